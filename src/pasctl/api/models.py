"""Response models for the PAM REST API.

Field aliases match the API's JSON names, so JSON/YAML output mirrors what
the server returned and table labels come out as the upper-cased aliases.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from pasctl.output.display import DisplayModel


def flexible_id(value: Any) -> str:
    """Normalize an identifier that may arrive as a string or a number."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class APIModel(DisplayModel):
    """Base model: accepts both field names and aliases, ignores extras."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class SecretManagement(APIModel):
    automatic_management_enabled: bool = Field(default=False, alias="automaticManagementEnabled")
    manual_management_reason: str = Field(default="", alias="manualManagementReason")
    status: str = ""
    last_modified_time: Optional[int] = Field(default=None, alias="lastModifiedTime")
    last_reconciled_time: Optional[int] = Field(default=None, alias="lastReconciledTime")
    last_verified_time: Optional[int] = Field(default=None, alias="lastVerifiedTime")


class Account(APIModel):
    """A privileged account stored in a safe."""

    id: str = ""
    name: str = ""
    address: str = ""
    user_name: str = Field(default="", alias="userName")
    platform_id: str = Field(default="", alias="platformId")
    safe_name: str = Field(default="", alias="safeName")
    secret_type: str = Field(default="", alias="secretType")
    platform_account_properties: Dict[str, Any] = Field(
        default_factory=dict, alias="platformAccountProperties"
    )
    secret_management: Optional[SecretManagement] = Field(default=None, alias="secretManagement")
    created_time: Optional[int] = Field(default=None, alias="createdTime")
    category_modification_time: Optional[int] = Field(default=None, alias="categoryModificationTime")

    @field_validator('id', 'platform_id', mode='before')
    @classmethod
    def normalize_id(cls, v: Any) -> str:
        return flexible_id(v)


class AccountList(APIModel):
    """One page of accounts plus the total match count."""

    value: List[Account] = Field(default_factory=list)
    count: int = 0
    next_link: str = Field(default="", alias="nextLink")
