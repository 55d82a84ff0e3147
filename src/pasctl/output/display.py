"""Display variants for tabular output.

Results are converted once, at the boundary, into a small closed set of
shapes that the table renderer understands:

- :class:`Scalar` - a single value
- :class:`Record` - ordered fields with display labels
- :class:`Collection` - ordered items
- :class:`MappingView` - key/value entries

API models inherit :class:`DisplayModel`, which knows how to describe itself.
:func:`describe` handles everything else (builtins, dataclasses, other
pydantic models).
"""

from __future__ import annotations

import dataclasses
import re
import typing
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Protocol, Tuple, Union, runtime_checkable

from pydantic import BaseModel

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Integers in this open interval are shown as Unix timestamps
EPOCH_MIN = 1_000_000_000
EPOCH_MAX = 2_000_000_000

MAX_SEQUENCE_ITEMS = 3

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')


@dataclasses.dataclass(frozen=True)
class DisplayField:
    """A single field of a record.

    Attributes:
        name: Field identifier
        label: Column or row label shown to the user
        value: Raw field value
        composite: Whether the field holds a nested structure
    """

    name: str
    label: str
    value: Any
    composite: bool = False


@dataclasses.dataclass(frozen=True)
class Scalar:
    """A single value printed on one line."""

    value: Any


@dataclasses.dataclass(frozen=True)
class Record:
    """An ordered set of fields."""

    fields: Tuple[DisplayField, ...]

    def __len__(self) -> int:
        return len(self.fields)


@dataclasses.dataclass(frozen=True)
class Collection:
    """An ordered sequence of items."""

    items: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.items)


@dataclasses.dataclass(frozen=True)
class MappingView:
    """Key/value entries in iteration order."""

    entries: Tuple[Tuple[Any, Any], ...]

    def __len__(self) -> int:
        return len(self.entries)


DisplayValue = Union[Scalar, Record, Collection, MappingView]


@runtime_checkable
class Displayable(Protocol):
    """Anything that can describe itself for display."""

    def to_display(self) -> DisplayValue:
        ...


def field_label(name: str, alias: Optional[str] = None) -> str:
    """Derive the display label of a field.

    The serialization alias wins when present; otherwise the identifier
    is converted from camelCase or snake_case to UPPER_SNAKE.

    Examples:
        >>> field_label("platformId", alias="platformId")
        'PLATFORMID'
        >>> field_label("secretType")
        'SECRET_TYPE'
    """
    if alias:
        return alias.upper()
    return _CAMEL_BOUNDARY.sub('_', name).upper()


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) is Union:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def is_composite_annotation(annotation: Any) -> bool:
    """Whether a type annotation describes a nested structure.

    Sequences, mappings and models are composite. Timestamps are not.
    """
    annotation = _unwrap_optional(annotation)
    origin = typing.get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return False
    if issubclass(origin, (datetime, date, str, bytes)):
        return False
    return issubclass(origin, (BaseModel, list, tuple, set, frozenset, dict, Mapping))


def is_composite_value(value: Any) -> bool:
    """Whether a runtime value is a nested structure."""
    if isinstance(value, (str, bytes, datetime, date)):
        return False
    return (
        isinstance(value, (BaseModel, Record, list, tuple, set, frozenset, Mapping))
        or dataclasses.is_dataclass(value)
    )


def record_from_model(model: BaseModel) -> Record:
    """Build a record from a pydantic model's declared fields."""
    fields = []
    for name, info in type(model).model_fields.items():
        value = getattr(model, name)
        composite = is_composite_annotation(info.annotation) or is_composite_value(value)
        fields.append(DisplayField(name, field_label(name, info.alias), value, composite))
    return Record(tuple(fields))


def record_from_dataclass(obj: Any) -> Record:
    """Build a record from a dataclass instance."""
    fields = []
    for f in dataclasses.fields(obj):
        value = getattr(obj, f.name)
        composite = is_composite_value(value)
        if not composite and isinstance(f.type, type):
            composite = is_composite_annotation(f.type)
        fields.append(DisplayField(f.name, field_label(f.name), value, composite))
    return Record(tuple(fields))


class DisplayModel(BaseModel):
    """Base class for API models shown by the formatter."""

    def to_display(self) -> DisplayValue:
        return record_from_model(self)


def describe(value: Any) -> Optional[DisplayValue]:
    """Convert an arbitrary result into a display variant.

    Args:
        value: Command result

    Returns:
        Display variant, or None when there is nothing to show
    """
    if value is None:
        return None
    if isinstance(value, (Scalar, Record, Collection, MappingView)):
        return value
    if isinstance(value, Displayable):
        return value.to_display()
    if isinstance(value, BaseModel):
        return record_from_model(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return record_from_dataclass(value)
    if isinstance(value, Mapping):
        return MappingView(tuple(value.items()))
    if isinstance(value, (list, tuple, set, frozenset)):
        return Collection(tuple(describe_item(item) for item in value))
    return Scalar(value)


def describe_item(item: Any) -> Any:
    """Describe a collection item, keeping plain values as they are."""
    if isinstance(item, Displayable) or is_composite_value(item):
        return describe(item)
    return item


def is_zero_timestamp(value: datetime) -> bool:
    """Whether a timestamp is unset (year 1 or the Unix epoch)."""
    if value.year == 1:
        return True
    if value.tzinfo is not None:
        return value.timestamp() == 0
    return value == datetime(1970, 1, 1)


def format_timestamp(value: datetime) -> str:
    if is_zero_timestamp(value):
        return ""
    return value.strftime(TIMESTAMP_FORMAT)


def format_cell(value: Any) -> str:
    """Format a single value for a table cell.

    Args:
        value: Raw value

    Returns:
        Display string
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Enum):
        return format_cell(value.value)
    if isinstance(value, int):
        if EPOCH_MIN < value < EPOCH_MAX:
            return datetime.fromtimestamp(value, tz=timezone.utc).strftime(TIMESTAMP_FORMAT)
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, bytes)):
        return value if isinstance(value, str) else value.decode(errors="replace")
    if isinstance(value, Record):
        return f"({len(value)} fields)"
    if isinstance(value, BaseModel):
        return f"({len(type(value).model_fields)} fields)"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return f"({len(dataclasses.fields(value))} fields)"
    if isinstance(value, (Mapping, MappingView)):
        return f"({len(value)} items)" if len(value) else ""
    if isinstance(value, Collection):
        return format_sequence(list(value.items))
    if isinstance(value, (list, tuple, set, frozenset)):
        return format_sequence(list(value))
    if isinstance(value, Scalar):
        return format_cell(value.value)
    return str(value)


def format_sequence(items: List[Any]) -> str:
    """Format up to three items, comma-joined, with a trailing marker."""
    if not items:
        return ""
    parts = [format_cell(item) for item in items[:MAX_SEQUENCE_ITEMS]]
    if len(items) > MAX_SEQUENCE_ITEMS:
        parts.append("...")
    return ", ".join(parts)
