"""Tests for display variants and cell formatting."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pasctl.api.models import Account
from pasctl.output.display import (
    Collection,
    MappingView,
    Record,
    Scalar,
    describe,
    field_label,
    format_cell,
)


class Color(Enum):
    RED = "red"


@dataclass
class Server:
    name: str
    port: int


class TestFieldLabel:
    """Test label derivation."""

    def test_camel_case(self):
        """Test camelCase names."""
        assert field_label("platformId") == "PLATFORM_ID"
        assert field_label("secretType") == "SECRET_TYPE"

    def test_snake_case(self):
        """Test snake_case names."""
        assert field_label("safe_name") == "SAFE_NAME"

    def test_acronyms(self):
        """Test that acronyms are not split letter by letter."""
        assert field_label("ID") == "ID"
        assert field_label("HTTPServer") == "HTTP_SERVER"

    def test_alias_wins(self):
        """Test that an alias is used as-is, upper-cased."""
        assert field_label("user_name", alias="userName") == "USERNAME"


class TestFormatCell:
    """Test the per-cell formatting rules."""

    def test_none_and_bool(self):
        """Test absent values and booleans."""
        assert format_cell(None) == ""
        assert format_cell(True) == "Yes"
        assert format_cell(False) == "No"

    def test_datetime(self):
        """Test timestamps and zero timestamps."""
        assert format_cell(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02 03:04:05"
        assert format_cell(datetime.min) == ""
        assert format_cell(datetime(1970, 1, 1)) == ""
        assert format_cell(datetime(1970, 1, 1, tzinfo=timezone.utc)) == ""

    def test_epoch_integers(self):
        """Test that integers in the epoch range are shown as UTC times."""
        assert format_cell(1700000000) == "2023-11-14 22:13:20"
        assert format_cell(1000000000) == "1000000000"
        assert format_cell(2000000000) == "2000000000"
        assert format_cell(42) == "42"
        assert format_cell(0) == "0"

    def test_strings_and_enums(self):
        """Test strings, bytes and enum members."""
        assert format_cell("text") == "text"
        assert format_cell(b"raw") == "raw"
        assert format_cell(Color.RED) == "red"

    def test_sequences(self):
        """Test that sequences show at most three items."""
        assert format_cell([]) == ""
        assert format_cell(["a", "b"]) == "a, b"
        assert format_cell([1, 2, 3, 4]) == "1, 2, 3, ..."

    def test_mappings(self):
        """Test that mappings are summarized by size."""
        assert format_cell({}) == ""
        assert format_cell({"a": 1, "b": 2}) == "(2 items)"

    def test_nested_records(self):
        """Test that nested structures are summarized by field count."""
        assert format_cell(Server("web", 443)) == "(2 fields)"
        assert format_cell(describe(Server("web", 443))) == "(2 fields)"

    def test_floats(self):
        """Test that integral floats print without a fraction."""
        assert format_cell(0.0) == "0"
        assert format_cell(2.0) == "2"
        assert format_cell(3.5) == "3.5"
        assert format_cell(float("inf")) == "inf"

    def test_other_objects(self):
        """Test that unknown objects fall back to str()."""
        assert format_cell(3.5) == "3.5"


class TestDescribe:
    """Test converting results into display variants."""

    def test_none(self):
        """Test that None has nothing to show."""
        assert describe(None) is None

    def test_scalar(self):
        """Test plain values."""
        assert describe("hello") == Scalar("hello")
        assert describe(5) == Scalar(5)

    def test_mapping(self):
        """Test that mappings keep their iteration order."""
        shape = describe({"b": 1, "a": 2})
        assert isinstance(shape, MappingView)
        assert shape.entries == (("b", 1), ("a", 2))

    def test_dataclass_record(self):
        """Test that a dataclass becomes a record."""
        shape = describe(Server("web", 443))
        assert isinstance(shape, Record)
        assert [f.label for f in shape.fields] == ["NAME", "PORT"]
        assert [f.value for f in shape.fields] == ["web", 443]

    def test_collection_of_records(self):
        """Test that collection items are described too."""
        shape = describe([Server("a", 1), Server("b", 2)])
        assert isinstance(shape, Collection)
        assert len(shape) == 2
        assert all(isinstance(item, Record) for item in shape.items)

    def test_collection_of_scalars(self):
        """Test that plain items are kept as they are."""
        assert describe(["a", "b"]) == Collection(("a", "b"))

    def test_model_record(self):
        """Test that API models describe themselves with alias labels."""
        account = Account(id="12_3", userName="admin", platformId="WinDomain")
        shape = describe(account)

        assert isinstance(shape, Record)
        labels = {f.name: f.label for f in shape.fields}
        assert labels["id"] == "ID"
        assert labels["user_name"] == "USERNAME"
        assert labels["platform_id"] == "PLATFORMID"

        composite = {f.name for f in shape.fields if f.composite}
        assert composite == {"platform_account_properties", "secret_management"}
