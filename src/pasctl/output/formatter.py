"""Output formatting for command results.

Renders results as a table, JSON or YAML depending on the current format.
The formatter is shared by every command of a shell, so ``set output json``
affects all later output.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import IO, Any, List, Optional, Union

import yaml
from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from pasctl.errors import RenderError
from pasctl.output.display import (
    Collection,
    MappingView,
    Record,
    describe,
    format_cell,
)

logger = logging.getLogger(__name__)

NO_DATA = "No data"
NO_ITEMS = "No items found"

# Formatted values that are left out of single-record tables
EMPTY_VALUES = ("", "0", "<nil>")

RECORD_VALUE_WIDTH = 60

# Upper bound used when measuring a table for non-terminal output
MEASURE_WIDTH = 10_000


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def parse(cls, value: Union[str, OutputFormat]) -> OutputFormat:
        """Parse a format name (case-insensitive).

        Raises:
            ValueError: If the name is not a known format
        """
        if isinstance(value, OutputFormat):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            raise ValueError(f"invalid output format: {value} (use: {valid})") from None


def to_document(value: Any) -> Any:
    """Convert a result into plain data for JSON/YAML encoding.

    Unknown objects are passed through unchanged so that the encoder can
    reject them.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_document(dataclasses.asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {to_document(k): to_document(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_document(v) for v in value]
    return value


def _is_terminal(stream: IO[str]) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty is not None and isatty())


def _new_table(*headers: str) -> Table:
    table = Table(
        box=box.ASCII,
        show_header=True,
        header_style="bold",
        show_lines=False,
        highlight=False,
    )
    for header in headers:
        table.add_column(Text(header), justify="left", no_wrap=True, overflow="ignore")
    return table


class TableBuilder:
    """Table with fixed headers, filled row by row.

    Used by commands that pick their own columns instead of relying on
    the generic record rendering.
    """

    def __init__(self, formatter: OutputFormatter, headers: List[str]):
        self._formatter = formatter
        self._table = _new_table(*headers)

    def add_row(self, *values: Any) -> None:
        """Add a row; each value is formatted with the cell rules."""
        self._table.add_row(*(Text(format_cell(v)) for v in values))

    @property
    def row_count(self) -> int:
        return self._table.row_count

    def render(self) -> None:
        self._formatter.print_renderable(self._table)


class OutputFormatter:
    """Formats command results in the current output format."""

    def __init__(
        self,
        output_format: Union[str, OutputFormat] = OutputFormat.TABLE,
        stream: Optional[IO[str]] = None,
        width: Optional[int] = None
    ):
        """Initialize formatter.

        Args:
            output_format: Initial output format
            stream: Output stream (default: sys.stdout at write time)
            width: Table width (default: detected from the terminal)
        """
        self._format = OutputFormat.parse(output_format)
        self._stream = stream
        self._width = width

    @property
    def stream(self) -> IO[str]:
        return self._stream if self._stream is not None else sys.stdout

    def get_format(self) -> OutputFormat:
        """Get the current output format."""
        return self._format

    def set_format(self, output_format: Union[str, OutputFormat]) -> None:
        """Change the output format.

        Args:
            output_format: New format (enum member or name)

        Raises:
            ValueError: If the format name is unknown
        """
        self._format = OutputFormat.parse(output_format)
        logger.debug(f"Output format set to {self._format.value}")

    def format(self, value: Any) -> None:
        """Write a result in the current format.

        Args:
            value: Result of any shape

        Raises:
            RenderError: If JSON or YAML encoding fails
        """
        if self._format == OutputFormat.JSON:
            self._write(self.to_json(value))
        elif self._format == OutputFormat.YAML:
            self._write(self.to_yaml(value))
        else:
            self.format_table(value)

    def to_json(self, value: Any) -> str:
        """Encode a result as indented JSON.

        Raises:
            RenderError: If the value cannot be encoded
        """
        try:
            return json.dumps(to_document(value), indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            raise RenderError(f"failed to encode JSON: {e}") from e

    def to_yaml(self, value: Any) -> str:
        """Encode a result as YAML.

        Raises:
            RenderError: If the value cannot be encoded
        """
        try:
            return yaml.safe_dump(
                to_document(value),
                indent=2,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        except (TypeError, ValueError, yaml.YAMLError) as e:
            raise RenderError(f"failed to encode YAML: {e}") from e

    def format_table(self, value: Any) -> None:
        """Render a result as a table, choosing the layout by its shape.

        Never fails for shape reasons; unrecognized values are printed
        on a single line.
        """
        shape = describe(value)

        if shape is None:
            self._write_line(NO_DATA)
        elif isinstance(shape, Collection):
            self._format_collection(shape)
        elif isinstance(shape, Record):
            self._format_record(shape)
        elif isinstance(shape, MappingView):
            self._format_mapping(shape)
        else:
            self._write_line(str(shape.value))

    def _format_collection(self, collection: Collection) -> None:
        if not collection.items:
            self._write_line(NO_ITEMS)
            return

        first = collection.items[0]
        if not isinstance(first, Record):
            for item in collection.items:
                self._write_line(format_cell(item))
            return

        columns = [f.name for f in first.fields if not f.composite]
        headers = [f.label for f in first.fields if not f.composite]
        table = _new_table(*headers)

        for item in collection.items:
            values = {f.name: f.value for f in item.fields} if isinstance(item, Record) else {}
            table.add_row(*(Text(format_cell(values.get(name))) for name in columns))

        self.print_renderable(table)

    def _format_record(self, record: Record) -> None:
        table = _new_table("Field", "Value")
        value_column = table.columns[1]
        value_column.max_width = RECORD_VALUE_WIDTH
        value_column.no_wrap = False
        value_column.overflow = "fold"

        for field in record.fields:
            value = format_cell(field.value)
            if value not in EMPTY_VALUES:
                table.add_row(Text(field.label), Text(value))

        self.print_renderable(table)

    def _format_mapping(self, mapping: MappingView) -> None:
        table = _new_table("Key", "Value")
        for key, value in mapping.entries:
            table.add_row(Text(str(key)), Text(format_cell(value)))
        self.print_renderable(table)

    def table(self, *headers: str) -> TableBuilder:
        """Start a table with custom headers."""
        return TableBuilder(self, list(headers))

    def print_renderable(self, renderable: Any) -> None:
        """Print a rich renderable to the output stream.

        Output that does not go to a terminal is never narrowed below the
        natural width of the renderable, so each row stays on one line.
        """
        console = Console(
            file=self.stream,
            width=self._width,
            highlight=False,
            emoji=False,
            soft_wrap=False,
        )
        if self._width is None and not _is_terminal(self.stream):
            options = console.options.update_width(MEASURE_WIDTH)
            natural = Measurement.get(console, options, renderable).maximum
            console.width = max(console.width, natural)
        console.print(renderable)

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _write_line(self, text: str) -> None:
        self._write(text + "\n")


def _print_message(symbol: str, message: str, stream: Optional[IO[str]] = None) -> None:
    print(f"{symbol} {message}", file=stream or sys.stdout)


def print_success(message: str, stream: Optional[IO[str]] = None) -> None:
    _print_message("✓", message, stream)


def print_info(message: str, stream: Optional[IO[str]] = None) -> None:
    _print_message("→", message, stream)


def print_warning(message: str, stream: Optional[IO[str]] = None) -> None:
    _print_message("!", message, stream)


def print_error(message: str, stream: Optional[IO[str]] = None) -> None:
    _print_message("✗", message, stream or sys.stderr)
