"""Output formatting for pasctl.

Renders command results as tables (via rich), JSON or YAML.
"""

from __future__ import annotations

from pasctl.output.display import (
    Collection,
    Displayable,
    DisplayField,
    DisplayModel,
    MappingView,
    Record,
    Scalar,
    describe,
    format_cell,
)
from pasctl.output.formatter import (
    OutputFormat,
    OutputFormatter,
    TableBuilder,
    print_error,
    print_info,
    print_success,
    print_warning,
    to_document,
)

__all__ = [
    "OutputFormat",
    "OutputFormatter",
    "TableBuilder",
    "Collection",
    "Displayable",
    "DisplayField",
    "DisplayModel",
    "MappingView",
    "Record",
    "Scalar",
    "describe",
    "format_cell",
    "to_document",
    "print_success",
    "print_info",
    "print_warning",
    "print_error",
]
