"""
Plain-text tables for command-line reports.

Used by scripts/tailor_resume.py to print previews, rebuild statistics, and
batch summaries with aligned columns.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence

from resplice.utils.text_processing import truncate_display


@dataclass(frozen=True)
class Column:
    """
    Column definition for a report table.

    Attributes:
        name: Header text
        width: Column width in characters (longer values are truncated)
        align: '<' left, '>' right, '^' center
    """

    name: str
    width: int
    align: str = "<"

    def cell(self, value: Any) -> str:
        text = truncate_display(str(value), self.width)
        return f"{text:{self.align}{self.width}}"


class TableFormatter:
    """Line-by-line builder for a titled, aligned text table."""

    def __init__(self, columns: Sequence[Column], rule_char: str = "-"):
        self.columns = list(columns)
        self.rule_char = rule_char
        self.lines: List[str] = []

    @property
    def width(self) -> int:
        return sum(col.width for col in self.columns) + len(self.columns) - 1

    def add_title(self, title: str) -> "TableFormatter":
        self.lines.extend(["=" * self.width, title, "=" * self.width])
        return self

    def add_header(self) -> "TableFormatter":
        self.lines.append(" ".join(col.cell(col.name) for col in self.columns))
        self.lines.append(self.rule_char * self.width)
        return self

    def add_row(self, values: Sequence[Any]) -> "TableFormatter":
        """
        Add a data row.

        Raises:
            ValueError: If the number of values doesn't match the columns
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")
        self.lines.append(" ".join(col.cell(value) for col, value in zip(self.columns, values)))
        return self

    def render(self) -> str:
        return "\n".join(self.lines)


def format_key_values(title: str, items: dict, key_width: int = 24) -> str:
    """
    Render a titled block of "key: value" lines.

    Example:
        >>> print(format_key_values("Statistics", {"totalProjects": 4}))
        Statistics
          totalProjects            4
    """
    lines = [title]
    for key, value in items.items():
        lines.append(f"  {key:<{key_width}} {value}")
    return "\n".join(lines)
