"""Rendering of tabular query results as delimited text.

CSV output does not quote values. Commas inside a value are replaced with
semicolons instead, so the column boundaries stay intact at the cost of
altering the value.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, model_validator

NO_RESULTS = "No results"


class FormatMode(Enum):
    CSV = ","
    PIPE_DELIMITED = " | "

    @property
    def delimiter(self) -> str:
        return self.value

    @classmethod
    def from_as_csv(cls, as_csv: bool) -> "FormatMode":
        return cls.CSV if as_csv else cls.PIPE_DELIMITED


class TabularResult(BaseModel):
    """Column names plus rows of nullable scalars, aligned by position."""

    columns: List[str]
    rows: List[List[Any]]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_row_widths(self) -> "TabularResult":
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} values but there are {width} columns"
                )
        return self

    @property
    def is_empty(self) -> bool:
        """True when there is no table at all: no columns and no rows."""
        return not self.columns and not self.rows

    @classmethod
    def from_logs_table(cls, table) -> "TabularResult":
        """Build from an ``azure.monitor.query.LogsTable``."""
        columns = [str(getattr(column, "name", column)) for column in table.columns]
        rows = [list(row) for row in table.rows]
        return cls(columns=columns, rows=rows)


def _render_value(value: Any, mode: FormatMode) -> str:
    text = "" if value is None else str(value)
    if mode is FormatMode.CSV:
        text = text.replace(",", ";")
    return text


def _render_line(values: Sequence[str], mode: FormatMode) -> str:
    return mode.delimiter.join(values) + "\n"


def format_table(table: Optional[TabularResult], mode: FormatMode) -> str:
    """Render a table as a header line plus one line per row.

    Args:
        table: The result to render; None means the query returned no table
        mode: CSV or pipe-delimited output

    Returns:
        The text block, every line terminated by a newline, or "No results"
        when there is no table
    """
    if table is None or table.is_empty:
        return NO_RESULTS

    lines = [_render_line(table.columns, mode)]
    for row in table.rows:
        lines.append(_render_line([_render_value(value, mode) for value in row], mode))
    return "".join(lines)
