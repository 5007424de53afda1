"""Markdown/HTML table rendering for indicator rows.

Cell values come from an upstream API, so every value is escaped: ``|`` for
Markdown, ``& < > " '`` for HTML.
"""
import html
import math
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel

from .normalize import Observation, year_as_int

Row = Dict[str, Any]


class Column(BaseModel):
    key: str
    label: str
    align: Literal["left", "right"] = "left"


WORLD_BANK_COLUMNS = [
    Column(key="year", label="Year"),
    Column(key="value", label="Value", align="right"),
    Column(key="country", label="Country"),
    Column(key="indicator", label="Indicator"),
]


class RenderedTable(BaseModel):
    title: str
    markdown: str
    html: Optional[str] = None
    rows: List[Row]


# ----------------------------
# Cell helpers
# ----------------------------
def format_value(value: Any) -> str:
    """Getallen met duizendtalscheiding (en-US), de rest ongewijzigd."""
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if not math.isfinite(value):
        return str(value)
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    # max 3 decimalen, net als toLocaleString()
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def escape_markdown_cell(value: Any) -> str:
    return str(value).replace("|", "\\|")


def display_row(observation: Observation) -> Row:
    return {
        "year": observation.year,
        "value": format_value(observation.value),
        "country": observation.country,
        "indicator": observation.indicator,
    }


def sort_most_recent_first(observations: Sequence[Observation]) -> List[Observation]:
    # jaren die geen getal zijn achteraan
    return sorted(
        observations,
        key=lambda obs: (year_as_int(obs.year) is not None, year_as_int(obs.year) or 0),
        reverse=True,
    )


# ----------------------------
# Markdown
# ----------------------------
def build_markdown_table(columns: Sequence[Column], rows: Sequence[Row]) -> str:
    header = "| " + " | ".join(escape_markdown_cell(c.label) for c in columns) + " |"
    divider = "| " + " | ".join("---:" if c.align == "right" else "---" for c in columns) + " |"
    body = []
    for row in rows:
        cells = [escape_markdown_cell(_cell(row, c.key)) for c in columns]
        body.append("| " + " | ".join(cells) + " |")
    return "\n".join([header, divider, *body])


# ----------------------------
# HTML
# ----------------------------
_TABLE_STYLE = "border-collapse: collapse; width: 100%; font-family: sans-serif; font-size: 14px;"
_HEADER_ROW_STYLE = "background-color: #1f2937; color: #ffffff;"
_CELL_STYLE = "padding: 6px 10px; border: 1px solid #d1d5db; text-align: {align};"
_ZEBRA = ("#ffffff", "#f3f4f6")


def build_html_table(columns: Sequence[Column], rows: Sequence[Row]) -> str:
    lines = [f'<table style="{_TABLE_STYLE}">', "  <thead>", f'    <tr style="{_HEADER_ROW_STYLE}">']
    for column in columns:
        style = _CELL_STYLE.format(align=column.align)
        lines.append(f'      <th style="{style}">{html.escape(column.label, quote=True)}</th>')
    lines += ["    </tr>", "  </thead>", "  <tbody>"]
    for index, row in enumerate(rows):
        lines.append(f'    <tr style="background-color: {_ZEBRA[index % 2]};">')
        for column in columns:
            style = _CELL_STYLE.format(align=column.align)
            value = html.escape(_cell(row, column.key), quote=True)
            lines.append(f'      <td style="{style}">{value}</td>')
        lines.append("    </tr>")
    lines += ["  </tbody>", "</table>"]
    return "\n".join(lines)


def _cell(row: Row, key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


# ----------------------------
# Title
# ----------------------------
def build_title(
    observations: Sequence[Observation],
    country_code: str,
    indicator_code: str,
    start_year: int,
    end_year: int,
) -> str:
    """Title like ``Canada - Population, total (2018-2023)``.

    Uses the min/max year actually present in the rows and the labels of the
    first row. Without rows it falls back to the requested codes and range.
    """
    if not observations:
        return f"{country_code} - {indicator_code} ({start_year}-{end_year})"

    years = [year_as_int(obs.year) for obs in observations]
    years = [y for y in years if y is not None]
    first = observations[0]
    if years:
        span = f"{min(years)}-{max(years)}"
    else:
        span = f"{start_year}-{end_year}"
    return f"{first.country} - {first.indicator} ({span})"


def decorate_title(title: str) -> str:
    return f"**{title}**"


def plain_title(title: str) -> str:
    """Strip Markdown emphasis markers from a (decorated) title."""
    text = title.strip()
    for marker in ("**", "__"):
        if text.startswith(marker) and text.endswith(marker) and len(text) > 2 * len(marker):
            text = text[len(marker):-len(marker)]
    return text.strip()


# ----------------------------
# Alles samen
# ----------------------------
def render_table(
    observations: Sequence[Observation],
    *,
    country_code: str,
    indicator_code: str,
    start_year: int,
    end_year: int,
    include_html: bool = True,
    decorate: bool = True,
    columns: Sequence[Column] = WORLD_BANK_COLUMNS,
) -> RenderedTable:
    title = build_title(observations, country_code, indicator_code, start_year, end_year)
    rows = [display_row(obs) for obs in observations]
    return RenderedTable(
        title=decorate_title(title) if decorate else title,
        markdown=build_markdown_table(columns, rows),
        html=build_html_table(columns, rows) if include_html else None,
        rows=rows,
    )
