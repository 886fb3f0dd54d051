"""
Excel export helper wrapping xlsxwriter.

Provides ``ExcelExporter`` — a builder that lays out a styled ledger report
in memory and returns its bytes for streaming via FastAPI's
``StreamingResponse``.

Usage example::

    exporter = ExcelExporter(title="Budget Summary 2024-25", filters={"Fiscal year": "2024-25"})
    exporter.add_header()
    exporter.add_kpi_row({"Allocated": 800000.0, "Utilized": 120000.0})
    exporter.add_data_table(headers, rows, numeric_cols={2, 3})
    exporter.add_sheet("Entries")
    exporter.add_data_table(entry_headers, entry_rows)
    file_bytes = exporter.finalize()

Design notes
------------
- ``xlsxwriter`` runs in ``in_memory`` mode over a ``BytesIO``.
- Monetary columns use ``#,##0.00`` prefixed with the base-currency code in
  the column header, not in the cell format, so the sheet stays numeric.
- Column widths follow the longest value per column, capped at 60.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Any, Sequence

import xlsxwriter

_COLOR_PRIMARY = "#1a56db"
_COLOR_HEADER_BG = "#1E3A5F"
_COLOR_WHITE = "#FFFFFF"
_COLOR_ALT_ROW = "#F3F4F6"
_COLOR_KPI_BG = "#EFF6FF"
_COLOR_BORDER = "#E5E7EB"

_MONEY_FORMAT = "#,##0.00"
_MAX_COL_WIDTH = 60
_MIN_COL_WIDTH = 8
_HEADER_MIN_COLS = 6


class ExcelExporter:
    """Workbook builder for ledger reports.

    Writes go to the *current* worksheet; ``add_sheet`` starts a new one.

    Args:
        title: Report title shown in the banner row of the first sheet.
        filters: Applied filter labels listed under the banner,
                 e.g. ``{"Fiscal year": "2024-25"}``.
        sheet_name: Name of the first worksheet tab.
    """

    def __init__(
        self,
        title: str,
        filters: dict[str, str] | None = None,
        sheet_name: str = "Summary",
    ) -> None:
        self._title = title
        self._filters = filters or {}

        self._buffer = io.BytesIO()
        self._workbook = xlsxwriter.Workbook(self._buffer, {"in_memory": True})
        self._formats = self._build_formats()
        self.add_sheet(sheet_name)

    def _build_formats(self) -> dict[str, Any]:
        wb = self._workbook
        base_cell = {
            "font_size": 9,
            "valign": "vcenter",
            "border": 1,
            "border_color": _COLOR_BORDER,
        }
        return {
            "banner": wb.add_format({
                "bold": True,
                "font_size": 16,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_PRIMARY,
                "align": "center",
                "valign": "vcenter",
            }),
            "subtitle": wb.add_format({
                "font_size": 10,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_HEADER_BG,
                "align": "center",
                "valign": "vcenter",
            }),
            "filter_key": wb.add_format({
                "bold": True, "font_size": 9, "bg_color": "#E5E7EB", "align": "right",
            }),
            "filter_value": wb.add_format({"font_size": 9, "bg_color": "#F9FAFB"}),
            "kpi_label": wb.add_format({
                "bold": True,
                "font_size": 10,
                "bg_color": _COLOR_KPI_BG,
                "align": "center",
                "border": 1,
                "border_color": "#BFDBFE",
            }),
            "kpi_value": wb.add_format({
                "bold": True,
                "font_size": 12,
                "font_color": _COLOR_PRIMARY,
                "bg_color": _COLOR_KPI_BG,
                "align": "center",
                "num_format": _MONEY_FORMAT,
                "border": 1,
                "border_color": "#BFDBFE",
            }),
            "col_header": wb.add_format({
                "bold": True,
                "font_size": 10,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_HEADER_BG,
                "align": "center",
                "valign": "vcenter",
                "border": 1,
                "text_wrap": True,
            }),
            "text": wb.add_format({**base_cell, "bg_color": _COLOR_WHITE}),
            "text_alt": wb.add_format({**base_cell, "bg_color": _COLOR_ALT_ROW}),
            "number": wb.add_format({
                **base_cell, "bg_color": _COLOR_WHITE, "align": "right", "num_format": _MONEY_FORMAT,
            }),
            "number_alt": wb.add_format({
                **base_cell, "bg_color": _COLOR_ALT_ROW, "align": "right", "num_format": _MONEY_FORMAT,
            }),
        }

    # -----------------------------------------------------------------------
    # Public builder methods
    # -----------------------------------------------------------------------

    def add_sheet(self, name: str) -> "ExcelExporter":
        """Start a new worksheet; subsequent writes go to it."""
        self._worksheet = self._workbook.add_worksheet(name[:31])
        self._current_row = 0
        return self

    def add_header(self) -> "ExcelExporter":
        """Write the banner, generation timestamp and filter rows."""
        ws = self._worksheet
        last_col = _HEADER_MIN_COLS - 1

        ws.set_row(self._current_row, 32)
        ws.merge_range(self._current_row, 0, self._current_row, last_col, self._title, self._formats["banner"])
        self._current_row += 1

        generated = datetime.now(timezone.utc).strftime("%d %b %Y %H:%M UTC")
        ws.merge_range(
            self._current_row, 0, self._current_row, last_col,
            f"Generated: {generated}", self._formats["subtitle"],
        )
        self._current_row += 1

        for key, value in self._filters.items():
            ws.write(self._current_row, 0, key, self._formats["filter_key"])
            ws.merge_range(
                self._current_row, 1, self._current_row, last_col, value, self._formats["filter_value"]
            )
            self._current_row += 1

        self._current_row += 1
        return self

    def add_kpi_row(self, kpis: dict[str, Any]) -> "ExcelExporter":
        """Write one labelled value per column: labels on one row, values below."""
        ws = self._worksheet
        for col, (label, value) in enumerate(kpis.items()):
            ws.write(self._current_row, col, label, self._formats["kpi_label"])
            ws.write(self._current_row + 1, col, value, self._formats["kpi_value"])
        ws.set_row(self._current_row + 1, 22)
        self._current_row += 3
        return self

    def add_data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        numeric_cols: set[int] | None = None,
    ) -> "ExcelExporter":
        """Write a header row plus data rows with alternating shading.

        Args:
            headers: Column header strings.
            rows: Data rows, each as long as ``headers``.
            numeric_cols: Zero-based indices of money columns.  When omitted,
                columns holding ``int``/``float`` in the first row are used.
        """
        ws = self._worksheet
        if numeric_cols is None:
            numeric_cols = {
                ci for ci, val in enumerate(rows[0]) if isinstance(val, (int, float))
            } if rows else set()

        widths = [len(str(h)) for h in headers]

        ws.set_row(self._current_row, 20)
        for ci, header in enumerate(headers):
            ws.write(self._current_row, ci, header, self._formats["col_header"])
        self._current_row += 1

        for ri, row in enumerate(rows):
            suffix = "_alt" if ri % 2 else ""
            for ci, value in enumerate(row):
                kind = "number" if ci in numeric_cols else "text"
                ws.write(self._current_row, ci, value, self._formats[kind + suffix])
                widths[ci] = min(_MAX_COL_WIDTH, max(widths[ci], len("" if value is None else str(value))))
            self._current_row += 1

        for ci, width in enumerate(widths):
            ws.set_column(ci, ci, max(width + 2, _MIN_COL_WIDTH))

        self._current_row += 1
        return self

    def finalize(self) -> bytes:
        """Close the workbook and return the ``.xlsx`` bytes."""
        self._workbook.close()
        self._buffer.seek(0)
        return self._buffer.read()
