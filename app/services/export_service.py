"""
Export service layer.

Turns the fiscal-year ledger summary into an ``.xlsx`` workbook.  Data comes
from ``budget_service.get_summary`` so the spreadsheet and the JSON endpoint
always agree; archive rows for the year are appended on a third sheet when
the year has been archived.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.config import get_settings
from app.exporters.excel_exporter import ExcelExporter
from app.services import budget_service

logger = logging.getLogger(__name__)

_MIME_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_budget_summary(db: Session, fiscal_year: str | None = None) -> tuple[bytes, str, str]:
    """Build the budget summary workbook.

    Returns:
        ``(file_bytes, filename, media_type)``.
    """
    currency = get_settings().BASE_CURRENCY
    summary = budget_service.get_summary(db, fiscal_year)

    exporter = ExcelExporter(
        title=f"Budget Summary {summary.fiscal_year}",
        filters={"Fiscal year": summary.fiscal_year, "Currency": currency},
    )
    exporter.add_header()
    exporter.add_kpi_row({
        f"Allocated ({currency})": summary.total_allocated,
        f"Utilized ({currency})": summary.total_utilized,
        f"Remaining ({currency})": summary.remaining,
        "Utilization %": summary.utilization_percent,
    })
    exporter.add_data_table(
        ["Category", "Allocated", "Utilized", "Remaining", "Utilization %"],
        [
            [c.category, c.total_allocated, c.total_utilized, c.remaining, c.utilization_percent]
            for c in summary.by_category
        ],
        numeric_cols={1, 2, 3},
    )

    exporter.add_sheet("Entries")
    exporter.add_data_table(
        ["Project code", "Project title", "Category", "Allocated", "Utilized", "Remaining"],
        [
            [
                e.project_code,
                e.project_title,
                e.category,
                e.allocated_amount,
                e.utilized_amount,
                e.remaining_amount,
            ]
            for e in summary.entries
        ],
        numeric_cols={3, 4, 5},
    )

    archives = budget_service.list_archives(db, summary.fiscal_year)
    if archives:
        exporter.add_sheet("Year-end archive")
        exporter.add_data_table(
            ["Project id", "Category", "Allocated", "Utilized", "Carried forward", "Returned", "Carry %"],
            [
                [
                    a.project_id,
                    a.category,
                    float(a.allocated_amount),
                    float(a.utilized_amount),
                    float(a.carried_forward),
                    float(a.returned_amount),
                    float(a.carry_forward_percent),
                ]
                for a in archives
            ],
            numeric_cols={2, 3, 4, 5},
        )

    content = exporter.finalize()
    filename = f"budget_summary_{summary.fiscal_year}.xlsx"
    logger.info(
        "export_budget_summary: %s entries=%d archives=%d size=%d bytes",
        summary.fiscal_year, len(summary.entries), len(archives), len(content),
    )
    return content, filename, _MIME_XLSX
