"""
Export router.

Mounts under ``/api/export`` (prefix set in ``main.py``).

The response is streamed with FastAPI's ``StreamingResponse`` and carries a
``Content-Disposition: attachment`` header so that browsers prompt a
download.

Endpoints
---------
GET /budget-summary — Fiscal-year summary as .xlsx (query param: fiscal_year).
"""

from __future__ import annotations

import io
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.services import export_service
from app.services.auth_service import require_permission
from app.utils.constants import FISCAL_YEAR_PATTERN
from app.utils.permissions import REPORT

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Export"])


@router.get(
    "/budget-summary",
    summary="Export the budget summary to Excel (.xlsx)",
    response_class=StreamingResponse,
    responses={
        200: {
            "description": "Excel file generated.",
            "content": {
                "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": {}
            },
        },
        403: {"description": "Caller may not export reports."},
    },
)
def export_budget_summary(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(REPORT, "export"))],
    fiscal_year: Annotated[
        str | None,
        Query(pattern=FISCAL_YEAR_PATTERN, description="Defaults to the current fiscal year."),
    ] = None,
) -> StreamingResponse:
    content, filename, media_type = export_service.export_budget_summary(db, fiscal_year)
    logger.info("export_budget_summary: %s downloaded by user=%s", filename, current_user.id)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
