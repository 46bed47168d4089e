from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.replenishment.domain import StockStatus
from app.models.models import ReorderSuggestion
from app.schemas.reorder_suggestion import ReorderScanResponse, ReorderSuggestionRead
from app.services.reorder_scan import list_reorder_suggestions, scan_reorder_needs


router = APIRouter()


@router.post("/scan", response_model=ReorderScanResponse)
def run_reorder_scan(db: Session = Depends(get_db)) -> ReorderScanResponse:
    return scan_reorder_needs(db=db)


@router.get("/", response_model=list[ReorderSuggestionRead])
def get_reorder_suggestions(
    status_filter: StockStatus | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> list[ReorderSuggestion]:
    return list_reorder_suggestions(
        db=db,
        status_filter=status_filter,
        limit=limit,
        offset=offset,
    )
