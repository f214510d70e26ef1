"""
app/api/routers/insight_router.py

Insight generation endpoint. Vendor failures are returned as `{error}`
bodies with HTTP 200; the caller decides how to present them.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.schemas.insights import InsightRequestBody
from app.services.insight_service import InsightService, get_insight_service

router = APIRouter(tags=["insights"])


@router.post("/insights")
def request_insight(
    request: InsightRequestBody,
    service: InsightService = Depends(get_insight_service),
) -> dict[str, Any]:
    result = service.request_insight(
        request.vendor,
        request.data,
        question=request.question,
        language=request.language,
    )
    return result.to_dict()
