"""
app/schemas/insights.py

Request schema for insight generation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from llm_insights import InsightVendor


class InsightRequestBody(BaseModel):
    """
    API request model for one insight call.
    """

    vendor: InsightVendor
    data: Any = None
    question: str | None = Field(default=None, max_length=4000)
    language: str | None = None
