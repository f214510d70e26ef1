"""
app/services/insight_service.py

Vendor selection for insight requests.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Callable

from app.config import (
    ExternalHTTPSettings,
    InsightSettings,
    get_external_http_settings,
    get_insight_settings,
)
from llm_insights import (
    ChatGPTRequester,
    DeepSeekRequester,
    GeminiRequester,
    InsightPromptBuilder,
    InsightRequester,
    InsightResult,
    InsightVendor,
    VertexAIRequester,
)

logger = logging.getLogger(__name__)

RequesterBuilder = Callable[[InsightSettings, ExternalHTTPSettings, InsightPromptBuilder], InsightRequester]


def _vertex(settings: InsightSettings, http: ExternalHTTPSettings, prompts: InsightPromptBuilder) -> InsightRequester:
    return VertexAIRequester(
        url=settings.vertex_agent_url,
        api_key=settings.vertex_api_key,
        timeout_seconds=http.timeout_seconds,
        prompt_builder=prompts,
        default_language=settings.default_language,
    )


def _gemini(settings: InsightSettings, http: ExternalHTTPSettings, prompts: InsightPromptBuilder) -> InsightRequester:
    return GeminiRequester(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout_seconds=http.timeout_seconds,
        prompt_builder=prompts,
        default_language=settings.default_language,
    )


def _chatgpt(settings: InsightSettings, http: ExternalHTTPSettings, prompts: InsightPromptBuilder) -> InsightRequester:
    return ChatGPTRequester(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=http.timeout_seconds,
        prompt_builder=prompts,
        default_language=settings.default_language,
    )


def _deepseek(settings: InsightSettings, http: ExternalHTTPSettings, prompts: InsightPromptBuilder) -> InsightRequester:
    return DeepSeekRequester(
        api_key=settings.deepseek_api_key,
        model=settings.deepseek_model,
        base_url=settings.deepseek_base_url,
        timeout_seconds=http.timeout_seconds,
        prompt_builder=prompts,
        default_language=settings.default_language,
    )


_BUILDERS: dict[InsightVendor, RequesterBuilder] = {
    InsightVendor.VERTEX_AI: _vertex,
    InsightVendor.GEMINI: _gemini,
    InsightVendor.CHATGPT: _chatgpt,
    InsightVendor.DEEPSEEK: _deepseek,
}


def build_requesters(
    settings: InsightSettings,
    http_settings: ExternalHTTPSettings,
) -> dict[InsightVendor, InsightRequester]:
    prompts = InsightPromptBuilder(max_answer_characters=settings.max_answer_characters)
    return {vendor: build(settings, http_settings, prompts) for vendor, build in _BUILDERS.items()}


class InsightService:
    """
    Routes one insight request to exactly one vendor.
    """

    def __init__(self, *, requesters: dict[InsightVendor, InsightRequester]) -> None:
        self._requesters = requesters

    def request_insight(
        self,
        vendor: InsightVendor,
        payload: Any,
        question: str | None = None,
        language: str | None = None,
    ) -> InsightResult:
        requester = self._requesters.get(vendor)
        if requester is None:
            return InsightResult.failure(f"Insight vendor '{vendor.value}' is not available.")
        return requester.request_insight(payload, question=question, language=language)


@lru_cache(maxsize=1)
def get_insight_service() -> InsightService:
    """
    Build and cache the insight service.
    """

    return InsightService(
        requesters=build_requesters(get_insight_settings(), get_external_http_settings()),
    )
