"""Insight generation over arbitrary JSON payloads."""

from llm_insights.adapter import (
    ChatGPTRequester,
    DeepSeekRequester,
    GeminiRequester,
    InsightRequester,
    VertexAIRequester,
)
from llm_insights.prompt_builder import InsightPrompt, InsightPromptBuilder
from llm_insights.schema import NO_DATA_MESSAGE, InsightResult, InsightVendor

__all__ = [
    "ChatGPTRequester",
    "DeepSeekRequester",
    "GeminiRequester",
    "InsightPrompt",
    "InsightPromptBuilder",
    "InsightRequester",
    "InsightResult",
    "InsightVendor",
    "NO_DATA_MESSAGE",
    "VertexAIRequester",
]
