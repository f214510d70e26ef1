"""Result contract shared by every insight vendor."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator

NO_DATA_MESSAGE = "No data to analyze was provided."


class InsightVendor(str, Enum):
    """LLM vendors an insight can be requested from."""

    VERTEX_AI = "vertex_ai"
    GEMINI = "gemini"
    CHATGPT = "chatgpt"
    DEEPSEEK = "deepseek"


class InsightResult(BaseModel):
    """Tagged insight outcome.

    Exactly one shape is valid: ``{analysis}``, ``{analysis, reasoning}``
    or ``{error}``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    analysis: Optional[str] = None
    reasoning: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "InsightResult":
        if self.error is not None:
            if self.analysis is not None or self.reasoning is not None:
                raise ValueError("An error result cannot carry analysis or reasoning.")
        elif self.analysis is None:
            raise ValueError("A successful result requires an analysis.")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, analysis: str, reasoning: Optional[str] = None) -> "InsightResult":
        return cls(analysis=analysis, reasoning=reasoning)

    @classmethod
    def failure(cls, reason: str) -> "InsightResult":
        return cls(error=reason)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
