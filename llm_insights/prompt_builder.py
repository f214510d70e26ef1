"""Prompt builder for ad-hoc insight requests."""

import json
from dataclasses import dataclass
from typing import Any, Optional

SYSTEM_PROMPT = "You are a data analyst."

_QUESTION_TEMPLATE = (
    "Analyze this JSON formatted data and answer in {language} this question: {question}. "
    "Base the answer only on this JSON formatted data. "
    "Limit the answer to {max_chars} characters maximum. "
    "Avoid returning a summary of the statistics.\n"
    "{data}"
)

_OVERVIEW_TEMPLATE = (
    "Analyze this JSON formatted data. "
    "Limit the answer to {max_chars} characters maximum. "
    "Avoid returning a summary of the statistics. "
    "Give me only key insights and main recommendations in {language}:\n"
    "{data}"
)


@dataclass(frozen=True)
class InsightPrompt:
    """System and user prompt pair for one insight request."""

    system: str
    user: str


class InsightPromptBuilder:
    """Builds the vendor-independent insight prompt.

    With a question, the model is told to answer it strictly from the
    supplied data; without one, it is asked for key insights and
    recommendations. Both variants cap the answer length.
    """

    def __init__(self, max_answer_characters: int = 10000) -> None:
        self._max_chars = max_answer_characters

    def build(
        self,
        payload: Any,
        *,
        language: str,
        question: Optional[str] = None,
    ) -> InsightPrompt:
        """Build the prompt pair.

        Args:
            payload: Any JSON-serializable data to analyze.
            language: Language the answer must be written in.
            question: Optional natural-language question about the data.

        Returns:
            The system prompt and the user prompt embedding the data.
        """
        data = json.dumps(payload, indent=2, default=str, ensure_ascii=False)
        question = (question or "").strip()
        if question:
            user = _QUESTION_TEMPLATE.format(
                language=language,
                question=question,
                max_chars=self._max_chars,
                data=data,
            )
        else:
            user = _OVERVIEW_TEMPLATE.format(
                language=language,
                max_chars=self._max_chars,
                data=data,
            )
        return InsightPrompt(system=SYSTEM_PROMPT, user=user)
