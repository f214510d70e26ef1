"""LLM vendor adapters for insight generation.

One interface, ``InsightRequester.request_insight``, and four vendor
implementations that differ only in endpoint, auth, request envelope and
response extraction. Every failure is returned as an ``InsightResult``
error; nothing is retried.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests
from openai import APIStatusError, OpenAI, OpenAIError

from llm_insights.prompt_builder import InsightPrompt, InsightPromptBuilder
from llm_insights.schema import NO_DATA_MESSAGE, InsightResult, InsightVendor

logger = logging.getLogger(__name__)


class InsightRequestError(Exception):
    """Raised inside an adapter when the vendor call cannot produce text."""


def is_missing_payload(payload: Any) -> bool:
    """Return True when there is nothing to analyze.

    Only None and empty containers count as missing; falsy scalars such as
    0 or False are real data points and are sent to the vendor.
    """
    if payload is None:
        return True
    if isinstance(payload, (str, list, dict, tuple)):
        return len(payload) == 0
    return False


def dig(value: Any, *path: Any) -> Any:
    """Walk nested dicts/lists, returning None when any step is missing."""
    current = value
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[key] if isinstance(key, int) else current.get(key)
        if current is None:
            return None
    return current


class InsightRequester(ABC):
    """Abstract base for all insight vendors."""

    vendor: InsightVendor

    def __init__(
        self,
        *,
        prompt_builder: Optional[InsightPromptBuilder] = None,
        default_language: str = "English",
    ) -> None:
        self._prompt_builder = prompt_builder or InsightPromptBuilder()
        self._default_language = default_language

    def request_insight(
        self,
        payload: Any,
        question: Optional[str] = None,
        language: Optional[str] = None,
    ) -> InsightResult:
        """Ask the vendor for insights about ``payload``.

        Args:
            payload: Any JSON-serializable data. Missing or empty data
                fails immediately without a network call.
            question: Optional natural-language question about the data.
            language: Answer language; defaults to the configured one.

        Returns:
            ``{analysis}``, ``{analysis, reasoning}`` or ``{error}``.
        """
        if is_missing_payload(payload):
            return InsightResult.failure(NO_DATA_MESSAGE)

        prompt = self._prompt_builder.build(
            payload,
            language=language or self._default_language,
            question=question,
        )
        try:
            result = self._complete(prompt)
        except InsightRequestError as exc:
            logger.error("Insight request failed vendor=%s error=%s", self.vendor.value, exc)
            return InsightResult.failure(str(exc))

        logger.info(
            "Insight generated vendor=%s chars=%d reasoning=%s",
            self.vendor.value,
            len(result.analysis or ""),
            result.reasoning is not None,
        )
        return result

    @abstractmethod
    def _complete(self, prompt: InsightPrompt) -> InsightResult:
        """Send the prompt to the vendor and extract the generated text.

        Raises:
            InsightRequestError: On missing credentials, transport, HTTP,
                or response-shape failures.
        """


class HTTPInsightRequester(InsightRequester):
    """Base for vendors called with plain JSON-over-HTTP."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds

    def _post_json(
        self,
        url: str,
        body: Dict[str, Any],
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST ``body`` and return the decoded response.

        A vendor ``error`` envelope becomes an ``InsightRequestError``
        carrying the vendor's message, whatever the HTTP status.
        """
        try:
            response = self._session.post(
                url,
                json=body,
                headers={"Content-Type": "application/json", **(headers or {})},
                params=params,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise InsightRequestError(f"Error calling {self.vendor.value}: {exc}") from exc

        try:
            result = response.json()
        except ValueError as exc:
            raise InsightRequestError(
                f"Error calling {self.vendor.value}: response was not valid JSON "
                f"(HTTP {response.status_code})."
            ) from exc

        if isinstance(result, dict) and result.get("error"):
            vendor_error = result["error"]
            message = dig(vendor_error, "message") if isinstance(vendor_error, dict) else vendor_error
            raise InsightRequestError(str(message or "Unknown API error"))
        if not 200 <= response.status_code < 300:
            raise InsightRequestError(
                f"Error calling {self.vendor.value}: HTTP {response.status_code}."
            )
        if not isinstance(result, dict):
            raise InsightRequestError(f"Error calling {self.vendor.value}: unexpected response shape.")
        return result


class VertexAIRequester(HTTPInsightRequester):
    """Vertex AI agent behind a bearer-protected endpoint.

    Request envelope is a single ``message`` string.
    """

    vendor = InsightVendor.VERTEX_AI

    def __init__(self, *, url: Optional[str], api_key: Optional[str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._url = url
        self._api_key = api_key

    def _complete(self, prompt: InsightPrompt) -> InsightResult:
        if not self._url or not self._api_key:
            raise InsightRequestError("Vertex AI agent URL or API key is not configured.")
        result = self._post_json(
            self._url,
            {"message": prompt.user},
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        text = dig(result, "response", "candidates", 0, "content", "parts", 0, "text")
        return InsightResult.success(text or "")


class GeminiRequester(HTTPInsightRequester):
    """Google Gemini ``generateContent`` with a parts-list envelope."""

    vendor = InsightVendor.GEMINI

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = "gemini-1.5-pro",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"

    def _complete(self, prompt: InsightPrompt) -> InsightResult:
        if not self._api_key:
            raise InsightRequestError("Gemini API key is not configured.")
        body = {
            "systemInstruction": {"parts": [{"text": prompt.system}]},
            "contents": [{"role": "user", "parts": [{"text": prompt.user}]}],
        }
        result = self._post_json(self._url, body, params={"key": self._api_key})
        text = dig(result, "candidates", 0, "content", "parts", 0, "text")
        return InsightResult.success(text or "")


class ChatCompletionRequester(InsightRequester):
    """Base for OpenAI-compatible chat completion vendors.

    Uses a role-tagged message list. The SDK's own retries are disabled.
    """

    default_base_url: Optional[str] = None

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None,
        timeout_seconds: float = 30.0,
        client: Optional[Any] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._model = model
        self._base_url = base_url or self.default_base_url
        self._timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            client_kwargs: dict = {
                "api_key": self._api_key,
                "timeout": self._timeout_seconds,
                "max_retries": 0,
            }
            if self._base_url:
                client_kwargs["base_url"] = self._base_url
            self._client = OpenAI(**client_kwargs)
        return self._client

    def _complete(self, prompt: InsightPrompt) -> InsightResult:
        if not self._api_key and self._client is None:
            raise InsightRequestError(f"{self.vendor.value} API key is not configured.")
        try:
            response = self._get_client().chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": prompt.system},
                    {"role": "user", "content": prompt.user},
                ],
                stream=False,
            )
        except APIStatusError as exc:
            vendor_message = exc.body.get("message") if isinstance(exc.body, dict) else None
            if vendor_message:
                raise InsightRequestError(str(vendor_message)) from exc
            raise InsightRequestError(f"Error fetching {self.vendor.value} insights: {exc}") from exc
        except OpenAIError as exc:
            raise InsightRequestError(f"Error fetching {self.vendor.value} insights: {exc}") from exc

        if not response.choices:
            raise InsightRequestError(f"Error fetching {self.vendor.value} insights: empty response.")
        return self._extract(response.choices[0].message)

    def _extract(self, message: Any) -> InsightResult:
        return InsightResult.success(message.content or "")


class ChatGPTRequester(ChatCompletionRequester):
    vendor = InsightVendor.CHATGPT


class DeepSeekRequester(ChatCompletionRequester):
    """DeepSeek chat completions; also returns the reasoning trace."""

    vendor = InsightVendor.DEEPSEEK
    default_base_url = "https://api.deepseek.com"

    def _extract(self, message: Any) -> InsightResult:
        reasoning = getattr(message, "reasoning_content", None)
        return InsightResult.success(message.content or "", reasoning=reasoning)
