"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_ALLOWED_TRANSPORTS = {"direct", "proxy"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for outbound calls.
    """

    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class CommerceSettings:
    """
    Commerce REST API transport settings.

    The merchant base URL and token arrive with each connector request; only
    the transport selection is process-wide.
    """

    transport: str = "direct"
    proxy_url: str | None = None


@dataclass(frozen=True)
class InsightSettings:
    """
    Credentials and endpoints for the LLM insight vendors.
    """

    vertex_agent_url: str | None = None
    vertex_api_key: str | None = None
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-1.5-pro"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    deepseek_api_key: str | None = None
    deepseek_model: str = "deepseek-chat"
    deepseek_base_url: str = "https://api.deepseek.com"
    default_language: str = "English"
    max_answer_characters: int = 10000


@dataclass(frozen=True)
class LicensingSettings:
    """
    Licensing/metering backend settings.
    """

    base_url: str | None = None
    api_key: str | None = None
    sku: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.base_url and self.api_key)


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 30.0)),
    )


@lru_cache(maxsize=1)
def get_commerce_settings() -> CommerceSettings:
    """
    Return commerce transport settings.

    Raises RuntimeError when the transport is unknown or when proxy mode is
    selected without a proxy URL.
    """

    transport = _get_str_env("COMMERCE_TRANSPORT", "direct").lower()
    if transport not in _ALLOWED_TRANSPORTS:
        raise RuntimeError(
            f"COMMERCE_TRANSPORT '{transport}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_TRANSPORTS)}."
        )
    proxy_url = _get_optional_str_env("FORWARDING_PROXY_URL")
    if transport == "proxy" and not proxy_url:
        raise RuntimeError("FORWARDING_PROXY_URL must be set when COMMERCE_TRANSPORT=proxy.")
    return CommerceSettings(transport=transport, proxy_url=proxy_url)


@lru_cache(maxsize=1)
def get_insight_settings() -> InsightSettings:
    """
    Return LLM vendor settings from environment variables.
    """

    return InsightSettings(
        vertex_agent_url=_get_optional_str_env("VERTEX_AGENT_URL"),
        vertex_api_key=_get_optional_str_env("VERTEX_AI_API_KEY"),
        gemini_api_key=_get_optional_str_env("GEMINI_API_KEY"),
        gemini_model=_get_str_env("GEMINI_MODEL", "gemini-1.5-pro"),
        gemini_base_url=_get_str_env(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        ),
        openai_api_key=_get_optional_str_env("OPENAI_API_KEY"),
        openai_model=_get_str_env("OPENAI_MODEL", "gpt-4o-mini"),
        deepseek_api_key=_get_optional_str_env("DEEPSEEK_API_KEY"),
        deepseek_model=_get_str_env("DEEPSEEK_MODEL", "deepseek-chat"),
        deepseek_base_url=_get_str_env("DEEPSEEK_BASE_URL", "https://api.deepseek.com"),
        default_language=_get_str_env("INSIGHT_DEFAULT_LANGUAGE", "English"),
        max_answer_characters=max(1, _get_int_env("INSIGHT_MAX_ANSWER_CHARACTERS", 10000)),
    )


@lru_cache(maxsize=1)
def get_licensing_settings() -> LicensingSettings:
    """
    Return licensing backend settings from environment variables.
    """

    return LicensingSettings(
        base_url=_get_optional_str_env("LICENSING_BASE_URL"),
        api_key=_get_optional_str_env("LICENSING_API_KEY"),
        sku=_get_optional_str_env("LICENSING_SKU"),
    )
