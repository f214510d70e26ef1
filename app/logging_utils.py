"""
app/logging_utils.py

Structured logging for outbound commerce, licensing and vendor calls.
Credential-bearing fields are masked before they reach the log line.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

REDACTED = "***"

_SENSITIVE_FIELDS = frozenset({"api_key", "api_token", "authorization", "token"})


def redact_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: REDACTED if key.lower() in _SENSITIVE_FIELDS and value else value
        for key, value in fields.items()
    }


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one `{"event": ..., **fields}` line as sorted JSON.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **redact_fields(fields)}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
