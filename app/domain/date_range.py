"""
app/domain/date_range.py

Inclusive reporting date range requested by the host.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


@dataclass(frozen=True)
class DateRange:
    """
    ISO `YYYY-MM-DD` bounds; `end` falls back to the current UTC date.
    """

    start: str
    end: str | None = None

    @property
    def resolved_end(self) -> str:
        return self.end or today_iso()
