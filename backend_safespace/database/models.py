"""
Domain models for stored scans.

Scan records and per-user scan statistics. Returned by the store layer;
no ORM coupling so backends stay swappable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from backend_safespace.analytics.models import ScanInput, Verdict


@dataclass(frozen=True)
class ScanRecord:
    """One immutable evaluation, owned by exactly one user."""

    id: int
    """Store-assigned sequence; later inserts get larger ids."""
    user_id: str
    input: ScanInput
    verdict: Verdict
    created_at: datetime
    """UTC time the record was written."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "kind": self.input.kind,
            "input": self.input.text,
            "result": self.verdict.to_dict(),
            "createdAt": self.created_at.isoformat(),
        }

    def to_history_item(self) -> dict[str, Any]:
        """Verdict fields plus id, kind, input and createdAt (history list entry)."""
        item = self.verdict.to_dict()
        item.update(
            id=self.id,
            kind=self.input.kind,
            input=self.input.text,
            createdAt=self.created_at.isoformat(),
        )
        return item

    def to_activity_item(self) -> dict[str, Any]:
        """Dashboard recent-activity entry."""
        return {
            "type": self.input.kind,
            "content": self.input.text,
            "riskScore": self.verdict.risk_score,
            "timestamp": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class ScanStats:
    """Aggregate counts over a user's scans (dashboard)."""

    total_scans: int = 0
    url_scans: int = 0
    message_scans: int = 0
    safe_scans: int = 0
    unsafe_scans: int = 0
    avg_risk_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalScans": self.total_scans,
            "urlScans": self.url_scans,
            "messageScans": self.message_scans,
            "safeScans": self.safe_scans,
            "unsafeScans": self.unsafe_scans,
            "avgRiskScore": self.avg_risk_score,
        }
