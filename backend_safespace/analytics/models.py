"""
Data models for evaluator input and output.

ScanInput is what a user submitted; Verdict is what an evaluator returns.
Verdict.to_dict() is the wire/storage shape (camelCase keys, absent optionals
omitted) and Verdict.from_dict() reads it back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

ScanKind = Literal["message", "url"]
SCAN_KINDS: tuple[str, ...] = ("message", "url")


@dataclass(frozen=True)
class ScanInput:
    """Submitted content: a chat message or a URL, original casing preserved."""

    kind: ScanKind
    text: str


@dataclass(frozen=True)
class UrlAnalysis:
    """Lexical facts about a scanned URL."""

    length: int
    has_secure_scheme: bool
    scanned_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "hasSecureScheme": self.has_secure_scheme,
            "scannedAt": self.scanned_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UrlAnalysis:
        scanned_at = datetime.fromisoformat(data["scannedAt"])
        if scanned_at.tzinfo is None:
            scanned_at = scanned_at.replace(tzinfo=timezone.utc)
        return cls(
            length=int(data["length"]),
            has_secure_scheme=bool(data["hasSecureScheme"]),
            scanned_at=scanned_at,
        )


@dataclass(frozen=True)
class Verdict:
    """Result of one risk evaluation."""

    is_safe: bool
    risk_score: int
    """0..100 inclusive; higher is riskier."""
    categories: list[str] = field(default_factory=list)
    reason: str | None = None
    """Set only when is_safe is False."""
    analysis: UrlAnalysis | None = None
    """URL scans only."""
    flagged_words: list[str] | None = None
    """Message scans only."""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "isSafe": self.is_safe,
            "riskScore": self.risk_score,
            "categories": list(self.categories),
        }
        if self.reason is not None:
            out["reason"] = self.reason
        if self.analysis is not None:
            out["analysis"] = self.analysis.to_dict()
        if self.flagged_words is not None:
            out["flaggedWords"] = list(self.flagged_words)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Verdict:
        analysis = data.get("analysis")
        flagged = data.get("flaggedWords")
        return cls(
            is_safe=bool(data["isSafe"]),
            risk_score=int(data["riskScore"]),
            categories=list(data.get("categories") or []),
            reason=data.get("reason"),
            analysis=UrlAnalysis.from_dict(analysis) if analysis else None,
            flagged_words=list(flagged) if flagged is not None else None,
        )
