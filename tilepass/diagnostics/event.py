"""Structured render diagnostics event."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    """One render or clip event, keyed by the caller's frame tick."""

    ts_utc: str
    tick: int
    category: str
    name: str
    level: str = "info"
    value: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def stamped(
        cls,
        *,
        tick: int,
        category: str,
        name: str,
        level: str = "info",
        value: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> DiagnosticEvent:
        return cls(
            ts_utc=utc_now_iso(),
            tick=int(tick),
            category=category,
            name=name,
            level=level,
            value=dict(value or {}),
            metadata=dict(metadata or {}),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "ts_utc": self.ts_utc,
            "tick": self.tick,
            "category": self.category,
            "name": self.name,
            "level": self.level,
            "value": dict(self.value),
            "metadata": dict(self.metadata),
        }


def utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds")
