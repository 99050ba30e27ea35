"""Collector for render pass and clip stack events."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from tilepass.diagnostics.event import DiagnosticEvent
from tilepass.diagnostics.ring_buffer import RingBuffer

if TYPE_CHECKING:
    from tilepass.api.geometry import Rect
    from tilepass.runtime.config import PassDiagnosticsConfig

RENDER_CATEGORY = "render"
CLIP_CATEGORY = "clip"


class DiagnosticHub:
    """Bounded store of pass and clip events.

    Events are filtered by category allow-list and sampled on the caller's
    frame tick: with ``sampling_n`` of N only ticks divisible by N are kept.
    """

    def __init__(
        self,
        *,
        capacity: int = 10_000,
        enabled: bool = True,
        sampling_n: int = 1,
        category_allowlist: Sequence[str] = (),
    ) -> None:
        self._enabled = bool(enabled)
        self._events = RingBuffer[DiagnosticEvent](capacity=capacity)
        self._sampling_n = max(1, int(sampling_n))
        self._allowlist = frozenset(
            item.strip().lower() for item in category_allowlist if item.strip()
        )

    @classmethod
    def from_config(cls, config: PassDiagnosticsConfig) -> DiagnosticHub:
        return cls(
            capacity=config.buffer_capacity,
            enabled=config.enabled,
            sampling_n=config.sampling_n,
            category_allowlist=config.category_allowlist,
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def capacity(self) -> int:
        return self._events.capacity

    @property
    def evicted(self) -> int:
        return self._events.evicted

    def accepts(self, category: str, tick: int) -> bool:
        if not self._enabled:
            return False
        if self._allowlist and category.strip().lower() not in self._allowlist:
            return False
        return int(tick) % self._sampling_n == 0

    def record(
        self,
        category: str,
        name: str,
        *,
        tick: int,
        value: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
        level: str = "info",
    ) -> DiagnosticEvent | None:
        """Store one event; returns None when it was filtered out."""
        if not self.accepts(category, tick):
            return None
        event = DiagnosticEvent.stamped(
            tick=tick,
            category=category.strip().lower(),
            name=name,
            level=level,
            value=value,
            metadata=metadata,
        )
        self._events.append(event)
        return event

    def record_pass(
        self,
        pass_name: str,
        *,
        tick: int,
        stats: dict[str, int],
        width: int,
        height: int,
    ) -> DiagnosticEvent | None:
        return self.record(
            RENDER_CATEGORY,
            "render.pass",
            tick=tick,
            value=stats,
            metadata={"pass": pass_name, "width": int(width), "height": int(height)},
        )

    def record_subpass(
        self,
        pass_name: str,
        *,
        tick: int,
        floor: int,
        depth: int,
    ) -> DiagnosticEvent | None:
        return self.record(
            RENDER_CATEGORY,
            "render.subpass",
            tick=tick,
            value={"floor": int(floor), "depth": int(depth)},
            metadata={"pass": pass_name},
        )

    def record_clip(
        self,
        pass_name: str,
        *,
        tick: int,
        kind: str,
        depth: int,
        heights: Sequence[int],
        coverage: Rect | None,
    ) -> DiagnosticEvent | None:
        """Clip stack state right after an append or restore changed it."""
        return self.record(
            CLIP_CATEGORY,
            f"clip.{kind}",
            tick=tick,
            level="debug",
            value={"depth": int(depth), "heights": [int(h) for h in heights]},
            metadata={"pass": pass_name, "coverage": _rect_payload(coverage)},
        )

    def snapshot(self, *, name: str | None = None, limit: int | None = None) -> list[DiagnosticEvent]:
        events = self._events.latest(limit)
        if name is None:
            return events
        return [event for event in events if event.name == name]

    def clear(self) -> None:
        self._events.clear()


def _rect_payload(rect: Rect | None) -> list[float] | None:
    if rect is None:
        return None
    return [rect.left, rect.top, rect.right, rect.bottom]


__all__ = ["CLIP_CATEGORY", "RENDER_CATEGORY", "DiagnosticHub"]
