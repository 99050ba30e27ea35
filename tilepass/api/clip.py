"""Clip coverage contracts shared by the clip stack and its drivers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tilepass.api.geometry import Rect

if TYPE_CHECKING:
    from tilepass.rendering.entity import Entity


class ClipCoverageKind(Enum):
    """How an entity changes the active clip."""

    NO_CHANGE = "no_change"
    APPEND = "append"
    RESTORE = "restore"


@dataclass(frozen=True, slots=True)
class ClipCoverage:
    """Requested clip change for one entity.

    ``coverage`` is only meaningful for appends and ``restore_height`` only
    for restores.
    """

    kind: ClipCoverageKind = ClipCoverageKind.NO_CHANGE
    coverage: Rect | None = None
    restore_height: int = 0

    @classmethod
    def no_change(cls, coverage: Rect | None = None) -> ClipCoverage:
        return cls(kind=ClipCoverageKind.NO_CHANGE, coverage=coverage)

    @classmethod
    def append(cls, coverage: Rect | None) -> ClipCoverage:
        return cls(kind=ClipCoverageKind.APPEND, coverage=coverage)

    @classmethod
    def restore(cls, restore_height: int, coverage: Rect | None = None) -> ClipCoverage:
        if int(restore_height) < 0:
            raise ValueError("restore_height must be >= 0")
        return cls(
            kind=ClipCoverageKind.RESTORE,
            coverage=coverage,
            restore_height=int(restore_height),
        )


@dataclass(frozen=True, slots=True)
class ClipCoverageLayer:
    """One entry in a clip frame's history."""

    coverage: Rect | None
    clip_height: int


@dataclass(frozen=True, slots=True)
class ReplayRecord:
    """Owned clip entity plus the coverage active when it was drawn."""

    entity: Entity
    clip_coverage: Rect | None


@dataclass(frozen=True, slots=True)
class ClipStateResult:
    """Outcome of applying one entity's clip request."""

    should_render: bool = False
    clip_did_change: bool = False
    # Pass-local area a restore re-opens; None means the whole pass.
    restore_coverage: Rect | None = None


__all__ = [
    "ClipCoverage",
    "ClipCoverageKind",
    "ClipCoverageLayer",
    "ClipStateResult",
    "ReplayRecord",
]
