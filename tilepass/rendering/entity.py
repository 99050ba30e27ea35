"""Drawable entities and the contents that give them clip behaviour."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from tilepass.api.clip import ClipCoverage
from tilepass.api.color import RGBA, parse_hex_color
from tilepass.api.geometry import Point, Rect

if TYPE_CHECKING:
    from tilepass.rendering.render_target import RenderTarget


class ClipOperation(Enum):
    INTERSECT = "intersect"
    DIFFERENCE = "difference"


class Contents(Protocol):
    """What an entity draws and how it affects the clip."""

    def get_coverage(self, entity: Entity) -> Rect | None:
        """Pass-local bounds touched by this contents, None for unbounded."""

    def get_clip_coverage(self, entity: Entity, current_clip_coverage: Rect | None) -> ClipCoverage:
        """Clip change requested when drawn over ``current_clip_coverage``."""

    def should_render(self, entity: Entity, clip_coverage: Rect | None) -> bool:
        """Return False if drawing can be skipped entirely."""

    def render(self, entity: Entity, target: RenderTarget) -> None:
        """Draw into ``target`` at ``entity.clip_height``."""


@dataclass(slots=True)
class Entity:
    """One drawable unit in a pass.

    ``clip_height`` is assigned by the pass driver and is relative to the
    clip height floor of the pass the entity is drawn in.
    """

    contents: Contents
    clip_height: int = 0
    # Reads the backdrop, so the backend must restart its render pass first.
    requires_flush: bool = False

    def get_coverage(self) -> Rect | None:
        return self.contents.get_coverage(self)

    def get_clip_coverage(self, current_clip_coverage: Rect | None) -> ClipCoverage:
        return self.contents.get_clip_coverage(self, current_clip_coverage)

    def should_render(self, clip_coverage: Rect | None) -> bool:
        return self.contents.should_render(self, clip_coverage)

    def render(self, target: RenderTarget) -> None:
        self.contents.render(self, target)

    def clone(self) -> Entity:
        return copy.deepcopy(self)


def _default_should_render(entity: Entity, clip_coverage: Rect | None) -> bool:
    if clip_coverage is None:
        return True
    coverage = entity.get_coverage()
    if coverage is None:
        return True
    return coverage.intersects_with(clip_coverage)


class SolidColorContents:
    """Fills a rectangle with one colour."""

    def __init__(self, rect: Rect, color: str | RGBA = "#ffffff") -> None:
        self.rect = rect
        self.color = color if isinstance(color, tuple) else parse_hex_color(color)

    def get_coverage(self, entity: Entity) -> Rect | None:
        return self.rect

    def get_clip_coverage(self, entity: Entity, current_clip_coverage: Rect | None) -> ClipCoverage:
        return ClipCoverage.no_change(current_clip_coverage)

    def should_render(self, entity: Entity, clip_coverage: Rect | None) -> bool:
        return _default_should_render(entity, clip_coverage)

    def render(self, entity: Entity, target: RenderTarget) -> None:
        target.fill(self.rect, self.color, clip_height=entity.clip_height)


class TextureContents:
    """Composites a finished sub-pass target at a pass-local offset."""

    def __init__(self, source: RenderTarget, position: Point) -> None:
        self.source = source
        self.position = position

    def get_coverage(self, entity: Entity) -> Rect | None:
        return Rect.from_xywh(self.position.x, self.position.y, self.source.width, self.source.height)

    def get_clip_coverage(self, entity: Entity, current_clip_coverage: Rect | None) -> ClipCoverage:
        return ClipCoverage.no_change(current_clip_coverage)

    def should_render(self, entity: Entity, clip_coverage: Rect | None) -> bool:
        return _default_should_render(entity, clip_coverage)

    def render(self, entity: Entity, target: RenderTarget) -> None:
        target.blit(self.source, self.position, clip_height=entity.clip_height)


class ClipContents:
    """Narrows the clip to (or away from) a rectangle."""

    def __init__(self, rect: Rect, operation: ClipOperation = ClipOperation.INTERSECT) -> None:
        self.rect = rect
        self.operation = operation

    def get_coverage(self, entity: Entity) -> Rect | None:
        return self.rect

    def get_clip_coverage(self, entity: Entity, current_clip_coverage: Rect | None) -> ClipCoverage:
        if self.operation is ClipOperation.DIFFERENCE:
            return ClipCoverage.append(current_clip_coverage)
        if current_clip_coverage is None:
            return ClipCoverage.append(None)
        # Disjoint intersections collapse to the zero rect so later appends still record.
        return ClipCoverage.append(current_clip_coverage.intersection(self.rect) or Rect())

    def should_render(self, entity: Entity, clip_coverage: Rect | None) -> bool:
        return True

    def render(self, entity: Entity, target: RenderTarget) -> None:
        target.clip_buffer.append(self.rect, entity.clip_height, self.operation)


class ClipRestoreContents:
    """Returns the clip to the state current at ``restore_height``."""

    def __init__(self, restore_height: int, restore_coverage: Rect | None = None) -> None:
        self.restore_height = int(restore_height)
        # Pass-local area to re-open; None re-opens the whole target.
        self.restore_coverage = restore_coverage

    def get_coverage(self, entity: Entity) -> Rect | None:
        return None

    def get_clip_coverage(self, entity: Entity, current_clip_coverage: Rect | None) -> ClipCoverage:
        return ClipCoverage.restore(self.restore_height, current_clip_coverage)

    def should_render(self, entity: Entity, clip_coverage: Rect | None) -> bool:
        return True

    def render(self, entity: Entity, target: RenderTarget) -> None:
        target.clip_buffer.restore(entity.clip_height, self.restore_coverage)


__all__ = [
    "ClipContents",
    "ClipOperation",
    "ClipRestoreContents",
    "Contents",
    "Entity",
    "SolidColorContents",
    "TextureContents",
]
