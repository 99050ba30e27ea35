"""Immutable 2D geometry contracts for pass rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    """Pass-space position or offset."""

    x: float = 0.0
    y: float = 0.0

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle stored as left/top/right/bottom edges.

    ``Rect()`` is the zero rectangle. Rectangles whose right/bottom edges do
    not exceed their left/top edges are empty.
    """

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def from_ltrb(cls, left: float, top: float, right: float, bottom: float) -> Rect:
        return cls(float(left), float(top), float(right), float(bottom))

    @classmethod
    def from_xywh(cls, x: float, y: float, width: float, height: float) -> Rect:
        return cls(float(x), float(y), float(x) + float(width), float(y) + float(height))

    @classmethod
    def from_size(cls, width: float, height: float) -> Rect:
        return cls(0.0, 0.0, float(width), float(height))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def origin(self) -> Point:
        return Point(self.left, self.top)

    @property
    def is_empty(self) -> bool:
        return self.right <= self.left or self.bottom <= self.top

    def shift(self, offset: Point) -> Rect:
        """Return this rectangle translated by ``offset``."""
        return Rect(
            self.left + offset.x,
            self.top + offset.y,
            self.right + offset.x,
            self.bottom + offset.y,
        )

    def intersection(self, other: Rect) -> Rect | None:
        """Return the overlapping area, or None when the overlap is empty."""
        result = Rect(
            max(self.left, other.left),
            max(self.top, other.top),
            min(self.right, other.right),
            min(self.bottom, other.bottom),
        )
        if result.is_empty:
            return None
        return result

    def intersects_with(self, other: Rect) -> bool:
        return self.intersection(other) is not None

    def contains(self, other: Rect) -> bool:
        """Return True if ``other`` lies entirely inside this rectangle."""
        if other.is_empty:
            return True
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )

    def pixel_bounds(self, width: int, height: int) -> tuple[int, int, int, int]:
        """Clamp to a ``width`` x ``height`` pixel grid as (x0, y0, x1, y1) slices."""
        x0 = max(0, min(int(width), int(round(self.left))))
        y0 = max(0, min(int(height), int(round(self.top))))
        x1 = max(x0, min(int(width), int(round(self.right))))
        y1 = max(y0, min(int(height), int(round(self.bottom))))
        return x0, y0, x1, y1


def shift_optional(rect: Rect | None, offset: Point) -> Rect | None:
    """Translate an optional rectangle, keeping absence."""
    if rect is None:
        return None
    return rect.shift(offset)


__all__ = ["Point", "Rect", "shift_optional"]
