"""Per-pixel clip height buffer emulating a stencil attachment."""

from __future__ import annotations

import numpy as np

from tilepass.api.geometry import Rect
from tilepass.rendering.entity import ClipOperation


class ClipBuffer:
    """Pixels are visible at clip height ``h`` only where the buffer equals ``h``.

    Appending a clip at height ``h`` raises the selected pixels from ``h`` to
    ``h + 1``; restoring to ``h`` lowers every pixel above ``h`` back to ``h``.
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError("clip buffer dimensions must be > 0")
        self._heights = np.zeros((int(height), int(width)), dtype=np.uint32)

    @property
    def width(self) -> int:
        return int(self._heights.shape[1])

    @property
    def height(self) -> int:
        return int(self._heights.shape[0])

    @property
    def heights(self) -> np.ndarray:
        return self._heights

    def clear(self) -> None:
        self._heights.fill(0)

    def append(self, rect: Rect, clip_height: int, operation: ClipOperation) -> None:
        current = self._heights == np.uint32(clip_height)
        inside = self._rect_mask(rect)
        if operation is ClipOperation.DIFFERENCE:
            selected = current & ~inside
        else:
            selected = current & inside
        self._heights[selected] = np.uint32(int(clip_height) + 1)

    def restore(self, clip_height: int, rect: Rect | None = None) -> None:
        above = self._heights > np.uint32(clip_height)
        if rect is not None:
            above &= self._rect_mask(rect)
        self._heights[above] = np.uint32(clip_height)

    def mask(self, clip_height: int) -> np.ndarray:
        """Boolean mask of pixels visible at ``clip_height``."""
        return self._heights == np.uint32(clip_height)

    def _rect_mask(self, rect: Rect) -> np.ndarray:
        out = np.zeros(self._heights.shape, dtype=bool)
        x0, y0, x1, y1 = rect.pixel_bounds(self.width, self.height)
        out[y0:y1, x0:x1] = True
        return out


__all__ = ["ClipBuffer"]
