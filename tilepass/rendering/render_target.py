"""CPU render target: float RGBA colour plane plus clip buffer."""

from __future__ import annotations

import logging

import numpy as np

from tilepass.api.color import RGBA
from tilepass.api.geometry import Point, Rect
from tilepass.rendering.clip_buffer import ClipBuffer

_LOG = logging.getLogger("tilepass.rendering")


class RenderTarget:
    """Colour and clip attachments for one pass."""

    def __init__(self, width: int, height: int, *, clear_color: RGBA = (0.0, 0.0, 0.0, 0.0)) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError("render target dimensions must be > 0")
        self._color = np.zeros((int(height), int(width), 4), dtype=np.float32)
        self._color[...] = np.asarray(clear_color, dtype=np.float32)
        self._clip_buffer = ClipBuffer(int(width), int(height))
        self._flush_count = 0

    @property
    def width(self) -> int:
        return int(self._color.shape[1])

    @property
    def height(self) -> int:
        return int(self._color.shape[0])

    @property
    def color(self) -> np.ndarray:
        return self._color

    @property
    def clip_buffer(self) -> ClipBuffer:
        return self._clip_buffer

    @property
    def flush_count(self) -> int:
        return self._flush_count

    def coverage(self) -> Rect:
        return Rect.from_size(self.width, self.height)

    def fill(self, rect: Rect, color: RGBA, *, clip_height: int) -> None:
        x0, y0, x1, y1 = rect.pixel_bounds(self.width, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        mask = self._clip_buffer.mask(clip_height)[y0:y1, x0:x1]
        src = np.broadcast_to(np.asarray(color, dtype=np.float32), (y1 - y0, x1 - x0, 4))
        _blend_into(self._color[y0:y1, x0:x1], src, mask)

    def blit(self, source: RenderTarget, position: Point, *, clip_height: int) -> None:
        """Composite ``source`` with its top-left corner at ``position``."""
        ox = int(round(position.x))
        oy = int(round(position.y))
        x0 = max(0, ox)
        y0 = max(0, oy)
        x1 = min(self.width, ox + source.width)
        y1 = min(self.height, oy + source.height)
        if x1 <= x0 or y1 <= y0:
            return
        sx = x0 - ox
        sy = y0 - oy
        src = source.color[sy : sy + (y1 - y0), sx : sx + (x1 - x0)]
        mask = self._clip_buffer.mask(clip_height)[y0:y1, x0:x1]
        _blend_into(self._color[y0:y1, x0:x1], src, mask)

    def flush(self) -> None:
        """Restart the backend render pass; clip attachment contents are lost."""
        self._clip_buffer.clear()
        self._flush_count += 1
        _LOG.debug("render target flushed count=%d", self._flush_count)


def _blend_into(dst: np.ndarray, src: np.ndarray, mask: np.ndarray) -> None:
    alpha = src[..., 3:4] * mask[..., None]
    dst[..., :3] = src[..., :3] * alpha + dst[..., :3] * (1.0 - alpha)
    dst[..., 3:4] = alpha + dst[..., 3:4] * (1.0 - alpha)


__all__ = ["RenderTarget"]
