from __future__ import annotations

import numpy as np
import pytest

from tilepass.api.geometry import Rect
from tilepass.rendering.clip_buffer import ClipBuffer
from tilepass.rendering.entity import ClipOperation


def _expected(shape: tuple[int, int], rect: tuple[int, int, int, int], value: int) -> np.ndarray:
    out = np.zeros(shape, dtype=np.uint32)
    x0, y0, x1, y1 = rect
    out[y0:y1, x0:x1] = value
    return out


def test_intersect_append_raises_pixels_inside_rect() -> None:
    buffer = ClipBuffer(8, 6)
    buffer.append(Rect.from_ltrb(2, 1, 5, 4), 0, ClipOperation.INTERSECT)

    assert np.array_equal(buffer.heights, _expected((6, 8), (2, 1, 5, 4), 1))
    assert int(buffer.mask(1).sum()) == 9


def test_nested_intersect_only_raises_pixels_at_previous_height() -> None:
    buffer = ClipBuffer(8, 8)
    buffer.append(Rect.from_ltrb(0, 0, 4, 4), 0, ClipOperation.INTERSECT)
    buffer.append(Rect.from_ltrb(2, 2, 8, 8), 1, ClipOperation.INTERSECT)

    assert np.array_equal(buffer.mask(2), _expected((8, 8), (2, 2, 4, 4), 1).astype(bool))


def test_difference_append_raises_pixels_outside_rect() -> None:
    buffer = ClipBuffer(4, 4)
    buffer.append(Rect.from_ltrb(1, 1, 3, 3), 0, ClipOperation.DIFFERENCE)

    mask = buffer.mask(1)
    assert mask[0, 0]
    assert not mask[1, 1]
    assert int(mask.sum()) == 12


def test_restore_lowers_pixels_within_rect_only() -> None:
    buffer = ClipBuffer(6, 6)
    buffer.append(Rect.from_ltrb(0, 0, 6, 6), 0, ClipOperation.INTERSECT)
    buffer.restore(0, Rect.from_ltrb(0, 0, 3, 6))

    assert np.array_equal(buffer.heights, _expected((6, 6), (3, 0, 6, 6), 1))

    buffer.restore(0)
    assert not buffer.heights.any()


def test_clear_resets_every_pixel() -> None:
    buffer = ClipBuffer(3, 3)
    buffer.append(Rect.from_ltrb(0, 0, 3, 3), 0, ClipOperation.INTERSECT)
    buffer.clear()
    assert bool(buffer.mask(0).all())


def test_clip_buffer_rejects_empty_dimensions() -> None:
    with pytest.raises(ValueError):
        ClipBuffer(0, 4)
