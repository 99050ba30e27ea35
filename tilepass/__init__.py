"""Clip coverage bookkeeping for tiled, pass-based rendering."""

from tilepass.api.clip import ClipCoverage, ClipCoverageKind, ClipCoverageLayer, ClipStateResult
from tilepass.api.geometry import Point, Rect
from tilepass.rendering.clip_stack import ClipCoverageStack
from tilepass.rendering.entity_pass import EntityPass

__all__ = [
    "ClipCoverage",
    "ClipCoverageKind",
    "ClipCoverageLayer",
    "ClipCoverageStack",
    "ClipStateResult",
    "EntityPass",
    "Point",
    "Rect",
]
