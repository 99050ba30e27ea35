"""Public pass rendering contracts."""

from tilepass.api.clip import (
    ClipCoverage,
    ClipCoverageKind,
    ClipCoverageLayer,
    ClipStateResult,
    ReplayRecord,
)
from tilepass.api.color import RGBA, parse_hex_color
from tilepass.api.geometry import Point, Rect, shift_optional
from tilepass.api.logging import PassLoggingConfig

__all__ = [
    "ClipCoverage",
    "ClipCoverageKind",
    "ClipCoverageLayer",
    "ClipStateResult",
    "PassLoggingConfig",
    "Point",
    "RGBA",
    "Rect",
    "ReplayRecord",
    "parse_hex_color",
    "shift_optional",
]
