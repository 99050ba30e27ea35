"""Pass rendering modules."""

from tilepass.rendering.clip_buffer import ClipBuffer
from tilepass.rendering.clip_stack import ClipCoverageStack, SubpassState
from tilepass.rendering.entity import (
    ClipContents,
    ClipOperation,
    ClipRestoreContents,
    Contents,
    Entity,
    SolidColorContents,
    TextureContents,
)
from tilepass.rendering.entity_pass import EntityPass, PassRenderStats
from tilepass.rendering.render_target import RenderTarget

__all__ = [
    "ClipBuffer",
    "ClipContents",
    "ClipCoverageStack",
    "ClipOperation",
    "ClipRestoreContents",
    "Contents",
    "Entity",
    "EntityPass",
    "PassRenderStats",
    "RenderTarget",
    "SolidColorContents",
    "SubpassState",
    "TextureContents",
]
