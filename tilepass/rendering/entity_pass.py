"""Pass driver: walks entities and nested sub-passes in draw order."""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, replace

from tilepass.api.clip import ClipCoverage, ClipCoverageKind, ClipStateResult
from tilepass.api.geometry import Point, Rect, shift_optional
from tilepass.diagnostics.hub import DiagnosticHub
from tilepass.rendering.clip_stack import ClipCoverageStack
from tilepass.rendering.entity import ClipRestoreContents, Entity, TextureContents
from tilepass.rendering.render_target import RenderTarget
from tilepass.runtime.config import PassRenderConfig, get_runtime_config
from tilepass.runtime.errors import ensure_invariant

_LOG = logging.getLogger("tilepass.rendering")


@dataclass(slots=True)
class PassRenderStats:
    """Per-render counters, accumulated across nested sub-passes."""

    rendered: int = 0
    culled: int = 0
    skipped: int = 0
    clip_changes: int = 0
    flushes: int = 0
    replayed: int = 0
    subpasses: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class _RenderContext:
    config: PassRenderConfig
    clip_stack: ClipCoverageStack
    stats: PassRenderStats
    hub: DiagnosticHub | None
    tick: int


class EntityPass:
    """Ordered elements of one pass.

    Elements are entities and child passes. A child pass draws in its own
    coordinate space whose origin sits at ``bounds`` top-left within the
    parent; its result is composited back under the parent's clip.
    """

    def __init__(self, *, bounds: Rect | None = None, name: str = "pass") -> None:
        self._bounds = bounds
        self._name = str(name)
        self._elements: list[Entity | EntityPass] = []

    @property
    def bounds(self) -> Rect | None:
        return self._bounds

    @property
    def name(self) -> str:
        return self._name

    @property
    def elements(self) -> tuple[Entity | EntityPass, ...]:
        return tuple(self._elements)

    def add_entity(self, entity: Entity) -> Entity:
        self._elements.append(entity)
        return entity

    def add_subpass(self, subpass: EntityPass) -> EntityPass:
        if subpass is self:
            raise ValueError("a pass cannot contain itself")
        _require_bounds(subpass)
        self._elements.append(subpass)
        return subpass

    def get_subpass_coverage(
        self,
        subpass: EntityPass,
        global_pass_position: Point,
        clip_coverage: Rect | None,
    ) -> Rect | None:
        """Global area a child pass can affect, or None when fully clipped."""
        global_bounds = _require_bounds(subpass).shift(global_pass_position)
        if clip_coverage is None:
            return global_bounds
        return global_bounds.intersection(clip_coverage)

    def render(
        self,
        target: RenderTarget,
        *,
        config: PassRenderConfig | None = None,
        hub: DiagnosticHub | None = None,
        tick: int = 0,
    ) -> PassRenderStats:
        """Render this pass and every nested pass into ``target``."""
        context = _RenderContext(
            config=config if config is not None else get_runtime_config().render,
            clip_stack=ClipCoverageStack(target.coverage()),
            stats=PassRenderStats(),
            hub=hub,
            tick=int(tick),
        )
        self._on_render(target, context, global_pass_position=Point(), clip_height_floor=0)
        ensure_invariant(context.clip_stack.depth == 1, "sub-pass frames left on the clip stack")

        stats = context.stats
        _LOG.debug("pass rendered name=%s stats=%s", self._name, stats.to_dict())
        if hub is not None:
            hub.record_pass(
                self._name,
                tick=context.tick,
                stats=stats.to_dict(),
                width=target.width,
                height=target.height,
            )
        return stats

    def _on_render(
        self,
        target: RenderTarget,
        context: _RenderContext,
        *,
        global_pass_position: Point,
        clip_height_floor: int,
    ) -> None:
        for element in self._elements:
            if isinstance(element, EntityPass):
                self._render_subpass(
                    element,
                    target,
                    context,
                    global_pass_position=global_pass_position,
                    clip_height_floor=clip_height_floor,
                )
            else:
                self._render_element(
                    element,
                    target,
                    context,
                    global_pass_position=global_pass_position,
                    clip_height_floor=clip_height_floor,
                )

    def _render_subpass(
        self,
        subpass: EntityPass,
        target: RenderTarget,
        context: _RenderContext,
        *,
        global_pass_position: Point,
        clip_height_floor: int,
    ) -> None:
        clip_stack = context.clip_stack
        bounds = _require_bounds(subpass)
        subpass_coverage = self.get_subpass_coverage(
            subpass, global_pass_position, clip_stack.current_clip_coverage()
        )
        if subpass_coverage is None:
            context.stats.culled += 1
            return

        subpass_target = RenderTarget(
            max(1, math.ceil(bounds.width)),
            max(1, math.ceil(bounds.height)),
            clear_color=context.config.clear_color,
        )
        subpass_floor = _current_clip_height(clip_stack, clip_height_floor)

        clip_stack.push_subpass(subpass_coverage, subpass_floor)
        subpass._on_render(
            subpass_target,
            context,
            global_pass_position=global_pass_position + bounds.origin,
            clip_height_floor=subpass_floor,
        )
        clip_stack.pop_subpass()
        context.stats.subpasses += 1

        if context.hub is not None:
            context.hub.record_subpass(
                subpass.name,
                tick=context.tick,
                floor=subpass_floor,
                depth=clip_stack.depth + 1,
            )

        composite = Entity(TextureContents(subpass_target, bounds.origin))
        self._render_element(
            composite,
            target,
            context,
            global_pass_position=global_pass_position,
            clip_height_floor=clip_height_floor,
        )

    def _render_element(
        self,
        element: Entity,
        target: RenderTarget,
        context: _RenderContext,
        *,
        global_pass_position: Point,
        clip_height_floor: int,
    ) -> None:
        clip_stack = context.clip_stack
        stats = context.stats
        entity = replace(element)

        clip_coverage = shift_optional(clip_stack.current_clip_coverage(), -global_pass_position)
        if context.config.cull_entities and not entity.should_render(clip_coverage):
            stats.culled += 1
            return

        request = entity.get_clip_coverage(clip_coverage)
        if request.kind is ClipCoverageKind.APPEND:
            request = ClipCoverage.append(shift_optional(request.coverage, global_pass_position))

        entity.clip_height = _current_clip_height(clip_stack, clip_height_floor) - clip_height_floor

        if entity.requires_flush:
            self._flush(target, context)

        if request.kind is ClipCoverageKind.RESTORE:
            result = self._restore_clip(
                request.restore_height,
                entity,
                target,
                context,
                global_pass_position=global_pass_position,
                clip_height_floor=clip_height_floor,
            )
        else:
            result = clip_stack.apply_clip_state(request, entity, clip_height_floor, global_pass_position)

        if result.clip_did_change:
            stats.clip_changes += 1
            if context.hub is not None:
                context.hub.record_clip(
                    self._name,
                    tick=context.tick,
                    kind=request.kind.value,
                    depth=clip_stack.depth,
                    heights=[layer.clip_height for layer in clip_stack.get_clip_coverage_layers()],
                    coverage=clip_stack.current_clip_coverage(),
                )

        if not result.should_render:
            stats.skipped += 1
            return
        entity.render(target)
        stats.rendered += 1

    def _restore_clip(
        self,
        restore_height: int,
        entity: Entity,
        target: RenderTarget,
        context: _RenderContext,
        *,
        global_pass_position: Point,
        clip_height_floor: int,
    ) -> ClipStateResult:
        """Restore one level at a time down to ``restore_height``.

        Each level drops exactly one replay record, so the replay log only
        holds clips that are still live.
        """
        clip_stack = context.clip_stack
        top_height = _current_clip_height(clip_stack, clip_height_floor)
        result = ClipStateResult()
        for height in range(top_height - 1, restore_height - 1, -1):
            step = clip_stack.apply_clip_state(
                ClipCoverage.restore(height), entity, clip_height_floor, global_pass_position
            )
            if not step.clip_did_change:
                continue
            restore = Entity(
                ClipRestoreContents(height, step.restore_coverage),
                clip_height=height - clip_height_floor,
            )
            restore.render(target)
            result = step
        if result.clip_did_change:
            _LOG.debug(
                "clip restored pass=%s height=%d",
                self._name,
                restore_height,
                extra={
                    "pass_name": self._name,
                    "restore_height": restore_height,
                    "clip_depth": clip_stack.depth,
                },
            )
        return result

    def _flush(self, target: RenderTarget, context: _RenderContext) -> None:
        target.flush()
        context.stats.flushes += 1
        if not context.config.replay_on_flush:
            return
        for record in context.clip_stack.get_replay_entities():
            record.entity.render(target)
            context.stats.replayed += 1


def _require_bounds(subpass: EntityPass) -> Rect:
    bounds = subpass.bounds
    if bounds is None or bounds.is_empty:
        raise ValueError(f"sub-pass {subpass.name!r} requires non-empty bounds")
    return bounds


def _current_clip_height(clip_stack: ClipCoverageStack, clip_height_floor: int) -> int:
    layers = clip_stack.get_clip_coverage_layers()
    if not layers:
        return int(clip_height_floor)
    return layers[-1].clip_height


__all__ = ["EntityPass", "PassRenderStats"]
