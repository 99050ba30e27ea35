"""Nested clip coverage bookkeeping for pass-based rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tilepass.api.clip import (
    ClipCoverage,
    ClipCoverageKind,
    ClipCoverageLayer,
    ClipStateResult,
    ReplayRecord,
)
from tilepass.api.geometry import Point, Rect
from tilepass.runtime.errors import ClipStackConsistencyError, ensure_invariant

if TYPE_CHECKING:
    from tilepass.rendering.entity import Entity

_LOG = logging.getLogger("tilepass.clip")


@dataclass(slots=True)
class SubpassState:
    """Clip history and replay log scoped to one sub-pass."""

    clip_coverage: list[ClipCoverageLayer] = field(default_factory=list)
    rendered_clip_entities: list[ReplayRecord] = field(default_factory=list)


class ClipCoverageStack:
    """Stack of per-sub-pass clip frames.

    Only the top frame is ever read or mutated. Lower frames stay dormant
    until their sub-pass is popped back to.
    """

    def __init__(self, initial_coverage_rect: Rect | None) -> None:
        self._subpass_state: list[SubpassState] = [
            SubpassState(
                clip_coverage=[ClipCoverageLayer(coverage=initial_coverage_rect, clip_height=0)]
            )
        ]

    @property
    def depth(self) -> int:
        """Number of live sub-pass frames, including the seed frame."""
        return len(self._subpass_state)

    def current_clip_coverage(self) -> Rect | None:
        layers = self._current_subpass_state().clip_coverage
        if not layers:
            return None
        return layers[-1].coverage

    def has_coverage(self) -> bool:
        return bool(self._current_subpass_state().clip_coverage)

    def push_subpass(self, subpass_coverage: Rect | None, clip_height: int) -> None:
        """Open an isolated clip frame seeded at ``clip_height``."""
        self._subpass_state.append(
            SubpassState(
                clip_coverage=[ClipCoverageLayer(coverage=subpass_coverage, clip_height=int(clip_height))]
            )
        )
        _LOG.debug(
            "clip subpass pushed depth=%d floor=%d",
            self.depth,
            int(clip_height),
            extra={"clip_depth": self.depth, "clip_height": int(clip_height)},
        )

    def pop_subpass(self) -> None:
        if len(self._subpass_state) <= 1:
            raise ClipStackConsistencyError("pop_subpass called without a matching push_subpass")
        self._subpass_state.pop()
        _LOG.debug("clip subpass popped depth=%d", self.depth, extra={"clip_depth": self.depth})

    def get_clip_coverage_layers(self) -> list[ClipCoverageLayer]:
        return list(self._current_subpass_state().clip_coverage)

    def get_replay_entities(self) -> list[ReplayRecord]:
        """Copy of the current frame's replay log, oldest first."""
        return list(self._current_subpass_state().rendered_clip_entities)

    def apply_clip_state(
        self,
        global_clip_coverage: ClipCoverage,
        entity: Entity,
        clip_height_floor: int,
        global_pass_position: Point,
    ) -> ClipStateResult:
        """Apply one entity's clip request to the current frame.

        Returns whether the entity must be drawn and whether the active clip
        changed. Restores never draw; they report the pass-local area they
        re-open through ``restore_coverage``.
        """
        subpass_state = self._current_subpass_state()
        layers = subpass_state.clip_coverage
        kind = global_clip_coverage.kind

        if kind is ClipCoverageKind.APPEND:
            previous_coverage = self.current_clip_coverage()
            if layers:
                previous_clip_height = layers[-1].clip_height
            else:
                previous_clip_height = int(clip_height_floor)

            layers.append(
                ClipCoverageLayer(
                    coverage=global_clip_coverage.coverage,
                    clip_height=previous_clip_height + 1,
                )
            )
            ensure_invariant(
                layers[-1].clip_height == layers[0].clip_height + len(layers) - 1,
                "clip heights are not contiguous within the current frame",
            )

            if previous_coverage is None:
                # Appending can't narrow an already absent coverage; nothing to draw or record.
                return ClipStateResult(should_render=False, clip_did_change=True)

        elif kind is ClipCoverageKind.RESTORE:
            restore_height = int(global_clip_coverage.restore_height)
            ensure_invariant(bool(layers), "clip restore applied to an empty frame")

            if layers[-1].clip_height <= restore_height:
                return ClipStateResult()

            restoration_index = restore_height - layers[0].clip_height
            ensure_invariant(
                0 <= restoration_index < len(layers),
                f"clip restore height {restore_height} is outside the current frame",
            )

            restore_coverage: Rect | None = None
            if restoration_index + 1 < len(layers):
                restore_coverage = layers[restoration_index + 1].coverage
            if restore_coverage is not None:
                restore_coverage = restore_coverage.shift(-global_pass_position)

            del layers[restoration_index + 1 :]

            if layers[-1].coverage is not None:
                self.record_entity(entity, kind, Rect())
            return ClipStateResult(
                should_render=False,
                clip_did_change=True,
                restore_coverage=restore_coverage,
            )

        self.record_entity(entity, kind, layers[-1].coverage if layers else None)
        return ClipStateResult(
            should_render=True,
            clip_did_change=kind is ClipCoverageKind.APPEND,
        )

    def record_entity(
        self,
        entity: Entity,
        kind: ClipCoverageKind,
        clip_coverage: Rect | None,
    ) -> None:
        """Maintain the replay log of the current frame."""
        replay = self._current_subpass_state().rendered_clip_entities
        if kind is ClipCoverageKind.APPEND:
            replay.append(ReplayRecord(entity=entity.clone(), clip_coverage=clip_coverage))
        elif kind is ClipCoverageKind.RESTORE:
            if replay:
                replay.pop()

    def _current_subpass_state(self) -> SubpassState:
        return self._subpass_state[-1]


__all__ = ["ClipCoverageStack", "SubpassState"]
