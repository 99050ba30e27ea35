from __future__ import annotations

import pytest

from tilepass.api.clip import ClipCoverage, ClipCoverageKind, ClipCoverageLayer, ClipStateResult
from tilepass.api.geometry import Point, Rect
from tilepass.rendering.clip_stack import ClipCoverageStack
from tilepass.rendering.entity import ClipContents, ClipRestoreContents, Entity, SolidColorContents
from tilepass.runtime.errors import ClipStackConsistencyError

R0 = Rect.from_ltrb(0, 0, 100, 100)
R1 = Rect.from_ltrb(10, 10, 50, 50)
R2 = Rect.from_ltrb(20, 20, 40, 40)
R3 = Rect.from_ltrb(25, 25, 30, 30)


def _clip(rect: Rect) -> Entity:
    return Entity(ClipContents(rect))


def _restore(height: int) -> Entity:
    return Entity(ClipRestoreContents(height))


def _append(stack: ClipCoverageStack, rect: Rect | None, *, floor: int = 0) -> ClipStateResult:
    entity = _clip(rect if rect is not None else Rect())
    return stack.apply_clip_state(ClipCoverage.append(rect), entity, floor, Point())


def _apply_restore(
    stack: ClipCoverageStack,
    height: int,
    *,
    floor: int = 0,
    position: Point = Point(),
) -> ClipStateResult:
    return stack.apply_clip_state(ClipCoverage.restore(height), _restore(height), floor, position)


def _heights(stack: ClipCoverageStack) -> list[int]:
    return [layer.clip_height for layer in stack.get_clip_coverage_layers()]


def test_stack_is_seeded_with_initial_coverage_at_height_zero() -> None:
    stack = ClipCoverageStack(R0)

    assert stack.depth == 1
    assert stack.has_coverage() is True
    assert stack.current_clip_coverage() == R0
    assert stack.get_clip_coverage_layers() == [ClipCoverageLayer(coverage=R0, clip_height=0)]
    assert stack.get_replay_entities() == []


def test_appends_produce_contiguous_heights() -> None:
    stack = ClipCoverageStack(R0)
    rects = [R1, R2, R3, R3, R3]

    for rect in rects:
        result = _append(stack, rect)
        assert result.should_render is True
        assert result.clip_did_change is True

    assert _heights(stack) == [0, 1, 2, 3, 4, 5]
    assert stack.current_clip_coverage() == R3
    assert len(stack.get_replay_entities()) == len(rects)


def test_no_change_entity_renders_without_touching_clip_state() -> None:
    stack = ClipCoverageStack(R0)
    entity = Entity(SolidColorContents(R1, "#ff0000"))

    result = stack.apply_clip_state(ClipCoverage.no_change(), entity, 0, Point())

    assert result == ClipStateResult(should_render=True, clip_did_change=False)
    assert _heights(stack) == [0]
    assert stack.get_replay_entities() == []


def test_worked_example_append_append_restore() -> None:
    stack = ClipCoverageStack(R0)

    first = _append(stack, R1)
    assert (first.should_render, first.clip_did_change) == (True, True)
    assert stack.get_clip_coverage_layers()[-1] == ClipCoverageLayer(coverage=R1, clip_height=1)
    assert len(stack.get_replay_entities()) == 1
    assert stack.get_replay_entities()[0].clip_coverage == R1

    second = _append(stack, None)
    assert (second.should_render, second.clip_did_change) == (True, True)
    assert _heights(stack) == [0, 1, 2]
    assert len(stack.get_replay_entities()) == 2
    assert stack.get_replay_entities()[1].clip_coverage is None

    restored = _apply_restore(stack, 1)
    assert restored == ClipStateResult(should_render=False, clip_did_change=True, restore_coverage=None)
    assert stack.get_clip_coverage_layers() == [
        ClipCoverageLayer(coverage=R0, clip_height=0),
        ClipCoverageLayer(coverage=R1, clip_height=1),
    ]
    # The restore step pops the most recent record.
    replay = stack.get_replay_entities()
    assert len(replay) == 1
    assert replay[0].clip_coverage == R1


@pytest.mark.parametrize("restore_height", [2, 3, 10])
def test_restore_at_or_above_top_height_is_noop(restore_height: int) -> None:
    stack = ClipCoverageStack(R0)
    _append(stack, R1)
    _append(stack, R2)
    layers_before = stack.get_clip_coverage_layers()
    replay_before = list(stack.get_replay_entities())

    result = _apply_restore(stack, restore_height)

    assert result == ClipStateResult()
    assert stack.get_clip_coverage_layers() == layers_before
    assert stack.get_replay_entities() == replay_before


def test_restore_to_intermediate_height_drops_layers_above_it() -> None:
    stack = ClipCoverageStack(R0)
    _append(stack, R1)
    _append(stack, R2)
    _append(stack, R3)

    result = _apply_restore(stack, 1)

    assert result.should_render is False
    assert result.clip_did_change is True
    assert result.restore_coverage == R2
    assert _heights(stack) == [0, 1]
    assert stack.current_clip_coverage() == R1
    assert len(stack.get_replay_entities()) == 2


def test_restore_coverage_is_made_relative_to_pass_position() -> None:
    stack = ClipCoverageStack(R0)
    _append(stack, R1)

    result = _apply_restore(stack, 0, position=Point(5, 5))

    assert result.restore_coverage == Rect.from_ltrb(5, 5, 45, 45)
    assert _heights(stack) == [0]
    assert stack.get_replay_entities() == []


def test_restore_to_unbounded_layer_skips_replay_bookkeeping() -> None:
    stack = ClipCoverageStack(None)
    _append(stack, R1)
    stack.record_entity(_clip(R2), ClipCoverageKind.APPEND, R2)

    result = _apply_restore(stack, 0)

    assert result == ClipStateResult(should_render=False, clip_did_change=True, restore_coverage=R1)
    assert _heights(stack) == [0]
    assert len(stack.get_replay_entities()) == 1


def test_append_over_absent_coverage_is_skipped_without_recording() -> None:
    stack = ClipCoverageStack(None)

    result = _append(stack, R1)

    assert result == ClipStateResult(should_render=False, clip_did_change=True)
    assert _heights(stack) == [0, 1]
    assert stack.current_clip_coverage() == R1
    assert stack.get_replay_entities() == []


def test_push_then_pop_leaves_parent_frame_unchanged() -> None:
    stack = ClipCoverageStack(R0)
    _append(stack, R1)
    layers_before = stack.get_clip_coverage_layers()
    replay_before = list(stack.get_replay_entities())

    stack.push_subpass(R2, 1)
    stack.pop_subpass()

    assert stack.depth == 1
    assert stack.get_clip_coverage_layers() == layers_before
    replay_after = stack.get_replay_entities()
    assert len(replay_after) == len(replay_before)
    assert all(a is b for a, b in zip(replay_after, replay_before))


def test_subpass_frame_is_isolated_from_parent() -> None:
    stack = ClipCoverageStack(R0)
    _append(stack, R1)

    stack.push_subpass(R2, 1)
    assert stack.depth == 2
    assert stack.current_clip_coverage() == R2
    assert stack.get_clip_coverage_layers() == [ClipCoverageLayer(coverage=R2, clip_height=1)]
    assert stack.get_replay_entities() == []

    _append(stack, R3, floor=1)
    assert _heights(stack) == [1, 2]
    assert len(stack.get_replay_entities()) == 1

    result = _apply_restore(stack, 1, floor=1)
    assert result.clip_did_change is True
    assert _heights(stack) == [1]
    assert stack.get_replay_entities() == []

    stack.pop_subpass()
    assert _heights(stack) == [0, 1]
    assert stack.current_clip_coverage() == R1
    assert len(stack.get_replay_entities()) == 1


def test_pop_without_matching_push_is_fatal() -> None:
    stack = ClipCoverageStack(R0)
    with pytest.raises(ClipStackConsistencyError):
        stack.pop_subpass()


def test_restore_below_frame_floor_is_fatal() -> None:
    stack = ClipCoverageStack(R0)
    stack.push_subpass(R1, 5)
    _append(stack, R2, floor=5)

    with pytest.raises(ClipStackConsistencyError):
        _apply_restore(stack, 2, floor=5)


def test_recorded_entities_are_independent_clones() -> None:
    stack = ClipCoverageStack(R0)
    contents = ClipContents(R1)
    entity = Entity(contents, clip_height=3)

    stack.apply_clip_state(ClipCoverage.append(R1), entity, 0, Point())
    contents.rect = R3
    entity.clip_height = 7

    record = stack.get_replay_entities()[0]
    assert record.entity is not entity
    assert record.entity.contents.rect == R1
    assert record.entity.clip_height == 3


def test_record_entity_restore_on_empty_log_is_noop() -> None:
    stack = ClipCoverageStack(R0)
    stack.record_entity(_restore(0), ClipCoverageKind.RESTORE, Rect())
    assert stack.get_replay_entities() == []


def test_layer_accessor_returns_a_copy() -> None:
    stack = ClipCoverageStack(R0)
    layers = stack.get_clip_coverage_layers()
    layers.clear()
    assert stack.has_coverage() is True


def test_replay_accessor_returns_a_copy() -> None:
    stack = ClipCoverageStack(R0)
    _append(stack, R1)

    replay = stack.get_replay_entities()
    replay.clear()

    assert len(stack.get_replay_entities()) == 1
