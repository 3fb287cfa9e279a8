"""Segment drag state machines: body drag and start/end handle drag.

SegmentShape 하나당 두 개의 독립된 컨트롤러를 가진다:
본문 드래그(MOVE)용 하나, 두 핸들이 공유하는 리사이즈용 하나.
제약 계산은 services.drag_constraints 의 순수 함수에 위임하고,
여기서는 세션의 생명주기(NONE → 드래그 중 → NONE)와 시그널 발행만 담당한다.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from waveseg.services.collision_policy import CollisionPolicy, policy_for
from waveseg.services.drag_constraints import (
    BodyDragSession,
    HandleDragSession,
    begin_body_drag,
    begin_handle_drag,
    drag_body,
    drag_handle,
)
from waveseg.ui.segment_events import SegmentDragEvent

if TYPE_CHECKING:
    from waveseg.models.segment import Segment
    from waveseg.ui.segment_shape import SegmentShape

logger = logging.getLogger(__name__)


class DragMode(Enum):
    """드래그 종류."""
    NONE = auto()
    MOVE = auto()
    RESIZE_START = auto()
    RESIZE_END = auto()


def _check_invariant(*segments: Segment | None) -> None:
    for seg in segments:
        if seg is not None:
            assert seg.end_time > seg.start_time, (
                f"{seg.segment_id}: end_time {seg.end_time} <= start_time {seg.start_time}"
            )


class _DragController:
    """Shared lifecycle for one drag state machine."""

    def __init__(self, shape: SegmentShape) -> None:
        self.shape = shape
        self.mode = DragMode.NONE

    @property
    def is_dragging(self) -> bool:
        return self.mode != DragMode.NONE

    def cancel(self) -> None:
        """Force the machine back to idle without emitting or resolving anything."""
        if self.is_dragging:
            logger.debug(f"Drag cancelled: {self.shape.segment.segment_id}")
        self._reset()

    def _reset(self) -> None:
        self.mode = DragMode.NONE

    def _current_policy(self) -> CollisionPolicy:
        return policy_for(self.shape.layer.get_segment_drag_mode())

    def _log_updates(self, updates) -> None:
        for u in updates:
            logger.debug(
                f"Neighbor gave way: {u.segment.segment_id} "
                f"start={u.start_time} end={u.end_time}"
            )

    def _emit(self, signal, start_marker: bool, evt: Any) -> None:
        signal.emit(SegmentDragEvent(segment=self.shape.segment, start_marker=start_marker, evt=evt))


class BodyDragController(_DragController):
    """Whole-segment drag: the segment moves, its duration stays fixed."""

    def __init__(self, shape: SegmentShape) -> None:
        super().__init__(shape)
        self._session: BodyDragSession | None = None

    @property
    def session(self) -> BodyDragSession | None:
        return self._session

    def start(self, x: float, evt: Any = None) -> bool:
        """Begin a body drag at pointer position *x*. No-op unless draggable."""
        shape = self.shape
        if self.is_dragging or not shape.is_draggable():
            return False
        policy = self._current_policy()
        self._session = begin_body_drag(shape.segment, x, shape.layer.track, policy)
        self.mode = DragMode.MOVE
        logger.debug(f"Body drag start: {shape.segment.segment_id} policy={policy.mode.value}")
        self._emit(shape.layer.events.drag_started, False, evt)
        return True

    @staticmethod
    def drag_bound(x: float, y: float) -> tuple[float, float]:
        """Allow the overlay to move horizontally but not vertically."""
        return x, 0.0

    def on_move(self, x: float, evt: Any = None) -> bool:
        """Apply one pointer sample. Returns True if a dragged signal was emitted."""
        if self._session is None:
            return False
        shape = self.shape
        result = drag_body(self._session, x, shape.view)
        result.apply()
        self._log_updates(result.neighbor_updates)
        self._session = result.session
        _check_invariant(shape.segment, *(u.segment for u in result.neighbor_updates))

        # 시간 경계가 진실의 원천: 오버레이 위치는 시간에서 다시 계산
        shape.layer.update_shapes(shape.segment, *(u.segment for u in result.neighbor_updates))

        if result.changed:
            self._emit(shape.layer.events.dragged, False, evt)
        return result.changed

    def on_release(self, evt: Any = None) -> None:
        if self._session is None:
            return
        self._reset()
        logger.debug(f"Body drag end: {self.shape.segment.segment_id}")
        self._emit(self.shape.layer.events.drag_ended, False, evt)

    def _reset(self) -> None:
        super()._reset()
        self._session = None


class HandleDragController(_DragController):
    """Start/end handle drag: one boundary moves, the other stays put."""

    def __init__(self, shape: SegmentShape) -> None:
        super().__init__(shape)
        self._session: HandleDragSession | None = None

    @property
    def session(self) -> HandleDragSession | None:
        return self._session

    @property
    def start_marker(self) -> bool:
        return self.mode == DragMode.RESIZE_START

    def start(self, start_marker: bool, evt: Any = None) -> bool:
        """Begin dragging the start (or end) handle. No-op without markers."""
        shape = self.shape
        if self.is_dragging or not shape.segment.editable or not shape.has_markers():
            return False
        policy = self._current_policy()
        self._session = begin_handle_drag(
            shape.segment, start_marker, shape.view, shape.layer.track, policy
        )
        self.mode = DragMode.RESIZE_START if start_marker else DragMode.RESIZE_END
        logger.debug(
            f"Handle drag start: {shape.segment.segment_id} "
            f"{'start' if start_marker else 'end'} policy={policy.mode.value}"
        )
        self._emit(shape.layer.events.drag_started, start_marker, evt)
        return True

    def on_move(self, x: float, y: float = 0.0, evt: Any = None) -> bool:
        """Apply one pointer sample; *y* is always discarded."""
        if self._session is None:
            return False
        shape = self.shape
        result = drag_handle(self._session, x, shape.view)
        result.apply()
        self._log_updates(result.neighbor_updates)
        self._session = result.session
        _check_invariant(shape.segment, *(u.segment for u in result.neighbor_updates))

        marker = shape.get_start_marker() if result.start_marker else shape.get_end_marker()
        marker.time_updated(shape.segment.start_time if result.start_marker else shape.segment.end_time)
        shape.layer.update_shapes(shape.segment, *(u.segment for u in result.neighbor_updates))

        if result.changed:
            self._emit(shape.layer.events.dragged, result.start_marker, evt)
        return result.changed

    def on_release(self, evt: Any = None) -> None:
        if self._session is None:
            return
        start_marker = self._session.start_marker
        self._reset()
        logger.debug(f"Handle drag end: {self.shape.segment.segment_id}")
        self._emit(self.shape.layer.events.drag_ended, start_marker, evt)

    def _reset(self) -> None:
        super()._reset()
        self._session = None
