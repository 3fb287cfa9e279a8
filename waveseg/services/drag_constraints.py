"""Drag constraint engine for segment body and handle drags (pure Python, no Qt).

세션은 드래그 시작 시점에 캡처한 불변 값이고, 각 포인터 샘플은
``(session, x) -> result`` 순수 함수로 계산된다. 결과에는 다음 샘플에 넘길
새 세션, 세그먼트의 새 시간, 그리고 양보해야 하는 이웃에 대한
:class:`NeighborUpdate` 가 담긴다. 실제 쓰기는 ``result.apply()`` 에서만 일어난다.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from waveseg.models.segment import Segment, SegmentTrack
from waveseg.models.waveform_view import WaveformViewport
from waveseg.services.collision_policy import (
    CollisionPolicy,
    NeighborSnapshot,
    NeighborUpdate,
)
from waveseg.utils.config import MIN_HANDLE_GAP_PX, MIN_SEGMENT_DURATION

__all__ = [
    "MIN_HANDLE_GAP_PX",
    "MIN_SEGMENT_DURATION",
    "BodyDragResult",
    "BodyDragSession",
    "HandleBound",
    "HandleDragResult",
    "HandleDragSession",
    "NeighborSnapshot",
    "NeighborUpdate",
    "begin_body_drag",
    "begin_handle_drag",
    "bound_handle_position",
    "capture_neighbors",
    "drag_body",
    "drag_handle",
]


def capture_neighbors(
    segment: Segment, track: SegmentTrack, policy: CollisionPolicy
) -> tuple[NeighborSnapshot | None, NeighborSnapshot | None]:
    """Snapshot the (previous, next) neighbors, or (None, None) under overlap."""
    if not policy.captures_neighbors:
        return None, None
    return (
        NeighborSnapshot.capture(track.find_previous_segment(segment)),
        NeighborSnapshot.capture(track.find_next_segment(segment)),
    )


# ================================================================
# 본문(body) 드래그
# ================================================================

@dataclass(frozen=True, slots=True)
class BodyDragSession:
    """State of a whole-segment drag, captured at pointer-down."""

    segment: Segment
    policy: CollisionPolicy
    anchor_x: float
    start_time: float
    end_time: float
    previous: NeighborSnapshot | None = None
    next: NeighborSnapshot | None = None
    last_x: float = 0.0

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass(frozen=True, slots=True)
class BodyDragResult:
    start_time: float
    end_time: float
    neighbor_updates: tuple[NeighborUpdate, ...]
    session: BodyDragSession
    changed: bool

    def apply(self) -> None:
        """Write the new boundaries, then the neighbor updates.

        A rejected segment write raises before any neighbor is touched.
        """
        self.session.segment.update(start_time=self.start_time, end_time=self.end_time)
        for update in self.neighbor_updates:
            update.apply()


def begin_body_drag(
    segment: Segment, x: float, track: SegmentTrack, policy: CollisionPolicy
) -> BodyDragSession:
    previous, next_ = capture_neighbors(segment, track, policy)
    return BodyDragSession(
        segment=segment,
        policy=policy,
        anchor_x=float(x),
        start_time=segment.start_time,
        end_time=segment.end_time,
        previous=previous,
        next=next_,
        last_x=float(x),
    )


def drag_body(session: BodyDragSession, x: float, view: WaveformViewport) -> BodyDragResult:
    """Compute the segment's boundaries for pointer position *x*.

    The segment keeps its duration: boundaries only ever move by offsets, so
    no drift accumulates over a long drag.
    """
    policy = session.policy
    time_offset = view.pixels_to_time(x - session.anchor_x)

    start = session.start_time + time_offset
    end = session.end_time + time_offset

    # 파형 원점에 닿으면 길이를 유지한 채 0에 고정
    if start < 0:
        start = 0.0
        end = session.duration

    updates: list[NeighborUpdate] = []
    previous = session.previous
    next_ = session.next

    if previous is not None:
        start, end, update = policy.resolve_previous(start, end, previous)
        if update is not None:
            updates.append(update)
            previous = previous.following(update)

    if next_ is not None:
        start, end, update = policy.resolve_next(start, end, next_)
        if update is not None:
            updates.append(update)
            next_ = next_.following(update)

    # 양쪽 이웃 사이에 꼭 맞게 끼인 경우 부동소수 오차로 이전 이웃을 침범하지 않게 고정
    if previous is not None and start < previous.end_time < end:
        start = previous.end_time

    changed = x != session.last_x
    new_session = dataclasses.replace(session, previous=previous, next=next_, last_x=float(x))
    return BodyDragResult(
        start_time=start,
        end_time=end,
        neighbor_updates=tuple(updates),
        session=new_session,
        changed=changed,
    )


# ================================================================
# 핸들(start/end marker) 드래그
# ================================================================

@dataclass(frozen=True, slots=True)
class HandleDragSession:
    """State of a start- or end-handle drag.

    Handle positions are view-relative pixel offsets of the boundary each
    handle controls; both are tracked across samples, together with the
    boundary times last produced for them.
    ``min_gap`` is the smallest pixel distance kept between the two
    boundaries. It never exceeds the segment's pixel width at drag start.
    """

    segment: Segment
    policy: CollisionPolicy
    start_marker: bool
    start_handle_x: float
    end_handle_x: float
    start_time: float
    end_time: float
    min_gap: float = MIN_HANDLE_GAP_PX
    previous: NeighborSnapshot | None = None
    next: NeighborSnapshot | None = None

    def lower_own_limit(self) -> float:
        """Lowest offset the end handle may take."""
        return self.start_handle_x + self.min_gap

    def upper_own_limit(self) -> float:
        """Highest offset the start handle may take."""
        return self.end_handle_x - self.min_gap


@dataclass(frozen=True, slots=True)
class HandleBound:
    x: float
    neighbor_update: NeighborUpdate | None
    session: HandleDragSession

    @property
    def y(self) -> float:
        # 핸들은 수평으로만 움직인다
        return 0.0


@dataclass(frozen=True, slots=True)
class HandleDragResult:
    x: float
    time: float
    neighbor_updates: tuple[NeighborUpdate, ...]
    session: HandleDragSession
    changed: bool

    @property
    def start_marker(self) -> bool:
        return self.session.start_marker

    def apply(self) -> None:
        """Write the dragged boundary, then the neighbors that gave way.

        If the segment rejects the new time nothing is written.
        """
        if self.session.start_marker:
            self.session.segment.set_start_time(self.time)
        else:
            self.session.segment.set_end_time(self.time)
        for update in self.neighbor_updates:
            update.apply()


def begin_handle_drag(
    segment: Segment,
    start_marker: bool,
    view: WaveformViewport,
    track: SegmentTrack,
    policy: CollisionPolicy,
) -> HandleDragSession:
    previous, next_ = capture_neighbors(segment, track, policy)
    start_x = view.time_to_offset(segment.start_time)
    end_x = view.time_to_offset(segment.end_time)
    return HandleDragSession(
        segment=segment,
        policy=policy,
        start_marker=start_marker,
        start_handle_x=start_x,
        end_handle_x=end_x,
        start_time=segment.start_time,
        end_time=segment.end_time,
        # 이미 1px보다 좁은 세그먼트는 그 폭 그대로 허용
        min_gap=min(MIN_HANDLE_GAP_PX, end_x - start_x),
        previous=previous,
        next=next_,
    )


def bound_handle_position(
    session: HandleDragSession, x: float, view: WaveformViewport
) -> HandleBound:
    """Clamp a candidate handle position into its permitted range.

    The segment's own other boundary is applied first and the neighbor limit
    last, so a handle never crosses into a neighbor it must not overlap.
    Under ``compress`` this is also where the neighbor gives way: while the
    pointer is inside the neighbor, its boundary follows the pointer down to
    the neighbor's minimum duration.
    """
    policy = session.policy
    update = None

    if session.start_marker:
        upper = session.upper_own_limit()
        lower = 0.0
        if session.previous is not None:
            lower, update = policy.start_handle_lower_limit(view, session.previous, x)
            if update is not None:
                session = dataclasses.replace(
                    session, previous=session.previous.following(update)
                )
        x = max(lower, min(upper, x))
    else:
        lower = session.lower_own_limit()
        upper = float(view.get_width())
        if session.next is not None:
            upper, update = policy.end_handle_upper_limit(view, session.next, x)
            if update is not None:
                session = dataclasses.replace(session, next=session.next.following(update))
        x = min(upper, max(lower, x))

    return HandleBound(x=x, neighbor_update=update, session=session)


def _guard_start_time(session: HandleDragSession, x: float, view: WaveformViewport) -> float:
    if x == session.start_handle_x:
        return session.start_time
    time = view.pixel_offset_to_time(x)
    time = min(time, view.pixel_offset_to_time(session.upper_own_limit()))
    # 픽셀→시간 변환의 부동소수 오차로 이웃과 겹치지 않도록 시간 공간에서 제한
    if session.previous is not None:
        time = max(time, session.previous.end_time)
    if time >= session.end_time:
        return session.start_time
    return time


def _guard_end_time(session: HandleDragSession, x: float, view: WaveformViewport) -> float:
    if x == session.end_handle_x:
        return session.end_time
    time = view.pixel_offset_to_time(x)
    time = max(time, view.pixel_offset_to_time(session.lower_own_limit()))
    if session.next is not None:
        time = min(time, session.next.start_time)
    if time <= session.start_time:
        return session.end_time
    return time


def drag_handle(session: HandleDragSession, x: float, view: WaveformViewport) -> HandleDragResult:
    """Compute the dragged handle's new boundary time for pointer position *x*.

    A sample that leaves the handle where it is keeps the current time
    exactly, so no pixel rounding is ever written back.
    """
    bound = bound_handle_position(session, x, view)
    session = bound.session

    if session.start_marker:
        time = _guard_start_time(session, bound.x, view)
        changed = bound.x != session.start_handle_x
        session = dataclasses.replace(session, start_handle_x=bound.x, start_time=time)
    else:
        time = _guard_end_time(session, bound.x, view)
        changed = bound.x != session.end_handle_x
        session = dataclasses.replace(session, end_handle_x=bound.x, end_time=time)

    updates = (bound.neighbor_update,) if bound.neighbor_update is not None else ()
    return HandleDragResult(
        x=bound.x,
        time=time,
        neighbor_updates=updates,
        session=session,
        changed=changed,
    )
