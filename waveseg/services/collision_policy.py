"""Collision policies for dragging a segment against its neighbors.

Strategy 패턴: 정책마다 하나의 클래스. 본문 드래그(body)와 핸들 드래그가
같은 인터페이스를 같은 방식으로 호출한다.

All policy methods are pure: they never write to a segment. A neighbor that
has to give way is described by a :class:`NeighborUpdate`, which the caller
applies.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from waveseg.models.segment import Segment, SegmentDragMode
from waveseg.models.waveform_view import WaveformViewport
from waveseg.utils.config import MIN_SEGMENT_DURATION


@dataclass(frozen=True, slots=True)
class NeighborSnapshot:
    """A neighbor's identity and boundaries as seen by the current drag.

    ``min_duration`` is fixed when the drag starts: the smaller of
    ``MIN_SEGMENT_DURATION`` and the neighbor's duration at that moment, so an
    already-short neighbor is never forced to grow.
    """

    segment: Segment
    start_time: float
    end_time: float
    min_duration: float

    @classmethod
    def capture(cls, segment: Segment | None) -> NeighborSnapshot | None:
        if segment is None:
            return None
        duration = segment.end_time - segment.start_time
        return cls(
            segment=segment,
            start_time=segment.start_time,
            end_time=segment.end_time,
            min_duration=min(MIN_SEGMENT_DURATION, duration),
        )

    @property
    def earliest_end(self) -> float:
        """Smallest end time the neighbor may be compressed to."""
        return self.start_time + self.min_duration

    @property
    def latest_start(self) -> float:
        """Largest start time the neighbor may be compressed to."""
        return self.end_time - self.min_duration

    def following(self, update: NeighborUpdate | None) -> NeighborSnapshot:
        """Return the snapshot as it will be once *update* is applied."""
        if update is None or update.segment is not self.segment:
            return self
        return dataclasses.replace(
            self,
            start_time=self.start_time if update.start_time is None else update.start_time,
            end_time=self.end_time if update.end_time is None else update.end_time,
        )


@dataclass(frozen=True, slots=True)
class NeighborUpdate:
    """New boundary time(s) for a neighbor that gives way to a drag."""

    segment: Segment
    start_time: float | None = None
    end_time: float | None = None

    def apply(self) -> None:
        kwargs = {}
        if self.start_time is not None:
            kwargs["start_time"] = self.start_time
        if self.end_time is not None:
            kwargs["end_time"] = self.end_time
        if kwargs:
            self.segment.update(**kwargs)


class CollisionPolicy:
    """Base policy: no neighbor constraint at all."""

    mode: SegmentDragMode = SegmentDragMode.OVERLAP
    captures_neighbors: bool = False

    def resolve_previous(
        self, start: float, end: float, previous: NeighborSnapshot
    ) -> tuple[float, float, NeighborUpdate | None]:
        """Resolve the dragged [start, end) against the previous neighbor."""
        return start, end, None

    def resolve_next(
        self, start: float, end: float, next_: NeighborSnapshot
    ) -> tuple[float, float, NeighborUpdate | None]:
        """Resolve the dragged [start, end) against the next neighbor."""
        return start, end, None

    def start_handle_lower_limit(
        self, view: WaveformViewport, previous: NeighborSnapshot, x: float
    ) -> tuple[float, NeighborUpdate | None]:
        """Lowest view offset the start handle may reach, given *previous*."""
        return 0.0, None

    def end_handle_upper_limit(
        self, view: WaveformViewport, next_: NeighborSnapshot, x: float
    ) -> tuple[float, NeighborUpdate | None]:
        """Highest view offset the end handle may reach, given *next_*."""
        return float(view.get_width()), None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.mode.value!r})"


class OverlapPolicy(CollisionPolicy):
    """Segments may overlap freely."""

    mode = SegmentDragMode.OVERLAP
    captures_neighbors = False


class NoOverlapPolicy(CollisionPolicy):
    """The dragged segment stops flush against its neighbors."""

    mode = SegmentDragMode.NO_OVERLAP
    captures_neighbors = True

    def resolve_previous(self, start, end, previous):
        if start >= previous.end_time:
            return start, end, None
        # 겹친 만큼 통째로 밀어낸다 (길이 재계산 없이 offset 이동).
        shift = previous.end_time - start
        return previous.end_time, end + shift, None

    def resolve_next(self, start, end, next_):
        if end <= next_.start_time:
            return start, end, None
        shift = end - next_.start_time
        return start - shift, next_.start_time, None

    def start_handle_lower_limit(self, view, previous, x):
        return max(0.0, view.time_to_offset(previous.end_time)), None

    def end_handle_upper_limit(self, view, next_, x):
        width = float(view.get_width())
        return min(width, view.time_to_offset(next_.start_time)), None


class CompressPolicy(CollisionPolicy):
    """Neighbors shrink to make room, down to their minimum duration."""

    mode = SegmentDragMode.COMPRESS
    captures_neighbors = True

    def resolve_previous(self, start, end, previous):
        if start >= previous.end_time:
            return start, end, None
        floor = previous.earliest_end
        if start >= floor:
            return start, end, NeighborUpdate(previous.segment, end_time=start)
        # 최소 길이를 넘어선 경우: 이웃은 floor까지만 줄이고 드래그 세그먼트는 거기 고정.
        shift = floor - start
        return floor, end + shift, NeighborUpdate(previous.segment, end_time=floor)

    def resolve_next(self, start, end, next_):
        if end <= next_.start_time:
            return start, end, None
        ceiling = next_.latest_start
        if end <= ceiling:
            return start, end, NeighborUpdate(next_.segment, start_time=end)
        shift = end - ceiling
        return start - shift, ceiling, NeighborUpdate(next_.segment, start_time=ceiling)

    def start_handle_lower_limit(self, view, previous, x):
        lower = max(0.0, view.time_to_offset(previous.earliest_end))
        if x >= view.time_to_offset(previous.end_time):
            return lower, None
        # 포인터를 따라 이웃의 끝을 연속적으로 당긴다; floor를 넘으면 floor에 고정.
        time = max(view.pixel_offset_to_time(max(x, lower)), previous.earliest_end)
        if time >= previous.end_time:
            return lower, None
        return lower, NeighborUpdate(previous.segment, end_time=time)

    def end_handle_upper_limit(self, view, next_, x):
        width = float(view.get_width())
        upper = min(width, view.time_to_offset(next_.latest_start))
        if x <= view.time_to_offset(next_.start_time):
            return upper, None
        time = min(view.pixel_offset_to_time(min(x, upper)), next_.latest_start)
        if time <= next_.start_time:
            return upper, None
        return upper, NeighborUpdate(next_.segment, start_time=time)


_POLICIES: dict[SegmentDragMode, CollisionPolicy] = {
    SegmentDragMode.OVERLAP: OverlapPolicy(),
    SegmentDragMode.NO_OVERLAP: NoOverlapPolicy(),
    SegmentDragMode.COMPRESS: CompressPolicy(),
}


def policy_for(mode: SegmentDragMode | str) -> CollisionPolicy:
    """Return the shared (stateless) policy for *mode*."""
    return _POLICIES[SegmentDragMode.from_value(mode)]
