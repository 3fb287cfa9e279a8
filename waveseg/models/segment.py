"""Segment data models (pure Python, no Qt dependency)."""

from __future__ import annotations

import bisect
import itertools
from dataclasses import dataclass, field
from enum import Enum

_id_counter = itertools.count()

_UNSET = object()


class SegmentDragMode(Enum):
    """How a dragged segment interacts with its neighbors."""

    OVERLAP = "overlap"
    NO_OVERLAP = "no-overlap"
    COMPRESS = "compress"

    @classmethod
    def from_value(cls, value: str | SegmentDragMode) -> SegmentDragMode:
        """Parse a settings string ('overlap', 'no-overlap', 'compress')."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown segment drag mode: {value!r}") from None


class InvalidSegmentError(ValueError):
    """Raised when a write would break 0 <= start_time < end_time."""


def _check_times(start_time: float, end_time: float) -> None:
    if start_time < 0:
        raise InvalidSegmentError(f"start_time must be >= 0 (got {start_time})")
    if end_time <= start_time:
        raise InvalidSegmentError(
            f"end_time must be greater than start_time (got {start_time} → {end_time})"
        )


@dataclass(eq=False)
class Segment:
    """A labeled time interval over the waveform, times in seconds.

    Identity matters: neighbor lookups and drag sessions compare segments
    with ``is``, so equality is left as object identity.
    """

    start_time: float
    end_time: float
    label_text: str = ""
    color: str | None = None
    editable: bool = True
    segment_id: str = ""

    def __post_init__(self) -> None:
        self.start_time = float(self.start_time)
        self.end_time = float(self.end_time)
        _check_times(self.start_time, self.end_time)
        if not self.segment_id:
            self.segment_id = f"segment.{next(_id_counter)}"

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def set_start_time(self, time: float) -> None:
        _check_times(float(time), self.end_time)
        self.start_time = float(time)

    def set_end_time(self, time: float) -> None:
        _check_times(self.start_time, float(time))
        self.end_time = float(time)

    def update(
        self,
        start_time=_UNSET,
        end_time=_UNSET,
        label_text=_UNSET,
        color=_UNSET,
        editable=_UNSET,
    ) -> None:
        """Change several attributes at once.

        경계 검증은 변경 후의 (start, end) 조합에 대해 한 번만 수행한다:
        세그먼트를 통째로 옮길 때 중간 상태에서 실패하지 않도록.
        """
        new_start = self.start_time if start_time is _UNSET else float(start_time)
        new_end = self.end_time if end_time is _UNSET else float(end_time)
        _check_times(new_start, new_end)
        self.start_time = new_start
        self.end_time = new_end
        if label_text is not _UNSET:
            self.label_text = label_text
        if color is not _UNSET:
            self.color = color
        if editable is not _UNSET:
            self.editable = bool(editable)


def _sort_key(segment: Segment) -> tuple[float, float]:
    return segment.start_time, segment.end_time


@dataclass
class SegmentTrack:
    """An ordered collection of segments (sorted by start time)."""

    segments: list[Segment] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.segments.sort(key=_sort_key)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    def add_segment(self, segment: Segment) -> None:
        """Add a segment and keep the list sorted by start time."""
        self._resort()
        bisect.insort(self.segments, segment, key=_sort_key)

    def remove_segment(self, segment: Segment) -> bool:
        """Remove *segment*. Returns False if it is not in the track."""
        idx = self.index_of(segment)
        if idx < 0:
            return False
        self.segments.pop(idx)
        return True

    def clear(self) -> None:
        self.segments.clear()

    def index_of(self, segment: Segment) -> int:
        for i, seg in enumerate(self.segments):
            if seg is segment:
                return i
        return -1

    def get_segment(self, segment_id: str) -> Segment | None:
        for seg in self.segments:
            if seg.segment_id == segment_id:
                return seg
        return None

    def segment_at(self, time: float) -> Segment | None:
        """Return the first segment covering *time*, or None."""
        self._resort()
        idx = bisect.bisect_right(self.segments, time, key=lambda s: s.start_time)
        for seg in reversed(self.segments[:idx]):
            if seg.start_time <= time < seg.end_time:
                return seg
        return None

    def segments_in_range(self, start_time: float, end_time: float) -> list[Segment]:
        """Return segments overlapping the half-open range [start_time, end_time)."""
        self._resort()
        return [
            seg for seg in self.segments
            if seg.start_time < end_time and seg.end_time > start_time
        ]

    def find_previous_segment(self, segment: Segment) -> Segment | None:
        """Immediate predecessor of *segment* in temporal order."""
        self._resort()
        idx = self.index_of(segment)
        if idx <= 0:
            return None
        return self.segments[idx - 1]

    def find_next_segment(self, segment: Segment) -> Segment | None:
        """Immediate successor of *segment* in temporal order."""
        self._resort()
        idx = self.index_of(segment)
        if idx < 0 or idx + 1 >= len(self.segments):
            return None
        return self.segments[idx + 1]

    def _resort(self) -> None:
        # 세그먼트는 드래그 중 제자리에서 수정되므로 조회 전에 재정렬 (안정 정렬).
        self.segments.sort(key=_sort_key)
