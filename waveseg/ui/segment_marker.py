"""Start/end handle of a segment shape."""

from __future__ import annotations

from waveseg.models.segment import Segment
from waveseg.utils.time_utils import seconds_to_display


class SegmentMarker:
    """A draggable handle at one boundary of a segment.

    ``x`` is the view-relative pixel of the boundary the handle controls.
    The start handle is drawn to the left of its boundary, the end handle to
    the right, so neither covers the segment body.
    """

    def __init__(self, segment: Segment, start_marker: bool, width: float, color: str) -> None:
        self._segment = segment
        self._start_marker = start_marker
        self._width = float(width)
        self.color = color
        self.x: float = 0.0
        self.label_text = ""
        self.time_updated(segment.start_time if start_marker else segment.end_time)

    def is_start_marker(self) -> bool:
        return self._start_marker

    def get_segment(self) -> Segment:
        return self._segment

    def get_x(self) -> float:
        return self.x

    def set_x(self, x: float) -> None:
        self.x = x

    def get_width(self) -> float:
        return self._width

    def time_updated(self, time: float) -> None:
        self.label_text = seconds_to_display(time)

    def rect(self, height: float) -> tuple[float, float, float, float]:
        """(left, top, width, height) of the handle's hit/draw area."""
        left = self.x - self._width if self._start_marker else self.x
        return left, 0.0, self._width, float(height)

    def contains(self, x: float, y: float, height: float) -> bool:
        left, top, w, h = self.rect(height)
        return left <= x <= left + w and top <= y <= top + h
