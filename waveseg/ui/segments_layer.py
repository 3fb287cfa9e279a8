"""SegmentsLayer: owns the segment shapes drawn over one waveform view."""

from __future__ import annotations

import logging

from waveseg.models.segment import Segment, SegmentDragMode, SegmentTrack
from waveseg.models.segment_options import SegmentOptions
from waveseg.models.waveform_view import WaveformViewport
from waveseg.ui.segment_events import SegmentEvents
from waveseg.ui.segment_shape import SegmentShape
from waveseg.utils.config import DEFAULT_SEGMENT_DRAG_MODE

logger = logging.getLogger(__name__)


class SegmentsLayer:
    """Keeps one SegmentShape per segment of a track in sync with a view.

    The collision policy is read from the layer when a drag starts; the drag
    session keeps it until pointer-up, so changing the mode mid-drag only
    affects the next drag.
    """

    def __init__(
        self,
        track: SegmentTrack,
        view: WaveformViewport,
        events: SegmentEvents | None = None,
        options: SegmentOptions | None = None,
        drag_mode: SegmentDragMode | str = DEFAULT_SEGMENT_DRAG_MODE,
        editing_enabled: bool = True,
        segment_dragging_enabled: bool = True,
    ) -> None:
        self.track = track
        self.view = view
        self.events = events if events is not None else SegmentEvents()
        self.options = options or SegmentOptions()
        self._drag_mode = SegmentDragMode.from_value(drag_mode)
        self._editing_enabled = editing_enabled
        self._segment_dragging_enabled = segment_dragging_enabled
        # 세그먼트 객체(identity)로 키잉: segment_id가 겹쳐도 shape는 따로 유지
        self._shapes: dict[Segment, SegmentShape] = {}
        self._rebuild_shapes()

    # -------------------------------------------------------- Settings

    def get_segment_drag_mode(self) -> SegmentDragMode:
        return self._drag_mode

    def set_segment_drag_mode(self, mode: SegmentDragMode | str) -> None:
        self._drag_mode = SegmentDragMode.from_value(mode)
        logger.info(f"Segment drag mode: {self._drag_mode.value}")

    def is_editing_enabled(self) -> bool:
        return self._editing_enabled

    def enable_editing(self, enable: bool) -> None:
        """Toggle handles; shapes are rebuilt because markers exist only while editing."""
        if enable == self._editing_enabled:
            return
        self._editing_enabled = enable
        self._rebuild_shapes()

    def is_segment_dragging_enabled(self) -> bool:
        return self._segment_dragging_enabled

    def enable_segment_dragging(self, enable: bool) -> None:
        self._segment_dragging_enabled = enable
        for shape in self._shapes.values():
            shape.enable_segment_dragging(enable)

    # -------------------------------------------------------- Segments

    def add_segment(self, segment: Segment) -> SegmentShape:
        self.track.add_segment(segment)
        shape = SegmentShape(segment, self, self.view, self.options)
        self._shapes[segment] = shape
        return shape

    def remove_segment(self, segment: Segment) -> bool:
        shape = self._shapes.pop(segment, None)
        if shape is not None:
            shape.cancel_drag()
        return self.track.remove_segment(segment)

    def shape_for(self, segment: Segment) -> SegmentShape | None:
        return self._shapes.get(segment)

    def shapes(self) -> list[SegmentShape]:
        """Shapes in temporal order (later segments draw on top)."""
        return [self._shapes[seg] for seg in self.track if seg in self._shapes]

    def active_shape(self) -> SegmentShape | None:
        for shape in self._shapes.values():
            if shape.is_dragging:
                return shape
        return None

    # -------------------------------------------------------- Layout

    def update_shapes(self, *segments: Segment) -> None:
        """Re-layout the shapes of *segments* after their times changed."""
        for seg in segments:
            shape = self._shapes.get(seg)
            if shape is not None:
                shape.update_position()

    def update_positions(self) -> None:
        for shape in self._shapes.values():
            shape.update_position()

    def fit_to_view(self) -> None:
        for shape in self._shapes.values():
            shape.fit_to_view()

    def cancel_drags(self) -> None:
        for shape in self._shapes.values():
            shape.cancel_drag()

    def _rebuild_shapes(self) -> None:
        for shape in self._shapes.values():
            shape.cancel_drag()
        self._shapes = {
            seg: SegmentShape(seg, self, self.view, self.options)
            for seg in self.track
        }
