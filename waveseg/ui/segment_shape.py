"""SegmentShape: layout and pointer handling for one segment on a waveform view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from waveseg.models.segment import Segment
from waveseg.models.segment_options import SegmentOptions
from waveseg.models.waveform_view import WaveformViewport
from waveseg.ui.segment_drag import BodyDragController, HandleDragController
from waveseg.ui.segment_events import SegmentMouseEvent
from waveseg.ui.segment_marker import SegmentMarker

if TYPE_CHECKING:
    from waveseg.ui.segments_layer import SegmentsLayer


@dataclass
class OverlayGeometry:
    """View-relative geometry of the segment body."""

    x: float = 0.0
    width: float = 0.0
    clip_width: float = 1.0
    height: float = 0.0
    rect_y: float = 0.0
    rect_height: float = 0.0
    text_visible: bool = True


class SegmentShape:
    """Overlay rect plus optional start/end markers for one segment."""

    def __init__(
        self,
        segment: Segment,
        layer: SegmentsLayer,
        view: WaveformViewport,
        options: SegmentOptions | None = None,
    ) -> None:
        self._segment = segment
        self._layer = layer
        self._view = view
        self._options = options or SegmentOptions()
        self._draggable = segment.editable and layer.is_segment_dragging_enabled()
        self._label_visible = False

        self.overlay = OverlayGeometry(rect_y=self._options.overlay_offset)
        self._start_marker: SegmentMarker | None = None
        self._end_marker: SegmentMarker | None = None
        self._create_markers()

        self._body_drag = BodyDragController(self)
        self._handle_drag = HandleDragController(self)

        self.update_position()
        self.fit_to_view()

    # -------------------------------------------------------- Accessors

    @property
    def segment(self) -> Segment:
        return self._segment

    @property
    def layer(self) -> SegmentsLayer:
        return self._layer

    @property
    def view(self) -> WaveformViewport:
        return self._view

    @property
    def options(self) -> SegmentOptions:
        return self._options

    @property
    def color(self) -> str:
        return self._segment.color or self._options.overlay_color

    @property
    def label_visible(self) -> bool:
        return self._label_visible

    @property
    def body_drag(self) -> BodyDragController:
        return self._body_drag

    @property
    def handle_drag(self) -> HandleDragController:
        return self._handle_drag

    def get_start_marker(self) -> SegmentMarker | None:
        return self._start_marker

    def get_end_marker(self) -> SegmentMarker | None:
        return self._end_marker

    def has_markers(self) -> bool:
        return self._start_marker is not None and self._end_marker is not None

    def is_draggable(self) -> bool:
        return self._draggable

    @property
    def is_dragging(self) -> bool:
        return self._body_drag.is_dragging or self._handle_drag.is_dragging

    # -------------------------------------------------------- Layout

    def _create_markers(self) -> None:
        if not (self._layer.is_editing_enabled() and self._segment.editable):
            return
        opts = self._options
        self._start_marker = SegmentMarker(
            self._segment, True, opts.handle_width, opts.start_marker_color
        )
        self._end_marker = SegmentMarker(
            self._segment, False, opts.handle_width, opts.end_marker_color
        )

    def update_position(self) -> None:
        """Recompute overlay and marker positions from the segment's times."""
        start_pixel = self._view.time_to_offset(self._segment.start_time)
        end_pixel = self._view.time_to_offset(self._segment.end_time)
        width = end_pixel - start_pixel

        if self._start_marker is not None:
            self._start_marker.set_x(start_pixel)
        if self._end_marker is not None:
            self._end_marker.set_x(end_pixel)

        self.overlay.x = start_pixel
        self.overlay.width = width
        self.overlay.clip_width = 1.0 if width < 1 else width

    def fit_to_view(self) -> None:
        """Recompute heights after the view was resized."""
        height = self._view.get_height()
        offset = self._options.overlay_offset
        rect_height = max(0.0, float(height - offset * 2))

        self.overlay.height = float(height)
        self.overlay.rect_y = float(offset)
        self.overlay.rect_height = rect_height

        opts = self._options
        # 라벨이 오버레이 안에 들어갈 때만 표시
        self.overlay.text_visible = opts.has_overlay and (
            opts.overlay_label_y + opts.overlay_font_size <= rect_height
        )

    def body_contains(self, x: float, y: float) -> bool:
        ov = self.overlay
        return (
            ov.x <= x <= ov.x + ov.clip_width
            and ov.rect_y <= y <= ov.rect_y + ov.rect_height
        )

    # -------------------------------------------------------- Dragging toggle

    def enable_segment_dragging(self, enable: bool) -> None:
        if not enable:
            self._body_drag.cancel()
        self._draggable = bool(enable) and self._segment.editable

    def cancel_drag(self) -> None:
        self._body_drag.cancel()
        self._handle_drag.cancel()

    # -------------------------------------------------------- Pointer events

    def on_mouse_enter(self, evt: Any = None) -> None:
        self._label_visible = True
        self._layer.events.mouse_entered.emit(SegmentMouseEvent(self._segment, evt))

    def on_mouse_leave(self, evt: Any = None) -> None:
        self._label_visible = False
        self._layer.events.mouse_left.emit(SegmentMouseEvent(self._segment, evt))

    def on_click(self, evt: Any = None) -> None:
        self._layer.events.clicked.emit(SegmentMouseEvent(self._segment, evt))

    def on_dbl_click(self, evt: Any = None) -> None:
        self._layer.events.double_clicked.emit(SegmentMouseEvent(self._segment, evt))

    def on_context_menu(self, evt: Any = None) -> None:
        self._layer.events.context_menu.emit(SegmentMouseEvent(self._segment, evt))

    # -------------------------------------------------------- Drag entry points

    def on_drag_start(self, x: float, evt: Any = None) -> bool:
        return self._body_drag.start(x, evt)

    def on_drag_move(self, x: float, evt: Any = None) -> bool:
        return self._body_drag.on_move(x, evt)

    def on_drag_end(self, evt: Any = None) -> None:
        self._body_drag.on_release(evt)

    def on_handle_drag_start(self, marker: SegmentMarker, evt: Any = None) -> bool:
        return self._handle_drag.start(marker.is_start_marker(), evt)

    def on_handle_drag_move(self, x: float, y: float = 0.0, evt: Any = None) -> bool:
        return self._handle_drag.on_move(x, y, evt)

    def on_handle_drag_end(self, evt: Any = None) -> None:
        self._handle_drag.on_release(evt)
