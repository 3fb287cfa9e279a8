"""Custom-painted waveform view with draggable, resizable segments."""

from __future__ import annotations

import logging
from typing import Any

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import (
    QBrush,
    QColor,
    QContextMenuEvent,
    QCursor,
    QFont,
    QImage,
    QMouseEvent,
    QPainter,
    QPaintEvent,
    QPen,
    QResizeEvent,
    QWheelEvent,
)
from PySide6.QtWidgets import QWidget

from waveseg.models.segment import InvalidSegmentError
from waveseg.services.waveform_service import WaveformData
from waveseg.ui.segment_hit_test import SegmentHitTester
from waveseg.ui.segment_shape import SegmentShape
from waveseg.ui.segments_layer import SegmentsLayer
from waveseg.utils.config import WAVEFORM_HEIGHT
from waveseg.utils.time_utils import nice_tick_interval, seconds_to_display

logger = logging.getLogger(__name__)

_RULER_H = 14


class WaveformWidget(QWidget):
    """Waveform display that routes pointer input to the segment shapes."""

    # Colors
    _BG_COLOR = QColor(30, 30, 30)
    _RULER_COLOR = QColor(100, 100, 100)
    _RULER_TEXT_COLOR = QColor(170, 170, 170)
    _WAVEFORM_FILL = QColor(80, 170, 255, 110)
    _WAVEFORM_EDGE = QColor(120, 200, 255, 190)
    _WAVEFORM_CENTER = QColor(80, 170, 255, 40)
    _LABEL_COLOR = QColor(255, 255, 255)

    def __init__(self, layer: SegmentsLayer, parent=None):
        super().__init__(parent)
        self.setMinimumHeight(WAVEFORM_HEIGHT)
        self.setMouseTracking(True)

        self._layer = layer
        self._hit_tester = SegmentHitTester(layer)

        # Waveform data
        self._waveform_data: WaveformData | None = None
        self._waveform_image_cache: QImage | None = None
        self._waveform_cache_key: tuple | None = None

        # Pointer state
        self._active_shape: SegmentShape | None = None
        self._active_kind: str = ""
        self._grab_offset: float = 0.0
        self._press_shape: SegmentShape | None = None
        self._press_x: float = 0.0
        self._moved: bool = False
        self._hover_shape: SegmentShape | None = None

    # -------------------------------------------------------- Public API

    @property
    def layer(self) -> SegmentsLayer:
        return self._layer

    def set_waveform(self, waveform_data: WaveformData | None) -> None:
        self._waveform_data = waveform_data
        self._waveform_image_cache = None
        self._waveform_cache_key = None
        if waveform_data is not None:
            self._layer.view.duration = waveform_data.duration
        self.update()

    def refresh(self) -> None:
        self._layer.update_positions()
        self.update()

    # -------------------------------------------------------- Paint

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        w = self.width()
        h = self.height()

        painter.fillRect(0, 0, w, h, self._BG_COLOR)
        self._draw_waveform(painter, w, h)
        self._draw_ruler(painter, w)
        self._draw_segments(painter, h)
        painter.end()

    def _draw_ruler(self, painter: QPainter, w: int) -> None:
        view = self._layer.view
        start, end = view.visible_time_range()
        tick = nice_tick_interval(end - start)
        t = int(start / tick) * tick
        if t < start:
            t += tick
        painter.setFont(QFont("Arial", 8))
        while t <= end:
            x = view.time_to_offset(t)
            painter.setPen(QPen(self._RULER_COLOR, 1))
            painter.drawLine(int(x), 0, int(x), _RULER_H)
            painter.setPen(self._RULER_TEXT_COLOR)
            painter.drawText(int(x) + 3, 12, seconds_to_display(t))
            t += tick

    def _draw_waveform(self, painter: QPainter, w: int, h: int) -> None:
        """Draw waveform using cached QImage for performance."""
        wf = self._waveform_data
        if wf is None or wf.duration <= 0:
            return
        view = self._layer.view
        cache_key = (view.frame_offset, view.scale, w, h)
        if self._waveform_cache_key != cache_key:
            self._waveform_image_cache = self._render_waveform_image(w, h)
            self._waveform_cache_key = cache_key
        if self._waveform_image_cache is not None:
            painter.drawImage(0, 0, self._waveform_image_cache)

    def _render_waveform_image(self, w: int, h: int) -> QImage:
        """Render waveform to a QImage for efficient blitting."""
        wf = self._waveform_data
        view = self._layer.view
        img = QImage(w, h, QImage.Format.Format_ARGB32_Premultiplied)
        img.fill(QColor(0, 0, 0, 0))

        center_y = h // 2
        half_h = h / 2.0

        p = QPainter(img)
        p.setPen(Qt.PenStyle.NoPen)
        for px in range(w):
            t0 = view.pixel_offset_to_time(px)
            if t0 >= wf.duration:
                break
            peak_max, peak_min = wf.peak_range(t0, view.pixel_offset_to_time(px + 1))
            y_top = center_y - int(peak_max * half_h)
            y_bot = center_y - int(peak_min * half_h)
            if y_bot <= y_top:
                y_bot = y_top + 1
            p.setBrush(QBrush(self._WAVEFORM_FILL))
            p.drawRect(px, y_top, 1, y_bot - y_top)
            p.setBrush(QBrush(self._WAVEFORM_EDGE))
            p.drawRect(px, y_top, 1, 1)

        p.setPen(QPen(self._WAVEFORM_CENTER, 1))
        p.drawLine(0, center_y, w, center_y)
        p.end()
        return img

    def _draw_segments(self, painter: QPainter, h: int) -> None:
        for shape in self._layer.shapes():
            ov = shape.overlay
            if ov.x + ov.clip_width < 0 or ov.x > self.width():
                continue
            opts = shape.options
            color = QColor(shape.color)
            rect = QRectF(ov.x, ov.rect_y, ov.clip_width, ov.rect_height)

            if opts.has_overlay:
                fill = QColor(color)
                fill.setAlphaF(opts.overlay_opacity)
                painter.setPen(QPen(QColor(opts.overlay_border_color), 1))
                painter.setBrush(QBrush(fill))
                painter.drawRect(rect)
                if ov.text_visible and shape.segment.label_text:
                    painter.setPen(self._LABEL_COLOR)
                    painter.setFont(QFont("Arial", opts.overlay_font_size))
                    painter.drawText(
                        int(ov.x + opts.overlay_label_x),
                        int(ov.rect_y + opts.overlay_label_y + opts.overlay_font_size),
                        shape.segment.label_text,
                    )
            elif shape.label_visible and shape.segment.label_text:
                painter.setPen(self._LABEL_COLOR)
                painter.setFont(QFont("Arial", 9))
                painter.drawText(int(ov.x) + 4, _RULER_H + 12, shape.segment.label_text)

            for marker in (shape.get_start_marker(), shape.get_end_marker()):
                if marker is None:
                    continue
                left, top, mw, mh = marker.rect(h)
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QBrush(QColor(marker.color)))
                painter.drawRect(QRectF(left, top, mw, mh))

    # -------------------------------------------------------- Mouse

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._press(event.position().x(), event.position().y(), event)
        self.update()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        self._move(event.position().x(), event.position().y(), event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._release(event)
        self.update()

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        shape = self._shape_at(event.position().x(), event.position().y())
        if shape is not None:
            shape.on_dbl_click(event)

    def contextMenuEvent(self, event: QContextMenuEvent) -> None:
        shape = self._shape_at(event.pos().x(), event.pos().y())
        if shape is not None:
            shape.on_context_menu(event)

    def leaveEvent(self, event) -> None:
        if self._hover_shape is not None and self._active_shape is None:
            self._hover_shape.on_mouse_leave(event)
            self._hover_shape = None
            self.update()

    def wheelEvent(self, event: QWheelEvent) -> None:
        delta = event.angleDelta().y()
        if delta == 0:
            return
        view = self._layer.view
        # 뷰 상태가 바뀌면 세션의 픽셀 좌표가 무효: 진행 중 드래그 취소
        self._cancel_drag()
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            factor = 0.8 if delta > 0 else 1.25
            view.set_zoom(int(view.scale * factor), anchor_offset=event.position().x())
        else:
            shift = view.get_width() * 0.1 * (-1 if delta > 0 else 1)
            view.scroll_by(shift)
        self.refresh()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._layer.view.resize(self.width(), self.height())
        self._layer.update_positions()
        self._layer.fit_to_view()

    # -------------------------------------------------------- Pointer helpers

    def _shape_at(self, x: float, y: float) -> SegmentShape | None:
        idx, _kind = self._hit_tester.hit_test(x, y)
        if idx < 0:
            return None
        return self._layer.shapes()[idx]

    def _press(self, x: float, y: float, evt: Any = None) -> None:
        idx, kind = self._hit_tester.hit_test(x, y)
        self._press_x = x
        self._moved = False
        self._press_shape = None
        if idx < 0:
            return
        shape = self._layer.shapes()[idx]
        self._press_shape = shape

        if kind in ("start_handle", "end_handle"):
            marker = shape.get_start_marker() if kind == "start_handle" else shape.get_end_marker()
            if shape.on_handle_drag_start(marker, evt):
                self._active_shape = shape
                self._active_kind = kind
                self._grab_offset = marker.get_x() - x
                self.setCursor(QCursor(Qt.CursorShape.SizeHorCursor))
        elif kind == "body":
            if shape.on_drag_start(x, evt):
                self._active_shape = shape
                self._active_kind = kind
                self._grab_offset = 0.0
                self.setCursor(QCursor(Qt.CursorShape.ClosedHandCursor))

    def _move(self, x: float, y: float, evt: Any = None) -> None:
        if x != self._press_x:
            self._moved = True

        shape = self._active_shape
        if shape is not None:
            try:
                if self._active_kind == "body":
                    shape.on_drag_move(x, evt)
                else:
                    shape.on_handle_drag_move(x + self._grab_offset, y, evt)
            except InvalidSegmentError as e:
                logger.warning(f"Rejected segment update during drag: {e}")
                self._cancel_drag()
            self.update()
            return

        hover = self._shape_at(x, y)
        if hover is not self._hover_shape:
            if self._hover_shape is not None:
                self._hover_shape.on_mouse_leave(evt)
            if hover is not None:
                hover.on_mouse_enter(evt)
            self._hover_shape = hover
            self.update()

        _idx, kind = self._hit_tester.hit_test(x, y)
        if kind in ("start_handle", "end_handle"):
            self.setCursor(QCursor(Qt.CursorShape.SizeHorCursor))
        elif kind == "body" and hover is not None and hover.is_draggable():
            self.setCursor(QCursor(Qt.CursorShape.OpenHandCursor))
        else:
            self.setCursor(QCursor(Qt.CursorShape.ArrowCursor))

    def _release(self, evt: Any = None) -> None:
        shape = self._active_shape
        if shape is not None:
            if self._active_kind == "body":
                shape.on_drag_end(evt)
            else:
                shape.on_handle_drag_end(evt)
        if self._press_shape is not None and not self._moved:
            self._press_shape.on_click(evt)
        self._active_shape = None
        self._active_kind = ""
        self._press_shape = None
        self.setCursor(QCursor(Qt.CursorShape.ArrowCursor))

    def _cancel_drag(self) -> None:
        if self._active_shape is not None:
            self._active_shape.cancel_drag()
        self._active_shape = None
        self._active_kind = ""
