"""Tests for the drag state machines and the signals they emit."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from PySide6.QtWidgets import QApplication

from waveseg.models.segment import Segment, SegmentTrack
from waveseg.models.waveform_view import WaveformViewport
from waveseg.ui.segment_drag import BodyDragController, DragMode
from waveseg.ui.segments_layer import SegmentsLayer

# QApplication 인스턴스 보장
_app = QApplication.instance() or QApplication([])


class _Recorder:
    """Collects every signal of a SegmentEvents as (name, payload)."""

    NAMES = ("drag_started", "dragged", "drag_ended")

    def __init__(self, events):
        self.calls: list[tuple[str, object]] = []
        for name in self.NAMES:
            getattr(events, name).connect(lambda e, n=name: self.calls.append((n, e)))

    def names(self) -> list[str]:
        return [n for n, _ in self.calls]


def _make_layer(*spans, mode="overlap", **kwargs) -> tuple[SegmentsLayer, list[Segment], _Recorder]:
    segs = [Segment(s, e) for s, e in spans]
    view = WaveformViewport(sample_rate=44100, scale=441, width=1000, height=200)
    layer = SegmentsLayer(SegmentTrack(list(segs)), view, drag_mode=mode, **kwargs)
    return layer, segs, _Recorder(layer.events)


class TestBodyDragController:
    def test_full_cycle_signals(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        assert shape.on_drag_start(300.0) is True
        assert shape.body_drag.mode == DragMode.MOVE
        assert shape.on_drag_move(400.0) is True
        shape.on_drag_end()
        assert rec.names() == ["drag_started", "dragged", "drag_ended"]
        assert all(e.segment is seg and e.start_marker is False for _, e in rec.calls)
        assert seg.start_time == pytest.approx(3.0)
        assert shape.body_drag.mode == DragMode.NONE

    def test_dragged_payload_via_mock_slot(self):
        layer, (seg,), _ = _make_layer((2.0, 4.0))
        slot = MagicMock()
        layer.events.dragged.connect(slot)
        shape = layer.shape_for(seg)
        shape.on_drag_start(300.0, evt="press")
        shape.on_drag_move(320.0, evt="move")
        slot.assert_called_once()
        payload = slot.call_args.args[0]
        assert payload.segment is seg
        assert payload.start_marker is False
        assert payload.evt == "move"

    def test_unchanged_sample_not_signalled(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        shape.on_drag_start(300.0)
        shape.on_drag_move(400.0)
        assert shape.on_drag_move(400.0) is False
        assert rec.names().count("dragged") == 1

    def test_move_without_start_ignored(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0))
        assert layer.shape_for(seg).on_drag_move(400.0) is False
        assert rec.calls == []
        assert seg.start_time == 2.0

    def test_release_twice_emits_once(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        shape.on_drag_start(300.0)
        shape.on_drag_end()
        shape.on_drag_end()
        assert rec.names() == ["drag_started", "drag_ended"]

    def test_second_start_rejected(self):
        layer, (seg,), _ = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        assert shape.on_drag_start(300.0) is True
        assert shape.on_drag_start(350.0) is False

    def test_not_draggable_when_disabled(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0), segment_dragging_enabled=False)
        assert layer.shape_for(seg).on_drag_start(300.0) is False
        assert rec.calls == []

    def test_not_draggable_when_not_editable(self):
        layer, _, _ = _make_layer()
        seg = Segment(2.0, 4.0, editable=False)
        shape = layer.add_segment(seg)
        assert shape.on_drag_start(300.0) is False

    def test_cancel_is_silent(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        shape.on_drag_start(300.0)
        shape.on_drag_move(350.0)
        shape.cancel_drag()
        shape.on_drag_end()
        assert "drag_ended" not in rec.names()
        assert shape.is_dragging is False
        # 취소는 되돌리지 않는다: 마지막 커밋 값 유지
        assert seg.start_time == pytest.approx(2.5)

    def test_disable_dragging_mid_drag_cancels(self):
        layer, (seg,), _ = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        shape.on_drag_start(300.0)
        layer.enable_segment_dragging(False)
        assert shape.is_dragging is False
        assert shape.is_draggable() is False

    def test_neighbor_shape_repositioned(self):
        layer, (a, b), _ = _make_layer((0.0, 2.0), (3.0, 5.0), mode="compress")
        shape_b = layer.shape_for(b)
        shape_b.on_drag_start(300.0)
        shape_b.on_drag_move(150.0)
        assert a.end_time == pytest.approx(1.5)
        shape_a = layer.shape_for(a)
        assert shape_a.overlay.width == pytest.approx(150.0)
        assert shape_a.get_end_marker().get_x() == pytest.approx(150.0)

    def test_policy_fixed_for_whole_drag(self):
        layer, (a, b), _ = _make_layer((0.0, 2.0), (3.0, 5.0), mode="no-overlap")
        shape_b = layer.shape_for(b)
        shape_b.on_drag_start(300.0)
        layer.set_segment_drag_mode("overlap")
        shape_b.on_drag_move(100.0)
        assert b.start_time == 2.0
        shape_b.on_drag_end()
        # 다음 드래그부터 새 정책 적용
        shape_b.on_drag_start(300.0)
        shape_b.on_drag_move(200.0)
        assert b.start_time == pytest.approx(1.0)


class TestHandleDragController:
    def test_start_handle_cycle(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        assert shape.on_handle_drag_start(shape.get_start_marker()) is True
        assert shape.handle_drag.mode == DragMode.RESIZE_START
        assert shape.handle_drag.start_marker is True
        assert shape.on_handle_drag_move(100.0, 57.0) is True
        shape.on_handle_drag_end()
        assert rec.names() == ["drag_started", "dragged", "drag_ended"]
        assert all(e.start_marker is True for _, e in rec.calls)
        assert seg.start_time == pytest.approx(1.0)
        assert shape.get_start_marker().label_text == "00:01.000"

    def test_end_handle_reports_end_marker(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        shape.on_handle_drag_start(shape.get_end_marker())
        assert shape.handle_drag.mode == DragMode.RESIZE_END
        shape.on_handle_drag_move(500.0)
        shape.on_handle_drag_end()
        assert all(e.start_marker is False for _, e in rec.calls)
        assert seg.end_time == pytest.approx(5.0)
        assert shape.get_end_marker().label_text == "00:05.000"

    def test_clamped_move_is_quiet(self):
        layer, (a, b), rec = _make_layer((0.0, 2.0), (2.0, 4.0), mode="no-overlap")
        shape = layer.shape_for(b)
        shape.on_handle_drag_start(shape.get_start_marker())
        assert shape.on_handle_drag_move(100.0) is False
        assert "dragged" not in rec.names()
        assert b.start_time == 2.0

    def test_no_markers_when_editing_disabled(self):
        layer, (seg,), rec = _make_layer((2.0, 4.0), editing_enabled=False)
        shape = layer.shape_for(seg)
        assert shape.has_markers() is False
        assert shape.handle_drag.start(True) is False
        assert rec.calls == []

    def test_handles_independent_of_body_drag(self):
        layer, (seg,), _ = _make_layer((2.0, 4.0), segment_dragging_enabled=False)
        shape = layer.shape_for(seg)
        assert shape.on_handle_drag_start(shape.get_end_marker()) is True

    def test_move_after_release_ignored(self):
        layer, (seg,), _ = _make_layer((2.0, 4.0))
        shape = layer.shape_for(seg)
        shape.on_handle_drag_start(shape.get_end_marker())
        shape.on_handle_drag_end()
        assert shape.on_handle_drag_move(700.0) is False
        assert seg.end_time == 4.0

    def test_body_drag_bound_is_horizontal(self):
        assert BodyDragController.drag_bound(42.0, 17.0) == (42.0, 0.0)
