"""Tests for the waveform viewport coordinate transform."""

import pytest

from waveseg.models.waveform_view import WaveformViewport
from waveseg.utils.config import MAX_SCALE, MIN_SCALE


def _view(**kwargs) -> WaveformViewport:
    # 44100 / 441 = 100 px per second
    params = dict(sample_rate=44100, scale=441, width=1000, height=200)
    params.update(kwargs)
    return WaveformViewport(**params)


class TestConversions:
    def test_pixels_to_time(self):
        assert _view().pixels_to_time(150) == pytest.approx(1.5)

    def test_time_to_pixels(self):
        assert _view().time_to_pixels(2.0) == pytest.approx(200.0)

    def test_no_flooring(self):
        assert _view().time_to_pixels(0.005) == pytest.approx(0.5)

    def test_offsets_respect_frame_offset(self):
        view = _view(frame_offset=300)
        assert view.pixel_offset_to_time(0) == pytest.approx(3.0)
        assert view.time_to_offset(4.0) == pytest.approx(100.0)

    def test_roundtrip(self):
        view = _view(frame_offset=123.5)
        assert view.pixel_offset_to_time(view.time_to_offset(7.25)) == pytest.approx(7.25)

    def test_visible_time_range(self):
        start, end = _view(frame_offset=100).visible_time_range()
        assert start == pytest.approx(1.0)
        assert end == pytest.approx(11.0)


class TestValidation:
    def test_zero_sample_rate(self):
        with pytest.raises(ValueError):
            _view(sample_rate=0)

    def test_zero_scale(self):
        with pytest.raises(ValueError):
            _view(scale=0)


class TestZoomScroll:
    def test_zoom_keeps_anchor_time(self):
        view = _view(frame_offset=1000)
        anchor_time = view.pixel_offset_to_time(500)
        view.set_zoom(882, anchor_offset=500)
        assert view.scale == 882
        assert view.pixel_offset_to_time(500) == pytest.approx(anchor_time)

    def test_zoom_clamped(self):
        view = _view()
        view.set_zoom(1)
        assert view.scale == MIN_SCALE
        view.set_zoom(10**9)
        assert view.scale == MAX_SCALE

    def test_scroll_not_negative(self):
        view = _view()
        view.scroll_by(-50)
        assert view.get_frame_offset() == 0.0

    def test_scroll_clamped_to_duration(self):
        view = _view(duration=20.0)  # 2000 px total, 1000 px visible
        view.scroll_by(5000)
        assert view.get_frame_offset() == pytest.approx(1000.0)

    def test_unbounded_without_duration(self):
        view = _view()
        view.set_frame_offset(5000)
        assert view.get_frame_offset() == 5000.0

    def test_resize(self):
        view = _view(duration=20.0, frame_offset=1000)
        view.resize(1500, 300)
        assert view.get_width() == 1500
        assert view.get_height() == 300
        assert view.get_frame_offset() == pytest.approx(500.0)
