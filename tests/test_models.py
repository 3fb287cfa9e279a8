"""Tests for the segment data models."""

import pytest

from waveseg.models.segment import (
    InvalidSegmentError,
    Segment,
    SegmentDragMode,
    SegmentTrack,
)


def _track(*spans: tuple[float, float]) -> SegmentTrack:
    return SegmentTrack([Segment(s, e) for s, e in spans])


class TestSegmentDragMode:
    def test_from_string(self):
        assert SegmentDragMode.from_value("overlap") is SegmentDragMode.OVERLAP
        assert SegmentDragMode.from_value("no-overlap") is SegmentDragMode.NO_OVERLAP
        assert SegmentDragMode.from_value("compress") is SegmentDragMode.COMPRESS

    def test_from_enum_passthrough(self):
        assert SegmentDragMode.from_value(SegmentDragMode.COMPRESS) is SegmentDragMode.COMPRESS

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown segment drag mode"):
            SegmentDragMode.from_value("squash")


class TestSegment:
    def test_duration(self):
        seg = Segment(1.0, 3.5)
        assert seg.duration == pytest.approx(2.5)

    def test_times_converted_to_float(self):
        seg = Segment(1, 2)
        assert isinstance(seg.start_time, float)
        assert isinstance(seg.end_time, float)

    def test_auto_id_unique(self):
        a = Segment(0, 1)
        b = Segment(0, 1)
        assert a.segment_id.startswith("segment.")
        assert a.segment_id != b.segment_id

    def test_explicit_id_kept(self):
        assert Segment(0, 1, segment_id="intro").segment_id == "intro"

    def test_identity_equality(self):
        # 같은 시간을 가진 두 세그먼트라도 서로 다른 객체
        assert Segment(0, 1) != Segment(0, 1)

    def test_negative_start_rejected(self):
        with pytest.raises(InvalidSegmentError):
            Segment(-0.1, 1.0)

    def test_end_not_after_start_rejected(self):
        with pytest.raises(InvalidSegmentError):
            Segment(2.0, 2.0)
        with pytest.raises(InvalidSegmentError):
            Segment(2.0, 1.0)

    def test_invalid_segment_error_is_value_error(self):
        assert issubclass(InvalidSegmentError, ValueError)

    def test_set_start_time(self):
        seg = Segment(1.0, 3.0)
        seg.set_start_time(2.0)
        assert seg.start_time == 2.0

    def test_set_start_time_past_end_rejected(self):
        seg = Segment(1.0, 3.0)
        with pytest.raises(InvalidSegmentError):
            seg.set_start_time(3.0)
        assert seg.start_time == 1.0

    def test_set_end_time_before_start_rejected(self):
        seg = Segment(1.0, 3.0)
        with pytest.raises(InvalidSegmentError):
            seg.set_end_time(0.5)
        assert seg.end_time == 3.0


class TestSegmentUpdate:
    def test_move_past_old_end(self):
        """여러 필드를 한 번에 검증: 중간 상태 때문에 실패하지 않음."""
        seg = Segment(1.0, 2.0)
        seg.update(start_time=5.0, end_time=6.0)
        assert (seg.start_time, seg.end_time) == (5.0, 6.0)

    def test_invalid_update_leaves_segment_untouched(self):
        seg = Segment(1.0, 2.0, label_text="a")
        with pytest.raises(InvalidSegmentError):
            seg.update(start_time=3.0, label_text="b")
        assert (seg.start_time, seg.end_time, seg.label_text) == (1.0, 2.0, "a")

    def test_update_other_attributes(self):
        seg = Segment(1.0, 2.0)
        seg.update(label_text="Verse", color="#00ff00", editable=False)
        assert seg.label_text == "Verse"
        assert seg.color == "#00ff00"
        assert seg.editable is False

    def test_color_can_be_cleared(self):
        seg = Segment(1.0, 2.0, color="#00ff00")
        seg.update(color=None)
        assert seg.color is None


class TestSegmentTrack:
    def test_sorted_on_creation(self):
        track = _track((5, 6), (1, 2), (3, 4))
        assert [s.start_time for s in track] == [1.0, 3.0, 5.0]

    def test_add_segment_keeps_order(self):
        track = _track((1, 2), (5, 6))
        seg = Segment(3, 4)
        track.add_segment(seg)
        assert track.index_of(seg) == 1
        assert len(track) == 3

    def test_remove_segment(self):
        track = _track((1, 2), (3, 4))
        seg = track[0]
        assert track.remove_segment(seg) is True
        assert track.remove_segment(seg) is False
        assert len(track) == 1

    def test_clear(self):
        track = _track((1, 2), (3, 4))
        track.clear()
        assert len(track) == 0

    def test_get_segment_by_id(self):
        seg = Segment(1, 2, segment_id="x")
        track = SegmentTrack([seg])
        assert track.get_segment("x") is seg
        assert track.get_segment("missing") is None

    def test_segment_at(self):
        track = _track((1, 2), (3, 4))
        assert track.segment_at(1.5) is track[0]
        assert track.segment_at(2.0) is None  # end is exclusive
        assert track.segment_at(3.0) is track[1]
        assert track.segment_at(10.0) is None

    def test_segments_in_range(self):
        track = _track((1, 2), (3, 4), (5, 6))
        found = track.segments_in_range(1.5, 3.5)
        assert found == [track[0], track[1]]

    def test_neighbors(self):
        track = _track((0, 1), (2, 3), (4, 5))
        a, b, c = track[0], track[1], track[2]
        assert track.find_previous_segment(b) is a
        assert track.find_next_segment(b) is c
        assert track.find_previous_segment(a) is None
        assert track.find_next_segment(c) is None

    def test_neighbors_of_unknown_segment(self):
        track = _track((0, 1))
        stranger = Segment(5, 6)
        assert track.find_previous_segment(stranger) is None
        assert track.find_next_segment(stranger) is None

    def test_neighbors_after_in_place_move(self):
        """드래그 중 제자리 수정 후에도 이웃 조회는 시간 순서를 따른다."""
        track = _track((0, 1), (2, 3), (4, 5))
        a, b, c = track[0], track[1], track[2]
        a.update(start_time=6.0, end_time=7.0)
        assert track.find_previous_segment(a) is c
        assert track.find_next_segment(b) is c
