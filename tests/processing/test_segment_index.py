"""Tests for the dynamic segment index."""

from geosimplify.core.types import LineSegment
from geosimplify.processing.segment_index import SegmentIndex, envelopes_intersect
from geosimplify.processing.tagged_line import TaggedLine


class TestEnvelopesIntersect:

    def test_overlap(self):
        assert envelopes_intersect((0, 0, 2, 2), (1, 1, 3, 3))

    def test_touching_corner(self):
        assert envelopes_intersect((0, 0, 1, 1), (1, 1, 2, 2))

    def test_disjoint(self):
        assert not envelopes_intersect((0, 0, 1, 1), (1.5, 0, 2, 1))
        assert not envelopes_intersect((0, 0, 1, 1), (0, 1.5, 1, 2))


class TestSegmentIndex:
    """Tests for insert, remove and query."""

    def test_query_finds_overlapping_envelopes(self):
        index = SegmentIndex()
        near = LineSegment((0, 0), (1, 1))
        far = LineSegment((10, 10), (11, 11))
        index.insert(near)
        index.insert(far)
        found = index.query(LineSegment((0.5, 0.5), (2, 2)))
        assert found == [near]

    def test_query_nothing(self):
        index = SegmentIndex()
        index.insert(LineSegment((0, 0), (1, 1)))
        assert index.query(LineSegment((5, 5), (6, 6))) == []

    def test_remove(self):
        index = SegmentIndex()
        seg = LineSegment((0, 0), (1, 1))
        index.insert(seg)
        index.remove(seg)
        assert seg not in index
        assert len(index) == 0
        assert index.query(LineSegment((0, 0), (1, 1))) == []

    def test_remove_absent_is_harmless(self):
        index = SegmentIndex()
        index.remove(LineSegment((0, 0), (1, 1)))
        assert len(index) == 0

    def test_identity_not_value(self):
        index = SegmentIndex()
        a = LineSegment((0, 0), (1, 1))
        b = LineSegment((0, 0), (1, 1))
        index.insert(a)
        index.insert(b)
        index.insert(a)
        assert len(index) == 2
        index.remove(a)
        assert index.query(LineSegment((0, 0), (1, 1))) == [b]

    def test_degenerate_query(self):
        index = SegmentIndex()
        seg = LineSegment((0, 0), (2, 0))
        index.insert(seg)
        assert index.query(LineSegment((1, 0), (1, 0))) == [seg]

    def test_queries_stay_correct_across_rebuilds(self):
        index = SegmentIndex(rebuild_threshold=2)
        segments = [LineSegment((i, 0), (i + 1, 0)) for i in range(20)]
        for seg in segments:
            index.insert(seg)
        query = LineSegment((4.5, -1), (6.5, 1))
        assert set(map(id, index.query(query))) == {id(segments[4]), id(segments[5]), id(segments[6])}

        for seg in segments[:15]:
            index.remove(seg)
        assert index.query(query) == []
        assert len(index) == 5

        extra = LineSegment((5, -1), (5, 1))
        index.insert(extra)
        assert index.query(query) == [extra]

    def test_reinsert_after_snapshot_is_not_duplicated(self):
        index = SegmentIndex(rebuild_threshold=0)
        seg = LineSegment((0, 0), (1, 0))
        other = LineSegment((3, 0), (4, 0))
        index.insert(seg)
        index.insert(other)
        assert index.query(seg) == [seg]
        index.remove(seg)
        index.insert(seg)
        assert index.query(seg) == [seg]

    def test_tagged_segments(self):
        line = TaggedLine([(0, 0), (1, 0), (2, 0)])
        index = SegmentIndex()
        for seg in line.segments:
            index.insert(seg)
        found = index.query(LineSegment((1.5, -1), (1.5, 1)))
        assert found == [line.segment(1)]
        assert list(index) == list(line.segments)

    def test_pending_scan_stays_bounded(self):
        index = SegmentIndex(rebuild_threshold=4)
        query = LineSegment((0, -1), (100, 1))
        for i in range(50):
            index.insert(LineSegment((i, 0), (i + 1, 0)))
            assert len(index.query(query)) == i + 1
            assert len(index._pending) <= max(4, len(index._tree_items) // 2)
