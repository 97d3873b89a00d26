"""
Topology-preserving line simplification.

This module simplifies tagged lines with the Douglas-Peucker split strategy,
but only flattens a span when the resulting segment introduces no new
intersection with already simplified output or with the remaining original
segments of any line in the same batch.
"""

import logging
from typing import Callable, Iterable, Optional

from geosimplify.core.types import LineSegment
from geosimplify.core.utils import check_tolerance, furthest_point, interior_intersections
from geosimplify.processing.segment_index import SegmentIndex
from geosimplify.processing.tagged_line import TaggedLine, TaggedLineSegment

logger = logging.getLogger(__name__)


class TaggedLineSimplifier:
    """Simplifies one TaggedLine against shared input and output indices.

    The input index holds the original segments that have not been flattened
    yet; the output index holds every flattened segment produced so far.

    Args:
        input_index: Index of remaining original segments (shared by the batch)
        output_index: Index of flattened segments (shared by the batch)
        distance_tolerance: Maximum distance of a removed point from the result
    """

    def __init__(self, input_index: SegmentIndex, output_index: SegmentIndex,
                 distance_tolerance: float = 0.0):
        self.input_index = input_index
        self.output_index = output_index
        self.distance_tolerance = check_tolerance(distance_tolerance)
        self.line: Optional[TaggedLine] = None
        self.line_pts = None

    def simplify(self, line: TaggedLine):
        """Simplify a tagged line, appending the kept segments to its result."""
        self.line = line
        self.line_pts = line.parent_coordinates
        if len(self.line_pts) < 2:
            return
        self._simplify_section(0, len(self.line_pts) - 1)

    def _simplify_section(self, start: int, end: int):
        # Sections are taken from a stack, left half before right half, so
        # segments reach the result in line order.
        stack = [(start, end, 0)]
        while stack:
            i, j, depth = stack.pop()
            depth += 1
            if i + 1 == j:
                # unchanged, so it stays in the input index and out of the output index
                self.line.add_to_result(self.line.segment(i))
                continue

            is_valid = True

            # If the result is still short of the minimum size and flattening
            # could leave it short in the worst case, keep splitting.
            if self.line.result_size < self.line.minimum_size:
                worst_case_size = depth + 1
                if worst_case_size < self.line.minimum_size:
                    is_valid = False

            furthest, distance = furthest_point(self.line_pts, i, j)
            if distance > self.distance_tolerance:
                is_valid = False

            if is_valid:
                candidate = LineSegment(self.line_pts[i], self.line_pts[j])
                if self._has_bad_intersection(self.line, i, j, candidate):
                    is_valid = False

            if is_valid:
                self.line.add_to_result(self._flatten(i, j, candidate))
                continue

            stack.append((furthest, j, depth))
            stack.append((i, furthest, depth))

    def _flatten(self, start: int, end: int, candidate: LineSegment) -> LineSegment:
        """Replace the section start..end by its chord and update both indices."""
        self._remove(self.line, start, end)
        self.output_index.insert(candidate)
        return candidate

    def _has_bad_intersection(self, line: TaggedLine, start: int, end: int,
                              candidate: LineSegment) -> bool:
        if self._has_bad_output_intersection(candidate):
            return True
        if self._has_bad_input_intersection(line, start, end, candidate):
            return True
        return False

    def _has_bad_output_intersection(self, candidate: LineSegment) -> bool:
        found = self.output_index.query(candidate)
        return bool(interior_intersections(candidate, found).any())

    def _has_bad_input_intersection(self, line: TaggedLine, start: int, end: int,
                                    candidate: LineSegment) -> bool:
        found = [seg for seg in self.input_index.query(candidate)
                 if not is_in_line_section(line, start, end, seg)]
        return bool(interior_intersections(candidate, found).any())

    def _remove(self, line: TaggedLine, start: int, end: int):
        for i in range(start, end):
            self.input_index.remove(line.segment(i))


def is_in_line_section(line: TaggedLine, start: int, end: int, seg) -> bool:
    """Test whether a segment belongs to the half-open section [start, end) of a line.

    Plain segments (from the output index) never belong to a section.
    """
    if not isinstance(seg, TaggedLineSegment) or seg.parent is not line:
        return False
    return start <= seg.index < end


class TaggedLinesSimplifier:
    """Simplifies a batch of TaggedLines against one pair of shared indices.

    All original segments of all lines are indexed before any line is
    simplified, so each line sees the unsimplified geometry of the lines
    after it. Lines are processed in the order given; earlier lines get the
    first chance at contested flattenings.

    Args:
        distance_tolerance: Maximum distance of a removed point from the result

    Raises:
        ValueError: If distance_tolerance is negative
    """

    def __init__(self, distance_tolerance: float = 0.0):
        self.distance_tolerance = check_tolerance(distance_tolerance)
        self.input_index = SegmentIndex()
        self.output_index = SegmentIndex()

    def simplify(self, tagged_lines: Iterable[TaggedLine],
                 report_progress: Optional[Callable[[int, int], None]] = None):
        """Simplify every line of the batch in place.

        Args:
            tagged_lines: Lines to simplify
            report_progress: Optional callback called as report_progress(done, total)
                after each line
        """
        lines = list(tagged_lines)
        for line in lines:
            for seg in line.segments:
                self.input_index.insert(seg)
        logger.debug("Indexed %d segments from %d lines", len(self.input_index), len(lines))

        for n, line in enumerate(lines, start=1):
            simplifier = TaggedLineSimplifier(self.input_index, self.output_index,
                                              self.distance_tolerance)
            simplifier.simplify(line)
            logger.debug("Line %d/%d: %d -> %d points", n, len(lines),
                         len(line.parent_coordinates), line.result_size)
            if report_progress is not None:
                report_progress(n, len(lines))
