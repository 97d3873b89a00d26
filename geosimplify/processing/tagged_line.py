"""
Provenance-tagged lines for topology-preserving simplification.

A TaggedLine wraps the coordinates of one input line or ring as an array of
segments that remember which line they came from and where, and collects the
segments chosen by the simplifier.
"""

from dataclasses import dataclass
from typing import List

import numpy as np
import shapely
from shapely import Geometry

from geosimplify.core.config import LINE_MINIMUM_SIZE
from geosimplify.core.types import Coordinate, Envelope, LineSegment


@dataclass(frozen=True, eq=False)
class TaggedLineSegment:
    """A line segment tagged with its parent line and position in it.

    Equality is identity, so coincident segments of different lines stay
    distinct.
    """

    segment: LineSegment
    """The plain segment."""

    parent: "TaggedLine"
    """Line the segment was taken from."""

    index: int
    """Position of the segment in the parent line."""

    @property
    def p0(self) -> Coordinate:
        return self.segment.p0

    @property
    def p1(self) -> Coordinate:
        return self.segment.p1

    @property
    def envelope(self) -> Envelope:
        return self.segment.envelope

    @property
    def geometry(self) -> Geometry:
        return self.segment.geometry

    def distance(self, point: Coordinate) -> float:
        return self.segment.distance(point)


class TaggedLine:
    """A line's original segments plus the segments kept by simplification.

    Args:
        coords: Coordinates of the input line, shape (N, >=2)
        minimum_size: Fewest coordinates the simplified line may have
            (2 for lines, 4 for rings)
    """

    def __init__(self, coords, minimum_size: int = LINE_MINIMUM_SIZE):
        self.parent_coordinates = np.asarray(coords, dtype=float)
        self.minimum_size = minimum_size
        self.segments = tuple(
            TaggedLineSegment(LineSegment(p0, p1), self, i)
            for i, (p0, p1) in enumerate(zip(self.parent_coordinates[:-1], self.parent_coordinates[1:]))
        )
        self._result: List[LineSegment] = []

    def __repr__(self):
        return (f"TaggedLine(points={len(self.parent_coordinates)}, "
                f"minimum_size={self.minimum_size}, result_size={self.result_size})")

    def segment(self, i: int) -> TaggedLineSegment:
        return self.segments[i]

    @property
    def result_segments(self) -> tuple:
        return tuple(self._result)

    @property
    def result_size(self) -> int:
        """Number of coordinates in the result so far (0 when nothing is kept)."""
        if not self._result:
            return 0
        return len(self._result) + 1

    def add_to_result(self, seg):
        """Append a segment to the result.

        Raises:
            ValueError: If the segment does not start where the last kept segment ends
        """
        if self._result and self._result[-1].p1 != seg.p0:
            raise ValueError(
                f"Segment starting at {seg.p0} does not continue the result ending at {self._result[-1].p1}"
            )
        self._result.append(seg)

    def result_coordinates(self) -> np.ndarray:
        """Coordinates of the simplified line.

        Returns the start of every kept segment followed by the end of the last
        one. A line too short to have segments returns its original coordinates.
        """
        if not self._result:
            return self.parent_coordinates.copy()
        pts = [seg.p0 for seg in self._result]
        pts.append(self._result[-1].p1)
        return np.asarray(pts, dtype=float)

    def as_line_string(self) -> shapely.LineString:
        return shapely.LineString(self.result_coordinates())

    def as_linear_ring(self) -> shapely.LinearRing:
        return shapely.LinearRing(self.result_coordinates())

