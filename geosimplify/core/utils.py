"""
Utility functions for the geosimplify package.

This module contains the numeric kernels shared by the simplification
algorithms: point-to-segment distances, triangle areas, the interior
intersection test used as the topology gate, and tolerance validation.
"""

from typing import Sequence

import numpy as np
import shapely

from geosimplify.core.config import DETAIL_MAPPING, DETAIL_OPTIONS
from geosimplify.core.types import LineSegment


def check_tolerance(tolerance: float) -> float:
    """Validate a distance tolerance.

    Args:
        tolerance: Tolerance value to check

    Returns:
        The tolerance as a float

    Raises:
        ValueError: If the tolerance is negative
    """
    tolerance = float(tolerance)
    if tolerance < 0.0:
        raise ValueError("Tolerance must be non-negative")
    return tolerance


def resolve_tolerance(tol: float | str) -> float:
    """Turn a tolerance value or detail preset name into a validated tolerance.

    Args:
        tol: Numeric tolerance, or one of the DETAIL_OPTIONS preset names

    Returns:
        Non-negative tolerance value

    Raises:
        ValueError: If the preset name is unknown or the value is negative
    """
    if isinstance(tol, str):
        if tol not in DETAIL_OPTIONS:
            raise ValueError(
                f"Unknown detail preset {tol!r}; expected one of {DETAIL_OPTIONS}"
            )
        tol = DETAIL_MAPPING[tol]
    return check_tolerance(tol)


def segment_distances(p0, p1, pts: np.ndarray) -> np.ndarray:
    """Distances from each point to the segment p0-p1.

    The projection of each point is clamped to the segment, so points beyond
    either end measure to the nearest endpoint.

    Args:
        p0: Segment start (x, y, ...)
        p1: Segment end (x, y, ...)
        pts: Array of points with shape (N, >=2)

    Returns:
        Array of N distances
    """
    ax, ay = float(p0[0]), float(p0[1])
    bx, by = float(p1[0]), float(p1[1])
    px = pts[:, 0]
    py = pts[:, 1]
    dx = bx - ax
    dy = by - ay
    len2 = dx * dx + dy * dy
    to_a = np.hypot(px - ax, py - ay)
    if len2 == 0.0:
        return to_a
    r = ((px - ax) * dx + (py - ay) * dy) / len2
    to_b = np.hypot(px - bx, py - by)
    perp = np.abs((ay - py) * dx - (ax - px) * dy) / np.sqrt(len2)
    return np.where(r <= 0.0, to_a, np.where(r >= 1.0, to_b, perp))


def furthest_point(pts: np.ndarray, i: int, j: int) -> tuple[int, float]:
    """Find the point strictly between i and j furthest from the chord pts[i]-pts[j].

    Ties go to the first point scanning from i towards j.

    Returns:
        Tuple of (index, distance); (i, -1.0) when there are no interior points
    """
    if j - i < 2:
        return i, -1.0
    dists = segment_distances(pts[i], pts[j], pts[i + 1:j])
    k = int(np.argmax(dists))
    return i + 1 + k, float(dists[k])


def triangle_area(a, b, c) -> float:
    """Unsigned area of the triangle a-b-c (x and y only)."""
    return abs(((c[0] - a[0]) * (b[1] - a[1]) - (b[0] - a[0]) * (c[1] - a[1])) / 2.0)


def interior_intersections(candidate: LineSegment, segments: Sequence) -> np.ndarray:
    """Test a segment against many segments for interior intersections.

    Two segments intersect in their interior when they meet at a point that
    is not an endpoint of both. Segments that only share an endpoint, or that
    overlap exactly end to end, do not count. A T-junction, where the end of
    one segment touches the middle of the other, does.

    Args:
        candidate: Segment being tested
        segments: Segments to test against (LineSegment or TaggedLineSegment)

    Returns:
        Boolean array, True where the candidate has an interior intersection
    """
    result = np.zeros(len(segments), dtype=bool)
    if not len(segments):
        return result

    others = np.empty(len(segments), dtype=object)
    others[:] = [seg.geometry for seg in segments]
    intersections = shapely.intersection(candidate.geometry, others)
    cand_ends = {candidate.p0[:2], candidate.p1[:2]}

    for n, (seg, inter) in enumerate(zip(segments, intersections)):
        if inter is None or inter.is_empty:
            continue
        seg_ends = {seg.p0[:2], seg.p1[:2]}
        for x, y in shapely.get_coordinates(inter):
            pt = (float(x), float(y))
            if pt not in cand_ends or pt not in seg_ends:
                result[n] = True
                break
    return result
