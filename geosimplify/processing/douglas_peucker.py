"""
Douglas-Peucker line simplification.

This module reduces a coordinate sequence to the subsequence of points that
keeps every removed point within a distance tolerance of the simplified line.
"""

import numpy as np

from geosimplify.core.utils import check_tolerance, furthest_point


def douglas_peucker_mask(coords, tolerance: float) -> np.ndarray:
    """Compute which points of a line the Douglas-Peucker algorithm keeps.

    Each sub-range [i, j] is replaced by its chord when no point strictly
    between i and j lies further than the tolerance from it; otherwise the
    range is split at the furthest point. The first and last points are
    always kept, and so are adjacent points.

    Args:
        coords: Sequence or array of coordinates with shape (N, >=2)
        tolerance: Maximum allowed distance of a removed point from the result

    Returns:
        Boolean array of length N, True for retained points

    Raises:
        ValueError: If tolerance is negative
    """
    tolerance = check_tolerance(tolerance)
    pts = np.asarray(coords, dtype=float)
    n = len(pts)
    keep = np.ones(n, dtype=bool)
    if n < 3:
        return keep

    stack = [(0, n - 1)]
    while stack:
        i, j = stack.pop()
        if j <= i + 1:
            continue
        k, dist = furthest_point(pts, i, j)
        if dist <= tolerance:
            keep[i + 1:j] = False
        else:
            stack.append((k, j))
            stack.append((i, k))
    return keep


def simplify_coords_dp(coords, tolerance: float) -> np.ndarray:
    """Simplify a coordinate sequence with the Douglas-Peucker algorithm.

    Args:
        coords: Sequence or array of coordinates with shape (N, >=2)
        tolerance: Distance tolerance (must be non-negative)

    Returns:
        Array of the retained coordinates, z values included
    """
    pts = np.asarray(coords, dtype=float)
    if len(pts) == 0:
        check_tolerance(tolerance)
        return pts.copy()
    return pts[douglas_peucker_mask(pts, tolerance)]
