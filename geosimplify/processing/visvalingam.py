"""
Visvalingam-Whyatt line simplification.

Vertices are removed one at a time in order of their effective area, the
area of the triangle formed with their current neighbours, until every
remaining vertex is at least as significant as the threshold. The threshold
is the square of the distance tolerance.
"""

import logging

import numpy as np

from geosimplify.core.utils import check_tolerance, triangle_area

logger = logging.getLogger(__name__)


class VertexChain:
    """Doubly linked chain of vertices stored as index arrays.

    Removed vertices are unlinked by rewriting the prev/next entries of their
    neighbours. The two endpoints have infinite area and are never removed.
    """

    def __init__(self, pts: np.ndarray):
        n = len(pts)
        self.pts = pts
        self.prev = np.arange(-1, n - 1)
        self.next = np.arange(1, n + 1)
        self.next[-1] = -1
        self.live = np.ones(n, dtype=bool)
        self.area = np.full(n, np.inf)
        for i in range(1, n - 1):
            self._update_area(i)

    def _update_area(self, i: int):
        p, q = self.prev[i], self.next[i]
        if p < 0 or q < 0:
            self.area[i] = np.inf
        else:
            self.area[i] = triangle_area(self.pts[p], self.pts[i], self.pts[q])

    def smallest(self) -> tuple[int, float]:
        """Live vertex with the smallest area (first one on ties)."""
        i = int(np.argmin(self.area))
        return i, float(self.area[i])

    def remove(self, i: int):
        p, q = self.prev[i], self.next[i]
        if p >= 0:
            self.next[p] = q
            self._update_area(p)
        if q >= 0:
            self.prev[q] = p
            self._update_area(q)
        self.live[i] = False
        self.area[i] = np.inf

    def indices(self) -> np.ndarray:
        """Indices of the live vertices in chain order."""
        return np.flatnonzero(self.live)


def visvalingam_indices(coords, tolerance: float) -> np.ndarray:
    """Compute the indices of the points kept by Visvalingam-Whyatt.

    Args:
        coords: Sequence or array of coordinates with shape (N, >=2)
        tolerance: Distance tolerance; its square is the area threshold

    Returns:
        Array of retained indices, in order

    Raises:
        ValueError: If tolerance is negative
    """
    tolerance = check_tolerance(tolerance)
    pts = np.asarray(coords, dtype=float)
    if len(pts) < 3:
        return np.arange(len(pts))

    threshold = tolerance * tolerance
    chain = VertexChain(pts)
    removed = 0
    while True:
        i, area = chain.smallest()
        if area >= threshold:
            break
        chain.remove(i)
        removed += 1

    logger.debug("Removed %d of %d vertices (area threshold %g)", removed, len(pts), threshold)
    return chain.indices()


def simplify_coords_vw(coords, tolerance: float) -> np.ndarray:
    """Simplify a coordinate sequence with the Visvalingam-Whyatt algorithm.

    A result is always a valid line: when only one point survives it is
    duplicated.

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
    simp = pts[visvalingam_indices(pts, tolerance)]
    if len(simp) < 2:
        return np.vstack([simp[0], simp[0]])
    return simp
