"""
Type definitions and data classes for the geosimplify package.

This module contains the type aliases, the plain line segment used by the
simplifiers and spatial index, and the settings object consumed by the batch
worker.
"""

import math
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

import shapely
from shapely import Geometry

Coordinate = Tuple[float, ...]
"""A coordinate tuple: (x, y) or (x, y, z)."""

Envelope = Tuple[float, float, float, float]
"""Bounding box as (minx, miny, maxx, maxy)."""

SimplifyMethod = Literal["topology", "douglas_peucker", "visvalingam"]
"""Type alias for valid simplification methods."""


@dataclass(eq=False)
class LineSegment:
    """A straight segment between two coordinates.

    Segments compare by identity: two segments with the same endpoints are
    still distinct entries in a spatial index. Only x and y take part in the
    geometric computations; any z value is carried along untouched.
    """

    p0: Coordinate
    """Start coordinate."""

    p1: Coordinate
    """End coordinate."""

    def __post_init__(self):
        self.p0 = tuple(float(v) for v in self.p0)
        self.p1 = tuple(float(v) for v in self.p1)
        self._geometry: Optional[Geometry] = None

    @property
    def envelope(self) -> Envelope:
        """Bounding box of the segment."""
        x0, y0 = self.p0[0], self.p0[1]
        x1, y1 = self.p1[0], self.p1[1]
        return (min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))

    @property
    def is_degenerate(self) -> bool:
        """True when both endpoints share the same x and y."""
        return self.p0[:2] == self.p1[:2]

    @property
    def geometry(self) -> Geometry:
        """Shapely geometry for the segment, a Point when it has zero length."""
        if self._geometry is None:
            if self.is_degenerate:
                self._geometry = shapely.Point(self.p0[:2])
            else:
                self._geometry = shapely.LineString([self.p0[:2], self.p1[:2]])
        return self._geometry

    def distance(self, point: Coordinate) -> float:
        """Distance from a point to the closest point on the segment."""
        ax, ay = self.p0[0], self.p0[1]
        bx, by = self.p1[0], self.p1[1]
        px, py = point[0], point[1]
        dx = bx - ax
        dy = by - ay
        len2 = dx * dx + dy * dy
        if len2 == 0:
            return math.hypot(px - ax, py - ay)
        r = ((px - ax) * dx + (py - ay) * dy) / len2
        if r <= 0.0:
            return math.hypot(px - ax, py - ay)
        if r >= 1.0:
            return math.hypot(px - bx, py - by)
        return abs((ay - py) * dx - (ax - px) * dy) / math.sqrt(len2)


@dataclass
class SimplifySettings:
    """Settings for a batch simplification run.

    This class bundles the tolerance, method and repair options applied to
    every geometry of a GeoSeries or GeoDataFrame.
    """

    tolerance: float | str
    """Distance tolerance, or a detail preset name ("low", "med", "high")."""

    method: SimplifyMethod = "topology"
    """Simplification method to apply."""

    ensure_valid: bool = True
    """Repair polygonal results with a zero-width buffer (distance-only and area methods)."""

    processes: int = 1
    """Worker processes for the per-geometry methods. The topology method always runs in one batch."""
