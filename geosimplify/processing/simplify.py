"""
Geometry simplification drivers.

This module contains the geometry-level entry points: topology-preserving
simplification of one geometry or of a whole set of geometries, plain
Douglas-Peucker and Visvalingam-Whyatt simplification with optional polygon
repair, and simplify_geom which dispatches between them.
"""

import logging
from typing import Callable, Iterable, List, Optional

import numpy as np
from shapely import Geometry

from geosimplify.core.config import (
    DEFAULT_METHOD, LINE_MINIMUM_SIZE, RING_MINIMUM_SIZE, SIMPLIFY_METHODS
)
from geosimplify.core.utils import check_tolerance, resolve_tolerance
from geosimplify.processing.douglas_peucker import simplify_coords_dp
from geosimplify.processing.tagged_line import TaggedLine
from geosimplify.processing.topology import TaggedLinesSimplifier
from geosimplify.processing.transform import GeometryTransformer, iter_linear_components
from geosimplify.processing.visvalingam import simplify_coords_vw

logger = logging.getLogger(__name__)


class CoordinateSimplifyTransformer(GeometryTransformer):
    """Applies a per-line coordinate simplifier to every line and ring of a geometry."""

    def __init__(self, simplify_coords: Callable[[np.ndarray, float], np.ndarray],
                 tolerance: float, ensure_valid: bool = True):
        super().__init__(ensure_valid=ensure_valid)
        self.simplify_coords = simplify_coords
        self.tolerance = tolerance

    def transform_coordinates(self, coords: np.ndarray, is_ring: bool) -> np.ndarray:
        if len(coords) == 0:
            return coords
        return self.simplify_coords(coords, self.tolerance)


class TaggedLineTransformer(GeometryTransformer):
    """Substitutes simplified tagged line results for the lines and rings of a geometry.

    The tagged lines must come in the order iter_linear_components produces them.
    """

    def __init__(self, tagged_lines: Iterable[TaggedLine]):
        super().__init__(ensure_valid=False)
        self._lines = iter(tagged_lines)

    def transform_line_string(self, geom: Geometry) -> Geometry:
        return next(self._lines).as_line_string()

    def transform_linear_ring(self, geom: Geometry, in_polygon: bool = False) -> Optional[Geometry]:
        if geom.is_empty:
            return None if in_polygon else geom
        return next(self._lines).as_linear_ring()


def _tag_lines(geom: Optional[Geometry]) -> List[TaggedLine]:
    return [
        TaggedLine(coords, RING_MINIMUM_SIZE if is_ring else LINE_MINIMUM_SIZE)
        for coords, is_ring in iter_linear_components(geom)
    ]


def topology_preserving_simplify_many(geoms: Iterable[Optional[Geometry]], tolerance: float,
                                      report_progress: Optional[Callable[[int, int], None]] = None
                                      ) -> List[Optional[Geometry]]:
    """Simplify several geometries as one batch, preserving topology between them.

    Every line and ring of every geometry is checked against the others, so
    simplified features neither cross each other nor themselves. None and
    empty entries are returned unchanged.

    Args:
        geoms: Geometries to simplify
        tolerance: Distance tolerance
        report_progress: Optional callback called as report_progress(done, total)
            after each line

    Returns:
        List of simplified geometries, in input order

    Raises:
        ValueError: If tolerance is negative
    """
    tolerance = check_tolerance(tolerance)
    geoms = list(geoms)
    per_geom = [_tag_lines(geom) for geom in geoms]
    lines = [line for tagged in per_geom for line in tagged]
    logger.debug("Topology-preserving batch: %d geometries, %d lines", len(geoms), len(lines))

    TaggedLinesSimplifier(tolerance).simplify(lines, report_progress=report_progress)

    return [
        geom if geom is None or geom.is_empty else TaggedLineTransformer(tagged).transform(geom)
        for geom, tagged in zip(geoms, per_geom)
    ]


def topology_preserving_simplify(geom: Geometry, tolerance: float) -> Geometry:
    """Simplify a geometry without introducing new intersections.

    Lines keep at least 2 coordinates and rings at least 4, so every
    component survives. Points are left untouched.

    Args:
        geom: Geometry to simplify (any type)
        tolerance: Distance tolerance

    Returns:
        Simplified geometry of the same type; empty input is returned as is

    Raises:
        ValueError: If tolerance is negative
    """
    tolerance = check_tolerance(tolerance)
    if geom.is_empty:
        return geom
    return topology_preserving_simplify_many([geom], tolerance)[0]


def douglas_peucker_simplify(geom: Geometry, tolerance: float, ensure_valid: bool = True) -> Geometry:
    """Simplify each line and ring of a geometry independently with Douglas-Peucker.

    The result may self-intersect. Rings that collapse below 4 coordinates
    are dropped from their polygon; a collapsed shell leaves an empty polygon.

    Args:
        geom: Geometry to simplify (any type)
        tolerance: Distance tolerance
        ensure_valid: Repair polygonal results with buffer(0)

    Returns:
        Simplified geometry

    Raises:
        ValueError: If tolerance is negative
    """
    tolerance = check_tolerance(tolerance)
    if geom.is_empty:
        return geom
    return CoordinateSimplifyTransformer(simplify_coords_dp, tolerance, ensure_valid).transform(geom)


def visvalingam_simplify(geom: Geometry, tolerance: float, ensure_valid: bool = True) -> Geometry:
    """Simplify each line and ring of a geometry independently with Visvalingam-Whyatt.

    Vertices whose effective triangle area is below tolerance squared are
    removed. Degenerate rings are handled as in douglas_peucker_simplify.

    Args:
        geom: Geometry to simplify (any type)
        tolerance: Distance tolerance
        ensure_valid: Repair polygonal results with buffer(0)

    Returns:
        Simplified geometry

    Raises:
        ValueError: If tolerance is negative
    """
    tolerance = check_tolerance(tolerance)
    if geom.is_empty:
        return geom
    return CoordinateSimplifyTransformer(simplify_coords_vw, tolerance, ensure_valid).transform(geom)


def simplify_geom(geom: Optional[Geometry], tol: float | str, method: str = DEFAULT_METHOD,
                  ensure_valid: bool = True) -> Optional[Geometry]:
    """Simplify a geometry with the chosen method.

    Args:
        geom: Input geometry to simplify (can be None)
        tol: Tolerance value, or a detail preset name ("low", "med", "high")
        method: One of "topology", "douglas_peucker", "visvalingam"
        ensure_valid: Repair polygonal results (ignored by the topology method,
            which never creates new intersections)

    Returns:
        Simplified geometry, or None if geom is None

    Raises:
        ValueError: If the method or preset is unknown, or the tolerance is negative
    """
    if method not in SIMPLIFY_METHODS:
        raise ValueError(f"Unknown simplification method {method!r}; expected one of {SIMPLIFY_METHODS}")
    tol = resolve_tolerance(tol)
    if geom is None:
        return geom
    if method == "topology":
        return topology_preserving_simplify(geom, tol)
    if method == "douglas_peucker":
        return douglas_peucker_simplify(geom, tol, ensure_valid=ensure_valid)
    return visvalingam_simplify(geom, tol, ensure_valid=ensure_valid)
