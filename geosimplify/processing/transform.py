"""
Geometry tree walking for the simplification drivers.

GeometryTransformer rebuilds a shapely geometry component by component,
handing the coordinates of every line and ring to transform_coordinates.
Subclasses supply the coordinate transform; polygon assembly, degenerate ring
removal and the optional zero-width buffer repair live here.
"""

from typing import Iterator, Optional, Tuple

import numpy as np
import shapely
from shapely import Geometry

from geosimplify.core.config import RING_MINIMUM_SIZE


def iter_linear_components(geom: Optional[Geometry]) -> Iterator[Tuple[np.ndarray, bool]]:
    """Yield (coords, is_ring) for every non-empty line and ring of a geometry.

    Components come out in the same order GeometryTransformer visits them:
    polygon shells before holes, collection members in order. Polygon rings
    and standalone LinearRings are rings, and so is a closed LineString of at
    least RING_MINIMUM_SIZE coordinates.
    """
    if geom is None or geom.is_empty:
        return
    gtype = geom.geom_type
    if gtype in ("Point", "MultiPoint"):
        return
    if gtype == "LinearRing":
        yield np.asarray(geom.coords, dtype=float), True
    elif gtype == "LineString":
        coords = np.asarray(geom.coords, dtype=float)
        yield coords, is_valid_ring(coords)
    elif gtype == "Polygon":
        yield np.asarray(geom.exterior.coords, dtype=float), True
        for ring in geom.interiors:
            if not ring.is_empty:
                yield np.asarray(ring.coords, dtype=float), True
    elif gtype in ("MultiLineString", "MultiPolygon", "GeometryCollection"):
        for part in geom.geoms:
            yield from iter_linear_components(part)
    else:
        raise TypeError(f"Unsupported geometry type: {gtype}")


def is_valid_ring(coords: np.ndarray) -> bool:
    """True when coords can form a LinearRing: closed and at least RING_MINIMUM_SIZE long."""
    if len(coords) < RING_MINIMUM_SIZE:
        return False
    return bool(np.array_equal(coords[0, :2], coords[-1, :2]))


class GeometryTransformer:
    """Rebuilds a geometry with transformed line and ring coordinates.

    Args:
        ensure_valid: Pass polygonal results through buffer(0)
    """

    def __init__(self, ensure_valid: bool = False):
        self.ensure_valid = ensure_valid

    def transform(self, geom: Optional[Geometry]) -> Optional[Geometry]:
        if geom is None or geom.is_empty:
            return geom
        gtype = geom.geom_type
        if gtype in ("Point", "MultiPoint"):
            return geom
        if gtype == "LinearRing":
            return self.transform_linear_ring(geom)
        if gtype == "LineString":
            return self.transform_line_string(geom)
        if gtype == "Polygon":
            return self.transform_polygon(geom)
        if gtype == "MultiLineString":
            return self.transform_multi_line_string(geom)
        if gtype == "MultiPolygon":
            return self.transform_multi_polygon(geom)
        if gtype == "GeometryCollection":
            return self.transform_collection(geom)
        raise TypeError(f"Unsupported geometry type: {gtype}")

    def transform_coordinates(self, coords: np.ndarray, is_ring: bool) -> np.ndarray:
        """Return the new coordinates for a line or ring. Identity by default."""
        return coords

    def transform_line_string(self, geom: Geometry) -> Geometry:
        coords = np.asarray(geom.coords, dtype=float)
        return shapely.LineString(self.transform_coordinates(coords, is_valid_ring(coords)))

    def transform_linear_ring(self, geom: Geometry, in_polygon: bool = False) -> Optional[Geometry]:
        """Transform a ring.

        A ring that no longer forms a valid LinearRing is dropped (None) when
        it belongs to a polygon, and returned as a LineString otherwise.
        """
        if geom.is_empty:
            return None if in_polygon else geom
        coords = self.transform_coordinates(np.asarray(geom.coords, dtype=float), True)
        if is_valid_ring(coords):
            return shapely.LinearRing(coords)
        if in_polygon:
            return None
        if len(coords) < 2:
            return shapely.LineString()
        return shapely.LineString(coords)

    def transform_polygon(self, geom: Geometry, in_multi: bool = False) -> Geometry:
        shell = self.transform_linear_ring(geom.exterior, in_polygon=True)
        if shell is None:
            # holes of a collapsed shell are still visited so that
            # transform_coordinates sees every ring in order
            for ring in geom.interiors:
                self.transform_linear_ring(ring, in_polygon=True)
            return shapely.Polygon()
        holes = []
        for ring in geom.interiors:
            hole = self.transform_linear_ring(ring, in_polygon=True)
            if hole is not None:
                holes.append(hole)
        result = shapely.Polygon(shell, holes)
        if in_multi:
            return result
        return self.create_valid_area(result)

    def transform_multi_line_string(self, geom: Geometry) -> Geometry:
        parts = [self.transform(part) for part in geom.geoms]
        return shapely.MultiLineString([p for p in parts if p is not None and not p.is_empty])

    def transform_multi_polygon(self, geom: Geometry) -> Geometry:
        parts = []
        for part in geom.geoms:
            if part.is_empty:
                continue
            poly = self.transform_polygon(part, in_multi=True)
            if not poly.is_empty:
                parts.append(poly)
        return self.create_valid_area(shapely.MultiPolygon(parts))

    def transform_collection(self, geom: Geometry) -> Geometry:
        parts = [self.transform(part) for part in geom.geoms]
        return shapely.GeometryCollection([p for p in parts if p is not None and not p.is_empty])

    def create_valid_area(self, geom: Geometry) -> Geometry:
        """Repair a polygonal result with a zero-width buffer when ensure_valid is set."""
        if self.ensure_valid:
            return geom.buffer(0)
        return geom
