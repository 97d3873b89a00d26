"""
geosimplify - Simplify lines and polygons while bounding their deviation.

This package provides Douglas-Peucker and Visvalingam-Whyatt simplification
of shapely geometries, and a topology-preserving mode that never makes a
simplified line cross itself or any other line simplified with it.
"""

from .processing.simplify import (
    douglas_peucker_simplify,
    simplify_geom,
    topology_preserving_simplify,
    topology_preserving_simplify_many,
    visvalingam_simplify,
)
from .processing.douglas_peucker import simplify_coords_dp
from .processing.visvalingam import simplify_coords_vw
from .workers.simplify_worker import simplify_frame, simplify_series
from .core.types import SimplifySettings

__version__ = "0.1.0"
__all__ = [
    "douglas_peucker_simplify",
    "simplify_geom",
    "topology_preserving_simplify",
    "topology_preserving_simplify_many",
    "visvalingam_simplify",
    "simplify_coords_dp",
    "simplify_coords_vw",
    "simplify_frame",
    "simplify_series",
    "SimplifySettings",
]
