"""
Batch worker for simplifying layers of geometries.

This module applies one SimplifySettings to every geometry of a GeoSeries or
GeoDataFrame. The topology method runs the whole layer as a single batch so
that neighbouring features stay consistent; the per-geometry methods can be
spread over a process pool.
"""

import functools
import logging
from multiprocessing import Pool
from typing import Callable, Optional

import geopandas as gpd

from geosimplify.core.config import SIMPLIFY_METHODS
from geosimplify.core.types import SimplifySettings
from geosimplify.core.utils import resolve_tolerance
from geosimplify.processing.simplify import simplify_geom, topology_preserving_simplify_many

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, Optional[str]], None]


def _report(report_progress: Optional[ProgressCallback], percent: float, message: Optional[str] = None):
    if report_progress is not None:
        report_progress(percent, message)


def simplify_series(geoms: gpd.GeoSeries, settings: SimplifySettings,
                    report_progress: Optional[ProgressCallback] = None) -> gpd.GeoSeries:
    """Simplify every geometry of a GeoSeries.

    Args:
        geoms: Geometries to simplify; missing values pass through
        settings: Tolerance, method and repair options
        report_progress: Optional callback called as report_progress(percent, message)

    Returns:
        New GeoSeries with the same index and CRS

    Raises:
        ValueError: If the method or tolerance is invalid
    """
    if settings.method not in SIMPLIFY_METHODS:
        raise ValueError(f"Unknown simplification method {settings.method!r}; expected one of {SIMPLIFY_METHODS}")
    tol = resolve_tolerance(settings.tolerance)
    values = list(geoms)

    _report(report_progress, 0, f"Simplifying {len(values)} geometries ({settings.method}, tolerance {tol})...")

    if settings.method == "topology":
        simplified = topology_preserving_simplify_many(
            values, tol,
            report_progress=lambda done, total: _report(report_progress, 100.0 * done / total),
        )
    elif settings.processes > 1 and len(values) > 1:
        with Pool(processes=settings.processes) as pool:
            simplified = pool.map(
                functools.partial(simplify_geom, tol=tol, method=settings.method,
                                  ensure_valid=settings.ensure_valid),
                values
            )
    else:
        simplified = []
        for n, geom in enumerate(values, start=1):
            simplified.append(simplify_geom(geom, tol, method=settings.method,
                                            ensure_valid=settings.ensure_valid))
            _report(report_progress, 100.0 * n / len(values))

    result = gpd.GeoSeries(simplified, index=geoms.index, crs=geoms.crs)
    before = int(geoms.count_coordinates().sum())
    after = int(result.count_coordinates().sum())
    logger.info("Simplified %d geometries: %d -> %d coordinates", len(values), before, after)
    _report(report_progress, 100, f"Simplified {len(values)} geometries: {before} -> {after} coordinates")
    return result


def simplify_frame(gdf: gpd.GeoDataFrame, settings: SimplifySettings,
                   report_progress: Optional[ProgressCallback] = None) -> gpd.GeoDataFrame:
    """Simplify the active geometry column of a GeoDataFrame.

    Args:
        gdf: Layer to simplify
        settings: Tolerance, method and repair options
        report_progress: Optional callback called as report_progress(percent, message)

    Returns:
        Copy of the frame with simplified geometries; other columns are unchanged
    """
    out = gdf.copy()
    out[gdf.geometry.name] = simplify_series(gdf.geometry, settings, report_progress)
    return out
