"""Pytest fixtures for geosimplify tests."""

import numpy as np
import pytest
from shapely.geometry import LineString, Polygon


# ============================================================================
# Line Fixtures
# ============================================================================

@pytest.fixture
def collinear_coords():
    """Four exactly collinear points."""
    return [(0, 0), (1, 0), (2, 0), (3, 0)]


@pytest.fixture
def wavy_coords():
    """A sampled sine wave."""
    x = np.linspace(0, 20, 200)
    return np.column_stack([x, np.sin(x)])


@pytest.fixture
def bump_line():
    """Line with a bump that would cross the crossing_bar if flattened."""
    return LineString([(0, 0), (5, 2), (10, 0)])


@pytest.fixture
def crossing_bar():
    """Short vertical line under the bump of bump_line."""
    return LineString([(5, 1), (5, -1)])


# ============================================================================
# Ring and Polygon Fixtures
# ============================================================================

@pytest.fixture
def bump_rectangle_coords():
    """Rectangle boundary with a near-collinear bump point on the top edge."""
    return [(0, 0), (0, 10), (0.1, 10.1), (10, 10), (10, 0), (0, 0)]


@pytest.fixture
def bump_rectangle(bump_rectangle_coords):
    return Polygon(bump_rectangle_coords)


@pytest.fixture
def sliver_polygon():
    """Thin spike polygon that Douglas-Peucker collapses at tolerance 1."""
    return Polygon([(0, 0), (10, 0.1), (0, 0.2), (0, 0)])


@pytest.fixture
def adjacent_polygons():
    """Two rings sharing a nearly straight boundary through (5.1, 5)."""
    left = Polygon([(0, 0), (0, 10), (5, 10), (5.1, 5), (5, 0), (0, 0)])
    right = Polygon([(5, 0), (5.1, 5), (5, 10), (10, 10), (10, 0), (5, 0)])
    return left, right


@pytest.fixture
def wedge_polygon():
    """Square with a wedge cut in from the left whose tip dips below y=0.

    The bottom edge bends down to (5, -0.5) underneath the wedge tip at
    (5, -0.2). Straightening the bottom edge makes the ring self-intersect.
    """
    return Polygon([
        (0, 0), (5, -0.5), (10, 0), (10, 10), (0, 10),
        (0, 6), (5, -0.2), (0, 5), (0, 0),
    ])
