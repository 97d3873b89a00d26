"""
Configuration constants for the geosimplify package.

This module contains the minimum vertex counts, tolerance presets, supported
simplification methods and spatial index tuning values used throughout the
package.
"""

from typing import Final

# Minimum vertex counts kept by the topology-preserving simplifier
LINE_MINIMUM_SIZE: Final = 2
"""Minimum number of coordinates in a simplified open line."""

RING_MINIMUM_SIZE: Final = 4
"""Minimum number of coordinates in a simplified ring (3 vertices plus closing point)."""

# Simplification methods
SIMPLIFY_METHODS = ("topology", "douglas_peucker", "visvalingam")
"""Method names accepted by simplify_geom and the batch worker."""

DEFAULT_METHOD: Final = "topology"
"""Method used when none is given."""

# Detail presets for simplification tolerance
DETAIL_OPTIONS = ["low", "med", "high"]
"""Available detail presets."""

DETAIL_MAPPING = {
    "low": 3.0,   # Low detail (coarser simplification)
    "med": 1.5,   # Medium detail
    "high": 0.5   # High detail (finer simplification)
}
"""Mapping of detail presets to simplification tolerance values."""

# Segment index tuning
INDEX_REBUILD_THRESHOLD: Final = 64
"""Number of segments inserted since the last STRtree snapshot before a rebuild is considered."""
