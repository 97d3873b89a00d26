"""
Dynamic spatial index of line segments.

shapely's STRtree is immutable, so the index keeps a tree snapshot of the
segments present at the last rebuild, drops removed segments from tree
results, and scans segments inserted since the snapshot directly. The
snapshot is rebuilt lazily when enough segments have been inserted or removed
since it was taken, so the linear scan on each query covers at most
max(rebuild_threshold, snapshot size // 2) pending segments.
"""

import logging
from typing import Dict, Iterator, List, Optional

import numpy as np
import shapely

from geosimplify.core.config import INDEX_REBUILD_THRESHOLD

logger = logging.getLogger(__name__)


def envelopes_intersect(a, b) -> bool:
    """Test whether two (minx, miny, maxx, maxy) boxes overlap or touch."""
    return not (a[2] < b[0] or b[2] < a[0] or a[3] < b[1] or b[3] < a[1])


class SegmentIndex:
    """Mutable envelope index over line segments.

    Accepts any object with ``envelope`` and ``geometry`` attributes
    (LineSegment or TaggedLineSegment). Segments are tracked by identity.

    Args:
        rebuild_threshold: Minimum number of pending inserts before the
            STRtree snapshot is rebuilt
    """

    def __init__(self, rebuild_threshold: int = INDEX_REBUILD_THRESHOLD):
        self.rebuild_threshold = rebuild_threshold
        self._live: Dict[int, object] = {}
        self._pending: Dict[int, object] = {}
        self._tree: Optional[shapely.STRtree] = None
        self._tree_items: List[object] = []
        self._tree_keys: set = set()
        self._tree_dead = 0

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, segment) -> bool:
        return id(segment) in self._live

    def __iter__(self) -> Iterator:
        return iter(list(self._live.values()))

    def insert(self, segment):
        """Add a segment. Inserting a segment that is already present does nothing."""
        key = id(segment)
        if key in self._live:
            return
        self._live[key] = segment
        if key in self._tree_keys:
            self._tree_dead -= 1
        else:
            self._pending[key] = segment

    def remove(self, segment):
        """Remove a segment. Removing an absent segment does nothing."""
        key = id(segment)
        if self._live.pop(key, None) is None:
            return
        if self._pending.pop(key, None) is None:
            self._tree_dead += 1

    def query(self, segment) -> list:
        """Find the segments whose envelope intersects the given segment's envelope.

        Tree candidates are re-checked against the exact envelope before
        being returned.
        """
        if self._needs_rebuild():
            self._rebuild()

        env = segment.envelope
        found = []
        if self._tree is not None:
            for i in np.sort(self._tree.query(segment.geometry)):
                item = self._tree_items[i]
                if id(item) in self._live and envelopes_intersect(env, item.envelope):
                    found.append(item)
        for item in self._pending.values():
            if envelopes_intersect(env, item.envelope):
                found.append(item)
        return found

    def _needs_rebuild(self) -> bool:
        size = len(self._tree_items)
        if len(self._pending) > max(self.rebuild_threshold, size // 2):
            return True
        return size > 0 and self._tree_dead > size // 2

    def _rebuild(self):
        self._tree_items = list(self._live.values())
        self._tree_keys = set(self._live)
        self._pending = {}
        self._tree_dead = 0
        if self._tree_items:
            geoms = np.empty(len(self._tree_items), dtype=object)
            geoms[:] = [item.geometry for item in self._tree_items]
            self._tree = shapely.STRtree(geoms)
        else:
            self._tree = None
        logger.debug("Rebuilt segment index snapshot with %d segments", len(self._tree_items))
