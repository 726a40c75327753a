#!/usr/bin/env python3
"""
point_filter.py - Bounding-box centroid extraction for the TurtleBot follower

Reduces a depth point cloud to the mean lateral position, the closest
depth and the number of points that fall inside the bounding volume.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import Z_SENTINEL
from .config_store import BoundingVolume


@dataclass(frozen=True)
class CentroidSummary:
    """Result of one filter pass."""
    x: float = 0.0
    y: float = 0.0
    z_min: float = Z_SENTINEL
    count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.count == 0


EMPTY_SUMMARY = CentroidSummary()


def as_point_array(points) -> np.ndarray:
    """
    Coerce a point collection to a float64 (N, 3) array.

    Accepts an (N, 3) ndarray, a list of (x, y, z) tuples, or a structured
    array with x/y/z fields (as returned by sensor_msgs_py).
    """
    arr = np.asarray(points)
    if arr.dtype.names is not None:
        arr = np.column_stack([arr['x'], arr['y'], arr['z']])
    arr = np.asarray(arr, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"expected an (N, 3) point array, got shape {arr.shape}")
    return arr


class PointFilter:
    """
    Bounding-volume filter.

    A point is kept iff all its coordinates are finite and
        -y > min_y and -y < max_y and min_x < x < max_x and z < max_z
    The reduction is a sum plus a min, so it is order independent.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def compute(self, points, volume: BoundingVolume) -> CentroidSummary:
        pts = as_point_array(points)
        if len(pts) == 0:
            return EMPTY_SUMMARY

        finite = np.isfinite(pts).all(axis=1)
        dropped = len(pts) - int(np.count_nonzero(finite))
        if dropped:
            self._logger.debug(f"[FILTER] dropped {dropped} non-finite points")

        x, y, z = pts[:, 0], pts[:, 1], pts[:, 2]
        with np.errstate(invalid='ignore'):
            inside = (
                finite &
                (-y > volume.min_y) & (-y < volume.max_y) &
                (x < volume.max_x) & (x > volume.min_x) &
                (z < volume.max_z)
            )

        count = int(np.count_nonzero(inside))
        if count == 0:
            return EMPTY_SUMMARY

        selected = pts[inside]
        return CentroidSummary(
            x=float(selected[:, 0].sum() / count),
            y=float(selected[:, 1].sum() / count),
            z_min=float(min(Z_SENTINEL, selected[:, 2].min())),
            count=count,
        )
