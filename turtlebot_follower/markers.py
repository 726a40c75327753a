#!/usr/bin/env python3
"""
markers.py - Debug marker descriptions for the TurtleBot follower

Describes the centroid sphere and the bounding-box cube in plain data
so the node can turn them into visualization_msgs/Marker. Purely
cosmetic; nothing here feeds back into control.
"""

from dataclasses import dataclass
from typing import Tuple

from .config import MARKER_FRAME, MARKER_NAMESPACE, CENTROID_MARKER_SIZE
from .config_store import BoundingVolume
from .point_filter import CentroidSummary

CENTROID_MARKER_ID = 0
BBOX_MARKER_ID = 1


@dataclass(frozen=True)
class MarkerSpec:
    marker_id: int
    shape: str                                   # 'sphere' or 'cube'
    position: Tuple[float, float, float]
    scale: Tuple[float, float, float]
    color: Tuple[float, float, float, float]     # r, g, b, a
    frame_id: str = MARKER_FRAME
    namespace: str = MARKER_NAMESPACE


def centroid_marker(summary: CentroidSummary, frame_id: str = MARKER_FRAME) -> MarkerSpec:
    """Red sphere at the reported centroid."""
    return MarkerSpec(
        marker_id=CENTROID_MARKER_ID,
        shape='sphere',
        position=(summary.x, summary.y, summary.z_min),
        scale=(CENTROID_MARKER_SIZE,) * 3,
        color=(1.0, 0.0, 0.0, 1.0),
        frame_id=frame_id,
    )


def bbox_marker(volume: BoundingVolume, frame_id: str = MARKER_FRAME) -> MarkerSpec:
    """Translucent green cube spanning the bounding volume from z=0 to max_z."""
    return MarkerSpec(
        marker_id=BBOX_MARKER_ID,
        shape='cube',
        position=(
            (volume.min_x + volume.max_x) / 2.0,
            -(volume.min_y + volume.max_y) / 2.0,
            volume.max_z / 2.0,
        ),
        scale=(
            volume.max_x - volume.min_x,
            volume.max_y - volume.min_y,
            volume.max_z,
        ),
        color=(0.0, 1.0, 0.0, 0.5),
        frame_id=frame_id,
    )
