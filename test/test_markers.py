import pytest

from turtlebot_follower.config_store import FollowerConfig
from turtlebot_follower.markers import bbox_marker, centroid_marker
from turtlebot_follower.point_filter import CentroidSummary


def test_centroid_marker_sits_on_summary():
    marker = centroid_marker(CentroidSummary(x=0.1, y=-0.3, z_min=0.7, count=42))

    assert marker.shape == 'sphere'
    assert marker.marker_id == 0
    assert marker.position == (0.1, -0.3, 0.7)
    assert marker.frame_id == 'camera_rgb_optical_frame'


def test_bbox_marker_spans_volume():
    volume = FollowerConfig().volume

    marker = bbox_marker(volume, frame_id='camera_depth_optical_frame')

    assert marker.shape == 'cube'
    assert marker.marker_id == 1
    assert marker.frame_id == 'camera_depth_optical_frame'
    assert marker.position == pytest.approx((0.0, -0.3, 0.4))
    assert marker.scale == pytest.approx((0.4, 0.4, 0.8))
    assert marker.color[3] == 0.5
