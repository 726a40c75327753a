import math

import numpy as np
import pytest

from turtlebot_follower.config import Z_SENTINEL
from turtlebot_follower.config_store import FollowerConfig
from turtlebot_follower.point_filter import PointFilter

VOLUME = FollowerConfig().volume   # x in (-0.2, 0.2), -y in (0.1, 0.5), z < 0.8


def test_points_inside_box_form_centroid():
    pts = [(0.1, -0.2, 0.5), (-0.1, -0.4, 0.7), (0.0, -0.3, 0.6)]

    summary = PointFilter().compute(pts, VOLUME)

    assert summary.count == 3
    assert summary.x == pytest.approx(0.0)
    assert summary.y == pytest.approx(-0.3)
    assert summary.z_min == pytest.approx(0.5)


def test_excluded_points_do_not_affect_summary():
    inside = [(0.1, -0.2, 0.5), (0.05, -0.3, 0.6)]
    outside = [
        (0.5, -0.3, 0.1),     # right of box
        (-0.5, -0.3, 0.1),    # left of box
        (0.0, 0.3, 0.1),      # below (positive y is down)
        (0.0, -0.9, 0.1),     # above
        (0.0, -0.3, 2.0),     # too deep
    ]

    summary = PointFilter().compute(inside + outside, VOLUME)

    assert summary.count == 2
    assert summary.x == pytest.approx(0.075)
    assert summary.y == pytest.approx(-0.25)
    assert summary.z_min == pytest.approx(0.5)


def test_bounds_are_strict():
    on_edges = [
        (0.2, -0.3, 0.5),
        (-0.2, -0.3, 0.5),
        (0.0, -0.1, 0.5),
        (0.0, -0.5, 0.5),
        (0.0, -0.3, 0.8),
    ]

    summary = PointFilter().compute(on_edges, VOLUME)

    assert summary.count == 0


def test_empty_cloud_reports_sentinel_depth():
    summary = PointFilter().compute(np.empty((0, 3)), VOLUME)

    assert summary.count == 0
    assert summary.is_empty
    assert summary.z_min == Z_SENTINEL
    assert (summary.x, summary.y) == (0.0, 0.0)


def test_nothing_inside_reports_sentinel_depth():
    summary = PointFilter().compute([(3.0, 0.0, 0.1)], VOLUME)

    assert summary.count == 0
    assert summary.z_min == Z_SENTINEL


def test_non_finite_points_are_rejected():
    """
    A NaN guard that only looked at the running sums would never fire,
    and the -inf depth below would pass the z < max_z test and become
    z_min. Raw points with any non-finite coordinate must be dropped.
    """
    pts = [
        (0.0, -0.3, 0.6),
        (0.0, -0.3, -math.inf),
        (math.nan, -0.3, 0.1),
        (0.0, math.nan, 0.1),
        (0.1, -0.3, math.nan),
    ]

    summary = PointFilter().compute(pts, VOLUME)

    assert summary.count == 1
    assert summary.z_min == pytest.approx(0.6)
    assert math.isfinite(summary.x) and math.isfinite(summary.y)


def test_result_is_independent_of_point_order():
    rng = np.random.default_rng(7)
    pts = rng.uniform(-0.6, 0.9, size=(2000, 3))
    shuffled = pts[rng.permutation(len(pts))]

    a = PointFilter().compute(pts, VOLUME)
    b = PointFilter().compute(shuffled, VOLUME)

    assert a.count == b.count
    assert a.x == pytest.approx(b.x)
    assert a.y == pytest.approx(b.y)
    assert a.z_min == b.z_min


def test_accepts_structured_arrays():
    dtype = np.dtype([('x', np.float32), ('y', np.float32), ('z', np.float32)])
    pts = np.array([(0.1, -0.2, 0.5), (0.9, -0.2, 0.5)], dtype=dtype)

    summary = PointFilter().compute(pts, VOLUME)

    assert summary.count == 1
    assert summary.x == pytest.approx(0.1)


def test_rejects_malformed_input():
    with pytest.raises(ValueError):
        PointFilter().compute(np.zeros((4, 2)), VOLUME)
