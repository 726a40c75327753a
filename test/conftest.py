import numpy as np
import pytest


class FixedRandom:
    """randrange() stand-in that replays a fixed sequence of draws."""

    def __init__(self, *draws):
        self._draws = list(draws)
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        value = self._draws.pop(0)
        assert 0 <= value < stop
        return value


def cloud(n, x=0.0, height=0.3, z=0.5, z_spread=0.0):
    """n points at lateral x, height (sensor y = -height), depths from z to z + z_spread."""
    pts = np.empty((n, 3))
    pts[:, 0] = x
    pts[:, 1] = -height
    pts[:, 2] = np.linspace(z, z + z_spread, n) if n else z
    return pts


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def make_cloud():
    return cloud
