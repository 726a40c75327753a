#!/usr/bin/env python3
"""
velocity_controller.py - Control law for the TurtleBot follower

Maps a centroid summary to a velocity command. Forward speed comes
from the depth regime; turning is a coarse left/right decision on the
centroid x with a randomized magnitude, so the robot sweeps a little
while it follows. Inside the lateral dead zone the last turn direction
is reused.
"""

import logging
import random
from typing import Optional

from .commands import Command
from .config import (
    MIN_CLOUD_POINTS,
    LATERAL_DEAD_ZONE,
    APPROACH_SPEED,
    SEEK_SPEED,
    DEAD_ZONE_TURN,
    APPROACH_DRAW_STEPS,
    APPROACH_RIGHT_HIGH,
    APPROACH_RIGHT_LOW,
    APPROACH_LEFT_HIGH,
    APPROACH_LEFT_LOW,
    ARRIVED_DRAW_STEPS,
    ARRIVED_RIGHT_HIGH,
    ARRIVED_RIGHT_LOW,
    ARRIVED_LEFT_HIGH,
    ARRIVED_LEFT_LOW,
)
from .config_store import FollowerConfig
from .point_filter import CentroidSummary
from .states import FollowerState, TurnDirection


def classify(summary: Optional[CentroidSummary], goal_z: float) -> FollowerState:
    """
    Pick the regime for a summary.

    Returns SEEKING when there is no summary or too few points to trust
    the centroid, APPROACHING while the closest point is beyond goal_z,
    ARRIVED otherwise.
    """
    if summary is None or summary.count <= MIN_CLOUD_POINTS:
        return FollowerState.SEEKING
    if summary.z_min - goal_z > 0:
        return FollowerState.APPROACHING
    return FollowerState.ARRIVED


class VelocityController:
    """
    Regime-based follower control law.

    Args:
        logger: Optional logger
        rng: Random source with randrange(); injectable for tests
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 rng: Optional[random.Random] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._rng = rng or random.Random()
        self._direction = TurnDirection.LEFT

    @property
    def direction(self) -> TurnDirection:
        return self._direction

    def compute(self, regime: FollowerState, summary: Optional[CentroidSummary],
                config: FollowerConfig) -> Optional[Command]:
        """
        Compute the command for a regime.

        Returns:
            Command to publish, or None when nothing should be published
            (SEEKING while disabled)
        """
        if regime == FollowerState.APPROACHING:
            return Command(APPROACH_SPEED, self._approach_turn(summary.x))
        if regime == FollowerState.ARRIVED:
            return Command(0.0, self._arrived_turn(summary.x))
        if regime == FollowerState.SEEKING:
            if not config.enabled:
                return None
            return Command(SEEK_SPEED, 0.0)
        raise ValueError(f"no control law for regime {regime}")

    def _dead_zone_turn(self) -> float:
        if self._direction == TurnDirection.RIGHT:
            return DEAD_ZONE_TURN
        return -DEAD_ZONE_TURN

    def _approach_turn(self, x: float) -> float:
        if x > LATERAL_DEAD_ZONE:
            self._direction = TurnDirection.RIGHT
            draw = self._rng.randrange(APPROACH_DRAW_STEPS) / float(APPROACH_DRAW_STEPS)
            self._logger.debug(f"x > {LATERAL_DEAD_ZONE}, draw {draw:.3f}")
            if draw > 0.7:
                return APPROACH_RIGHT_HIGH
            if draw > 0.4:
                return draw
            return APPROACH_RIGHT_LOW

        if x < -LATERAL_DEAD_ZONE:
            self._direction = TurnDirection.LEFT
            draw = self._rng.randrange(APPROACH_DRAW_STEPS) / float(APPROACH_DRAW_STEPS) - 1.0
            self._logger.debug(f"x < -{LATERAL_DEAD_ZONE}, draw {draw:.3f}")
            if draw < -0.7:
                return APPROACH_LEFT_HIGH
            if draw < -0.5:
                return draw
            return APPROACH_LEFT_LOW

        return self._dead_zone_turn()

    def _arrived_turn(self, x: float) -> float:
        if x > LATERAL_DEAD_ZONE:
            self._direction = TurnDirection.RIGHT
            draw = self._rng.randrange(ARRIVED_DRAW_STEPS) / float(ARRIVED_DRAW_STEPS)
            self._logger.debug(f"x > {LATERAL_DEAD_ZONE}, draw {draw:.3f}")
            if draw > 0.7:
                return ARRIVED_RIGHT_HIGH
            if draw > 0.4:
                return draw
            return ARRIVED_RIGHT_LOW

        if x < -LATERAL_DEAD_ZONE:
            self._direction = TurnDirection.LEFT
            draw = self._rng.randrange(ARRIVED_DRAW_STEPS) / float(ARRIVED_DRAW_STEPS) - 1.0
            self._logger.debug(f"x < -{LATERAL_DEAD_ZONE}, draw {draw:.3f}")
            if draw < -0.7:
                return ARRIVED_LEFT_HIGH
            if draw < -0.4:
                return draw
            return ARRIVED_LEFT_LOW

        return self._dead_zone_turn()

    def reset(self):
        """Forget the remembered turn direction."""
        self._direction = TurnDirection.LEFT
