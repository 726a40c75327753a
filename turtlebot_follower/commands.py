#!/usr/bin/env python3
"""
commands.py - Velocity command type shared by the controllers

Kept free of ROS message types so the control core can be exercised
without a ROS installation. The node converts to geometry_msgs/Twist.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """Planar velocity command (m/s, rad/s)."""
    linear_x: float = 0.0
    angular_z: float = 0.0


STOP = Command()
