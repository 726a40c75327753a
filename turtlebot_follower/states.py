#!/usr/bin/env python3
"""
states.py - State and event definitions for the TurtleBot follower

Defines the follower regimes plus the small enums used on the bumper
and toggle interfaces.
"""

from enum import Enum


class FollowerState(str, Enum):
    """
    Control regime of the follower, recomputed every cycle.

    - DISABLED: following stopped and nothing usable in the box
    - SEEKING: too few points in the box, crawl forward
    - APPROACHING: target farther than goal_z, drive towards it
    - ARRIVED: target at or inside goal_z, turn in place
    - EVADING: bumper manoeuvre running, preempts everything else
    """
    DISABLED = "DISABLED"
    SEEKING = "SEEKING"
    APPROACHING = "APPROACHING"
    ARRIVED = "ARRIVED"
    EVADING = "EVADING"


class BumperSide(int, Enum):
    """Bumper identifiers, numbered like kobuki BumperEvent.bumper."""
    LEFT = 0
    CENTER = 1
    RIGHT = 2


class BumperTransition(int, Enum):
    """Bumper transitions, numbered like kobuki BumperEvent.state."""
    RELEASED = 0
    PRESSED = 1


class FollowRequest(str, Enum):
    STOPPED = "STOPPED"
    FOLLOW = "FOLLOW"


class FollowResult(str, Enum):
    OK = "OK"


class TurnDirection(str, Enum):
    """Last lateral correction, reused inside the dead zone."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
