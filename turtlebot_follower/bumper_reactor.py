#!/usr/bin/env python3
"""
bumper_reactor.py - Bumper handling and evasive manoeuvres

Tracks which bumper sides are pressed and runs a fixed-duration
back-off-and-turn manoeuvre after a new press. The manoeuvre is
advanced one tick per control cycle instead of blocking the caller,
so bumper events keep arriving while it runs.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional
import logging

from .commands import Command
from .config import (
    EVADE_LINEAR,
    EVADE_ANGULAR_LEFT,
    EVADE_ANGULAR_CENTER,
    EVADE_ANGULAR_RIGHT,
    EVADE_TICKS_SIDE,
    EVADE_TICKS_CENTER,
)
from .states import BumperSide, BumperTransition


@dataclass(frozen=True)
class BumperEvent:
    side: BumperSide
    transition: BumperTransition


@dataclass(frozen=True)
class EvasionManeuver:
    """Command to repeat and how many control ticks to repeat it for."""
    command: Command
    ticks: int


MANEUVERS: Dict[BumperSide, EvasionManeuver] = {
    BumperSide.LEFT: EvasionManeuver(Command(EVADE_LINEAR, EVADE_ANGULAR_LEFT), EVADE_TICKS_SIDE),
    BumperSide.CENTER: EvasionManeuver(Command(EVADE_LINEAR, EVADE_ANGULAR_CENTER), EVADE_TICKS_CENTER),
    BumperSide.RIGHT: EvasionManeuver(Command(EVADE_LINEAR, EVADE_ANGULAR_RIGHT), EVADE_TICKS_SIDE),
}


@dataclass
class BumperState:
    """Press flags plus the single shared evasion slot."""
    left: bool = False
    center: bool = False
    right: bool = False
    evading: bool = False
    active_side: Optional[BumperSide] = None
    remaining_ticks: int = 0
    ticks_run: int = 0

    def is_pressed(self, side: BumperSide) -> bool:
        return getattr(self, side.name.lower())

    def set_pressed(self, side: BumperSide, pressed: bool):
        setattr(self, side.name.lower(), pressed)


class BumperReactor:
    """
    Edge-triggered bumper reactor.

    - A press on a side that was released arms evasion with that side's
      manoeuvre. The newest press wins and restarts the tick budget.
    - A press on a side that is already pressed is ignored.
    - A release only clears that side's flag; a manoeuvre that has
      started keeps running until its tick budget is spent. One that
      has not started yet is dropped on the next tick.

    Usage:
        reactor = BumperReactor(logger)
        reactor.handle(BumperEvent(BumperSide.LEFT, BumperTransition.PRESSED))

        # In the control loop:
        if reactor.evading:
            cmd = reactor.tick()
            publish(cmd)
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 maneuvers: Optional[Dict[BumperSide, EvasionManeuver]] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._maneuvers = maneuvers or MANEUVERS
        self._state = BumperState()
        self._on_complete: Optional[Callable[[BumperSide], None]] = None

    def set_callbacks(self, on_complete: Optional[Callable[[BumperSide], None]] = None):
        """
        Set optional callbacks.

        Args:
            on_complete: Called with the side once a manoeuvre finishes
        """
        self._on_complete = on_complete

    def handle(self, event: BumperEvent) -> bool:
        """
        Apply one bumper transition.

        Returns:
            True if the event armed a new evasion
        """
        side = BumperSide(event.side)
        if BumperTransition(event.transition) == BumperTransition.RELEASED:
            self._state.set_pressed(side, False)
            self._logger.debug(f"[BUMPER] {side.name} released")
            return False

        if self._state.is_pressed(side):
            return False

        self._state.set_pressed(side, True)
        self._arm(side)
        return True

    def _arm(self, side: BumperSide):
        if self._state.evading and self._state.active_side != side:
            self._logger.info(
                f"[BUMPER] {side.name} pressed, overriding {self._state.active_side.name} evasion"
            )
        else:
            self._logger.info(f"[BUMPER] {side.name} pressed, evading")
        self._state.evading = True
        self._state.active_side = side
        self._state.remaining_ticks = self._maneuvers[side].ticks
        self._state.ticks_run = 0

    def tick(self) -> Optional[Command]:
        """
        Advance the manoeuvre by one control tick.

        A manoeuvre only starts while its side is still pressed. An arm
        whose bumper was released before its first tick is dropped.

        Returns:
            The evasion command to publish, or None if not evading
        """
        if not self._state.evading:
            return None

        side = self._state.active_side
        if self._state.ticks_run == 0 and not self._state.is_pressed(side):
            self._logger.info(f"[EVADE] {side.name} released before the manoeuvre started, dropped")
            self._disarm()
            return None

        maneuver = self._maneuvers[side]
        self._state.remaining_ticks -= 1
        self._state.ticks_run += 1

        if self._state.remaining_ticks <= 0:
            self._logger.info(
                f"[EVADE] {side.name} manoeuvre finished after {self._state.ticks_run} ticks"
            )
            self._disarm()
            if self._on_complete:
                self._on_complete(side)

        return maneuver.command

    def _disarm(self):
        self._state.evading = False
        self._state.active_side = None
        self._state.remaining_ticks = 0
        self._state.ticks_run = 0

    def reset(self):
        """Forget press flags and cancel any manoeuvre."""
        self._state = BumperState()

    @property
    def evading(self) -> bool:
        return self._state.evading

    @property
    def active_side(self) -> Optional[BumperSide]:
        return self._state.active_side

    @property
    def remaining_ticks(self) -> int:
        return self._state.remaining_ticks

    def is_pressed(self, side: BumperSide) -> bool:
        return self._state.is_pressed(side)
