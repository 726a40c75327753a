#!/usr/bin/env python3
"""
follower.py - Follower state machine and lifecycle

One control cycle:
    1. apply queued bumper events
    2. take one config snapshot
    3. filter the newest cloud (if any) and classify the regime
    4. SEEKING while disabled -> publish nothing
    5. evading -> one evasion tick (preempts tracking); an arm whose
       bumper was already released is dropped instead
    6. otherwise -> control law for the regime

State Machine:
    DISABLED <-> SEEKING <-> APPROACHING <-> ARRIVED
        any state --(new bumper press)--> EVADING --(budget spent)--> regime

The transport layer stays outside: initialize() wires the core to a
set of collaborator callables and returns a FollowerHandle that the
node drives from its callbacks and timer.
"""

import logging
import queue
import random
import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .bumper_reactor import BumperEvent, BumperReactor
from .commands import Command, STOP
from .config import MARKER_FRAME
from .config_store import ConfigStore, FollowerConfig
from .markers import MarkerSpec, bbox_marker, centroid_marker
from .point_filter import CentroidSummary, PointFilter
from .states import BumperSide, FollowerState, FollowRequest, FollowResult
from .velocity_controller import VelocityController, classify


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one control cycle."""
    state: FollowerState
    command: Optional[Command] = None
    summary: Optional[CentroidSummary] = None    # only set when a new cloud was consumed
    config: Optional[FollowerConfig] = None


class FollowerStateMachine:
    """
    Orchestrates BumperReactor, PointFilter and VelocityController.

    Bumper events are posted to a queue from any thread and applied at
    the start of the next cycle, so the reactor has a single writer.

    Note: the enabled flag only gates the SEEKING branch. While a
    target is in the box (APPROACHING / ARRIVED) commands are produced
    even when following has been stopped.
    """

    def __init__(self, store: ConfigStore,
                 logger: Optional[logging.Logger] = None,
                 reactor: Optional[BumperReactor] = None,
                 point_filter: Optional[PointFilter] = None,
                 controller: Optional[VelocityController] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._store = store
        self._reactor = reactor or BumperReactor(logger=self._logger)
        self._filter = point_filter or PointFilter(logger=self._logger)
        self._controller = controller or VelocityController(logger=self._logger)
        self._reactor.set_callbacks(on_complete=self._on_evasion_complete)

        self._events: "queue.SimpleQueue[BumperEvent]" = queue.SimpleQueue()
        self._regime = FollowerState.SEEKING
        self._state = FollowerState.SEEKING if store.enabled else FollowerState.DISABLED

    # ==================== Inputs ====================

    def post_bumper_event(self, event: BumperEvent):
        """Queue a bumper transition for the next cycle."""
        self._events.put(event)

    def request_follow_state(self, request: FollowRequest) -> Optional[Command]:
        """
        Handle a start/stop request.

        Returns:
            STOP if following was just stopped (publish it now), else None
        """
        request = FollowRequest(request)
        if request == FollowRequest.STOPPED:
            if self._store.set_enabled(False):
                self._logger.info("[TOGGLE] Change mode service request: following stopped")
                return STOP
        elif self._store.set_enabled(True):
            self._logger.info("[TOGGLE] Change mode service request: following (re)started")
        return None

    # ==================== Cycle ====================

    def step(self, points=None) -> CycleResult:
        """
        Run one control cycle.

        Args:
            points: Newest cloud as an (N, 3) array-like, or None if no
                new cloud arrived since the last cycle

        Returns:
            CycleResult; command is None when nothing should be published
        """
        self._drain_bumper_events()
        config = self._store.snapshot()

        summary = None
        if points is not None:
            summary = self._filter.compute(points, config.volume)
            self._regime = classify(summary, config.goal_z)
            self._logger.debug(
                f"centroid ({summary.x:.3f}, {summary.y:.3f}) z_min {summary.z_min:.3f} "
                f"with {summary.count} points"
            )
        elif not self._reactor.evading:
            return CycleResult(state=self._state, config=config)

        command = None
        if self._regime == FollowerState.SEEKING and not config.enabled:
            state = FollowerState.DISABLED
        else:
            command = self._reactor.tick()
            if command is not None:
                state = FollowerState.EVADING
            elif summary is None:
                # stale arm dropped and no cloud to act on
                return CycleResult(state=self._state, config=config)
            else:
                state = self._regime
                command = self._controller.compute(self._regime, summary, config)

        self._set_state(state)
        return CycleResult(state=state, command=command, summary=summary, config=config)

    def reset(self):
        """Drop queued events, press flags and turn memory."""
        self._drain_bumper_events()
        self._reactor.reset()
        self._controller.reset()

    # ==================== Internals ====================

    def _drain_bumper_events(self):
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return
            self._reactor.handle(event)

    def _set_state(self, state: FollowerState):
        if state != self._state:
            self._logger.info(f"[STATE] {self._state.value} -> {state.value}")
            self._state = state

    def _on_evasion_complete(self, side: BumperSide):
        self._logger.info(f"[STATE] {side.name} evasion complete")

    @property
    def state(self) -> FollowerState:
        return self._state

    @property
    def reactor(self) -> BumperReactor:
        return self._reactor


# ==================== Lifecycle ====================

@dataclass
class FollowerCollaborators:
    """Outbound transport hooks supplied by the host."""
    publish_command: Callable[[Command], None]
    publish_marker: Optional[Callable[[MarkerSpec], None]] = None
    marker_frame: str = MARKER_FRAME


class FollowerHandle:
    """
    Live follower instance returned by initialize().

    Usage:
        handle = initialize(config, FollowerCollaborators(publish_command=pub))
        handle.on_point_cloud(points)     # cloud callback
        handle.on_bumper_event(event)     # bumper callback
        handle.run_cycle()                # control timer
        shutdown(handle)
    """

    def __init__(self, machine: FollowerStateMachine, store: ConfigStore,
                 collaborators: FollowerCollaborators,
                 logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._machine = machine
        self._store = store
        self._collab = collaborators
        self._lock = threading.Lock()
        self._pending_points = None
        self._closed = False

    def on_point_cloud(self, points):
        """Keep only the newest cloud; older unprocessed clouds are dropped."""
        with self._lock:
            self._pending_points = points

    def on_bumper_event(self, event: BumperEvent):
        self._machine.post_bumper_event(event)

    def reconfigure(self, values: Mapping[str, Any]) -> FollowerConfig:
        """Replace the geometry. Raises ConfigError and keeps the old config on bad input."""
        return self._store.reconfigure(values)

    def change_state(self, request: FollowRequest) -> FollowResult:
        command = self._machine.request_follow_state(request)
        if command is not None and not self._closed:
            self._collab.publish_command(command)
        return FollowResult.OK

    def run_cycle(self) -> Optional[CycleResult]:
        """Run one control cycle and publish its outputs."""
        if self._closed:
            return None

        with self._lock:
            points, self._pending_points = self._pending_points, None

        result = self._machine.step(points)
        if result.command is not None:
            self._collab.publish_command(result.command)
        if result.summary is not None and self._collab.publish_marker is not None:
            self._collab.publish_marker(centroid_marker(result.summary, self._collab.marker_frame))
            self._collab.publish_marker(bbox_marker(result.config.volume, self._collab.marker_frame))
        return result

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._machine.reset()
        self._collab.publish_command(STOP)
        self._logger.info("Follower shut down, robot stopped")

    @property
    def state(self) -> FollowerState:
        return self._machine.state

    @property
    def config(self) -> FollowerConfig:
        return self._store.snapshot()

    @property
    def closed(self) -> bool:
        return self._closed


def initialize(config: Optional[FollowerConfig],
               collaborators: FollowerCollaborators,
               logger: Optional[logging.Logger] = None,
               rng: Optional[random.Random] = None) -> FollowerHandle:
    """
    Build a follower from a configuration and its collaborators.

    Args:
        config: Initial configuration (defaults if None); validated here
        collaborators: Outbound publish hooks
        logger: Optional logger shared by all components
        rng: Random source for the exploratory turning

    Raises:
        ConfigError: if the configuration is invalid
    """
    logger = logger or logging.getLogger(__name__)
    store = ConfigStore(config, logger=logger)
    machine = FollowerStateMachine(
        store,
        logger=logger,
        controller=VelocityController(logger=logger, rng=rng),
    )
    logger.info(
        f"Follower initialized (enabled={store.enabled}, goal_z={store.snapshot().goal_z:.2f})"
    )
    return FollowerHandle(machine, store, collaborators, logger=logger)


def shutdown(handle: FollowerHandle):
    """Stop the robot and make further cycles no-ops."""
    handle.close()
