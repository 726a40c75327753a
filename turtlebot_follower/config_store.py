#!/usr/bin/env python3
"""
config_store.py - Runtime configuration for the TurtleBot follower

Holds the reconfigurable geometry as an immutable snapshot. Writers
replace the whole snapshot under a lock; every control cycle reads a
single snapshot, so a cycle never sees half an update.
"""

import dataclasses
import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .config import (
    DEFAULT_MIN_Y,
    DEFAULT_MAX_Y,
    DEFAULT_MIN_X,
    DEFAULT_MAX_X,
    DEFAULT_MAX_Z,
    DEFAULT_GOAL_Z,
    DEFAULT_Z_SCALE,
    DEFAULT_X_SCALE,
    DEFAULT_ENABLED,
)


# Fields pushed by live reconfiguration. `enabled` only changes through the toggle service.
RECONFIGURABLE_FIELDS = (
    'min_y', 'max_y', 'min_x', 'max_x', 'max_z', 'goal_z', 'z_scale', 'x_scale',
)


# Read once when the node starts.
STARTUP_ONLY_PARAMETERS = {
    'enabled': "enabled is read at start-up; use the change_state service",
    'marker_frame': "marker_frame is read at start-up; restart the node to change it",
}


class ConfigError(ValueError):
    """Raised for missing, malformed or inconsistent follower configuration."""


def reconfigurable_changes(updates: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Pick the reconfigurable fields out of a parameter update.

    Raises:
        ConfigError: if the update touches a start-up only parameter
    """
    for name in updates:
        if name in STARTUP_ONLY_PARAMETERS:
            raise ConfigError(STARTUP_ONLY_PARAMETERS[name])
    return {name: value for name, value in updates.items() if name in RECONFIGURABLE_FIELDS}


@dataclass(frozen=True)
class BoundingVolume:
    """Region of interest in the sensor frame. The y bounds apply to -y."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    max_z: float


@dataclass(frozen=True)
class FollowerConfig:
    min_y: float = DEFAULT_MIN_Y
    max_y: float = DEFAULT_MAX_Y
    min_x: float = DEFAULT_MIN_X
    max_x: float = DEFAULT_MAX_X
    max_z: float = DEFAULT_MAX_Z
    goal_z: float = DEFAULT_GOAL_Z
    z_scale: float = DEFAULT_Z_SCALE
    x_scale: float = DEFAULT_X_SCALE
    enabled: bool = DEFAULT_ENABLED

    @property
    def volume(self) -> BoundingVolume:
        return BoundingVolume(
            min_x=self.min_x, max_x=self.max_x,
            min_y=self.min_y, max_y=self.max_y,
            max_z=self.max_z,
        )

    def validate(self) -> 'FollowerConfig':
        """
        Check the bounding volume is well formed.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigError: if a bound is not finite or a min/max pair is inverted
        """
        for name in RECONFIGURABLE_FIELDS:
            if not math.isfinite(getattr(self, name)):
                raise ConfigError(f"{name} must be finite, got {getattr(self, name)}")
        if self.min_x >= self.max_x:
            raise ConfigError(f"min_x ({self.min_x}) must be less than max_x ({self.max_x})")
        if self.min_y >= self.max_y:
            raise ConfigError(f"min_y ({self.min_y}) must be less than max_y ({self.max_y})")
        if self.max_z <= 0.0:
            raise ConfigError(f"max_z must be positive, got {self.max_z}")
        return self

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any],
                     enabled: Optional[bool] = None) -> 'FollowerConfig':
        """
        Build a validated config from a parameter mapping.

        Args:
            values: Must hold every name in RECONFIGURABLE_FIELDS
            enabled: Overrides values['enabled'] when given

        Raises:
            ConfigError: on a missing or non-numeric field, or bad geometry
        """
        missing = [name for name in RECONFIGURABLE_FIELDS if values.get(name) is None]
        if missing:
            raise ConfigError(f"missing required parameters: {', '.join(missing)}")

        fields = {}
        for name in RECONFIGURABLE_FIELDS:
            try:
                fields[name] = float(values[name])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"{name} must be a number, got {values[name]!r}") from e

        if enabled is None:
            enabled = bool(values.get('enabled', DEFAULT_ENABLED))
        return cls(enabled=enabled, **fields).validate()


class ConfigStore:
    """
    Owner of the current FollowerConfig.

    Usage:
        store = ConfigStore(FollowerConfig())
        cfg = store.snapshot()           # once per cycle
        store.reconfigure({...})         # from the parameter callback
        store.set_enabled(False)         # from the toggle service
    """

    def __init__(self, config: Optional[FollowerConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._config = (config or FollowerConfig()).validate()

    def snapshot(self) -> FollowerConfig:
        with self._lock:
            return self._config

    @property
    def enabled(self) -> bool:
        return self.snapshot().enabled

    def reconfigure(self, values: Mapping[str, Any]) -> FollowerConfig:
        """
        Replace the geometry with a full set of reconfigurable fields.

        The enabled flag is carried over untouched. On error the current
        snapshot stays in force.
        """
        with self._lock:
            new_config = FollowerConfig.from_mapping(values, enabled=self._config.enabled)
            self._config = new_config
        self._logger.info(
            f"[CONFIG] box x=({new_config.min_x:.2f},{new_config.max_x:.2f}) "
            f"y=({new_config.min_y:.2f},{new_config.max_y:.2f}) "
            f"max_z={new_config.max_z:.2f} goal_z={new_config.goal_z:.2f}"
        )
        return new_config

    def set_enabled(self, enabled: bool) -> bool:
        """Set the enabled flag. Returns True if the value changed."""
        with self._lock:
            if self._config.enabled == enabled:
                return False
            self._config = dataclasses.replace(self._config, enabled=enabled)
            return True
