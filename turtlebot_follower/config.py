#!/usr/bin/env python3
"""
config.py - Configuration constants for the TurtleBot follower

All tunables in one place. Geometry values are the defaults for the
reconfigurable ROS parameters; everything else is fixed behaviour.
"""

# =============================================================================
# BOUNDING VOLUME DEFAULTS (sensor optical frame, meters)
# =============================================================================
DEFAULT_MIN_Y = 0.1              # Min height (applied to -y)
DEFAULT_MAX_Y = 0.5              # Max height (applied to -y)
DEFAULT_MIN_X = -0.2             # Left edge of the box
DEFAULT_MAX_X = 0.2              # Right edge of the box
DEFAULT_MAX_Z = 0.8              # Max depth of the box
DEFAULT_GOAL_Z = 0.6             # Distance to hold from the target
DEFAULT_Z_SCALE = 1.0            # Translational scale (accepted, not used by the control law)
DEFAULT_X_SCALE = 5.0            # Rotational scale (accepted, not used by the control law)
DEFAULT_ENABLED = True

# =============================================================================
# PERCEPTION
# =============================================================================
Z_SENTINEL = 1e6                 # Reported depth when no point is in the box
MIN_CLOUD_POINTS = 4000          # Need strictly more than this to trust the centroid

# =============================================================================
# CONTROL LAW
# =============================================================================
LATERAL_DEAD_ZONE = 0.2          # |x| <= this keeps the last turn direction
APPROACH_SPEED = 0.2             # m/s while target is farther than goal_z
SEEK_SPEED = 0.2                 # m/s crawl when too few points
DEAD_ZONE_TURN = 0.3             # rad/s magnitude used inside the dead zone

# Randomized turn bands while APPROACHING (draw = randrange(7) / 7)
APPROACH_DRAW_STEPS = 7
APPROACH_RIGHT_HIGH = 0.4        # draw > 0.7
APPROACH_RIGHT_LOW = 0.3         # draw <= 0.4
APPROACH_LEFT_HIGH = -0.36       # draw < -0.7
APPROACH_LEFT_LOW = -0.2         # draw >= -0.5

# Randomized turn bands when ARRIVED (draw = randrange(10) / 10)
ARRIVED_DRAW_STEPS = 10
ARRIVED_RIGHT_HIGH = 0.4         # draw > 0.7
ARRIVED_RIGHT_LOW = 0.3          # draw <= 0.4
ARRIVED_LEFT_HIGH = -0.2         # draw < -0.7
ARRIVED_LEFT_LOW = -0.2          # draw >= -0.4

# =============================================================================
# BUMPER EVASION
# =============================================================================
EVADE_LINEAR = -0.2              # m/s, back away
EVADE_ANGULAR_LEFT = -0.4        # rad/s
EVADE_ANGULAR_CENTER = -0.5      # rad/s
EVADE_ANGULAR_RIGHT = 0.4        # rad/s
EVADE_TICKS_SIDE = 15            # Ticks for left/right presses
EVADE_TICKS_CENTER = 20          # Ticks for center presses

# =============================================================================
# RATES
# =============================================================================
CONTROL_HZ = 10.0                # Control loop frequency (Hz), also the evasion pace

# =============================================================================
# DIAGNOSTICS
# =============================================================================
MARKER_FRAME = 'camera_rgb_optical_frame'
MARKER_NAMESPACE = 'turtlebot_follower'
CENTROID_MARKER_SIZE = 0.2       # Sphere diameter (meters)
