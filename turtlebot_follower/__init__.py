"""
TurtleBot Follower Package

A ROS2 package that keeps a TurtleBot at a standoff distance from
whatever sits in a box in front of its depth camera, with
bumper-triggered evasion.

Modules:
    config              - Configuration constants and tunables
    config_store        - Runtime configuration snapshots
    states              - State machine and interface enums
    commands            - Velocity command type
    point_filter        - Bounding-box centroid extraction
    bumper_reactor      - Bumper tracking and evasive manoeuvres
    velocity_controller - Regime classification and control law
    markers             - Debug marker descriptions
    follower            - State machine, initialize() / shutdown()

Main Nodes:
    follower_node       - ROS2 wiring (topics, parameters, service)

Usage:
    ros2 run turtlebot_follower follower_node

Import example:
    from turtlebot_follower.follower import initialize, FollowerCollaborators
    from turtlebot_follower.point_filter import PointFilter
    from turtlebot_follower.states import FollowerState
"""

__version__ = '0.3.0'
