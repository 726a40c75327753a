#!/usr/bin/env python3
"""
follower_node.py - ROS 2 node for the TurtleBot follower

Wires the follower core onto ROS 2:
- depth/points (PointCloud2)       -> newest cloud for the next cycle
- events/bumper (kobuki BumperEvent) -> bumper queue
- ~/change_state (SetBool)         -> start / stop following
- parameters                       -> live reconfiguration
- 10 Hz timer                      -> control cycle, ~/cmd_vel, ~/marker, ~/bbox
"""

import rclpy
from rclpy.node import Node
from rclpy.qos import QoSProfile, ReliabilityPolicy, DurabilityPolicy, HistoryPolicy
from rcl_interfaces.msg import SetParametersResult

from geometry_msgs.msg import Twist
from sensor_msgs.msg import PointCloud2
from sensor_msgs_py import point_cloud2
from std_msgs.msg import ColorRGBA
from std_srvs.srv import SetBool
from visualization_msgs.msg import Marker
from kobuki_ros_interfaces.msg import BumperEvent as BumperEventMsg

from .bumper_reactor import BumperEvent
from .commands import Command
from .config import (
    CONTROL_HZ,
    MARKER_FRAME,
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
from .config_store import (
    ConfigError,
    FollowerConfig,
    RECONFIGURABLE_FIELDS,
    reconfigurable_changes,
)
from .follower import FollowerCollaborators, initialize, shutdown
from .markers import MarkerSpec
from .states import BumperSide, BumperTransition, FollowRequest


PARAMETER_DEFAULTS = {
    'min_y': DEFAULT_MIN_Y,
    'max_y': DEFAULT_MAX_Y,
    'min_x': DEFAULT_MIN_X,
    'max_x': DEFAULT_MAX_X,
    'max_z': DEFAULT_MAX_Z,
    'goal_z': DEFAULT_GOAL_Z,
    'z_scale': DEFAULT_Z_SCALE,
    'x_scale': DEFAULT_X_SCALE,
}


class TurtlebotFollowerNode(Node):
    """
    Point-cloud follower with bumper evasion.

    All decision logic lives in follower.py; this class only converts
    messages and forwards them.
    """

    def __init__(self):
        super().__init__('turtlebot_follower')

        # ==================== Parameters ====================

        for name, default in PARAMETER_DEFAULTS.items():
            self.declare_parameter(name, default)
        self.declare_parameter('enabled', DEFAULT_ENABLED)
        self.declare_parameter('marker_frame', MARKER_FRAME)

        values = {name: self.get_parameter(name).value for name in RECONFIGURABLE_FIELDS}
        enabled = self.get_parameter('enabled').get_parameter_value().bool_value
        self._marker_frame = self.get_parameter('marker_frame').get_parameter_value().string_value

        try:
            config = FollowerConfig.from_mapping(values, enabled=enabled)
        except ConfigError as e:
            self.get_logger().fatal(f"Invalid follower configuration: {e}")
            raise

        # ==================== Publishers ====================

        self._cmd_vel_pub = self.create_publisher(Twist, '~/cmd_vel', 1)
        self._marker_pub = self.create_publisher(Marker, '~/marker', 1)
        self._bbox_pub = self.create_publisher(Marker, '~/bbox', 1)

        # ==================== Follower core ====================

        self._follower = initialize(
            config,
            FollowerCollaborators(
                publish_command=self._publish_command,
                publish_marker=self._publish_marker,
                marker_frame=self._marker_frame,
            ),
            logger=self.get_logger(),
        )

        # ==================== QoS Profiles ====================

        qos_sensor = QoSProfile(
            reliability=ReliabilityPolicy.BEST_EFFORT,
            durability=DurabilityPolicy.VOLATILE,
            history=HistoryPolicy.KEEP_LAST,
            depth=1
        )

        # ==================== Subscriptions ====================

        self.create_subscription(
            PointCloud2, 'depth/points',
            self._cloud_callback, qos_sensor
        )
        self.create_subscription(
            BumperEventMsg, 'events/bumper',
            self._bumper_callback, 10
        )

        # ==================== Services ====================

        self._switch_srv = self.create_service(
            SetBool, '~/change_state', self._change_state_callback
        )

        self.add_on_set_parameters_callback(self._parameters_callback)

        # ==================== Timers ====================

        self._timer = self.create_timer(1.0 / CONTROL_HZ, self._control_loop)

        self.get_logger().info("TurtleBot follower started")

    # ==================== Callbacks (ROS) ====================

    def _cloud_callback(self, msg: PointCloud2):
        """Hand the newest cloud to the follower (NaNs are filtered there)."""
        points = point_cloud2.read_points_numpy(
            msg, field_names=('x', 'y', 'z'), skip_nans=False
        )
        self._follower.on_point_cloud(points)

    def _bumper_callback(self, msg: BumperEventMsg):
        try:
            event = BumperEvent(BumperSide(msg.bumper), BumperTransition(msg.state))
        except ValueError:
            self.get_logger().warning(f"[BUMPER] unknown event bumper={msg.bumper} state={msg.state}")
            return
        self._follower.on_bumper_event(event)

    def _change_state_callback(self, request, response):
        """SetBool: data=True starts following, data=False stops it."""
        follow = FollowRequest.FOLLOW if request.data else FollowRequest.STOPPED
        result = self._follower.change_state(follow)
        response.success = True
        response.message = result.value
        return response

    def _parameters_callback(self, params) -> SetParametersResult:
        """Validate and apply a parameter update as one config snapshot."""
        try:
            changes = reconfigurable_changes({param.name: param.value for param in params})
            if not changes:
                return SetParametersResult(successful=True)

            values = self._follower.config.as_dict()
            values.update(changes)
            self._follower.reconfigure(values)
        except ConfigError as e:
            self.get_logger().warning(f"[CONFIG] rejected update: {e}")
            return SetParametersResult(successful=False, reason=str(e))
        return SetParametersResult(successful=True)

    def _control_loop(self):
        self._follower.run_cycle()

    # ==================== Publishing ====================

    def _publish_command(self, command: Command):
        twist = Twist()
        twist.linear.x = float(command.linear_x)
        twist.angular.z = float(command.angular_z)
        self._cmd_vel_pub.publish(twist)

    def _publish_marker(self, spec: MarkerSpec):
        m = Marker()
        m.header.frame_id = spec.frame_id
        m.header.stamp = self.get_clock().now().to_msg()
        m.ns = spec.namespace
        m.id = spec.marker_id
        m.type = Marker.SPHERE if spec.shape == 'sphere' else Marker.CUBE
        m.action = Marker.ADD
        m.pose.position.x = float(spec.position[0])
        m.pose.position.y = float(spec.position[1])
        m.pose.position.z = float(spec.position[2])
        m.pose.orientation.w = 1.0
        m.scale.x = float(spec.scale[0])
        m.scale.y = float(spec.scale[1])
        m.scale.z = float(spec.scale[2])
        r, g, b, a = spec.color
        m.color = ColorRGBA(r=r, g=g, b=b, a=a)

        if spec.shape == 'sphere':
            self._marker_pub.publish(m)
        else:
            self._bbox_pub.publish(m)

    def stop(self):
        shutdown(self._follower)


def main(args=None):
    rclpy.init(args=args)
    node = TurtlebotFollowerNode()
    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        node.stop()
        node.destroy_node()
        rclpy.shutdown()


if __name__ == '__main__':
    main()
