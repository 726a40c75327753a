from launch import LaunchDescription
from launch_ros.actions import Node
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration

def generate_launch_description():
    enabled = LaunchConfiguration('enabled', default='true')
    goal_z = LaunchConfiguration('goal_z', default='0.6')

    declare_enabled_cmd = DeclareLaunchArgument(
        'enabled',
        default_value='true',
        description='Start following immediately'
    )

    declare_goal_z_cmd = DeclareLaunchArgument(
        'goal_z',
        default_value='0.6',
        description='Distance (m) to hold from the target'
    )

    return LaunchDescription([
        declare_enabled_cmd,
        declare_goal_z_cmd,

        Node(
            package='turtlebot_follower',
            executable='follower_node',
            name='turtlebot_follower',
            output='screen',
            parameters=[{
                'enabled': enabled,
                'goal_z': goal_z,
                'min_y': 0.1,
                'max_y': 0.5,
                'min_x': -0.2,
                'max_x': 0.2,
                'max_z': 0.8,
                'z_scale': 1.0,
                'x_scale': 5.0,
            }],
            remappings=[
                ('depth/points', '/camera/depth/points'),
                ('events/bumper', '/events/bumper'),
                ('~/cmd_vel', '/cmd_vel'),
            ],
        ),
    ])
