from setuptools import setup

package_name = 'turtlebot_follower'

setup(
    name=package_name,
    version='0.3.0',
    packages=[package_name],
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        ('share/' + package_name + '/launch', ['launch/follower_launch.py']),
    ],
    install_requires=['setuptools', 'numpy'],
    zip_safe=True,
    maintainer='turtlebot',
    maintainer_email='turtlebot@example.com',
    description='Point-cloud follower with bumper evasion for TurtleBot',
    license='BSD-3-Clause',
    tests_require=['pytest'],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'follower_node = turtlebot_follower.follower_node:main',
        ],
    },
)
