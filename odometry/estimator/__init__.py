"""
Three-wheel odometry pose estimator.
"""

from ..math.point import Point2D
from .pose import Pose, RobotConfig
from .kinematics import ArcKinematics
from .manager import OdometryManager

__all__ = ["OdometryManager", "ArcKinematics", "Pose", "Point2D", "RobotConfig"]
