"""
Three-wheel dead-wheel odometry.

This package provides platform-independent implementations of:
- Arc-based pose estimation from two vertical encoders and one strafe encoder
- Encoder channel and delta tracking helpers
- Mathematical utilities
"""

__version__ = "1.0.0"
__author__ = "Odometry Team"

from .estimator import OdometryManager, Pose, Point2D, RobotConfig
from .sensors import Encoder, SimulatedEncoder, DeltaTracker
from .math import rotate_about_origin, rotation_matrix

__all__ = [
    "OdometryManager",
    "Pose",
    "Point2D",
    "RobotConfig",
    "Encoder",
    "SimulatedEncoder",
    "DeltaTracker",
    "rotate_about_origin",
    "rotation_matrix"
]
