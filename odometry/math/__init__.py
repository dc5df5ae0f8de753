"""
Mathematical utilities for odometry calculations.
"""

from .point import Point2D
from .utils import rotation_matrix, rotate_about_origin, radians_to_degrees
from .constants import *

__all__ = [
    "Point2D",
    "rotation_matrix",
    "rotate_about_origin",
    "radians_to_degrees"
]
