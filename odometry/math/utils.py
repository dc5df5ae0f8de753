"""
Mathematical utility functions for odometry.
"""

import numpy as np
from .constants import RAD_TO_DEG
from .point import Point2D

def rotation_matrix(angle):
    """
    Create a 2D rotation matrix for the given angle.

    Args:
        angle (float): Angle in radians, positive is counter-clockwise

    Returns:
        np.ndarray: 2x2 rotation matrix (NaN entries for an infinite angle)
    """
    with np.errstate(invalid='ignore'):
        cos_a = np.cos(angle)
        sin_a = np.sin(angle)

    return np.array([
        [cos_a, -sin_a],
        [sin_a,  cos_a]
    ])

def rotate_about_origin(point, angle):
    """
    Rotate a 2D vector about the origin.

    Non-finite inputs are not trapped; they propagate into the result.

    Args:
        point (Point2D): Vector to rotate
        angle (float): Angle in radians, positive is counter-clockwise

    Returns:
        Point2D: Rotated vector
    """
    with np.errstate(invalid='ignore', over='ignore'):
        x, y = rotation_matrix(angle) @ point.as_array()
    return Point2D(float(x), float(y))

def radians_to_degrees(radians):
    """Convert radians to degrees."""
    return radians * RAD_TO_DEG
