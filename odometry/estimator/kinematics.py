"""
Arc kinematics for three-wheel odometry.

Robot-centric frame: the vertical encoders drive along the y-axis and the
strafe encoder measures along the x-axis.
"""

import numpy as np
from typing import Tuple
from ..math.point import Point2D
from ..math.utils import rotate_about_origin
from .pose import RobotConfig

class ArcKinematics:
    """
    Constant-curvature displacement model for one update step.

    Inputs are the incremental distances of the left (d1), right (d2) and
    strafe encoders since the previous step.
    """

    @staticmethod
    def heading_change(d1: float, d2: float, track_width: float) -> float:
        """
        Heading change over the step.

        Positive when the right wheel travels farther than the left
        (counter-clockwise turn). A zero track width yields an infinite or
        NaN result instead of raising.
        """
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(d2 - d1) / track_width)

    @staticmethod
    def is_straight(d1: float, d2: float) -> bool:
        """True when the step takes the straight-line branch (exact equality)."""
        return d1 == d2

    @staticmethod
    def vertical_displacement(d1: float, d2: float,
                              track_width: float) -> Tuple[Point2D, float]:
        """
        Robot-centric displacement from the two vertical encoders.

        Args:
            d1: Left encoder delta
            d2: Right encoder delta
            track_width: Distance between the vertical encoders

        Returns:
            (displacement, heading change)
        """
        # Straight line: the arc formula is 0/0 here
        if ArcKinematics.is_straight(d1, d2):
            return Point2D(0.0, d1), 0.0

        # Average travel and arc radius
        d = (d1 + d2) / 2
        d_theta = ArcKinematics.heading_change(d1, d2, track_width)
        # d_theta may underflow to 0.0 for tiny differences; r is then inf or NaN
        with np.errstate(divide='ignore', invalid='ignore'):
            r = float(np.float64(d) / d_theta)

        # Chord between (r, 0) and the same point swept through d_theta
        start = Point2D(r, 0.0)
        end = rotate_about_origin(start, d_theta)

        return start - end, d_theta

    @staticmethod
    def strafe_displacement(d_strafe: float, d_theta: float,
                            strafe_distance_per_rotation: float) -> Point2D:
        """
        Robot-centric displacement from the strafe encoder.

        Turning in place drives the strafe wheel by
        d_theta * strafe_distance_per_rotation; that part is removed before
        the remaining travel is projected at the heading change angle.
        """
        turn_offset = d_theta * strafe_distance_per_rotation
        corrected = d_strafe - turn_offset

        with np.errstate(invalid='ignore'):
            return Point2D(float(np.cos(d_theta) * corrected),
                           float(np.sin(d_theta) * corrected))

    @staticmethod
    def robot_centric_displacement(d1: float, d2: float, d_strafe: float,
                                   config: RobotConfig) -> Tuple[Point2D, float]:
        """
        Combined robot-centric displacement for one step.

        Returns:
            (displacement, heading change)
        """
        vertical, d_theta = ArcKinematics.vertical_displacement(
            d1, d2, config.track_width)
        strafe = ArcKinematics.strafe_displacement(
            d_strafe, d_theta, config.strafe_distance_per_rotation)

        return vertical + strafe, d_theta
