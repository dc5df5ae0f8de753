"""
Pose and calibration data types for the odometry estimator.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict
from ..math.point import Point2D

@dataclass(frozen=True)
class Pose:
    """
    Snapshot of the robot pose in the field frame.

    - location: Position in encoder distance units
    - heading: Orientation in radians, unwrapped. 0 rad follows the x-axis,
      pi/2 follows the y-axis (unit-circle convention).
    """

    location: Point2D = Point2D()
    heading: float = 0.0

    @property
    def x(self) -> float:
        return self.location.x

    @property
    def y(self) -> float:
        return self.location.y

    @property
    def heading_degrees(self) -> float:
        """Get heading in degrees (unwrapped)."""
        return math.degrees(self.heading)

    @property
    def is_finite(self) -> bool:
        """True when position and heading are all finite."""
        return self.location.is_finite and math.isfinite(self.heading)

    @property
    def state_vector(self) -> np.ndarray:
        """Get pose as [x, y, heading] numpy vector."""
        return np.array([self.x, self.y, self.heading])

    def __str__(self) -> str:
        return (
            f"Pose(pos=[{self.x:.2f}, {self.y:.2f}], "
            f"heading={self.heading:.3f})"
        )

@dataclass(frozen=True)
class RobotConfig:
    """
    Calibration constants of a three-wheel odometry pod.

    - track_width: Perpendicular distance between the two vertical encoders
    - strafe_distance_per_rotation: Distance the strafe encoder reports when
      the robot turns one full rotation in place
    """

    track_width: float
    strafe_distance_per_rotation: float = 0.0

    def validate(self):
        """
        Check the constants before they reach the estimator.

        Raises:
            ValueError: If the track width is not a positive finite number or
                the strafe factor is not finite
        """
        if not math.isfinite(self.track_width) or self.track_width <= 0:
            raise ValueError(
                f"track_width must be positive and finite, got {self.track_width}")
        if not math.isfinite(self.strafe_distance_per_rotation):
            raise ValueError(
                "strafe_distance_per_rotation must be finite, "
                f"got {self.strafe_distance_per_rotation}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'RobotConfig':
        """Create from a configuration mapping."""
        if "track_width" not in values:
            raise ValueError("Robot configuration requires 'track_width'")
        return cls(
            track_width=float(values["track_width"]),
            strafe_distance_per_rotation=float(
                values.get("strafe_distance_per_rotation", 0.0))
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "track_width": self.track_width,
            "strafe_distance_per_rotation": self.strafe_distance_per_rotation
        }
