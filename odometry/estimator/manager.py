"""
Pose estimator integrating three dead-wheel encoders.
"""

from typing import Any, Dict, Optional
from ..math.point import Point2D
from ..math.utils import rotate_about_origin
from ..sensors.encoder import EncoderSource
from ..sensors.tracker import DeltaTracker
from .kinematics import ArcKinematics
from .pose import Pose, RobotConfig

class OdometryManager:
    """
    Dead-reckoning pose estimator for two vertical and one strafe encoder.

    Not thread-safe: update() and the accessors must be called from one
    control loop or behind an external lock.
    """

    def __init__(self, initial_location: Point2D, initial_heading: float,
                 left_encoder: EncoderSource, right_encoder: EncoderSource,
                 strafe_encoder: EncoderSource, track_width: float,
                 strafe_distance_per_rotation: float):
        """
        Initialize the estimator.

        Configuration is not validated here; call RobotConfig.validate()
        before construction if the constants come from user input.

        Args:
            initial_location: Initial (x, y) location
            initial_heading: Initial global orientation in radians
            left_encoder: Left vertical encoder
            right_encoder: Right vertical encoder
            strafe_encoder: Bottom strafe/horizontal encoder
            track_width: Track width in same units as encoder distances
            strafe_distance_per_rotation: Distance the strafe
                encoder travels when the robot does one full rotation
        """
        self.config = RobotConfig(
            track_width=track_width,
            strafe_distance_per_rotation=strafe_distance_per_rotation
        )

        # Pose
        self._coords = initial_location
        self._theta = initial_heading

        # Per-encoder baselines
        self.left = DeltaTracker(left_encoder)
        self.right = DeltaTracker(right_encoder)
        self.strafe = DeltaTracker(strafe_encoder)

        # Statistics
        self.update_count = 0
        self.straight_update_count = 0
        self.arc_update_count = 0
        self.distance_traveled = 0.0
        self.heading_change = 0.0

    @classmethod
    def from_config(cls, left_encoder: EncoderSource,
                    right_encoder: EncoderSource,
                    strafe_encoder: EncoderSource,
                    config: RobotConfig,
                    initial_pose: Optional[Pose] = None) -> 'OdometryManager':
        """Create an estimator from a RobotConfig and optional start pose."""
        initial_pose = initial_pose or Pose()
        return cls(initial_pose.location, initial_pose.heading,
                   left_encoder, right_encoder, strafe_encoder,
                   config.track_width, config.strafe_distance_per_rotation)

    def update(self):
        """
        Advance the pose by one step using the latest encoder readings.

        Every encoder is read exactly once per call. Degenerate readings or
        calibration (NaN, zero track width) leave a non-finite pose rather
        than raising.
        """
        d1 = self.left.delta()
        d2 = self.right.delta()
        d_strafe = self.strafe.delta()

        robot_centric_change, d_theta = ArcKinematics.robot_centric_displacement(
            d1, d2, d_strafe, self.config)

        # Heading is updated before the step is rotated into the field frame
        self._theta += d_theta

        # NOTE: Assumes the field orientation follows the unit circle;
        # 0 radians is the x-axis and pi/2 radians is the y-axis.
        field_centric_change = rotate_about_origin(robot_centric_change, self._theta)

        self._coords = self._coords + field_centric_change

        self.update_count += 1
        if ArcKinematics.is_straight(d1, d2):
            self.straight_update_count += 1
        else:
            self.arc_update_count += 1
        self.distance_traveled += field_centric_change.norm
        self.heading_change += d_theta

    def get_location(self) -> Point2D:
        """Get current (x, y) location."""
        return self._coords

    def get_orientation(self) -> float:
        """Get current orientation in radians (unwrapped)."""
        return self._theta

    def get_pose(self) -> Pose:
        """Get current pose snapshot."""
        return Pose(location=self._coords, heading=self._theta)

    def reset(self, location: Point2D, heading: float):
        """
        Overwrite the pose, e.g. after an external position fix.

        Encoder baselines are kept so travel since the last update is not lost.
        """
        self._coords = location
        self._theta = heading

        # Reset counters
        self.update_count = 0
        self.straight_update_count = 0
        self.arc_update_count = 0
        self.distance_traveled = 0.0
        self.heading_change = 0.0

    def get_statistics(self) -> Dict[str, Any]:
        """Get estimator statistics."""
        return {
            'updates': self.update_count,
            'straight_updates': self.straight_update_count,
            'arc_updates': self.arc_update_count,
            'distance_traveled': self.distance_traveled,
            'heading_change': self.heading_change
        }
