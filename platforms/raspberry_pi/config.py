"""
Configuration manager for Raspberry Pi odometry system.
"""

import copy
import json
import os
from typing import Dict, Any

from odometry.estimator import Pose, Point2D, RobotConfig
from odometry.math.constants import DEFAULT_UPDATE_RATE_HZ, DEFAULT_OUTPUT_RATE_HZ

class Config:
    """Configuration manager for the odometry system."""

    DEFAULT_CONFIG = {
        # Hardware configuration
        "i2c_bus": 1,
        "encoders": {
            "left": {"i2c_address": 0x30, "distance_per_tick": 0.0012, "invert": False},
            "right": {"i2c_address": 0x31, "distance_per_tick": 0.0012, "invert": False},
            "strafe": {"i2c_address": 0x32, "distance_per_tick": 0.0012, "invert": False}
        },

        # Calibration (same units as encoder distances)
        "robot": {
            "track_width": 0.30,
            "strafe_distance_per_rotation": 0.0
        },

        # Starting pose
        "initial_pose": {
            "x": 0.0,
            "y": 0.0,
            "heading": 0.0
        },

        # Loop rates
        "update_rate_hz": DEFAULT_UPDATE_RATE_HZ,
        "output_rate_hz": DEFAULT_OUTPUT_RATE_HZ,

        # Data logging
        "enable_logging": True,
        "log_file": "odometry_log.csv"
    }

    def __init__(self, config_file: str = "config.json"):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        # Load configuration from file if it exists
        if os.path.exists(config_file):
            self.load_config()
        else:
            print(f"Config file {config_file} not found, using defaults")
            self.save_config()  # Create default config file

    def load_config(self) -> bool:
        """
        Load configuration from file.

        Returns:
            True if loaded successfully
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)

            # Merge with defaults (file config overrides defaults)
            self._merge_config(self.config, file_config)

            print(f"Configuration loaded from {self.config_file}")
            return True

        except (OSError, ValueError) as e:
            print(f"Failed to load config: {e}")
            return False

    def save_config(self) -> bool:
        """
        Save current configuration to file.

        Returns:
            True if saved successfully
        """
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)

            print(f"Configuration saved to {self.config_file}")
            return True

        except OSError as e:
            print(f"Failed to save config: {e}")
            return False

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]):
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def robot_config(self) -> RobotConfig:
        """
        Build and validate the robot calibration.

        Raises:
            ValueError: If the calibration constants are invalid
        """
        robot = RobotConfig.from_dict(self.robot)
        robot.validate()
        return robot

    def initial_pose_value(self) -> Pose:
        """Get the configured starting pose."""
        pose = self.initial_pose
        return Pose(
            location=Point2D(float(pose.get("x", 0.0)), float(pose.get("y", 0.0))),
            heading=float(pose.get("heading", 0.0))
        )

    # Property accessors for common configuration values
    @property
    def i2c_bus(self) -> int:
        return self.config["i2c_bus"]

    @property
    def encoders(self) -> Dict[str, Dict[str, Any]]:
        return self.config["encoders"]

    @property
    def robot(self) -> Dict[str, float]:
        return self.config["robot"]

    @property
    def initial_pose(self) -> Dict[str, float]:
        return self.config["initial_pose"]

    @property
    def update_rate_hz(self) -> float:
        return self.config["update_rate_hz"]

    @property
    def output_rate_hz(self) -> float:
        return self.config["output_rate_hz"]

    @property
    def enable_logging(self) -> bool:
        return self.config["enable_logging"]

    @property
    def log_file(self) -> str:
        return self.config["log_file"]

    def print_config(self):
        """Print current configuration."""
        print("=== Odometry Configuration ===")
        print(json.dumps(self.config, indent=2))
