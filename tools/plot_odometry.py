#!/usr/bin/env python3
"""
plot_odometry.py

Replays a CSV log of cumulative encoder readings through the odometry
estimator and plots the resulting path and heading. Calibration constants
can be overridden to check a new track width or strafe factor against an
existing recording.

Usage:
    python tools/plot_odometry.py odometry_log.csv --track-width 0.3
"""

from __future__ import annotations

import argparse
import csv
import os
import sys
from typing import Dict, List

import numpy as np
import matplotlib.pyplot as plt

# Add core modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from odometry.estimator import OdometryManager, Pose, RobotConfig
from odometry.sensors import SimulatedEncoder

def load_encoder_log(csvfile: str) -> Dict[str, np.ndarray]:
    """Read a log written by the Raspberry Pi application.

    Args:
        csvfile (str): Path to the CSV log.

    Returns:
        Dict[str, np.ndarray]: Column name to values. Only the columns
        time_s, left, right and strafe are required.
    """
    columns: Dict[str, List[float]] = {}
    with open(csvfile, "r", newline="") as f:
        reader = csv.DictReader(f)
        for name in ("time_s", "left", "right", "strafe"):
            if reader.fieldnames is None or name not in reader.fieldnames:
                raise ValueError(f"{csvfile}: missing column '{name}'")
        for row in reader:
            for key, value in row.items():
                columns.setdefault(key, []).append(float(value))

    return {key: np.array(values) for key, values in columns.items()}

def replay(log: Dict[str, np.ndarray], robot: RobotConfig,
           initial_pose: Pose = Pose()) -> np.ndarray:
    """Run the logged readings through a fresh estimator.

    Args:
        log (Dict[str, np.ndarray]): Output of load_encoder_log.
        robot (RobotConfig): Calibration to replay with.
        initial_pose (Pose): Starting pose.

    Returns:
        np.ndarray: N x 3 array of [x, y, heading], one row per log row.
    """
    left, right, strafe = SimulatedEncoder(), SimulatedEncoder(), SimulatedEncoder()
    odometry = OdometryManager.from_config(left, right, strafe, robot, initial_pose)

    poses = np.zeros((len(log["time_s"]), 3))
    for i in range(len(poses)):
        left.set_distance(log["left"][i])
        right.set_distance(log["right"][i])
        strafe.set_distance(log["strafe"][i])
        odometry.update()
        poses[i] = odometry.get_pose().state_vector

    return poses

def plot(log: Dict[str, np.ndarray], poses: np.ndarray) -> None:
    """Plot the replayed path and heading, overlaying the logged path if present."""
    fig, (ax_path, ax_heading) = plt.subplots(1, 2, figsize=(12, 5))

    ax_path.plot(poses[:, 0], poses[:, 1], label="Replayed")
    if "x" in log and "y" in log:
        ax_path.plot(log["x"], log["y"], "--", label="Logged")
    ax_path.set_xlabel("x")
    ax_path.set_ylabel("y")
    ax_path.set_title("Path")
    ax_path.axis("equal")
    ax_path.grid(True)
    ax_path.legend()

    ax_heading.plot(log["time_s"], np.degrees(poses[:, 2]), label="Replayed")
    if "heading" in log:
        ax_heading.plot(log["time_s"], np.degrees(log["heading"]), "--", label="Logged")
    ax_heading.set_xlabel("time [s]")
    ax_heading.set_ylabel("heading [deg]")
    ax_heading.set_title("Heading (unwrapped)")
    ax_heading.grid(True)
    ax_heading.legend()

    fig.tight_layout()
    plt.show()

def main() -> int:
    parser = argparse.ArgumentParser(description="Replay and plot an odometry encoder log")
    parser.add_argument("logfile", help="CSV log with time_s,left,right,strafe columns")
    parser.add_argument("--track-width", type=float, default=0.30,
                        help="distance between the vertical encoders")
    parser.add_argument("--strafe-per-rotation", type=float, default=0.0,
                        help="strafe encoder travel per full robot rotation")
    parser.add_argument("--no-plot", action="store_true",
                        help="print the final pose only")
    args = parser.parse_args()

    robot = RobotConfig(args.track_width, args.strafe_per_rotation)
    try:
        robot.validate()
        log = load_encoder_log(args.logfile)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    poses = replay(log, robot)
    if len(poses):
        x, y, heading = poses[-1]
        print(f"Final pose: [{x:.3f}, {y:.3f}], heading {heading:.3f} rad "
              f"({len(poses)} samples)")

    if not args.no_plot:
        plot(log, poses)

    return 0

if __name__ == "__main__":
    sys.exit(main())
