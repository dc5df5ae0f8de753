#!/usr/bin/env python3
"""
Basic usage example of the three-wheel odometry estimator.

This example drives simulated encoders through a scripted sequence of
wheel motions without any hardware dependencies.
"""

import sys
import os
import numpy as np

# Add core modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from odometry.estimator import OdometryManager, Point2D
from odometry.sensors import SimulatedEncoder

TRACK_WIDTH = 10.0
STRAFE_PER_ROTATION = 1.5

def scripted_wheel_motion():
    """
    Generate per-step encoder increments for a short test drive.

    Yields:
        (label, left_delta, right_delta, strafe_delta) tuples
    """
    # Drive straight
    for _ in range(10):
        yield "straight", 2.0, 2.0, 0.0

    # Gentle left arc
    for _ in range(10):
        yield "arc", 1.8, 2.2, 0.0

    # Turn in place; the strafe wheel picks up the spurious rotation travel
    d_theta = 0.1
    half = d_theta * TRACK_WIDTH / 2
    for _ in range(5):
        yield "spin", -half, half, d_theta * STRAFE_PER_ROTATION

    # Strafe sideways
    for _ in range(5):
        yield "strafe", 0.0, 0.0, 1.0

def main():
    """Main example function."""
    print("Three-Wheel Odometry - Basic Usage Example")
    print("=" * 50)

    left = SimulatedEncoder()
    right = SimulatedEncoder()
    strafe = SimulatedEncoder()

    odometry = OdometryManager(
        initial_location=Point2D(0.0, 0.0),
        initial_heading=0.0,
        left_encoder=left,
        right_encoder=right,
        strafe_encoder=strafe,
        track_width=TRACK_WIDTH,
        strafe_distance_per_rotation=STRAFE_PER_ROTATION
    )

    print("Initialized odometry")
    print(f"Initial pose: {odometry.get_pose()}")
    print()

    previous_label = None
    for label, d_left, d_right, d_strafe in scripted_wheel_motion():
        if previous_label is not None and label != previous_label:
            print_status(previous_label, odometry)
        previous_label = label

        left.advance(d_left)
        right.advance(d_right)
        strafe.advance(d_strafe)
        odometry.update()

    print_status(previous_label, odometry)

    # Final statistics
    stats = odometry.get_statistics()
    print("=== Final Statistics ===")
    print(f"Updates: {stats['updates']} "
          f"({stats['straight_updates']} straight, {stats['arc_updates']} arc)")
    print(f"Distance traveled: {stats['distance_traveled']:.2f}")
    print(f"Heading change: {stats['heading_change']:.3f} rad")

def print_status(segment: str, odometry: OdometryManager):
    """Print pose after a motion segment."""
    pose = odometry.get_pose()

    print(f"After {segment}:")
    print(f"  Position: [{pose.x:6.2f}, {pose.y:6.2f}]")
    print(f"  Heading:  {pose.heading:6.3f} rad ({np.degrees(pose.heading):6.1f}°)")
    print()

if __name__ == "__main__":
    main()
