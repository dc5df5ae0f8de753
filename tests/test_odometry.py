#!/usr/bin/env python3
"""
Unit tests for the three-wheel odometry estimator.
"""

import unittest
import dataclasses
import math
import numpy as np
import sys
import os

# Add core modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from odometry.estimator import OdometryManager, ArcKinematics, Pose, Point2D, RobotConfig
from odometry.sensors import Encoder, SimulatedEncoder, DeltaTracker
from odometry.math import rotate_about_origin, rotation_matrix, radians_to_degrees

def make_manager(track_width=10.0, strafe_per_rotation=0.0,
                 location=Point2D(0.0, 0.0), heading=0.0):
    """Create an estimator driven by simulated encoders."""
    left, right, strafe = SimulatedEncoder(), SimulatedEncoder(), SimulatedEncoder()
    manager = OdometryManager(location, heading, left, right, strafe,
                              track_width, strafe_per_rotation)
    return manager, left, right, strafe

class TestRotation(unittest.TestCase):
    """Test rotation primitive and angle helpers."""

    def test_rotation_matrix(self):
        """Test rotation matrix is orthonormal and counter-clockwise."""
        R = rotation_matrix(0.7)

        self.assertEqual(R.shape, (2, 2))
        np.testing.assert_allclose(R @ R.T, np.eye(2), atol=1e-12)
        self.assertAlmostEqual(R[1, 0], math.sin(0.7))

    def test_quarter_turn_is_counter_clockwise(self):
        """Test positive angle rotates x-axis onto y-axis."""
        rotated = rotate_about_origin(Point2D(1.0, 0.0), math.pi / 2)

        self.assertAlmostEqual(rotated.x, 0.0, places=12)
        self.assertAlmostEqual(rotated.y, 1.0, places=12)

    def test_round_trip(self):
        """Test rotating by theta then -theta returns the original vector."""
        vectors = [Point2D(1.0, 0.0), Point2D(-3.5, 2.25), Point2D(1e3, -1e-3),
                   Point2D(0.0, 0.0)]
        angles = [0.0, 0.1, -1.3, math.pi, 7.5, -42.0]

        for vector in vectors:
            for angle in angles:
                back = rotate_about_origin(rotate_about_origin(vector, angle), -angle)
                self.assertAlmostEqual(back.x, vector.x, places=9)
                self.assertAlmostEqual(back.y, vector.y, places=9)

    def test_rotation_preserves_length(self):
        """Test rotation does not scale the vector."""
        vector = Point2D(3.0, 4.0)
        rotated = rotate_about_origin(vector, 2.1)

        self.assertAlmostEqual(rotated.norm, 5.0, places=12)

    def test_non_finite_propagates(self):
        """Test NaN input gives NaN output rather than an exception."""
        rotated = rotate_about_origin(Point2D(float('nan'), 1.0), 0.5)

        self.assertFalse(rotated.is_finite)

    def test_infinite_angle_propagates(self):
        """Test an infinite angle gives NaN output rather than an exception."""
        rotated = rotate_about_origin(Point2D(1.0, 0.0), float('inf'))

        self.assertFalse(rotated.is_finite)

    def test_radians_to_degrees(self):
        """Test display conversion keeps the heading unwrapped."""
        self.assertAlmostEqual(radians_to_degrees(math.pi / 2), 90.0)
        self.assertAlmostEqual(radians_to_degrees(-3 * math.pi), -540.0)

class TestDataModel(unittest.TestCase):
    """Test Point2D, Pose and RobotConfig."""

    def test_point_arithmetic(self):
        """Test componentwise add and subtract."""
        a = Point2D(1.0, 2.0)
        b = Point2D(0.5, -1.0)

        self.assertEqual(a + b, Point2D(1.5, 1.0))
        self.assertEqual(a - b, Point2D(0.5, 3.0))
        np.testing.assert_array_equal(a.as_array(), [1.0, 2.0])

    def test_point_is_immutable(self):
        """Test points cannot be mutated in place."""
        point = Point2D(1.0, 2.0)

        with self.assertRaises(dataclasses.FrozenInstanceError):
            point.x = 5.0

    def test_pose_properties(self):
        """Test pose accessors."""
        pose = Pose(Point2D(1.0, 2.0), math.pi)

        self.assertEqual(pose.x, 1.0)
        self.assertEqual(pose.y, 2.0)
        self.assertAlmostEqual(pose.heading_degrees, 180.0)
        self.assertTrue(pose.is_finite)
        np.testing.assert_array_equal(pose.state_vector, [1.0, 2.0, math.pi])
        self.assertFalse(Pose(Point2D(0.0, 0.0), float('inf')).is_finite)

    def test_robot_config_validation(self):
        """Test invalid calibration is rejected."""
        RobotConfig(10.0, -2.5).validate()

        for track_width in [0.0, -1.0, float('nan'), float('inf')]:
            with self.assertRaises(ValueError):
                RobotConfig(track_width).validate()

        with self.assertRaises(ValueError):
            RobotConfig(10.0, float('nan')).validate()

    def test_robot_config_from_dict(self):
        """Test building calibration from a mapping."""
        config = RobotConfig.from_dict({"track_width": "12.5"})

        self.assertEqual(config.track_width, 12.5)
        self.assertEqual(config.strafe_distance_per_rotation, 0.0)
        self.assertEqual(RobotConfig.from_dict(config.to_dict()), config)

        with self.assertRaises(ValueError):
            RobotConfig.from_dict({"strafe_distance_per_rotation": 1.0})

class TestEncoders(unittest.TestCase):
    """Test encoder sources and delta tracking."""

    def test_encoder_distance(self):
        """Test tick count is scaled to distance."""
        ticks = [0]
        encoder = Encoder(0.25, lambda: ticks[0])

        ticks[0] = 8
        self.assertEqual(encoder.get_ticks(), 8)
        self.assertEqual(encoder.get_distance(), 2.0)

    def test_simulated_encoder(self):
        """Test simulated encoder accumulates travel."""
        encoder = SimulatedEncoder(1.0)
        encoder.advance(2.5)
        encoder.advance(-0.5)

        self.assertEqual(encoder.get_distance(), 3.0)
        encoder.set_distance(-4.0)
        self.assertEqual(encoder.get_distance(), -4.0)
        self.assertEqual(encoder.read_count, 2)

    def test_delta_is_not_idempotent(self):
        """Test second delta without motion is zero."""
        encoder = SimulatedEncoder()
        tracker = DeltaTracker(encoder)

        encoder.advance(3.0)
        self.assertEqual(tracker.delta(), 3.0)
        self.assertEqual(tracker.delta(), 0.0)
        self.assertEqual(tracker.last_distance, 3.0)

    def test_delta_from_baseline(self):
        """Test first delta is measured from the given baseline."""
        encoder = SimulatedEncoder(10.0)
        tracker = DeltaTracker(encoder, last_distance=7.0)

        self.assertEqual(tracker.delta(), 3.0)

    def test_negative_travel(self):
        """Test reverse motion produces negative deltas."""
        encoder = SimulatedEncoder()
        tracker = DeltaTracker(encoder)

        encoder.advance(-1.5)
        self.assertEqual(tracker.delta(), -1.5)

    def test_rebaseline(self):
        """Test rebaseline discards pending travel."""
        encoder = SimulatedEncoder()
        tracker = DeltaTracker(encoder)

        encoder.advance(5.0)
        tracker.rebaseline()
        encoder.advance(1.0)
        self.assertEqual(tracker.delta(), 1.0)

class TestArcKinematics(unittest.TestCase):
    """Test the per-step displacement model."""

    def test_heading_change_sign(self):
        """Test right wheel farther gives positive (counter-clockwise) change."""
        self.assertGreater(ArcKinematics.heading_change(1.0, 2.0, 10.0), 0)
        self.assertLess(ArcKinematics.heading_change(2.0, 1.0, 10.0), 0)

    def test_straight_branch(self):
        """Test equal deltas give forward travel and no heading change."""
        displacement, d_theta = ArcKinematics.vertical_displacement(4.0, 4.0, 10.0)

        self.assertEqual(displacement, Point2D(0.0, 4.0))
        self.assertEqual(d_theta, 0.0)

    def test_arc_chord_formula(self):
        """Test curved step matches (r, 0) - rotate((r, 0), d_theta)."""
        displacement, d_theta = ArcKinematics.vertical_displacement(5.0, 15.0, 10.0)

        self.assertEqual(d_theta, 1.0)
        r = 10.0
        self.assertAlmostEqual(displacement.x, r - r * math.cos(1.0), places=12)
        self.assertAlmostEqual(displacement.y, -r * math.sin(1.0), places=12)

    def test_strafe_correction(self):
        """Test rotation-induced strafe travel is removed before projection."""
        displacement = ArcKinematics.strafe_displacement(3.0, 0.5, 2.0)

        corrected = 3.0 - 0.5 * 2.0
        self.assertAlmostEqual(displacement.x, math.cos(0.5) * corrected)
        self.assertAlmostEqual(displacement.y, math.sin(0.5) * corrected)

    def test_strafe_without_turn(self):
        """Test pure strafe maps onto the robot x-axis."""
        displacement = ArcKinematics.strafe_displacement(2.0, 0.0, 5.0)

        self.assertEqual(displacement, Point2D(2.0, 0.0))

    def test_robot_centric_displacement(self):
        """Test vertical and strafe contributions are summed."""
        config = RobotConfig(10.0, 1.0)
        combined, d_theta = ArcKinematics.robot_centric_displacement(1.0, 3.0, 0.5, config)

        vertical, _ = ArcKinematics.vertical_displacement(1.0, 3.0, 10.0)
        strafe = ArcKinematics.strafe_displacement(0.5, d_theta, 1.0)
        self.assertEqual(combined, vertical + strafe)
        self.assertAlmostEqual(d_theta, 0.2)

class TestOdometryManager(unittest.TestCase):
    """Test OdometryManager update behaviour."""

    def test_initial_pose(self):
        """Test accessors return the construction pose."""
        manager, _, _, _ = make_manager(location=Point2D(1.0, -2.0), heading=0.3)

        self.assertEqual(manager.get_location(), Point2D(1.0, -2.0))
        self.assertEqual(manager.get_orientation(), 0.3)
        self.assertEqual(manager.get_pose(), Pose(Point2D(1.0, -2.0), 0.3))

    def test_scenario_straight_then_arc(self):
        """Test straight step followed by a 1 rad arc step."""
        manager, left, right, strafe = make_manager(track_width=10.0)

        # Straight line branch
        left.advance(10.0)
        right.advance(10.0)
        manager.update()

        self.assertEqual(manager.get_location(), Point2D(0.0, 10.0))
        self.assertEqual(manager.get_orientation(), 0.0)

        # d = 10, d_theta = 1.0, r = 10
        left.advance(5.0)
        right.advance(15.0)
        manager.update()

        dx1 = 10.0 - 10.0 * math.cos(1.0)
        dy1 = -10.0 * math.sin(1.0)
        # Rotated by the new heading (1.0 rad)
        fx = dx1 * math.cos(1.0) - dy1 * math.sin(1.0)
        fy = dx1 * math.sin(1.0) + dy1 * math.cos(1.0)

        self.assertEqual(manager.get_orientation(), 1.0)
        location = manager.get_location()
        self.assertAlmostEqual(location.x, fx, places=9)
        self.assertAlmostEqual(location.y, 10.0 + fy, places=9)

        # Rotating by the old heading (0 rad) would land elsewhere
        self.assertGreater(abs(location.x - dx1), 1.0)

    def test_straight_line_invariant(self):
        """Test equal deltas keep heading and advance along it."""
        heading = 0.5
        manager, left, right, strafe = make_manager(heading=heading)

        for _ in range(20):
            left.advance(3.0)
            right.advance(3.0)
            manager.update()

        self.assertEqual(manager.get_orientation(), heading)
        location = manager.get_location()
        self.assertAlmostEqual(location.x, -60.0 * math.sin(heading), places=9)
        self.assertAlmostEqual(location.y, 60.0 * math.cos(heading), places=9)

    def test_zero_motion(self):
        """Test zero deltas leave the pose unchanged."""
        manager, _, _, _ = make_manager(location=Point2D(1.5, -2.0), heading=0.3)

        for _ in range(3):
            manager.update()

        self.assertEqual(manager.get_location(), Point2D(1.5, -2.0))
        self.assertEqual(manager.get_orientation(), 0.3)

    def test_pure_rotation_strafe_cancellation(self):
        """Test in-place rotation with matching strafe bias does not translate."""
        track_width = 10.0
        strafe_per_rotation = 3.0
        manager, left, right, strafe = make_manager(track_width, strafe_per_rotation)

        k = 2.0
        d_theta = (k - (-k)) / track_width
        left.advance(-k)
        right.advance(k)
        strafe.advance(d_theta * strafe_per_rotation)
        manager.update()

        location = manager.get_location()
        self.assertAlmostEqual(location.x, 0.0, places=12)
        self.assertAlmostEqual(location.y, 0.0, places=12)
        self.assertAlmostEqual(manager.get_orientation(), 0.4)

    def test_heading_accumulation(self):
        """Test heading is the direct sum of per-step changes."""
        track_width = 8.0
        steps = [(0.5, 1.25), (2.0, 2.0), (3.0, -1.0), (-0.75, 0.25)]
        manager, left, right, strafe = make_manager(track_width, heading=1.0)

        expected = 1.0
        for d1, d2 in steps:
            left.advance(d1)
            right.advance(d2)
            manager.update()
            expected += (d2 - d1) / track_width

        self.assertAlmostEqual(manager.get_orientation(), expected, places=12)

    def test_heading_is_not_wrapped(self):
        """Test heading grows past 2*pi."""
        manager, left, right, _ = make_manager(track_width=1.0)

        for _ in range(4):
            left.advance(-1.0)
            right.advance(1.0)
            manager.update()

        self.assertAlmostEqual(manager.get_orientation(), 8.0)

    def test_each_encoder_read_once_per_update(self):
        """Test every encoder is read exactly once, for both branches."""
        manager, left, right, strafe = make_manager()

        manager.update()               # straight branch
        right.advance(1.0)
        manager.update()               # arc branch

        for encoder in (left, right, strafe):
            self.assertEqual(encoder.read_count, 2)

    def test_pure_strafe(self):
        """Test strafe-only travel moves along the rotated robot x-axis."""
        manager, _, _, strafe = make_manager(heading=math.pi / 2)

        strafe.advance(2.0)
        manager.update()

        location = manager.get_location()
        self.assertAlmostEqual(location.x, 0.0, places=12)
        self.assertAlmostEqual(location.y, 2.0, places=12)

    def test_snapshot_is_not_live(self):
        """Test returned pose is unaffected by later updates."""
        manager, left, right, _ = make_manager()
        before = manager.get_location()

        left.advance(1.0)
        right.advance(1.0)
        manager.update()

        self.assertEqual(before, Point2D(0.0, 0.0))
        self.assertNotEqual(manager.get_location(), before)

    def test_nan_reading_propagates(self):
        """Test malformed readings corrupt the pose without raising."""
        manager, left, _, _ = make_manager()

        left.set_distance(float('nan'))
        manager.update()

        self.assertFalse(manager.get_pose().is_finite)

    def test_negative_track_width_not_validated(self):
        """Test the estimator accepts a sign-inverted track width."""
        manager, left, right, _ = make_manager(track_width=-10.0)

        right.advance(1.0)
        manager.update()

        self.assertAlmostEqual(manager.get_orientation(), -0.1)

    def test_from_config(self):
        """Test construction from RobotConfig and Pose."""
        left, right, strafe = SimulatedEncoder(), SimulatedEncoder(), SimulatedEncoder()
        config = RobotConfig(12.0, 1.5)
        manager = OdometryManager.from_config(left, right, strafe, config,
                                              Pose(Point2D(2.0, 3.0), 0.25))

        self.assertEqual(manager.config, config)
        self.assertEqual(manager.get_pose(), Pose(Point2D(2.0, 3.0), 0.25))

    def test_statistics(self):
        """Test update counters and traveled distance."""
        manager, left, right, _ = make_manager()

        left.advance(3.0)
        right.advance(3.0)
        manager.update()
        right.advance(1.0)
        manager.update()

        stats = manager.get_statistics()
        self.assertEqual(stats['updates'], 2)
        self.assertEqual(stats['straight_updates'], 1)
        self.assertEqual(stats['arc_updates'], 1)
        self.assertGreater(stats['distance_traveled'], 3.0)
        self.assertAlmostEqual(stats['heading_change'], 0.1)

    def test_reset(self):
        """Test reset overwrites pose and keeps encoder baselines."""
        manager, left, right, _ = make_manager()

        left.advance(5.0)
        right.advance(5.0)
        manager.update()
        manager.reset(Point2D(10.0, 10.0), 0.0)

        self.assertEqual(manager.get_pose(), Pose(Point2D(10.0, 10.0), 0.0))
        self.assertEqual(manager.get_statistics()['updates'], 0)

        # Baselines kept: no catch-up travel after reset
        manager.update()
        self.assertEqual(manager.get_location(), Point2D(10.0, 10.0))

    def test_reset_by_keyword(self):
        """Test reset takes the same heading keyword as construction."""
        manager, _, _, _ = make_manager()

        manager.reset(location=Point2D(1.0, 2.0), heading=0.75)

        self.assertEqual(manager.get_pose(), Pose(Point2D(1.0, 2.0), 0.75))

    def test_zero_track_width_corrupts_pose(self):
        """Test a zero track width yields a non-finite pose without raising."""
        manager, _, right, _ = make_manager(track_width=0.0)

        right.advance(1.0)
        manager.update()

        self.assertFalse(manager.get_pose().is_finite)
        self.assertTrue(math.isinf(manager.get_orientation()))
        self.assertEqual(manager.right.last_distance, 1.0)
        self.assertEqual(manager.get_statistics()['updates'], 1)

    def test_underflowing_heading_change_corrupts_pose(self):
        """Test unequal deltas whose heading change rounds to zero do not raise."""
        manager, _, right, _ = make_manager(track_width=10.0)

        right.advance(5e-324)
        manager.update()

        self.assertEqual(manager.get_orientation(), 0.0)
        self.assertFalse(manager.get_pose().is_finite)

        # Counted with the branch the kinematics took, not by d_theta
        stats = manager.get_statistics()
        self.assertEqual(stats['arc_updates'], 1)
        self.assertEqual(stats['straight_updates'], 0)

    def test_straight_branch_predicate(self):
        """Test only exactly equal deltas take the straight branch."""
        self.assertTrue(ArcKinematics.is_straight(2.5, 2.5))
        self.assertFalse(ArcKinematics.is_straight(0.1 + 0.2, 0.3))
        self.assertTrue(ArcKinematics.is_straight(0.0, -0.0))

if __name__ == '__main__':
    unittest.main()
