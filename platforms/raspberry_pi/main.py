#!/usr/bin/env python3
"""
Three-Wheel Odometry Application for Raspberry Pi
Hardware: three I2C quadrature counters (left, right, strafe dead wheels)
"""

import sys
import os
import csv
import time
import threading
import signal
from typing import Any, Optional

# Add core modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from odometry.estimator import OdometryManager
from odometry.math import radians_to_degrees
from hardware.encoder_driver import EncoderCounterDriver
from config import Config

class OdometrySystem:
    """Main odometry system for Raspberry Pi."""

    CSV_HEADER = ["time_s", "left", "right", "strafe", "x", "y", "heading"]

    def __init__(self, config_file: str = "config.json", bus: Optional[Any] = None):
        """
        Initialize the odometry system.

        Args:
            config_file: Path to configuration file
            bus: Already open I2C bus shared by all counters (opened per
                driver when omitted)

        Raises:
            ValueError: If the robot calibration in the config is invalid
        """

        # Load configuration
        self.config = Config(config_file)
        self.robot_config = self.config.robot_config()

        # Initialize hardware drivers
        self.drivers = {
            name: EncoderCounterDriver(
                i2c_address=settings["i2c_address"],
                i2c_bus=self.config.i2c_bus,
                invert=settings.get("invert", False),
                bus=bus
            )
            for name, settings in self.config.encoders.items()
        }
        self.encoders = {
            name: self.drivers[name].as_encoder(settings["distance_per_tick"])
            for name, settings in self.config.encoders.items()
        }

        # Initialize estimator
        self.odometry = OdometryManager.from_config(
            self.encoders["left"],
            self.encoders["right"],
            self.encoders["strafe"],
            self.robot_config,
            initial_pose=self.config.initial_pose_value()
        )

        # The estimator is not thread-safe; every access goes through this lock
        self.lock = threading.Lock()

        # Threading control
        self.running = False
        self.update_thread = None
        self.output_thread = None

        # Data logging
        self.log_handle = None
        self.log_writer = None

        # Statistics
        self.start_time = time.time()
        self.loop_errors = 0

        # Setup signal handlers
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        print("Odometry System initialized")
        print(f"Encoders: I2C bus {self.config.i2c_bus}, addresses " +
              ", ".join(f"{name}=0x{driver.i2c_address:02X}"
                        for name, driver in self.drivers.items()))
        print(f"Track width: {self.robot_config.track_width}, "
              f"strafe per rotation: {self.robot_config.strafe_distance_per_rotation}")

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        print("\nShutdown signal received, stopping system...")
        self.stop()
        sys.exit(0)

    def start(self) -> bool:
        """Start the odometry system."""
        if self.running:
            print("System already running")
            return True

        print("Starting odometry system...")

        # Initialize hardware
        for name, driver in self.drivers.items():
            if not driver.initialize():
                print(f"ERROR: Failed to initialize {name} encoder")
                return False

        if self.config.enable_logging:
            self._open_log()

        self.running = True

        # Start threads
        self.update_thread = threading.Thread(target=self._update_loop, daemon=True)
        self.output_thread = threading.Thread(target=self._output_loop, daemon=True)

        self.update_thread.start()
        self.output_thread.start()

        print("Odometry system started successfully")
        return True

    def stop(self):
        """Stop the odometry system."""
        if not self.running:
            return

        print("Stopping odometry system...")

        self.running = False

        # Wait for threads to finish
        if self.update_thread and self.update_thread.is_alive():
            self.update_thread.join(timeout=2.0)

        if self.output_thread and self.output_thread.is_alive():
            self.output_thread.join(timeout=2.0)

        # Cleanup hardware
        for driver in self.drivers.values():
            driver.cleanup()

        self._close_log()

        print("Odometry system stopped")

    def _open_log(self):
        """Open the CSV log; one file holds one session, counters start at zero."""
        log_file = self.config.log_file

        self.log_handle = open(log_file, 'w', newline='')
        self.log_writer = csv.writer(self.log_handle)
        self.log_writer.writerow(self.CSV_HEADER)

        print(f"Logging encoder readings to {log_file}")

    def _close_log(self):
        """Close the CSV log if one is open."""
        if self.log_handle:
            self.log_handle.close()
            self.log_handle = None
            self.log_writer = None

    def _update_step(self, timestamp: float):
        """Run one estimator update and log the readings behind it."""
        with self.lock:
            self.odometry.update()
            pose = self.odometry.get_pose()

        if self.log_writer:
            self.log_writer.writerow([
                f"{timestamp - self.start_time:.4f}",
                self.odometry.left.last_distance,
                self.odometry.right.last_distance,
                self.odometry.strafe.last_distance,
                pose.x, pose.y, pose.heading
            ])

        if not pose.is_finite:
            print(f"WARNING: Non-finite pose {pose}")

    def _update_loop(self):
        """Odometry update loop."""
        period = 1.0 / self.config.update_rate_hz

        while self.running:
            loop_start = time.time()
            try:
                self._update_step(loop_start)

                # Sleep for the remainder of the period
                time.sleep(max(0.0, period - (time.time() - loop_start)))

            except Exception as e:
                self.loop_errors += 1
                print(f"Update loop error: {e}")
                time.sleep(0.1)

    def _output_loop(self):
        """Status output loop."""
        last_output_time = time.time()
        output_interval = 1.0 / self.config.output_rate_hz

        while self.running:
            try:
                current_time = time.time()

                if current_time - last_output_time >= output_interval:
                    self._print_status()
                    last_output_time = current_time

                time.sleep(0.1)

            except Exception as e:
                print(f"Output loop error: {e}")
                time.sleep(1.0)

    def _print_status(self):
        """Print current system status."""
        uptime = time.time() - self.start_time

        with self.lock:
            pose = self.odometry.get_pose()
            stats = self.odometry.get_statistics()

        read_errors = sum(driver.error_count for driver in self.drivers.values())

        print(f"\n=== Odometry Status (Uptime: {uptime:.1f}s) ===")
        print(f"Position: [{pose.x:.3f}, {pose.y:.3f}]")
        print(f"Heading:  {pose.heading:.3f} rad ({radians_to_degrees(pose.heading):.1f}°)")
        print(f"Updates: {stats['updates']} "
              f"({stats['straight_updates']} straight, {stats['arc_updates']} arc), "
              f"Distance: {stats['distance_traveled']:.3f}")
        print(f"Errors: {read_errors} encoder reads, {self.loop_errors} loop")

    def get_current_position(self) -> dict:
        """Get current position for external API."""
        with self.lock:
            pose = self.odometry.get_pose()

        return {
            'timestamp': time.time(),
            'position': {'x': pose.x, 'y': pose.y},
            'heading': {'radians': pose.heading, 'degrees': radians_to_degrees(pose.heading)}
        }

def main(config_file: Optional[str] = None):
    """Main entry point."""
    print("Three-Wheel Odometry for Raspberry Pi")
    print("Hardware: 3x I2C quadrature counter")
    print("=" * 50)

    # Create and start system
    try:
        odometry_system = OdometrySystem(config_file or "config.json")
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    odometry_system.config.print_config()

    if not odometry_system.start():
        print("Failed to start system")
        return 1

    try:
        # Keep main thread alive
        while odometry_system.running:
            time.sleep(1.0)

    except KeyboardInterrupt:
        print("\nKeyboard interrupt received")

    finally:
        odometry_system.stop()

    return 0

if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
