"""
Encoder channels for dead-wheel odometry.

Any object with a ``get_distance()`` method returning the cumulative distance
traveled can feed the estimator. Two implementations are provided here: a
tick-counting ``Encoder`` for real hardware and a ``SimulatedEncoder`` for
tests, replay and examples.
"""

from typing import Callable, Protocol

class EncoderSource(Protocol):
    """Cumulative distance source consumed by the estimator."""

    def get_distance(self) -> float:
        ...

class Encoder:
    """
    Rotary encoder that converts a raw tick count into distance.

    The tick count comes from a hardware-specific reader (see the platform
    drivers); the sign convention of that reader must match the track width
    and strafe calibration of the robot.
    """

    def __init__(self, distance_per_tick: float, read_ticks: Callable[[], float]):
        """
        Initialize encoder.

        Args:
            distance_per_tick: Distance (in your choice of units) per tick
            read_ticks: Zero-argument callable returning the current tick count
        """
        self.distance_per_tick = distance_per_tick
        self._read_ticks = read_ticks

    def get_ticks(self) -> float:
        """Get current tick count."""
        return self._read_ticks()

    def get_distance(self) -> float:
        """Get cumulative distance traveled."""
        return self.get_ticks() * self.distance_per_tick

class SimulatedEncoder:
    """In-memory encoder whose cumulative distance is set by the caller."""

    def __init__(self, distance: float = 0.0):
        self.distance = distance
        self.read_count = 0

    def advance(self, delta: float):
        """Add travel to the cumulative distance."""
        self.distance += delta

    def set_distance(self, distance: float):
        """Overwrite the cumulative distance (e.g. from a replayed log)."""
        self.distance = distance

    def get_distance(self) -> float:
        self.read_count += 1
        return self.distance
