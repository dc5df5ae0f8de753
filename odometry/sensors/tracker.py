"""
Per-encoder delta tracking.
"""

from .encoder import EncoderSource

class DeltaTracker:
    """
    Converts cumulative encoder readings into incremental distances.

    Each call to ``delta()`` reads the source once and moves the baseline to
    that reading, so a second call without intervening motion returns zero.
    """

    def __init__(self, source: EncoderSource, last_distance: float = 0.0):
        """
        Initialize tracker.

        Args:
            source: Encoder source exposing get_distance()
            last_distance: Baseline reading the first delta is measured from
        """
        self.source = source
        self._last_distance = last_distance

    @property
    def last_distance(self) -> float:
        """Last observed cumulative distance."""
        return self._last_distance

    def delta(self) -> float:
        """
        Distance traveled since the previous call.

        Returns:
            Current reading minus the previous baseline
        """
        distance = self.source.get_distance()
        delta = distance - self._last_distance
        self._last_distance = distance
        return delta

    def rebaseline(self):
        """Move the baseline to the current reading, discarding pending travel."""
        self._last_distance = self.source.get_distance()
