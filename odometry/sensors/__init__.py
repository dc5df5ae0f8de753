"""
Encoder data sources and delta tracking.
"""

from .encoder import EncoderSource, Encoder, SimulatedEncoder
from .tracker import DeltaTracker

__all__ = ["EncoderSource", "Encoder", "SimulatedEncoder", "DeltaTracker"]
