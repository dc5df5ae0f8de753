"""
Hardware drivers for Raspberry Pi platform.
"""

from .encoder_driver import EncoderCounterDriver

__all__ = ["EncoderCounterDriver"]
