"""
Mathematical constants and defaults for odometry.
"""

import math

# Conversion factors
RAD_TO_DEG = 180.0 / math.pi

# Default loop rates
DEFAULT_UPDATE_RATE_HZ = 100.0   # Odometry update rate
DEFAULT_OUTPUT_RATE_HZ = 1.0     # Status output rate
