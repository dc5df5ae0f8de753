"""
Planar point/vector type shared by the math and estimator layers.
"""

import math
import numpy as np
from dataclasses import dataclass

@dataclass(frozen=True)
class Point2D:
    """
    Immutable (x, y) pair in the same linear units as encoder distances.
    
    Used both for field positions and for displacement vectors.
    """
    
    x: float = 0.0
    y: float = 0.0
    
    def __add__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x + other.x, self.y + other.y)
    
    def __sub__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x - other.x, self.y - other.y)
    
    @property
    def is_finite(self) -> bool:
        """True when both coordinates are finite."""
        return math.isfinite(self.x) and math.isfinite(self.y)
    
    @property
    def norm(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)
    
    def as_array(self) -> np.ndarray:
        """Get point as [x, y] numpy vector."""
        return np.array([self.x, self.y])
    
    def __str__(self) -> str:
        return f"({self.x:.3f}, {self.y:.3f})"
