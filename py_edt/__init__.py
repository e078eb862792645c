"""
py-edt - exact Euclidean distance and feature transforms of N-dimensional
binary grids (Maurer et al., 2003).
"""

__version__ = "0.1.0"

from .config import settings
from .core import (
    TransformError, InvalidGridError, EmptyGridError,
    DistanceMode, FeatureTransform, transform, edt, feature_indices,
    brute_force_transform,
)
from .utils.logging import configure_logging

__all__ = ['settings', 'configure_logging',
           'TransformError', 'InvalidGridError', 'EmptyGridError',
           'DistanceMode', 'FeatureTransform', 'transform', 'edt', 'feature_indices',
           'brute_force_transform']
