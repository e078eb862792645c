"""
Core distance and feature transform functionality.
"""

from .exceptions import TransformError, InvalidGridError, EmptyGridError
from .metrics import SENTINEL, encode, decode, squared_distance, distance
from .transform import DistanceMode, FeatureTransform, transform, edt, feature_indices
from .reference import brute_force_transform

__all__ = ['TransformError', 'InvalidGridError', 'EmptyGridError',
           'SENTINEL', 'encode', 'decode', 'squared_distance', 'distance',
           'DistanceMode', 'FeatureTransform', 'transform', 'edt', 'feature_indices',
           'brute_force_transform']
