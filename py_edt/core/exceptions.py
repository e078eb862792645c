"""Errors raised by the distance and feature transform."""


class TransformError(Exception):
    """Base class for all transform errors."""


class InvalidGridError(TransformError, ValueError):
    """The input is not a usable N-dimensional boolean grid."""


class EmptyGridError(TransformError, ValueError):
    """The grid has no foreground voxel, so no voxel has a nearest feature."""
