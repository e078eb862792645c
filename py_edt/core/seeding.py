"""Initial feature map: every foreground voxel is its own nearest feature."""

import numpy as np

from .metrics import SENTINEL


def compute_initial_features(grid: np.ndarray) -> np.ndarray:
    """
    Seed the feature map from a boolean grid.

    Foreground voxels receive their own index, background voxels the
    sentinel. This is F_0 in Maurer et al. (2003).

    Args:
        grid: N-dimensional boolean array

    Returns:
        C-contiguous int64 array with the same shape as ``grid``
    """
    features = np.full(grid.shape, SENTINEL, dtype=np.int64)
    flat = features.reshape(-1)

    # Index of a voxel is its C-order flat offset plus one
    foreground = np.flatnonzero(grid)
    flat[foreground] = foreground + 1

    return features
