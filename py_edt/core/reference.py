"""
Brute-force nearest-feature search.

Compares every voxel against every foreground voxel, O(voxels * foreground).
Only meant for small grids, e.g. to check ``transform`` results.
"""

import numpy as np
from scipy.spatial.distance import cdist

from .transform import DistanceMode, FeatureTransform, validate_grid

CHUNK_SIZE = 1024


def brute_force_transform(grid, distance_mode=DistanceMode.SQUARED) -> FeatureTransform:
    """
    Feature and distance transform by exhaustive search.

    Ties between equally distant features go to the lowest index.

    Args:
        grid: N-dimensional boolean array
        distance_mode: ``"squared"`` or ``"euclidean"``

    Returns:
        FeatureTransform shaped like ``grid``
    """
    mode = DistanceMode(distance_mode)
    grid = validate_grid(grid)

    positions = np.indices(grid.shape).reshape(grid.ndim, -1).T
    foreground = np.flatnonzero(grid)
    targets = positions[foreground]

    features = np.empty(grid.size, dtype=np.int64)
    distances = np.empty(grid.size, dtype=np.int64)

    # Bound the size of the pairwise distance matrix
    for start in range(0, grid.size, CHUNK_SIZE):
        stop = min(start + CHUNK_SIZE, grid.size)
        squared = cdist(positions[start:stop], targets, metric="sqeuclidean")
        nearest = np.argmin(squared, axis=1)

        features[start:stop] = foreground[nearest] + 1
        distances[start:stop] = np.rint(squared[np.arange(stop - start), nearest])

    features = features.reshape(grid.shape)
    distances = distances.reshape(grid.shape)

    if mode is DistanceMode.EUCLIDEAN:
        distances = np.sqrt(distances)

    return FeatureTransform(features, distances)
