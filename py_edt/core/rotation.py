"""
Cyclic axis rotation of a feature map.

Every Voronoi pass works on the leading axis only. After a pass the axes are
rotated (axis 1 becomes last, axis 2 becomes the new leading axis) so the
next pass can do the same. The data is physically moved into a new
C-contiguous array, and every stored index is re-encoded for the rotated
shape, since indices refer to positions in the grid they live in.
"""

from typing import Tuple

import numpy as np
import structlog

from .metrics import SENTINEL, compute_strides

logger = structlog.get_logger()


def rotate_axes(features: np.ndarray) -> Tuple[np.ndarray, Tuple[int, ...]]:
    """
    Rotate the axis order of a feature map by one step.

    For each live index: decode under the old shape, move the leading
    coordinate to the end, encode under the new strides. Sentinels are left
    untouched. Applying this N times to an N-axis map restores the input.

    Args:
        features: int64 feature map

    Returns:
        Tuple of (rotated feature map, stride vector of the rotated map)
    """
    old_shape = features.shape
    rotated = np.moveaxis(features, 0, -1).copy(order="C")
    new_shape = rotated.shape
    strides = compute_strides(new_shape)

    if features.ndim < 2:
        return rotated, strides

    flat = rotated.reshape(-1)
    live = flat != SENTINEL
    if np.any(live):
        coords = np.unravel_index(flat[live] - 1, old_shape)
        shifted = coords[1:] + coords[:1]
        flat[live] = np.ravel_multi_index(shifted, new_shape) + 1

    logger.debug("Rotated feature map", old_shape=old_shape, new_shape=new_shape,
                 live=int(np.count_nonzero(live)))

    return rotated, strides
