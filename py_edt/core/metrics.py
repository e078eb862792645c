"""
Index arithmetic and distances between encoded voxel positions.

Positions are 0-based coordinate tuples. An index packs a position into a
single integer using a per-axis stride vector:

    index = 1 + sum(position[i] * stride[i])

so that 0 stays free as the "unresolved" sentinel. Strides are C-order
element strides, which makes the index of a voxel equal to its flat offset
plus one.
"""

import math
from typing import Sequence, Tuple

# Reserved index for voxels whose nearest feature is not known yet
SENTINEL = 0


def compute_strides(shape: Sequence[int]) -> Tuple[int, ...]:
    """
    Compute C-order element strides for a grid shape.

    Matches ``array.strides // array.itemsize`` of a C-contiguous numpy array.

    Args:
        shape: Grid shape

    Returns:
        Stride of each axis, in elements
    """
    strides = []
    step = 1
    for extent in reversed(shape):
        strides.append(step)
        step *= extent
    return tuple(reversed(strides))


def encode_strided(position: Sequence[int], strides: Sequence[int]) -> int:
    """Encode a position with a precomputed stride vector."""
    index = 1
    for coord, stride in zip(position, strides):
        index += coord * stride
    return index


def encode(position: Sequence[int], shape: Sequence[int]) -> int:
    """
    Encode a 0-based position into an index (never the sentinel).

    Args:
        position: Coordinate tuple, one entry per axis
        shape: Grid shape the position lives in

    Returns:
        Index >= 1
    """
    return encode_strided(position, compute_strides(shape))


def decode(index: int, shape: Sequence[int]) -> Tuple[int, ...]:
    """
    Decode an index back into its 0-based position.

    Inverse of ``encode`` for the same shape. The sentinel has no position.
    """
    if index == SENTINEL:
        raise ValueError("Cannot decode the unresolved sentinel index")

    offset = index - 1
    position = []
    for extent in reversed(shape):
        offset, coord = divmod(offset, extent)
        position.append(coord)
    return tuple(reversed(position))


def circular_shift(position: Sequence[int]) -> Tuple[int, ...]:
    """Move the leading coordinate to the end: (p1, p2, ..., pN) -> (p2, ..., pN, p1)."""
    return tuple(position[1:]) + (position[0],)


def squared_distance(a: int, b: int, shape: Sequence[int]) -> int:
    """Squared Euclidean distance between two indices."""
    total = 0
    for ca, cb in zip(decode(a, shape), decode(b, shape)):
        total += (ca - cb) ** 2
    return total


def distance(a: int, b: int, shape: Sequence[int]) -> float:
    """Euclidean distance between two indices."""
    return math.sqrt(squared_distance(a, b, shape))


def distance2(u: int, r: Sequence[int], shape: Sequence[int]) -> int:
    """
    Squared distance from feature ``u`` to a column line.

    A column varies only the leading axis, so it is identified by its
    coordinates on the remaining axes ``r``. For 2-D grids this is the
    squared difference between u's second-axis coordinate and ``r[0]``.

    Args:
        u: Feature index
        r: Column coordinates on axes 1..N-1
        shape: Grid shape

    Returns:
        Sum of squared differences over the non-leading axes
    """
    position = decode(u, shape)
    total = 0
    for coord, fixed in zip(position[1:], r):
        total += (coord - fixed) ** 2
    return total
