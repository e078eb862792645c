"""
Partial Voronoi diagram along the leading axis.

Implements the per-dimension step of Maurer et al. (2003), "A Linear Time
Algorithm for Computing Exact Euclidean Distance Transforms of Binary Images
in Arbitrary Dimensions".

The feature map is processed column by column, a column being the 1-D slice
that varies only the leading axis. Each column is swept twice:

1. Build a stack of candidate features, dropping any feature whose
   parabola is hidden by its neighbours for every row of the column.
2. Walk the rows in order with a pointer into the surviving candidates.
   The nearest candidate only moves forward as the row increases, so the
   pointer never resets.

Both sweeps are linear in the column length, so a pass is linear in the
number of voxels. The sweeps are numba kernels over the flat feature map;
each candidate is decoded once, when it is pushed, and its leading
coordinate and squared distance to the column line are kept beside it.
"""

from typing import Optional, Sequence

import numba as nb
import numpy as np
import structlog

from .metrics import SENTINEL, compute_strides, decode, distance2

logger = structlog.get_logger()


@nb.njit(cache=True, nogil=True)
def hidden(u1, du, v1, dv, w1, dw):
    """
    Separating-parabola test on decoded candidates.

    ``*1`` are leading-axis coordinates in increasing order, ``d*`` squared
    distances to the column line. True when the middle candidate ``v`` is
    never strictly nearest for any row of the column.
    """
    a = v1 - u1
    b = w1 - v1
    c = a + b
    return c * dv - b * du - a * dw - a * b * c > 0


@nb.njit(cache=True, nogil=True)
def line_distance2(index, base, shape, strides):
    """Squared distance from ``index`` to the column through flat offset ``base``."""
    total = 0
    for axis in range(1, shape.size):
        coord = ((index - 1) // strides[axis]) % shape[axis]
        fixed = (base // strides[axis]) % shape[axis]
        diff = coord - fixed
        total += diff * diff
    return total


@nb.njit(cache=True, nogil=True)
def build_candidates(flat, base, shape, strides, stack, lead, height):
    """
    Fill ``stack`` with the surviving candidates of the column at ``base``.

    ``lead`` and ``height`` receive each candidate's leading coordinate and
    squared distance to the column line.

    Returns:
        Number of candidates on the stack
    """
    step = strides[0]
    count = 0
    for row in range(shape[0]):
        f = flat[base + row * step]
        if f == SENTINEL:
            continue
        f1 = (f - 1) // step
        fd = line_distance2(f, base, shape, strides)
        while count >= 2 and hidden(lead[count - 2], height[count - 2],
                                    lead[count - 1], height[count - 1], f1, fd):
            count -= 1
        stack[count] = f
        lead[count] = f1
        height[count] = fd
        count += 1
    return count


@nb.njit(cache=True, nogil=True)
def assign_rows(flat, base, shape, strides, stack, lead, height, count):
    """Write the nearest of ``count`` candidates into every row of the column."""
    step = strides[0]
    current = 0
    for row in range(shape[0]):
        # Squared distances order the same way as true distances
        while current < count - 1:
            here = row - lead[current]
            there = row - lead[current + 1]
            if here * here + height[current] > there * there + height[current + 1]:
                current += 1
            else:
                break
        flat[base + row * step] = stack[current]


@nb.njit(cache=True, nogil=True)
def sweep_columns(flat, shape, strides, stack, lead, height):
    """Run both sweeps over every column; returns the number of resolved columns."""
    resolved = 0
    for base in range(strides[0]):
        count = build_candidates(flat, base, shape, strides, stack, lead, height)
        if count == 0:
            continue
        assign_rows(flat, base, shape, strides, stack, lead, height, count)
        resolved += 1
    return resolved


def remove_feature(u: int, v: int, w: int, r: Sequence[int], shape: Sequence[int]) -> bool:
    """
    Check whether feature ``v`` can be dropped from the column's diagram.

    ``u``, ``v`` and ``w`` are consecutive candidates in increasing
    leading-axis order. ``v`` is never the nearest of the three for any row
    of the column ``r`` when the separating-parabola test holds.

    Args:
        u: Second-to-top candidate on the stack
        v: Top candidate on the stack
        w: Incoming feature
        r: Column coordinates on axes 1..N-1
        shape: Shape of the (rotated) feature map

    Returns:
        True if ``v`` should be removed
    """
    return bool(hidden(decode(u, shape)[0], distance2(u, r, shape),
                       decode(v, shape)[0], distance2(v, r, shape),
                       decode(w, shape)[0], distance2(w, r, shape)))


def voronoi_pass(features: np.ndarray, stack: np.ndarray,
                 strides: Optional[Sequence[int]] = None) -> int:
    """
    Run one dimensional pass over the leading axis of ``features`` in place.

    Columns with no resolved feature keep their sentinels; a later pass
    may still resolve them.

    Args:
        features: C-contiguous int64 feature map
        stack: int64 scratch buffer shared by all columns, at least
            ``features.shape[0] + 1`` long
        strides: Stride vector of ``features``, computed from its shape if
            not given

    Returns:
        Number of columns that had at least one candidate
    """
    if not features.flags.c_contiguous:
        raise ValueError("Feature map must be C-contiguous")

    shape = features.shape
    expected = compute_strides(shape)
    if strides is None:
        strides = expected
    elif tuple(strides) != expected:
        raise ValueError(f"Strides {tuple(strides)} do not match shape {shape}")

    length = shape[0]
    if stack.size < length + 1:
        raise ValueError(
            f"Scratch buffer holds {stack.size} entries, column needs {length + 1}"
        )
    if features.size == 0:
        return 0

    lead = np.empty(length + 1, dtype=np.int64)
    height = np.empty(length + 1, dtype=np.int64)

    resolved = sweep_columns(features.reshape(-1), np.asarray(shape, dtype=np.int64),
                             np.asarray(strides, dtype=np.int64), stack, lead, height)

    logger.debug("Voronoi pass complete", shape=shape, columns=expected[0],
                 resolved=int(resolved))

    return int(resolved)
