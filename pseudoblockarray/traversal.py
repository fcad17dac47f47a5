"""
Dimension-generic traversal of rectangular regions

A region of an n-dimensional array is described by one `range` per axis. Rather
than nesting one loop per dimension, a region is traversed by iterating a flat
offset over the region volume and decomposing it into per-axis offsets
(a mixed-radix decomposition with the region extents as the radices). The
traversal order is C order; the last axis varies fastest.
"""

from typing import Iterator, Tuple
import math

from .errors import ShapeMismatchError
from .typing import Shape, Ranges


def unravel_offset(offset: int, extents: Shape) -> Tuple[int, ...]:
    """
    Return per-axis offsets from a flat offset into a region

    Parameters
    ----------
    offset :
        The flat offset, in `[0, prod(extents))`
    extents :
        The size of the region along each axis

    Returns
    -------
    Tuple[int, ...]
        The offset along each axis
    """
    ret = [0]*len(extents)
    for dim in range(len(extents)-1, -1, -1):
        offset, ret[dim] = divmod(offset, extents[dim])
    return tuple(ret)

def iter_offsets(extents: Shape) -> Iterator[Tuple[int, ...]]:
    """
    Return an iterator over all per-axis offsets of a region in C order
    """
    for offset in range(math.prod(extents)):
        yield unravel_offset(offset, extents)

def region_shape(ranges: Ranges) -> Shape:
    """Return the shape of a region"""
    return tuple(len(axis_range) for axis_range in ranges)

def region_slices(ranges: Ranges) -> Tuple[slice, ...]:
    """Return a tuple of slices selecting a region"""
    return tuple(slice(axis_range.start, axis_range.stop) for axis_range in ranges)

def full_ranges(shape: Shape) -> Ranges:
    """Return the region covering a whole array of the given shape"""
    return tuple(range(size) for size in shape)

def shift(starts: Tuple[int, ...], offset: Tuple[int, ...]) -> Tuple[int, ...]:
    """Return `starts + offset` element-wise"""
    return tuple(a + b for a, b in zip(starts, offset))

def copy_region(src, src_ranges: Ranges, dst, dst_ranges: Ranges):
    """
    Copy a region of one storage into a region of another

    Both regions must have the same shape, otherwise `ShapeMismatchError` is
    raised before anything is copied. If both storages support slicing, the
    copy is a single sliced assignment. Otherwise every element is visited
    exactly once, in the same order for both regions.

    Parameters
    ----------
    src, dst : storage.GenericStorage
        The source and destination storage
    src_ranges, dst_ranges :
        The regions to copy from and to
    """
    extents = region_shape(src_ranges)
    dst_extents = region_shape(dst_ranges)
    if extents != dst_extents:
        raise ShapeMismatchError(
            dst_extents, extents,
            f"can't copy region with shape {extents} into region with shape {dst_extents}"
        )

    if src.supports_slicing and dst.supports_slicing:
        dst[region_slices(dst_ranges)] = src[region_slices(src_ranges)]
    else:
        src_starts = tuple(axis_range.start for axis_range in src_ranges)
        dst_starts = tuple(axis_range.start for axis_range in dst_ranges)
        for offset in iter_offsets(extents):
            dst[shift(dst_starts, offset)] = src[shift(src_starts, offset)]
