"""
Index validation and conversion for blocks and elements

Blocks along an axis can be selected with integer indices or, if the axis has
labels, with string labels. Elements are always selected with integer indices.
Unlike `numpy`, negative indices are not wrapped around; they are out of range.
"""

from typing import Tuple
from itertools import chain
import operator

from .errors import (
    BlockIndexError,
    BlockLabelError,
    BlockCoordLengthError,
    BoundsCheckError,
    IndexLengthError
)
from .typing import (
    T,
    NestedList,
    Shape,
    MultiLabels,
    GenIndex,
    StdIndex,
    GenBlockCoord,
    StdBlockCoord,
    MultiStdIndex,
    LabelToStdIndex,
    MultiLabelToStdIndex
)

def nested_shape(array: NestedList[T]) -> Shape:
    """
    Return the shape of a nested list

    Parameters
    ----------
    array :
        A nested list, where every nesting level has sub-lists of equal length

    Returns
    -------
    shape :
        The shape of the nested list

    Raises
    ------
    ValueError
        If the list is improperly nested (ragged)
    """
    def check_is_nested(array):
        """
        Check whether an array is nested
        """
        # Checks whether each element of an array is another array
        is_array = [isinstance(elem, list) for elem in array]
        is_array_count = is_array.count(True)
        if is_array_count == len(is_array) and len(is_array) > 0:
            if not all([len(elem) == len(array[0]) for elem in array]):
                raise ValueError("Improperly nested array")
            return True
        elif is_array_count == 0:
            return False
        else:
            raise ValueError("Improperly nested array")

    flat_array = array
    shape = (len(flat_array),)
    while check_is_nested(flat_array):
        shape += (len(flat_array[0]),)
        flat_array = [elem for elem in chain(*flat_array)]

    return shape

def validate_labels(labels: MultiLabels, nblocks: Shape):
    """
    Validate if block labels and the number of blocks are compatible

    This checks that for each axis:
        - There is one label for each block
        - there are no duplicate labels
        - or, there are no labels

    Parameters
    ----------
    labels :
        The block labels for each axis
    nblocks :
        The number of blocks along each axis

    Raises
    ------
    ValueError
        Raises `ValueError` if `labels` and `nblocks` are not compatible
    """
    if len(labels) != len(nblocks):
        raise ValueError(f"{len(labels)} axis labels is incompatible for array with {len(nblocks)} dimensions")

    for dim, (axis_labels, axis_nblocks) in enumerate(zip(labels, nblocks)):
        if len(axis_labels) != 0:
            if len(axis_labels) != axis_nblocks:
                raise ValueError(f"Invalid {len(axis_labels)} axis labels for axis {dim} with {axis_nblocks} blocks")

            if not all(isinstance(label, str) for label in axis_labels):
                raise ValueError(f"Invalid non-string labels for axis {dim} with labels {axis_labels}")

            if len(set(axis_labels)) != len(axis_labels):
                raise ValueError(f"Invalid duplicate labels for axis {dim} with labels {axis_labels}")

def make_label_to_idx(labels: MultiLabels) -> MultiLabelToStdIndex:
    """
    Return a mapping from label to block index for each axis
    """
    return tuple(
        {label: ii for ii, label in enumerate(axis_labels)}
        for axis_labels in labels
    )

def conv_gen_to_std_idx(
        idx: GenIndex,
        label_to_idx: LabelToStdIndex,
        nblocks: int,
        dim: int = 0
    ) -> StdIndex:
    """
    Return the integer block index from a label or integer block index

    Parameters
    ----------
    idx :
        A block label or integer block index
    label_to_idx :
        Mapping from labels to integer block indices for the axis
    nblocks :
        The number of blocks along the axis
    dim :
        The axis; only used for error messages

    Raises
    ------
    BlockIndexError
        If the block does not exist along the axis
    """
    if isinstance(idx, str):
        try:
            return label_to_idx[idx]
        except KeyError as err:
            raise BlockLabelError(idx, dim, tuple(label_to_idx)) from err

    try:
        std_idx = operator.index(idx)
    except TypeError as err:
        raise TypeError(f"Unknown block index {idx!r} of type {type(idx)}.") from err

    if std_idx < 0 or std_idx >= nblocks:
        raise BlockIndexError(idx, dim, nblocks)
    return std_idx

def conv_block_coord(
        block: GenBlockCoord,
        multi_label_to_idx: MultiLabelToStdIndex,
        nblocks: Shape
    ) -> StdBlockCoord:
    """
    Return a standard block coordinate (tuple of integer block indices)

    Parameters
    ----------
    block :
        A tuple of block labels and/or integer block indices, one per axis
    multi_label_to_idx :
        Label to index mappings for each axis
    nblocks :
        The number of blocks along each axis
    """
    block = require_tuple(block)
    if len(block) != len(nblocks):
        raise BlockCoordLengthError(block, len(nblocks), len(block))

    return tuple(
        conv_gen_to_std_idx(idx, label_to_idx, axis_nblocks, dim)
        for dim, (idx, label_to_idx, axis_nblocks)
        in enumerate(zip(block, multi_label_to_idx, nblocks))
    )

def conv_multi_std_idx(midx: Tuple[int, ...], shape: Shape) -> MultiStdIndex:
    """
    Validate an element multi-index against a shape

    Parameters
    ----------
    midx :
        A tuple of integer indices, one per axis
    shape :
        The shape of the indexed array

    Raises
    ------
    BoundsCheckError
        If any index is outside `[0, shape[dim])`
    """
    midx = require_tuple(midx)
    if len(midx) != len(shape):
        raise IndexLengthError(midx, len(shape), len(midx))

    ret_midx = []
    for dim, (idx, size) in enumerate(zip(midx, shape)):
        try:
            idx = operator.index(idx)
        except TypeError as err:
            raise TypeError(
                f"Only integer element indices are supported, not {idx!r} of type {type(idx)}"
            ) from err
        if idx < 0 or idx >= size:
            raise BoundsCheckError(idx, dim, size)
        ret_midx.append(idx)
    return tuple(ret_midx)

def require_tuple(idx) -> Tuple:
    """
    Return single (non-tuple) indices in a size 1 tuple
    """
    if isinstance(idx, tuple):
        return idx
    elif isinstance(idx, list):
        return tuple(idx)
    else:
        return (idx,)

def labels_or_empty(labels, ndim: int) -> MultiLabels:
    """
    Return labels as a tuple of tuples, using empty labels if none are given
    """
    if labels is None:
        return ((),)*ndim
    return tuple(tuple(axis_labels) for axis_labels in labels)
