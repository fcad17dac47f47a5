"""
This module contains the partition of an array into blocks along each axis

A `BlockSizes` object stores, for each axis, the cumulative block boundaries.
For example, block sizes `(3, 2, 1)` along an axis correspond to boundaries
`(0, 3, 5, 6)` and block 1 along that axis covers indices `range(3, 5)`.
Indices are 0-based so the first boundary of every axis is 0 and the last
boundary is the size of the axis.
"""

from typing import NamedTuple, Optional, Sequence, Tuple
from itertools import accumulate
from bisect import bisect_right
import operator

from . import indexing as idxg
from .errors import (
    InvalidPartitionError,
    EmptyAxisPartitionError,
    BoundaryPartitionError,
    BoundsCheckError,
    IndexLengthError,
    AxisIndexError
)
from .typing import (
    Shape,
    AxisSizes,
    AxisCumul,
    BlockShape,
    MultiLabels,
    GenBlockCoord,
    StdBlockCoord,
    MultiStdIndex,
    Ranges
)


class BlockIndex(NamedTuple):
    """
    An element index given as a block coordinate and an offset within the block
    """
    block: GenBlockCoord
    offset: MultiStdIndex


def _require_int(size, dim: int) -> int:
    try:
        return operator.index(size)
    except TypeError as err:
        raise TypeError(
            f"Block sizes along axis {dim} must be integers, not {size!r} of type {type(size)}"
        ) from err

def _cumul_from_sizes(axis_sizes: Sequence[int], dim: int) -> AxisCumul:
    """
    Return cumulative block boundaries along an axis from block sizes
    """
    axis_sizes = [_require_int(size, dim) for size in axis_sizes]
    if len(axis_sizes) == 0:
        raise EmptyAxisPartitionError(dim)
    for size in axis_sizes:
        if size <= 0:
            raise InvalidPartitionError(dim, size)
    return tuple(accumulate(axis_sizes, initial=0))

def _validate_cumul(axis_cumul: Sequence[int], dim: int) -> AxisCumul:
    """
    Validate cumulative block boundaries along an axis
    """
    axis_cumul = tuple(_require_int(bound, dim) for bound in axis_cumul)
    if len(axis_cumul) < 2:
        raise EmptyAxisPartitionError(dim)
    if axis_cumul[0] != 0:
        raise BoundaryPartitionError(dim, axis_cumul)
    if not all(a < b for a, b in zip(axis_cumul[:-1], axis_cumul[1:])):
        raise BoundaryPartitionError(dim, axis_cumul)
    return axis_cumul


class BlockSizes:
    """
    The partition of an n-dimensional array into blocks

    Parameters
    ----------
    *axis_sizes :
        One sequence of block sizes per axis. For example, `BlockSizes([1, 1], [2, 1])`
        partitions a 2x3 array into 2 row blocks of sizes 1 and 1, and 2 column
        blocks of sizes 2 and 1.
    labels :
        Optional labels for each block along each axis. `labels[0]` contains
        the block labels along axis 0, etc. An empty tuple for an axis means
        blocks along that axis can only be selected by integer index.

    Attributes
    ----------
    cumul :
        The cumulative block boundaries along each axis
    nblocks :
        The number of blocks along each axis
    shape :
        The shape of the partitioned array
    bshape :
        The block sizes along each axis
    labels :
        The block labels along each axis
    """

    def __init__(
            self,
            *axis_sizes: Sequence[int],
            labels: Optional[MultiLabels]=None
        ):
        cumul = tuple(
            _cumul_from_sizes(sizes, dim) for dim, sizes in enumerate(axis_sizes)
        )
        self._init_from_cumul(cumul, labels)

    @classmethod
    def from_cumul(
            cls,
            *axis_cumuls: Sequence[int],
            labels: Optional[MultiLabels]=None
        ) -> 'BlockSizes':
        """
        Return block sizes from cumulative block boundaries along each axis

        Parameters
        ----------
        *axis_cumuls :
            One sequence of boundaries per axis, starting at 0 and strictly
            increasing. The last boundary is the size of the axis.
        labels :
            See class docstring
        """
        cumul = tuple(
            _validate_cumul(axis_cumul, dim)
            for dim, axis_cumul in enumerate(axis_cumuls)
        )
        ret = cls.__new__(cls)
        ret._init_from_cumul(cumul, labels)
        return ret

    def _init_from_cumul(self, cumul: Tuple[AxisCumul, ...], labels: Optional[MultiLabels]):
        self._cumul = cumul
        self._labels = idxg.labels_or_empty(labels, len(cumul))
        idxg.validate_labels(self._labels, self.nblocks)
        self._MULTI_LABEL_TO_IDX = idxg.make_label_to_idx(self._labels)

    ## String representation functions
    def __repr__(self):
        axis_sizes = ', '.join(repr(sizes) for sizes in self.bshape)
        if any(self.labels):
            return f"{self.__class__.__name__}({axis_sizes}, labels={self.labels})"
        return f"{self.__class__.__name__}({axis_sizes})"

    def __eq__(self, other):
        if not isinstance(other, BlockSizes):
            return NotImplemented
        return self.cumul == other.cumul and self.labels == other.labels

    def __hash__(self):
        return hash((self.cumul, self.labels))

    @property
    def cumul(self) -> Tuple[AxisCumul, ...]:
        """Return the cumulative block boundaries along each axis"""
        return self._cumul

    @property
    def labels(self) -> MultiLabels:
        """Return the block labels along each axis"""
        return self._labels

    @property
    def ndim(self) -> int:
        """Return the number of dimensions (axes)"""
        return len(self.cumul)

    @property
    def nblocks(self) -> Shape:
        """Return the number of blocks along each axis"""
        return tuple(len(axis_cumul)-1 for axis_cumul in self.cumul)

    def _std_dim(self, dim: int) -> int:
        """
        Return `dim` as an integer axis, without wrapping negative axes

        Raises
        ------
        AxisIndexError
            If `dim` isn't in `[0, ndim)`
        """
        try:
            std_dim = operator.index(dim)
        except TypeError as err:
            raise TypeError(f"Axis must be an integer, not {dim!r} of type {type(dim)}") from err
        if std_dim < 0 or std_dim >= self.ndim:
            raise AxisIndexError(dim, self.ndim)
        return std_dim

    def axis_nblocks(self, dim: int) -> int:
        """Return the number of blocks along axis `dim`"""
        return len(self.cumul[self._std_dim(dim)]) - 1

    @property
    def shape(self) -> Shape:
        """Return the shape of the partitioned array"""
        return tuple(self.total_size(dim) for dim in range(self.ndim))

    def total_size(self, dim: int) -> int:
        """Return the size of the partitioned array along axis `dim`"""
        axis_cumul = self.cumul[self._std_dim(dim)]
        return axis_cumul[-1] - axis_cumul[0]

    def axis_sizes(self, dim: int) -> AxisSizes:
        """Return the block sizes along axis `dim`"""
        axis_cumul = self.cumul[self._std_dim(dim)]
        return tuple(b - a for a, b in zip(axis_cumul[:-1], axis_cumul[1:]))

    @property
    def bshape(self) -> BlockShape:
        """Return the block sizes along every axis"""
        return tuple(self.axis_sizes(dim) for dim in range(self.ndim))

    ## Block coordinate translation
    def std_block(self, block: GenBlockCoord) -> StdBlockCoord:
        """
        Return a block coordinate with any labels replaced by integer indices

        Raises
        ------
        BlockIndexError
            If a block index is out of range or a label doesn't exist
        """
        return idxg.conv_block_coord(block, self._MULTI_LABEL_TO_IDX, self.nblocks)

    def blocksize(self, dim: int, block) -> int:
        """
        Return the size of a block along axis `dim`

        Parameters
        ----------
        dim :
            The axis
        block :
            The block index (or label) along the axis
        """
        dim = self._std_dim(dim)
        ii = idxg.conv_gen_to_std_idx(
            block, self._MULTI_LABEL_TO_IDX[dim], self.axis_nblocks(dim), dim
        )
        axis_cumul = self.cumul[dim]
        return axis_cumul[ii+1] - axis_cumul[ii]

    def block_shape(self, block: GenBlockCoord) -> Shape:
        """
        Return the shape of a block

        Parameters
        ----------
        block :
            A tuple of block indices (or labels), one per axis
        """
        return tuple(len(axis_range) for axis_range in self.globalrange(block))

    def globalrange(self, block: GenBlockCoord) -> Ranges:
        """
        Return the index ranges a block occupies in the partitioned array

        Each axis is translated independently; the returned ranges are
        half-open, as for `range`.

        Parameters
        ----------
        block :
            A tuple of block indices (or labels), one per axis

        Returns
        -------
        Tuple[range, ...]
            The index range along each axis
        """
        block = self.std_block(block)
        return tuple(
            range(axis_cumul[ii], axis_cumul[ii+1])
            for ii, axis_cumul in zip(block, self.cumul)
        )

    ## Element index translation
    def block_index(self, midx: MultiStdIndex) -> BlockIndex:
        """
        Return the block and offset within the block containing an element

        Parameters
        ----------
        midx :
            Integer indices of the element, one per axis
        """
        midx = idxg.conv_multi_std_idx(midx, self.shape)
        block = []
        offset = []
        for ii, axis_cumul in zip(midx, self.cumul):
            nblock = bisect_right(axis_cumul, ii) - 1
            block.append(nblock)
            offset.append(ii - axis_cumul[nblock])
        return BlockIndex(tuple(block), tuple(offset))

    def global_index(self, block_idx: BlockIndex) -> MultiStdIndex:
        """
        Return the element indices from a block and offset within the block

        This is the inverse of `block_index`.

        Raises
        ------
        BoundsCheckError
            If the offset lies outside the block
        """
        block, offset = block_idx
        ranges = self.globalrange(block)
        offset = idxg.require_tuple(offset)
        if len(offset) != len(ranges):
            raise IndexLengthError(offset, len(ranges), len(offset))

        midx = []
        for dim, (ii, axis_range) in enumerate(zip(offset, ranges)):
            ii = operator.index(ii)
            if ii < 0 or ii >= len(axis_range):
                raise BoundsCheckError(ii, dim, len(axis_range))
            midx.append(axis_range[ii])
        return tuple(midx)

    ## Copy methods
    def copy(self) -> 'BlockSizes':
        """Return a copy"""
        return self.__class__.from_cumul(*self.cumul, labels=self.labels)

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()
