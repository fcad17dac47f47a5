"""
This module contains the pseudo block array definition and creation routines
"""

from typing import TypeVar, Optional, Union, Callable, Generic, Tuple, Iterator
from itertools import product
import logging

import numpy as np

from . import storage as gsto
from . import traversal as trav
from . import indexing as idxg
from .blocksizes import BlockSizes, BlockIndex
from .errors import ShapeMismatchError
from .typing import (
    Shape,
    BlockShape,
    MultiLabels,
    GenBlockCoord,
    StdBlockCoord,
    MultiStdIndex,
    Scalar
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

## `PseudoBlockArray` object + core functions
class PseudoBlockArray(Generic[T]):
    """
    An n-dimensional array partitioned into blocks but stored contiguously

    A `PseudoBlockArray` is similar to a block array except the full array is
    stored in a single backing array instead of block by block. This means
    blocks can't be inserted or retrieved without copying data. On the other
    hand, converting a `PseudoBlockArray` to a monolithic array is instant since
    it just returns the backing array.

    When iteratively solving a set of equations, the Jacobian typically has a
    block structure. A `PseudoBlockArray` can be used to build up the Jacobian
    block by block and then pass the monolithic array to a direct solver.

    Parameters
    ----------
    array :
        The backing array; a `np.ndarray`, `h5py.Dataset` or nested list. The
        array is used directly (aliased), so changes through the
        `PseudoBlockArray` are visible in `array` and vice versa, unless
        `copy=True`.
    *block_sizes :
        Either a single `BlockSizes` instance or one sequence of block sizes
        for each axis. For example, `PseudoBlockArray(np.zeros((2, 3)), [1, 1], [2, 1])`
        is a 2x3 array with 2 row blocks and 2 column blocks.
    labels :
        Optional labels for blocks along each axis
    copy :
        Whether to copy `array` into newly allocated storage

    Attributes
    ----------
    block_sizes :
        The partition of the array into blocks
    shape :
        The shape of the (monolithic) array
    nblocks :
        The number of blocks along each axis
    bshape :
        The block sizes along each axis. For example, a block shape
        `((1, 1), (2, 1))` represents a 2-by-2 block matrix with entries:
            - (0, 0) is a 1x2 matrix
            - (0, 1) is a 1x1 matrix
            - (1, 0) is a 1x2 matrix
            - (1, 1) is a 1x1 matrix
    array :
        The backing array
    owns_storage :
        Whether the backing array was allocated by this object (`True`), or
        supplied by the caller and possibly shared (`False`)
    """

    def __init__(
            self,
            array,
            *block_sizes: Union[BlockSizes, Tuple[int, ...]],
            labels: Optional[MultiLabels]=None,
            copy: bool=False
        ):
        storage = gsto.wrap(array)
        if copy:
            storage = storage.copy()
        self._storage = storage
        self._block_sizes = _require_block_sizes(block_sizes, labels)
        self._owns_storage = copy

        _validate_storage_shape(self._storage, self._block_sizes)

    @classmethod
    def _from_owned_storage(cls, array, block_sizes: BlockSizes) -> 'PseudoBlockArray':
        """
        Return a `PseudoBlockArray` from freshly allocated backing storage
        """
        ret = cls(array, block_sizes)
        ret._owns_storage = True
        return ret

    ## String representation functions
    def __repr__(self):
        return f"{self.__class__.__name__}({self.array!r}, {self.block_sizes!r})"

    def __str__(self):
        return format_blocks(self)

    @property
    def storage(self) -> gsto.GenericStorage:
        """
        Return the backing storage wrapper
        """
        return self._storage

    @property
    def array(self):
        """
        Return the backing array

        This is the array object itself, not a copy.
        """
        return self._storage.data

    @property
    def owns_storage(self) -> bool:
        """
        Return whether the backing array was allocated by this object
        """
        return self._owns_storage

    @property
    def block_sizes(self) -> BlockSizes:
        """
        Return the partition into blocks
        """
        return self._block_sizes

    @property
    def shape(self) -> Shape:
        """
        Return the shape of the monolithic array
        """
        return self.block_sizes.shape

    @property
    def ndim(self) -> int:
        return self.block_sizes.ndim

    @property
    def size(self) -> int:
        """
        Return the total number of elements
        """
        return self._storage.size

    @property
    def dtype(self):
        return self._storage.dtype

    @property
    def bshape(self) -> BlockShape:
        """
        Return the block sizes along each axis
        """
        return self.block_sizes.bshape

    @property
    def labels(self) -> MultiLabels:
        """Return the block labels along each axis"""
        return self.block_sizes.labels

    def nblocks(self, axis: Optional[int]=None) -> Union[int, Shape]:
        """
        Return the number of blocks

        Parameters
        ----------
        axis :
            If supplied, return the number of blocks along this axis only.
            Otherwise return the number of blocks along every axis.
        """
        if axis is None:
            return self.block_sizes.nblocks
        return self.block_sizes.axis_nblocks(axis)

    def blocksize(self, block: GenBlockCoord) -> Shape:
        """
        Return the shape of a block
        """
        return self.block_sizes.block_shape(block)

    def block_index(self, midx: MultiStdIndex) -> BlockIndex:
        """
        Return the block and offset within the block of an element
        """
        return self.block_sizes.block_index(midx)

    def __len__(self):
        if self.ndim == 0:
            raise TypeError("len() of unsized object")
        return self.shape[0]

    ## Element indexing
    def _std_midx(self, key) -> MultiStdIndex:
        if isinstance(key, BlockIndex):
            return self.block_sizes.global_index(key)
        return idxg.conv_multi_std_idx(key, self.shape)

    def __getitem__(self, key: Union[MultiStdIndex, BlockIndex]):
        """
        Return an element

        Parameters
        ----------
        key :
            Integer indices of the element, one for each axis, or a
            `BlockIndex` giving the block and offset within the block
        """
        return self._storage[self._std_midx(key)]

    def __setitem__(self, key: Union[MultiStdIndex, BlockIndex], value):
        """
        Set an element to a given value

        See `__getitem__` for the format of `key`.
        """
        self._storage[self._std_midx(key)] = value

    ## Block indexing
    def getblock(self, block: GenBlockCoord):
        """
        Return the values of a block

        For `numpy` backing arrays this is a view into the backing array so
        writing to the result modifies the array. Other backing arrays return a
        new array read from the block region.

        Parameters
        ----------
        block :
            A tuple of block indices (or labels), one per axis
        """
        return self._storage.view(self.block_sizes.globalrange(block))

    def getblock_into(self, out, block: GenBlockCoord):
        """
        Copy the values of a block into `out`

        Parameters
        ----------
        out :
            The array to copy into. It must have the same shape as the block.
        block :
            A tuple of block indices (or labels), one per axis

        Returns
        -------
        out
            The same `out` array

        Raises
        ------
        ShapeMismatchError
            If `out` doesn't have the shape of the block
        BlockIndexError
            If the block doesn't exist
        ValueError
            If `out` is a ragged (improperly nested) list, so it has no shape
        TypeError
            If `out` isn't a supported array type
        """
        ranges = self.block_sizes.globalrange(block)
        out_storage = gsto.wrap(out)

        block_shape = trav.region_shape(ranges)
        if out_storage.shape != block_shape:
            raise ShapeMismatchError(
                block_shape, out_storage.shape,
                f"tried to assign {block_shape} block to {out_storage.shape} array"
            )

        trav.copy_region(
            self._storage, ranges, out_storage, trav.full_ranges(block_shape)
        )
        return out

    def setblock(self, block: GenBlockCoord, x):
        """
        Copy the values of `x` into a block

        Parameters
        ----------
        block :
            A tuple of block indices (or labels), one per axis
        x :
            The values to copy. These must have the same shape as the block.

        Raises
        ------
        ShapeMismatchError
            If `x` doesn't have the shape of the block
        BlockIndexError
            If the block doesn't exist
        ValueError
            If `x` is a ragged (improperly nested) list, so it has no shape
        """
        ranges = self.block_sizes.globalrange(block)
        x_storage = gsto.wrap_source(x)

        block_shape = trav.region_shape(ranges)
        if x_storage.shape != block_shape:
            raise ShapeMismatchError(
                block_shape, x_storage.shape,
                f"tried to assign {x_storage.shape} array to {block_shape} block"
            )

        trav.copy_region(
            x_storage, trav.full_ranges(block_shape), self._storage, ranges
        )

    @property
    def blocks(self):
        """
        Return an object that allows indexing blocks

        `barray.blocks[0, 1]` returns the block at (0, 1) (see `getblock`) and
        `barray.blocks[0, 1] = x` copies `x` into the block (see `setblock`).
        """
        class BlockIndexer:
            """
            Object to allow indexing blocks
            """
            def __init__(self, barray: PseudoBlockArray):
                self._barray = barray

            def __getitem__(self, key: GenBlockCoord):
                return self._barray.getblock(key)

            def __setitem__(self, key: GenBlockCoord, value):
                self._barray.setblock(key, value)

        return BlockIndexer(self)

    def block_coords(self) -> Iterator[StdBlockCoord]:
        """
        Return an iterator over all block coordinates in C order
        """
        return product(*[range(n) for n in self.block_sizes.nblocks])

    def iter_blocks(self) -> Iterator[Tuple[StdBlockCoord, np.ndarray]]:
        """
        Return an iterator over `(block coordinate, block values)` pairs
        """
        for block in self.block_coords():
            yield block, self.getblock(block)

    ## Methods for converting to monolithic array
    def to_mono_ndarray(self) -> np.ndarray:
        """
        Return a monolithic ndarray

        For `numpy` backing arrays this is the backing array itself.
        """
        if isinstance(self.array, np.ndarray):
            return self.array
        return np.asarray(self._storage)

    def __array__(self, dtype=None, copy=None):
        return self._storage.__array__(dtype=dtype, copy=copy)

    ## Whole array modification
    def copy_from(self, source):
        """
        Copy every element from `source` into the backing array

        Raises
        ------
        ShapeMismatchError
            If `source` doesn't have the same shape as the array
        """
        source = gsto.wrap_source(source)
        if source.shape != self.shape:
            raise ShapeMismatchError(
                self.shape, source.shape,
                f"can't copy array with shape {source.shape} into array with shape {self.shape}"
            )
        self._storage.copy_from(source)
        return self

    def fill(self, value: Scalar):
        """
        Set every element to `value`
        """
        self._storage.fill(value)
        return self

    ## Copy methods
    def similar(self, dtype=None) -> 'PseudoBlockArray':
        """
        Return a new array with the same shape and blocks but uninitialized values

        Parameters
        ----------
        dtype :
            The data type of the new array; defaults to the current data type
        """
        return self._from_owned_storage(
            self._storage.similar(dtype), self.block_sizes.copy()
        )

    def copy(self) -> 'PseudoBlockArray':
        """Return a copy"""
        return self._from_owned_storage(self._storage.copy(), self.block_sizes.copy())

    def __copy__(self):
        return self.copy()

def _require_block_sizes(
        block_sizes: Tuple[Union[BlockSizes, Tuple[int, ...]], ...],
        labels: Optional[MultiLabels]=None
    ) -> BlockSizes:
    """
    Return a `BlockSizes` instance from the supported block size formats
    """
    if len(block_sizes) == 1 and isinstance(block_sizes[0], BlockSizes):
        if labels is None:
            return block_sizes[0]
        else:
            return BlockSizes.from_cumul(*block_sizes[0].cumul, labels=labels)
    else:
        return BlockSizes(*block_sizes, labels=labels)

def _validate_storage_shape(storage: gsto.GenericStorage, block_sizes: BlockSizes):
    """
    Validate the backing storage has the shape implied by the block sizes
    """
    if storage.shape != block_sizes.shape:
        raise ShapeMismatchError(
            block_sizes.shape, storage.shape,
            f"array with shape {storage.shape} can't be partitioned by blocks"
            f" {block_sizes.bshape} with shape {block_sizes.shape}"
        )

## `PseudoBlockArray` creation routines
def make_create_array(create_numpy_array: Callable[..., np.ndarray]):
    """
    Derive a `PseudoBlockArray` creation routine from a `numpy` creation routine

    Parameters
    ----------
    create_numpy_array :
        A numpy array creation routine with the signature
        `create_numpy_array(shape, dtype)`
        Examples are `np.zeros`, `np.ones`, etc.
    """
    def create_pseudo_block_array(
            *block_sizes: Union[BlockSizes, Tuple[int, ...]],
            dtype=float,
            labels: Optional[MultiLabels]=None
        ) -> PseudoBlockArray:
        _block_sizes = _require_block_sizes(block_sizes, labels)
        logger.debug(
            "Allocating %s backing array for blocks %s",
            _block_sizes.shape, _block_sizes.bshape
        )
        array = create_numpy_array(_block_sizes.shape, dtype)
        return PseudoBlockArray._from_owned_storage(array, _block_sizes)

    return create_pseudo_block_array

empty = make_create_array(np.empty)

zeros = make_create_array(np.zeros)

ones = make_create_array(np.ones)

rand = make_create_array(
    lambda shape, dtype: np.asarray(np.random.random_sample(shape), dtype=dtype)
)

def full(
        *block_sizes: Union[BlockSizes, Tuple[int, ...]],
        fill_value: Scalar,
        dtype=None,
        labels: Optional[MultiLabels]=None
    ) -> PseudoBlockArray:
    """
    Return a new `PseudoBlockArray` with every element set to `fill_value`
    """
    return make_create_array(
        lambda shape, _dtype: np.full(shape, fill_value, dtype=_dtype)
    )(*block_sizes, dtype=dtype, labels=labels)

## String formatting
def _dims_str(shape: Shape) -> str:
    return '×'.join(str(n) for n in shape)

def format_blocks(barray: PseudoBlockArray) -> str:
    """
    Return a string of the array values with lines separating blocks

    1D arrays are drawn as a column and 2D arrays as a matrix; blocks of higher
    dimensional arrays are not drawn.
    """
    name = barray.__class__.__name__
    if barray.ndim == 1:
        header = (
            f"{barray.nblocks(0)}-blocked {barray.shape[0]}-element"
            f" {name}(dtype={barray.dtype}):"
        )
    else:
        header = (
            f"{_dims_str(barray.nblocks())}-blocked {_dims_str(barray.shape)}"
            f" {name}(dtype={barray.dtype}):"
        )

    data = barray.to_mono_ndarray()
    if barray.ndim == 1:
        data = data.reshape(-1, 1)
        row_cumul, col_cumul = barray.block_sizes.cumul[0], (0, 1)
    elif barray.ndim == 2:
        row_cumul, col_cumul = barray.block_sizes.cumul
    else:
        return f"{header}\n{data}"

    cells = [[str(elem) for elem in row] for row in data]
    width = max(len(cell) for row in cells for cell in row)
    col_bounds = list(zip(col_cumul[:-1], col_cumul[1:]))

    def format_row(row):
        return ' │ '.join(
            ' '.join(cell.rjust(width) for cell in row[a:b])
            for a, b in col_bounds
        )

    separator = '-┼-'.join('-'*((b-a)*(width+1)-1) for a, b in col_bounds)

    lines = [header]
    for nrow_block, (a, b) in enumerate(zip(row_cumul[:-1], row_cumul[1:])):
        if nrow_block > 0:
            lines.append(separator)
        lines.extend(format_row(row) for row in cells[a:b])
    return '\n'.join(lines)
