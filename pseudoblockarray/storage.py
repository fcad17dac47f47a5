"""
Generic wrappers for the backing storage of pseudo block arrays

A pseudo block array only needs a small set of capabilities from its backing
array: a fixed shape, element reads/writes, allocation of a similar array,
filling and element-wise copying. `GenericStorage` defines these in terms of
element access so any n-dimensional container can be wrapped; subclasses for
`numpy` arrays and `h5py` datasets override them with sliced operations.
"""

from typing import TypeVar, Generic, Optional
import math

import numpy as np

from . import _HAS_H5PY
from . import indexing as idxg
from . import traversal as trav
from .errors import ShapeMismatchError
from .typing import Shape, Ranges, H5Dataset

# pylint: disable=no-member

T = TypeVar('T')


def wrap(array) -> 'GenericStorage':
    """
    Return a storage wrapper around an array

    The wrapper refers to `array` directly; nothing is copied.
    """
    if isinstance(array, GenericStorage):
        return array
    elif isinstance(array, np.ndarray):
        return NumpyStorage(array)
    elif _HAS_H5PY and isinstance(array, H5Dataset):
        return H5Storage(array)
    elif isinstance(array, list):
        return NestedListStorage(array)
    else:
        raise TypeError(
            f"Couldn't find storage wrapper type for array of type {type(array)}"
        )

def wrap_source(array) -> 'GenericStorage':
    """
    Return a storage wrapper around an array that will only be read from

    Unlike `wrap`, any array-like (tuples, scalars, etc.) is accepted by
    converting it to a `np.ndarray`.
    """
    if isinstance(array, (GenericStorage, np.ndarray, list)):
        return wrap(array)
    elif _HAS_H5PY and isinstance(array, H5Dataset):
        return wrap(array)
    else:
        return NumpyStorage(np.asarray(array))

class GenericStorage(Generic[T]):
    """
    A wrapper giving a uniform interface to n-dimensional storage

    Subclasses must implement `shape`, `dtype` and element access through
    `__getitem__`/`__setitem__` with tuples of integers. Everything else is
    derived from element access using `traversal.iter_offsets`.
    """
    shape: Shape
    data: T

    # Whether `__getitem__`/`__setitem__` accept tuples of slices
    supports_slicing = False

    def __init__(self, array: T):
        self._data = array

    def __getitem__(self, key):
        raise NotImplementedError(
            f"Can't index values from storage wrapper type {type(self)}"
        )

    def __setitem__(self, key, value):
        raise NotImplementedError(
            f"Can't set at index to storage wrapper type {type(self)}"
        )

    def __array__(self, dtype=None, copy=None):
        # Values are always read into a new array, which `copy=False` forbids
        if copy is False:
            raise ValueError(
                f"Can't return storage wrapper type {type(self)} as an array without copying"
            )
        return np.asarray(self.view(trav.full_ranges(self.shape)), dtype=dtype)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.data!r})"

    @property
    def data(self) -> T:
        return self._data

    @property
    def dtype(self):
        return np.dtype(object)

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def size(self) -> int:
        return math.prod(self.shape)

    def view(self, ranges: Ranges) -> np.ndarray:
        """
        Return the values in a region

        The base implementation reads the region into a new array; subclasses
        may return a view that shares memory with the storage.
        """
        ret = np.empty(trav.region_shape(ranges), dtype=self.dtype)
        trav.copy_region(self, ranges, NumpyStorage(ret), trav.full_ranges(ret.shape))
        return ret

    def similar(self, dtype=None) -> 'NumpyStorage':
        """
        Return new, uninitialized storage with the same shape
        """
        if dtype is None:
            dtype = self.dtype
        return NumpyStorage(np.empty(self.shape, dtype=dtype))

    def fill(self, value):
        """
        Set every element to `value`
        """
        for midx in trav.iter_offsets(self.shape):
            self[midx] = value

    def copy_from(self, source: 'GenericStorage'):
        """
        Copy every element from `source`, which must have the same shape
        """
        if source.shape != self.shape:
            raise ShapeMismatchError(
                self.shape, source.shape,
                f"can't copy storage with shape {source.shape} into storage with shape {self.shape}"
            )
        ranges = trav.full_ranges(self.shape)
        trav.copy_region(source, ranges, self, ranges)

    def copy(self) -> 'NumpyStorage':
        """Return a copy as `numpy` storage"""
        return NumpyStorage(np.array(self.view(trav.full_ranges(self.shape))))


class NumpyStorage(GenericStorage[np.ndarray]):
    supports_slicing = True

    def __init__(self, array: np.ndarray):
        super().__init__(array)
        if not isinstance(self.data, np.ndarray):
            raise TypeError(f"Expected `np.ndarray` not {type(self.data)}")

    def __getitem__(self, key):
        return self.data[key]

    def __setitem__(self, key, value):
        self.data[key] = value

    def __array__(self, dtype=None, copy=None):
        if copy:
            return np.array(self.data, dtype=dtype, copy=True)
        if copy is False and dtype is not None and np.dtype(dtype) != self.data.dtype:
            raise ValueError(
                f"Can't convert array of dtype {self.data.dtype} to {dtype} without copying"
            )
        return np.asarray(self.data, dtype=dtype)

    @property
    def shape(self):
        return self.data.shape

    @property
    def dtype(self):
        return self.data.dtype

    def view(self, ranges: Ranges) -> np.ndarray:
        return self.data[trav.region_slices(ranges)]

    def similar(self, dtype=None):
        return NumpyStorage(np.empty_like(self.data, dtype=dtype))

    def fill(self, value):
        self.data.fill(value)

    def copy(self):
        return NumpyStorage(self.data.copy())


class H5Storage(GenericStorage[H5Dataset]):
    """
    Storage backed by an `h5py.Dataset`

    Reads and writes go directly to the dataset.
    """
    supports_slicing = True

    def __init__(self, array: H5Dataset):
        super().__init__(array)
        if not isinstance(self.data, H5Dataset):
            raise TypeError(f"Expected `h5py.Dataset` not {type(self.data)}")

    def __getitem__(self, key):
        return self.data[key]

    def __setitem__(self, key, value):
        self.data[key] = value

    @property
    def shape(self):
        return self.data.shape

    @property
    def dtype(self):
        return self.data.dtype

    def view(self, ranges: Ranges) -> np.ndarray:
        # Reading from a dataset always creates a new array
        return self.data[trav.region_slices(ranges)]

    def fill(self, value):
        self.data[...] = value


class NestedListStorage(GenericStorage[list]):
    """
    Storage backed by a nested Python list

    The nested list is used directly, so writes are visible through the
    original list.
    """

    def __init__(self, array: list, shape: Optional[Shape]=None):
        super().__init__(array)
        if shape is None:
            shape = idxg.nested_shape(array)
        self._shape = tuple(shape)

    def __getitem__(self, key):
        key = idxg.require_tuple(key)
        ret = self.data
        for ii in key:
            ret = ret[ii]
        return ret

    def __setitem__(self, key, value):
        *key, last = idxg.require_tuple(key)
        sublist = self.data
        for ii in key:
            sublist = sublist[ii]
        sublist[last] = value

    @property
    def shape(self):
        return self._shape
