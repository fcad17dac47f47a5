"""
Test the backing storage wrappers in `pseudoblockarray.storage`
"""

import pytest
import numpy as np
import h5py

from pseudoblockarray import storage as gsto
from pseudoblockarray import traversal as trav
from pseudoblockarray.errors import ShapeMismatchError

class TestWrap:

    def test_wrap_ndarray(self):
        array = np.zeros((2, 3))
        storage = gsto.wrap(array)
        assert isinstance(storage, gsto.NumpyStorage)
        assert storage.data is array

    def test_wrap_list(self):
        array = [[1, 2], [3, 4]]
        storage = gsto.wrap(array)
        assert isinstance(storage, gsto.NestedListStorage)
        assert storage.data is array
        assert storage.shape == (2, 2)

    def test_wrap_storage(self):
        storage = gsto.NumpyStorage(np.zeros(3))
        assert gsto.wrap(storage) is storage

    def test_wrap_h5(self, tmp_path):
        with h5py.File(tmp_path/'test.h5', mode='w') as f:
            dset = f.create_dataset('a', data=np.zeros((2, 3)))
            assert isinstance(gsto.wrap(dset), gsto.H5Storage)

    def test_wrap_invalid(self):
        with pytest.raises(TypeError):
            gsto.wrap((1, 2, 3))

    def test_wrap_source(self):
        storage = gsto.wrap_source((1, 2, 3))
        assert isinstance(storage, gsto.NumpyStorage)
        assert storage.shape == (3,)

class TestNumpyStorage:

    @pytest.fixture()
    def setup_storage(self):
        array = np.arange(6, dtype=float).reshape(2, 3)
        return gsto.NumpyStorage(array), array

    def test_view(self, setup_storage):
        storage, array = setup_storage
        view = storage.view((range(0, 1), range(1, 3)))
        assert np.shares_memory(view, array)
        assert np.all(view == array[0:1, 1:3])

    def test_similar(self, setup_storage):
        storage, _ = setup_storage
        similar = storage.similar(int)
        assert similar.shape == storage.shape
        assert similar.dtype == np.dtype(int)
        assert storage.similar().dtype == storage.dtype

    def test_fill(self, setup_storage):
        storage, array = setup_storage
        storage.fill(7.0)
        assert np.all(array == 7.0)

    def test_copy(self, setup_storage):
        storage, array = setup_storage
        storage_copy = storage.copy()
        assert not np.shares_memory(storage_copy.data, array)
        assert np.all(storage_copy.data == array)

    def test_invalid_type(self):
        with pytest.raises(TypeError):
            gsto.NumpyStorage([1, 2])

    def test_array_no_copy(self, setup_storage):
        storage, array = setup_storage
        assert np.shares_memory(np.asarray(storage, copy=False), array)
        assert not np.shares_memory(np.asarray(storage, copy=True), array)
        with pytest.raises(ValueError):
            np.asarray(storage, dtype=int, copy=False)

class TestNestedListStorage:

    @pytest.fixture()
    def setup_storage(self):
        array = [[0, 1, 2], [3, 4, 5]]
        return gsto.NestedListStorage(array), array

    def test_getitem(self, setup_storage):
        storage, array = setup_storage
        assert storage[1, 2] == 5
        assert storage.ndim == 2
        assert storage.size == 6

    def test_setitem(self, setup_storage):
        storage, array = setup_storage
        storage[0, 1] = 10
        assert array[0][1] == 10

    def test_view(self, setup_storage):
        storage, array = setup_storage
        view = storage.view((range(1, 2), range(0, 2)))
        assert view.shape == (1, 2)
        assert view[0, 0] == 3 and view[0, 1] == 4

    def test_fill(self, setup_storage):
        storage, array = setup_storage
        storage.fill(-1)
        assert array == [[-1, -1, -1], [-1, -1, -1]]

    def test_copy_from(self, setup_storage):
        storage, array = setup_storage
        storage.copy_from(gsto.NumpyStorage(np.ones((2, 3), dtype=int)))
        assert array == [[1, 1, 1], [1, 1, 1]]

    def test_copy_from_shape_mismatch(self, setup_storage):
        storage, array = setup_storage
        with pytest.raises(ShapeMismatchError):
            storage.copy_from(gsto.NumpyStorage(np.ones((3, 2), dtype=int)))
        assert array == [[0, 1, 2], [3, 4, 5]]

    def test_array(self, setup_storage):
        storage, array = setup_storage
        assert np.all(np.asarray(storage, dtype=int) == np.array(array))

    def test_similar(self, setup_storage):
        storage, _ = setup_storage
        similar = storage.similar(float)
        assert isinstance(similar, gsto.NumpyStorage)
        assert similar.shape == (2, 3)

class TestH5Storage:

    def test_region_access(self, tmp_path):
        with h5py.File(tmp_path/'test.h5', mode='w') as f:
            dset = f.create_dataset('a', data=np.zeros((2, 3)))
            storage = gsto.H5Storage(dset)

            src = gsto.NumpyStorage(np.array([[1.0, 2.0]]))
            ranges = (range(1, 2), range(1, 3))
            trav.copy_region(src, trav.full_ranges((1, 2)), storage, ranges)
            assert np.all(dset[1, 1:3] == [1.0, 2.0])
            assert np.all(storage.view(ranges) == src.data)

            storage.fill(3.0)
            assert np.all(dset[()] == 3.0)

    def test_invalid_type(self):
        with pytest.raises(TypeError):
            gsto.H5Storage(np.zeros((2, 3)))
