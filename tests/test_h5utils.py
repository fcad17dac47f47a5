"""
Tests that h5utils works
"""

import pytest

import numpy as np
import h5py

import pseudoblockarray.pseudoblockarray as pba
from pseudoblockarray.h5utils import (
    write_pseudo_block_array,
    read_pseudo_block_array,
    read_block_sizes
)


@pytest.fixture()
def setup_parray():
    """
    Return a `PseudoBlockArray` instance
    """
    labels = (('a', 'b', 'c'), ())
    A = pba.rand([2, 10, 3], [4, 1], labels=labels)
    return A


def test_write_pseudo_block_array(setup_parray, tmp_path):
    A = setup_parray
    with h5py.File(f"{tmp_path/'test.h5'}", mode='w') as f:
        dset = write_pseudo_block_array(f, 'A', A)

        assert dset.shape == A.shape
        assert np.all(dset[()] == A.array)
        assert read_block_sizes(dset) == A.block_sizes


def test_read_pseudo_block_array(setup_parray, tmp_path):
    A = setup_parray
    with h5py.File(f"{tmp_path/'test.h5'}", mode='w') as f:
        write_pseudo_block_array(f, 'A', A)

    with h5py.File(f"{tmp_path/'test.h5'}", mode='r') as f:
        B = read_pseudo_block_array(f, 'A')

    assert isinstance(B.array, np.ndarray)
    assert B.owns_storage
    assert B.block_sizes == A.block_sizes
    assert np.all(B.array == A.array)


def test_read_pseudo_block_array_no_load(setup_parray, tmp_path):
    """
    Test block reads/writes on an array backed by the dataset go to the file
    """
    A = setup_parray
    with h5py.File(f"{tmp_path/'test.h5'}", mode='a') as f:
        write_pseudo_block_array(f, 'A', A)

        B = read_pseudo_block_array(f, 'A', load=False)
        assert isinstance(B.array, h5py.Dataset)
        assert not B.owns_storage

        assert np.all(B.getblock(('b', 0)) == A.getblock(('b', 0)))

        B.setblock(('c', 1), np.zeros((3, 1)))
        assert np.all(f['A'][12:15, 4:5] == 0)

        buf = B.getblock_into(np.empty((2, 1)), ('a', 1))
        assert np.all(buf == A.array[0:2, 4:5])

        B[0, 0] = -1.0
        assert f['A'][0, 0] == -1.0


def test_read_pseudo_block_array_scalar(tmp_path):
    """
    Test a 0-dimensional array is read back as a 0-dimensional `np.ndarray`
    """
    A = pba.PseudoBlockArray(np.array(3.0))
    with h5py.File(f"{tmp_path/'test.h5'}", mode='w') as f:
        write_pseudo_block_array(f, 'A', A)

    with h5py.File(f"{tmp_path/'test.h5'}", mode='r') as f:
        B = read_pseudo_block_array(f, 'A')

    assert isinstance(B.array, np.ndarray)
    assert B.shape == ()
    assert B.block_sizes == A.block_sizes
    assert B[()] == 3.0
