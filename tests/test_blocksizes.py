"""
Test the partitions in `pseudoblockarray.blocksizes`
"""

import copy

import pytest

from pseudoblockarray.blocksizes import BlockSizes, BlockIndex
from pseudoblockarray.errors import (
    InvalidPartitionError,
    BlockIndexError,
    BoundsCheckError,
    AxisIndexError
)

@pytest.fixture()
def setup_block_sizes():
    axis_sizes = ((3, 2, 1), (2, 4))
    labels = (('a', 'b', 'c'), ('x', 'y'))
    return BlockSizes(*axis_sizes, labels=labels), (axis_sizes, labels)

class TestBlockSizes:

    def test_cumul(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        assert block_sizes.cumul == ((0, 3, 5, 6), (0, 2, 6))

    def test_shape(self, setup_block_sizes):
        block_sizes, (axis_sizes, _) = setup_block_sizes
        assert block_sizes.shape == tuple(sum(sizes) for sizes in axis_sizes)
        assert block_sizes.shape == (6, 6)
        assert block_sizes.ndim == 2

    def test_nblocks(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        assert block_sizes.nblocks == (3, 2)
        assert block_sizes.axis_nblocks(0) == 3
        assert block_sizes.axis_nblocks(1) == 2

    def test_bshape(self, setup_block_sizes):
        block_sizes, (axis_sizes, _) = setup_block_sizes
        assert block_sizes.bshape == axis_sizes
        assert block_sizes.axis_sizes(1) == (2, 4)

    def test_blocksize(self, setup_block_sizes):
        block_sizes, (axis_sizes, _) = setup_block_sizes
        for dim, sizes in enumerate(axis_sizes):
            for ii, size in enumerate(sizes):
                assert block_sizes.blocksize(dim, ii) == size
        assert block_sizes.blocksize(0, 'b') == 2

    def test_blocksize_out_of_range(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        with pytest.raises(BlockIndexError):
            block_sizes.blocksize(0, 3)
        with pytest.raises(BlockIndexError):
            block_sizes.blocksize(1, -1)

    def test_axis_out_of_range(self, setup_block_sizes):
        """
        Test negative or too large axes are rejected rather than wrapped
        """
        block_sizes, _ = setup_block_sizes
        for dim in (-1, 2):
            with pytest.raises(AxisIndexError):
                block_sizes.axis_nblocks(dim)
            with pytest.raises(AxisIndexError):
                block_sizes.blocksize(dim, 0)
            with pytest.raises(AxisIndexError):
                block_sizes.axis_sizes(dim)
            with pytest.raises(AxisIndexError):
                block_sizes.total_size(dim)

    def test_globalrange(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        assert block_sizes.globalrange((0, 0)) == (range(0, 3), range(0, 2))
        assert block_sizes.globalrange((1, 1)) == (range(3, 5), range(2, 6))
        assert block_sizes.globalrange((2, 0)) == (range(5, 6), range(0, 2))
        assert block_sizes.globalrange(('c', 'y')) == (range(5, 6), range(2, 6))

    def test_globalrange_out_of_range(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        with pytest.raises(BlockIndexError):
            block_sizes.globalrange((3, 0))
        with pytest.raises(BlockIndexError):
            block_sizes.globalrange((0, 2))
        with pytest.raises(BlockIndexError):
            block_sizes.globalrange((0, 'z'))
        with pytest.raises(BlockIndexError):
            block_sizes.globalrange((0,))

    def test_block_shape(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        assert block_sizes.block_shape((1, 1)) == (2, 4)
        assert block_sizes.block_shape(('c', 'x')) == (1, 2)

    def test_total_size(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        assert block_sizes.total_size(0) == 6
        assert block_sizes.total_size(1) == 6

    def test_block_index(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        assert block_sizes.block_index((0, 0)) == BlockIndex((0, 0), (0, 0))
        assert block_sizes.block_index((3, 2)) == BlockIndex((1, 1), (0, 0))
        assert block_sizes.block_index((4, 5)) == BlockIndex((1, 1), (1, 3))
        assert block_sizes.block_index((5, 1)) == BlockIndex((2, 0), (0, 1))

        with pytest.raises(BoundsCheckError):
            block_sizes.block_index((6, 0))

    def test_global_index(self, setup_block_sizes):
        """
        Test `global_index` is the inverse of `block_index`
        """
        block_sizes, _ = setup_block_sizes
        for ii in range(6):
            for jj in range(6):
                block_idx = block_sizes.block_index((ii, jj))
                assert block_sizes.global_index(block_idx) == (ii, jj)

        assert block_sizes.global_index(BlockIndex(('b', 'y'), (1, 0))) == (4, 2)

        with pytest.raises(BoundsCheckError):
            block_sizes.global_index(BlockIndex((2, 0), (1, 0)))

    def test_copy(self, setup_block_sizes):
        block_sizes, _ = setup_block_sizes
        block_sizes_copy = block_sizes.copy()
        assert block_sizes_copy == block_sizes
        assert block_sizes_copy is not block_sizes

        assert copy.copy(block_sizes) == block_sizes
        assert copy.deepcopy(block_sizes) == block_sizes

    def test_from_cumul(self, setup_block_sizes):
        block_sizes, (_, labels) = setup_block_sizes
        assert BlockSizes.from_cumul((0, 3, 5, 6), (0, 2, 6), labels=labels) == block_sizes

    def test_repr(self):
        assert repr(BlockSizes([1, 1], [2, 1])) == "BlockSizes((1, 1), (2, 1))"

@pytest.fixture(params=[
    ([3, 0, 1],),
    ([2, 2], [1, -1]),
    ([],),
])
def setup_invalid_sizes(request):
    return request.param

def test_invalid_partition(setup_invalid_sizes):
    with pytest.raises(InvalidPartitionError):
        BlockSizes(*setup_invalid_sizes)

@pytest.fixture(params=[
    ((1, 3),),
    ((0, 3, 3),),
    ((0, 4, 2),),
    ((0,),),
])
def setup_invalid_cumul(request):
    return request.param

def test_invalid_cumul(setup_invalid_cumul):
    with pytest.raises(InvalidPartitionError):
        BlockSizes.from_cumul(*setup_invalid_cumul)

def test_invalid_sizes_type():
    with pytest.raises(TypeError):
        BlockSizes([1.5, 2])

def test_invalid_labels():
    with pytest.raises(ValueError):
        BlockSizes([1, 2], labels=(('a',),))
    with pytest.raises(ValueError):
        BlockSizes([1, 2], labels=(('a', 'a'),))
    with pytest.raises(ValueError):
        BlockSizes([1, 2], [3], labels=(('a', 'b'),))
