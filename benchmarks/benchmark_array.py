"""
Contains functions for benchmarking `PseudoBlockArray` functions

Run this using `cProfile`, `line_profiler`, etc. as an entry point to
benchmarking
"""

import numpy as np

from pseudoblockarray.pseudoblockarray import PseudoBlockArray


def setup_array():
    sizes = (500, 500, 100, 900)
    array = np.ones((sum(sizes), sum(sizes)))
    return PseudoBlockArray(array, sizes, sizes)


def benchmark_block_copy(barray):
    for block in barray.block_coords():
        buf = np.empty(barray.blocksize(block))
        barray.getblock_into(buf, block)
        barray.setblock(block, buf)


if __name__ == '__main__':
    barray = setup_array()

    for n in range(20):
        benchmark_block_copy(barray)
