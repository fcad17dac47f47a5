"""
This package provides pseudo block arrays: block views over a single contiguous array
"""


## Detect if optional packages exist
def make_require(module_name, has_module):
    def require_module(func):
        def dec_func(*args, **kwargs):
            if has_module:
                return func(*args, **kwargs)
            else:
                raise ImportError(
                    f"Function {func} this can't be called without {module_name}"
                )

        return dec_func

    return require_module


try:
    import h5py as _
except ImportError:
    _HAS_H5PY = False
else:
    _HAS_H5PY = True
require_h5py = make_require('h5py', _HAS_H5PY)


from .errors import (
    InvalidPartitionError,
    BlockIndexError,
    BoundsCheckError,
    ShapeMismatchError
)
from .blocksizes import BlockSizes, BlockIndex
from .pseudoblockarray import (
    PseudoBlockArray,
    empty,
    zeros,
    ones,
    full,
    rand
)
