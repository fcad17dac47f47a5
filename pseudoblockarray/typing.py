"""
Modules to collect all types used for type hints
"""
from typing import TypeVar, Tuple, List, Union, Mapping

from . import _HAS_H5PY
if _HAS_H5PY:
    import h5py

_Null = type(None)
if _HAS_H5PY:
    H5Dataset = h5py.Dataset
else:
    H5Dataset = _Null

Scalar = Union[int, float, complex]

T = TypeVar("T")
NestedList = Union[List['NestedList'], List[T]]

Shape = Tuple[int, ...]

## Partition types
# Block sizes along a single axis, e.g. `(3, 2, 1)`
AxisSizes = Tuple[int, ...]
# Block sizes along every axis, e.g. `((1, 1), (2, 1))`
BlockShape = Tuple[AxisSizes, ...]
# Cumulative block boundaries along a single axis, e.g. `(0, 3, 5, 6)`
AxisCumul = Tuple[int, ...]

Labels = Tuple[str, ...]
MultiLabels = Tuple[Labels, ...]

## Indexing types
# A block along an axis can be selected by integer or by label
StdIndex = int
GenIndex = Union[int, str]

StdBlockCoord = Tuple[StdIndex, ...]
GenBlockCoord = Tuple[GenIndex, ...]

# Element coordinates into the full array
MultiStdIndex = Tuple[StdIndex, ...]

# A half-open index range along each axis
Ranges = Tuple[range, ...]

LabelToStdIndex = Mapping[str, StdIndex]
MultiLabelToStdIndex = Tuple[LabelToStdIndex, ...]
