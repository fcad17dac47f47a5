"""
Exceptions raised when partitioning, indexing or copying pseudo block arrays
"""


class _BasePseudoBlockError(ValueError):
    _msg = ""

    def __init__(self, *args):
        super().__init__(self._msg.format(*args))


class _BasePseudoBlockIndexError(IndexError):
    _msg = ""

    def __init__(self, *args):
        super().__init__(self._msg.format(*args))


class InvalidPartitionError(_BasePseudoBlockError):
    _msg = "invalid block size {1!r} along axis {0}; block sizes must be positive"


class EmptyAxisPartitionError(InvalidPartitionError):
    _msg = "axis {0} has no blocks; every axis needs at least one block"


class BoundaryPartitionError(InvalidPartitionError):
    _msg = (
        "invalid block boundaries {1!r} along axis {0}; boundaries must start"
        " at 0 and be strictly increasing"
    )


class BlockIndexError(_BasePseudoBlockIndexError):
    _msg = "block index {0!r} out of range for axis {1} with {2} blocks"


class BlockLabelError(BlockIndexError):
    _msg = "unknown block label {0!r} for axis {1} with labels {2!r}"


class BoundsCheckError(_BasePseudoBlockIndexError):
    _msg = "index {0!r} out of bounds for axis {1} with size {2}"


class AxisIndexError(_BasePseudoBlockIndexError):
    _msg = "axis {0!r} out of range for array with {1} dimensions"


class BlockCoordLengthError(BlockIndexError):
    _msg = "wrong number of block indices in {0!r}; expected {1}, got {2}"


class IndexLengthError(BoundsCheckError):
    _msg = "wrong number of indices in {0!r}; expected {1}, got {2}"


class ShapeMismatchError(ValueError):
    """
    Raised when an array or buffer has a different shape than required

    Attributes
    ----------
    expected :
        The required shape
    actual :
        The shape that was supplied
    """
    def __init__(self, expected, actual, msg=None):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        if msg is None:
            msg = f"expected shape {self.expected} but got shape {self.actual}"
        super().__init__(msg)
