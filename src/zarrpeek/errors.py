__all__ = [
    "BasePeekError",
    "BufferSizeError",
    "DegenerateRangeError",
    "IndexOutOfBoundsError",
    "InvalidQuantileError",
    "InvalidShapeError",
    "ShapeMismatchError",
    "StorageError",
    "TooManyIndicesError",
    "UnsupportedDataTypeError",
]


class BasePeekError(Exception):
    """
    Base error which all zarrpeek errors are sub-classed from.
    """

    _msg: str = "{}"

    def __init__(self, *args: object) -> None:
        """
        The arguments fill the template string class variable ``_msg``. Without arguments the
        template itself is the message.
        """
        if args:
            super().__init__(self._msg.format(*args))
        else:
            super().__init__(self._msg)


class InvalidShapeError(BasePeekError, ValueError):
    """Raised when the array has fewer than two dimensions."""

    _msg = "Array must have at least 2 dimensions, got shape {}"


class TooManyIndicesError(BasePeekError, ValueError):
    """
    Raised when more slice indices are given than the array has non-display dimensions.
    """

    _msg = "Too many slice indices provided. Expected {} but got {}"


class IndexOutOfBoundsError(BasePeekError, IndexError):
    """Raised when a slice index does not fit the dimension it selects from."""

    _msg = "Slice index {} is out of bounds for dimension {} with length {}"


class UnsupportedDataTypeError(BasePeekError, TypeError):
    """Raised when the array's data type has no widening conversion to float32."""

    _msg = "Unsupported data type: {!r}"


class ShapeMismatchError(BasePeekError, RuntimeError):
    """
    Raised when a subset or a retrieved block does not have the shape the pipeline relies on.

    This signals a broken invariant, for example a leading dimension with an extent other than
    one reaching the reshape into a 2-D matrix.
    """


class StorageError(BasePeekError, OSError):
    """
    Raised when the storage backend fails to open or read an array.

    The backend's own exception is chained as ``__cause__``.
    """

    _msg = "Failed to {} {!r}: {}"


class InvalidQuantileError(BasePeekError, ValueError):
    """Raised when a normalization quantile is not within [0, 1]."""

    _msg = "Invalid value for quantile '{}'. Expected {}. Got {!r}."


class DegenerateRangeError(BasePeekError, ValueError):
    """Raised when the normalization range collapses to a single value."""

    _msg = "Cannot normalize: low and high quantiles are both {}"


class BufferSizeError(BasePeekError, RuntimeError):
    """Raised when an image buffer does not hold exactly rows x columns bytes."""

    _msg = "Image buffer of {} bytes does not match {} rows x {} columns"
