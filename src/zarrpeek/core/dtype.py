from __future__ import annotations

from enum import Enum
from typing import Any

import numpy as np
import numpy.typing as npt

from zarrpeek.errors import UnsupportedDataTypeError

DecodedMatrix = npt.NDArray[np.float32]


class ElementStorageType(Enum):
    """
    The numeric element types an array may be stored with.

    Each member knows the native numpy data type it corresponds to, and how to widen a block of
    its elements into float32.
    """

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @classmethod
    def from_dtype(cls, dtype: npt.DTypeLike) -> ElementStorageType:
        """
        Look up the storage type of a numpy data type, regardless of its byte order.

        Raises
        ------
        UnsupportedDataTypeError
            If the data type is not one of the enumerated integer or float types.
        """
        try:
            native = np.dtype(dtype)
        except TypeError as e:
            raise UnsupportedDataTypeError(str(dtype)) from e
        # structured and subarray types can share a kind with a plain numeric type
        if native.fields is not None or native.subdtype is not None:
            raise UnsupportedDataTypeError(str(native))
        try:
            return cls(native.name)
        except ValueError as e:
            raise UnsupportedDataTypeError(native.name) from e

    @property
    def numpy_dtype(self) -> np.dtype[Any]:
        return np.dtype(self.value)

    @property
    def is_integer(self) -> bool:
        return self.numpy_dtype.kind in ("i", "u")

    def widen(self, data: npt.NDArray[Any]) -> DecodedMatrix:
        """
        Convert a block of elements of this storage type to float32.

        Integers are cast directly and float64 is narrowed; float32 data is returned as is.
        """
        if data.dtype.name != self.value:
            raise UnsupportedDataTypeError(data.dtype.name)
        if self is ElementStorageType.FLOAT32:
            return data.astype(np.float32, copy=False)
        return data.astype(np.float32)
