from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zarrpeek.errors import ShapeMismatchError
from zarrpeek.storage import data_type, retrieve_subset

if TYPE_CHECKING:
    from zarrpeek.core.dtype import DecodedMatrix
    from zarrpeek.core.indexing import Subset
    from zarrpeek.storage import ArrayHandle

logger = logging.getLogger(__name__)


def decode_subset(array: ArrayHandle, subset: Subset) -> DecodedMatrix:
    """
    Read ``subset`` from ``array`` and return it as a 2-D float32 matrix.

    The element storage type of the array selects the widening conversion. The leading
    dimensions of the subset must all have an extent of 1; they are dropped, leaving the
    (rows, columns) of the two trailing dimensions.

    Raises
    ------
    UnsupportedDataTypeError
        If the array's data type is not a supported integer or float type.
    StorageError
        If the storage backend fails to read the subset.
    ShapeMismatchError
        If the retrieved block does not have the extents of the subset, or cannot be
        collapsed to two dimensions.
    """
    storage_type = data_type(array)
    raw = retrieve_subset(array, subset)
    if raw.shape != subset.extent:
        raise ShapeMismatchError(
            f"Retrieved block of shape {raw.shape} does not match subset extent {subset.extent}"
        )
    decoded = storage_type.widen(raw)
    rows, columns = subset.display_shape
    if decoded.size != rows * columns:
        raise ShapeMismatchError(
            f"Cannot reshape block of shape {decoded.shape} into ({rows}, {columns})"
        )
    logger.debug("Decoded %s block of shape %s", storage_type.value, decoded.shape)
    return decoded.reshape(rows, columns)
