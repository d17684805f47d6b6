from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest
import zarr
from numpy.testing import assert_array_equal

from tests.conftest import FakeArray, RecordingObserver, expected_plane
from zarrpeek.core.decode import decode_subset
from zarrpeek.core.dtype import ElementStorageType
from zarrpeek.core.indexing import Subset, resolve_subset
from zarrpeek.errors import ShapeMismatchError, StorageError, UnsupportedDataTypeError

if TYPE_CHECKING:
    from tests.conftest import ArrayWriter


@pytest.mark.parametrize("storage_type", list(ElementStorageType))
def test_decode_every_storage_type(
    write_array: ArrayWriter, storage_type: ElementStorageType
) -> None:
    data = np.arange(12, dtype=storage_type.numpy_dtype).reshape(3, 4)
    root = write_array(data)
    array = zarr.open_array(store=str(root), path="0", mode="r")

    decoded = decode_subset(array, Subset((0, 0), (3, 4)))

    assert decoded.dtype == np.float32
    assert_array_equal(decoded, data.astype(np.float32))


def test_decode_collapses_leading_dimensions(write_array: ArrayWriter) -> None:
    data = np.arange(2 * 3 * 40 * 50, dtype="uint16").reshape(2, 3, 40, 50)
    root = write_array(data, chunks=(1, 1, 16, 16))
    array = zarr.open_array(store=str(root), path="0", mode="r")
    subset = resolve_subset(array.shape, [1], crop_size=32, observer=RecordingObserver())

    decoded = decode_subset(array, subset)

    assert decoded.shape == (32, 32)
    assert_array_equal(decoded, data[1, 1, :32, :32].astype(np.float32))


def test_decode_keeps_row_and_column_order() -> None:
    data = np.array([[[1, 2, 3], [4, 5, 6]]], dtype="int8")
    decoded = decode_subset(FakeArray(data), Subset((0, 0, 0), (1, 2, 3)))
    assert_array_equal(decoded, np.array([[1, 2, 3], [4, 5, 6]], dtype=np.float32))


def test_decode_issues_a_single_read() -> None:
    data = np.zeros((4, 30, 30), dtype="float64")
    array = FakeArray(data)
    subset = resolve_subset(data.shape, crop_size=10, observer=RecordingObserver())

    decoded = decode_subset(array, subset)

    assert array.reads == [(slice(2, 3), slice(0, 10), slice(0, 10))]
    assert_array_equal(decoded, expected_plane(data, subset))


def test_decode_narrows_float64() -> None:
    data = np.full((2, 2), 0.1, dtype="float64")
    decoded = decode_subset(FakeArray(data), Subset((0, 0), (2, 2)))
    assert decoded.dtype == np.float32
    assert decoded[0, 0] == np.float32(0.1)


def test_decode_unsupported_type_reads_nothing() -> None:
    array = FakeArray(np.zeros((3, 3), dtype="complex64"))
    with pytest.raises(UnsupportedDataTypeError, match="complex64"):
        decode_subset(array, Subset((0, 0), (3, 3)))
    assert array.reads == []


def test_decode_wraps_storage_failures() -> None:
    cause = OSError("chunk file vanished")
    array = FakeArray(np.zeros((3, 3), dtype="uint8"), error=cause)
    with pytest.raises(StorageError, match="chunk file vanished") as exc_info:
        decode_subset(array, Subset((0, 0), (3, 3)))
    assert exc_info.value.__cause__ is cause


def test_decode_rejects_block_of_wrong_shape() -> None:
    array = FakeArray(np.zeros((1, 3, 4), dtype="uint8"), result=np.zeros((3, 4), dtype="uint8"))
    with pytest.raises(ShapeMismatchError, match="does not match subset extent"):
        decode_subset(array, Subset((0, 0, 0), (1, 3, 4)))


def test_decode_rejects_non_unit_leading_extent() -> None:
    array = FakeArray(np.zeros((2, 3, 4), dtype="uint8"))
    with pytest.raises(ShapeMismatchError, match="Cannot reshape"):
        decode_subset(array, Subset((0, 0, 0), (2, 3, 4)))
