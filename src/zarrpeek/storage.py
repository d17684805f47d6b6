"""
Access to arrays held in a Zarr hierarchy.

This is the only module that talks to the ``zarr`` library. Everything it hands out satisfies
the small ``ArrayHandle`` protocol, so the decoding pipeline can be fed from any object with a
shape, a dtype and numpy-style basic indexing.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np
import zarr
from zarr.errors import BaseZarrError

from zarrpeek.core.dtype import ElementStorageType
from zarrpeek.errors import BasePeekError, StorageError

if TYPE_CHECKING:
    import numpy.typing as npt

    from zarrpeek.core.indexing import Subset

logger = logging.getLogger(__name__)

# exceptions the backend raises for missing, unreadable, malformed or undecodable data;
# numcodecs reports failed decompression as RuntimeError or ValueError
_BACKEND_ERRORS = (OSError, KeyError, RuntimeError, ValueError, BaseZarrError)


@runtime_checkable
class ArrayHandle(Protocol):
    @property
    def shape(self) -> tuple[int, ...]: ...

    @property
    def dtype(self) -> Any: ...

    def __getitem__(self, selection: Any) -> Any: ...


def normalize_array_name(array_name: str) -> str:
    """Strip the leading and trailing ``/`` from an array name, so ``/0`` and ``0`` match."""
    return array_name.strip("/")


def open_array(path: str | os.PathLike[str], array_name: str = "/0") -> zarr.Array:
    """
    Open an array of a Zarr hierarchy for reading.

    Parameters
    ----------
    path : str | os.PathLike
        The location of the group holding the array, e.g. 'data/image.ome.zarr'.
    array_name : str, default="/0"
        The path of the array (resolution level) within the group.

    Raises
    ------
    StorageError
        If the hierarchy or the array cannot be opened.
    """
    name = normalize_array_name(array_name)
    store = os.fspath(path)
    logger.debug("Opening array %r in %s", name, store)
    try:
        return zarr.open_array(store=store, path=name, mode="r")
    except BasePeekError:
        raise
    except _BACKEND_ERRORS as e:
        raise StorageError("open array", f"{store}/{name}", e) from e


def data_type(array: ArrayHandle) -> ElementStorageType:
    """The storage type of the elements of ``array``."""
    return ElementStorageType.from_dtype(array.dtype)


def retrieve_subset(array: ArrayHandle, subset: Subset) -> npt.NDArray[Any]:
    """
    Read the elements of ``subset`` from ``array`` in a single request.

    The result keeps the full rank of the subset.

    Raises
    ------
    StorageError
        If the backend fails to read or decode the chunks.
    """
    logger.debug("Reading subset start=%s extent=%s", subset.start, subset.extent)
    try:
        data = array[subset.selection]
    except BasePeekError:
        raise
    except _BACKEND_ERRORS as e:
        raise StorageError("read subset of", subset.selection, e) from e
    return np.asarray(data)
