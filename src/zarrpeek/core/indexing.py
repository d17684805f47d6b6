from __future__ import annotations

import logging
import operator
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from zarrpeek.core.common import DISPLAY_AXES, NUM_DISPLAY_AXES, parse_shapelike, product
from zarrpeek.errors import (
    IndexOutOfBoundsError,
    InvalidShapeError,
    ShapeMismatchError,
    TooManyIndicesError,
)

if TYPE_CHECKING:
    from zarrpeek.core.common import ArrayShape, ShapeLike

logger = logging.getLogger(__name__)


@runtime_checkable
class SubsetObserver(Protocol):
    """Receives the decisions taken while resolving a subset."""

    def on_slice(self, dimension: int, index: int) -> None: ...

    def on_crop(self, axis: str, size: int, full_size: int) -> None: ...


class LoggingObserver:
    """Reports slicing and cropping decisions through the ``logging`` module."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def on_slice(self, dimension: int, index: int) -> None:
        self.log.info("Slicing dimension %d at index %d", dimension, index)

    def on_crop(self, axis: str, size: int, full_size: int) -> None:
        self.log.info("Cropping dimension %s size %d (full size %d)", axis, size, full_size)


@dataclass(frozen=True)
class Subset:
    """
    A rectangular region of an N-dimensional array.

    Attributes
    ----------
    start : tuple[int, ...]
        The offset of the region along each dimension.
    extent : tuple[int, ...]
        The number of elements of the region along each dimension.
    """

    start: tuple[int, ...]
    extent: tuple[int, ...]

    def __init__(self, start: ShapeLike, extent: ShapeLike) -> None:
        start_parsed = parse_shapelike(start)
        extent_parsed = parse_shapelike(extent)
        if len(start_parsed) != len(extent_parsed):
            raise ShapeMismatchError(
                f"Subset start {start_parsed} and extent {extent_parsed} differ in length"
            )
        object.__setattr__(self, "start", start_parsed)
        object.__setattr__(self, "extent", extent_parsed)

    @property
    def ndim(self) -> int:
        return len(self.start)

    @property
    def size(self) -> int:
        return product(self.extent)

    @property
    def stop(self) -> tuple[int, ...]:
        return tuple(s + e for s, e in zip(self.start, self.extent, strict=True))

    @property
    def selection(self) -> tuple[slice, ...]:
        return tuple(slice(s, s + e) for s, e in zip(self.start, self.extent, strict=True))

    @property
    def display_shape(self) -> tuple[int, int]:
        """The (rows, columns) of the 2-D plane selected by this subset."""
        rows, columns = self.extent[-NUM_DISPLAY_AXES:]
        return rows, columns


def check_subset(subset: Subset, array_shape: ArrayShape) -> None:
    """
    Check that ``subset`` lies within ``array_shape`` and selects a single 2-D plane.

    Raises
    ------
    ShapeMismatchError
        If the ranks differ, the subset leaves the array, or a leading dimension has an
        extent other than 1.
    """
    if subset.ndim != len(array_shape):
        raise ShapeMismatchError(
            f"Subset of rank {subset.ndim} does not match array of shape {array_shape}"
        )
    for dim, (stop, dim_len) in enumerate(zip(subset.stop, array_shape, strict=True)):
        if stop > dim_len:
            raise ShapeMismatchError(
                f"Subset ends at {stop} in dimension {dim} with length {dim_len}"
            )
    leading = subset.extent[:-NUM_DISPLAY_AXES]
    if any(e != 1 for e in leading):
        raise ShapeMismatchError(
            f"Leading dimensions must have an extent of 1 to display a plane, got {leading}"
        )


def _parse_slice_index(index: int, dim: int, dim_len: int) -> int:
    index = operator.index(index)
    if not 0 <= index < dim_len:
        raise IndexOutOfBoundsError(index, dim, dim_len)
    return index


def resolve_subset(
    array_shape: ShapeLike,
    slice_indices: Sequence[int] | None = None,
    crop_size: int = 720,
    observer: SubsetObserver | None = None,
) -> Subset:
    """
    Choose the region of an array to display.

    Every dimension except the last two is reduced to a single index: the matching entry of
    ``slice_indices`` if one was given, the middle of the dimension otherwise. The last two
    dimensions start at 0 and are cut to at most ``crop_size`` elements.

    Parameters
    ----------
    array_shape : ShapeLike
        The shape of the array, with at least 2 dimensions.
    slice_indices : Sequence[int] | None, default=None
        Indices for the leading dimensions, in order. May be shorter than the number of
        leading dimensions.
    crop_size : int, default=720
        The maximum extent of each display dimension.
    observer : SubsetObserver | None, default=None
        Notified of every slicing and cropping decision. Defaults to a ``LoggingObserver``.

    Returns
    -------
    Subset

    Examples
    --------
    >>> resolve_subset((5, 3, 1000, 2000), [2], crop_size=720)
    Subset(start=(2, 1, 0, 0), extent=(1, 1, 720, 720))
    """
    shape = parse_shapelike(array_shape)
    if len(shape) < NUM_DISPLAY_AXES:
        raise InvalidShapeError(shape)
    if crop_size < 0:
        raise ValueError(f"Expected a non-negative crop size. Got {crop_size} instead")
    if observer is None:
        observer = LoggingObserver()

    ndims_to_be_sliced = len(shape) - NUM_DISPLAY_AXES
    indices = list(slice_indices) if slice_indices is not None else []
    if len(indices) > ndims_to_be_sliced:
        raise TooManyIndicesError(ndims_to_be_sliced, len(indices))

    start: list[int] = []
    for dim, index in enumerate(indices):
        start.append(_parse_slice_index(index, dim, shape[dim]))
    # unspecified leading dimensions default to their midpoint
    for dim in range(len(start), ndims_to_be_sliced):
        start.append(shape[dim] // 2)
    for dim, index in enumerate(start):
        observer.on_slice(dim, index)

    extent = [1] * ndims_to_be_sliced
    for axis, full_size in zip(DISPLAY_AXES, shape[ndims_to_be_sliced:], strict=True):
        start.append(0)
        if crop_size >= full_size:
            extent.append(full_size)
        else:
            observer.on_crop(axis, crop_size, full_size)
            extent.append(crop_size)

    subset = Subset(start, extent)
    check_subset(subset, shape)
    return subset
