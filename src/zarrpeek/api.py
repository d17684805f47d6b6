from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from zarrpeek.core.config import config, parse_crop_size
from zarrpeek.core.decode import decode_subset
from zarrpeek.core.image import GrayImage, assemble
from zarrpeek.core.indexing import Subset, SubsetObserver, resolve_subset
from zarrpeek.core.normalize import NormalizationRange, normalize
from zarrpeek.storage import open_array

if TYPE_CHECKING:
    import os
    from collections.abc import Sequence

    from zarrpeek.core.dtype import DecodedMatrix
    from zarrpeek.storage import ArrayHandle

logger = logging.getLogger(__name__)

__all__ = ["PeekResult", "peek", "read_image"]


class PeekResult(NamedTuple):
    image: GrayImage
    subset: Subset
    range: NormalizationRange


def read_image(
    array: ArrayHandle,
    slice_indices: Sequence[int] | None = None,
    crop_size: int = 720,
    observer: SubsetObserver | None = None,
) -> tuple[DecodedMatrix, Subset]:
    """Resolve the plane to display from ``array`` and decode it to float32."""
    subset = resolve_subset(array.shape, slice_indices, crop_size, observer=observer)
    return decode_subset(array, subset), subset


def peek(
    path: str | os.PathLike[str],
    array_name: str | None = None,
    slice_indices: Sequence[int] | None = None,
    crop_size: int | None = None,
    low: float | None = None,
    high: float | None = None,
    observer: SubsetObserver | None = None,
) -> PeekResult:
    """
    Read a 2-D plane of an array and turn it into an 8-bit greyscale image.

    Parameters
    ----------
    path : str | os.PathLike
        The location of the group holding the array.
    array_name : str | None, default=None
        The array (resolution level) within the group. Defaults to the ``array_name`` config
        value.
    slice_indices : Sequence[int] | None, default=None
        Indices for the dimensions in front of the last two. Dimensions without an index are
        sliced at their middle.
    crop_size : int | None, default=None
        The maximum extent of each displayed dimension. Defaults to the ``crop_size`` config
        value.
    low, high : float | None, default=None
        The quantiles that bound the normalization range. Default to the ``quantiles.low``
        and ``quantiles.high`` config values.
    observer : SubsetObserver | None, default=None
        Notified of the slicing and cropping decisions.

    Returns
    -------
    PeekResult

    Raises
    ------
    BadConfigError
        If a configuration value used as a default is invalid, e.g. a crop size below 1.
    """
    if array_name is None:
        array_name = config.get("array_name")
    if crop_size is None:
        crop_size = parse_crop_size(config.get("crop_size"))
    if low is None:
        low = float(config.get("quantiles.low"))
    if high is None:
        high = float(config.get("quantiles.high"))

    array = open_array(path, array_name)
    logger.debug("Array shape %s, dtype %s", array.shape, array.dtype)
    decoded, subset = read_image(array, slice_indices, crop_size, observer=observer)
    normalized, value_range = normalize(decoded, low, high)
    logger.debug("Normalization range %s", value_range)
    return PeekResult(image=assemble(normalized), subset=subset, range=value_range)
