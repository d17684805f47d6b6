"""
The ``zarrpeek.core`` module holds the numeric pipeline: resolving the subset to read,
decoding it to floats, normalizing it and packing it into an image.
"""

from __future__ import annotations

from zarrpeek.core.decode import decode_subset
from zarrpeek.core.dtype import ElementStorageType
from zarrpeek.core.image import GrayImage, assemble
from zarrpeek.core.indexing import LoggingObserver, Subset, SubsetObserver, resolve_subset
from zarrpeek.core.normalize import NormalizationRange, normalize

__all__ = [
    "ElementStorageType",
    "GrayImage",
    "LoggingObserver",
    "NormalizationRange",
    "Subset",
    "SubsetObserver",
    "assemble",
    "decode_subset",
    "normalize",
    "resolve_subset",
]
