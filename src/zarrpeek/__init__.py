from importlib.metadata import PackageNotFoundError, version

from zarrpeek.api import PeekResult, peek, read_image
from zarrpeek.core.config import config
from zarrpeek.core.dtype import ElementStorageType
from zarrpeek.core.image import GrayImage
from zarrpeek.core.indexing import Subset, resolve_subset
from zarrpeek.core.normalize import NormalizationRange, normalize
from zarrpeek.storage import open_array

try:
    __version__ = version("zarrpeek")
except PackageNotFoundError:
    # running from a source tree that was never installed
    __version__ = "unknown"

__all__ = [
    "ElementStorageType",
    "GrayImage",
    "NormalizationRange",
    "PeekResult",
    "Subset",
    "__version__",
    "config",
    "normalize",
    "open_array",
    "peek",
    "read_image",
    "resolve_subset",
]
