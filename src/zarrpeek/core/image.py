from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from zarrpeek.errors import BufferSizeError

if TYPE_CHECKING:
    from PIL import Image

    from zarrpeek.core.normalize import NormalizedImage


@dataclass(frozen=True)
class GrayImage:
    """A single-channel 8-bit image stored row-major, top row first."""

    buffer: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        if len(self.buffer) != self.width * self.height:
            raise BufferSizeError(len(self.buffer), self.height, self.width)

    def to_array(self) -> NormalizedImage:
        return np.frombuffer(self.buffer, dtype=np.uint8).reshape(self.height, self.width)

    def to_pil(self) -> Image.Image:
        from PIL import Image

        return Image.frombytes("L", (self.width, self.height), self.buffer)


def assemble(image: NormalizedImage) -> GrayImage:
    """
    Pack a 2-D uint8 matrix into a contiguous row-major buffer.

    Raises
    ------
    TypeError
        If ``image`` is not a 2-D uint8 matrix.
    BufferSizeError
        If the packed buffer does not hold exactly rows x columns bytes.
    """
    if image.ndim != 2 or image.dtype != np.uint8:
        msg = f"Expected a 2-D uint8 matrix. Got a {image.ndim}-D {image.dtype} array instead."
        raise TypeError(msg)
    rows, columns = image.shape
    buffer = np.ascontiguousarray(image).tobytes(order="C")
    return GrayImage(buffer=buffer, width=columns, height=rows)
