"""
Draw greyscale images in the terminal.

Each terminal cell shows two pixels stacked on top of each other: the upper half block
character is drawn with the upper pixel as foreground colour and the lower pixel as
background colour.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image
from rich.color import Color
from rich.console import Console
from rich.measure import Measurement
from rich.segment import Segment
from rich.style import Style

from zarrpeek.core.config import config
from zarrpeek.core.image import GrayImage, assemble

if TYPE_CHECKING:
    from rich.console import ConsoleOptions, RenderResult

UPPER_HALF_BLOCK = "▀"


@functools.lru_cache(maxsize=1024)
def _cell_style(upper: int, lower: int | None) -> Style:
    if lower is None:
        return Style(color=Color.from_rgb(upper, upper, upper))
    return Style(
        color=Color.from_rgb(upper, upper, upper),
        bgcolor=Color.from_rgb(lower, lower, lower),
    )


class HalfBlockImage:
    """A rich renderable drawing a ``GrayImage`` two pixel rows per line."""

    def __init__(self, image: GrayImage) -> None:
        self.image = image

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        pixels = self.image.to_array()
        for top in range(0, self.image.height, 2):
            upper = pixels[top].tolist()
            if top + 1 < self.image.height:
                lower: list[int | None] = pixels[top + 1].tolist()
            else:
                lower = [None] * self.image.width
            for up, down in zip(upper, lower, strict=True):
                yield Segment(UPPER_HALF_BLOCK, _cell_style(up, down))
            yield Segment.line()

    def __rich_measure__(self, console: Console, options: ConsoleOptions) -> Measurement:
        return Measurement(self.image.width, self.image.width)


def fit_image(image: GrayImage, max_width: int) -> GrayImage:
    """
    Shrink ``image`` to at most ``max_width`` columns, keeping its aspect ratio.

    Images that already fit are returned unchanged.
    """
    if max_width < 1:
        raise ValueError(f"Expected a positive width. Got {max_width} instead")
    if image.width <= max_width:
        return image
    height = max(1, round(image.height * max_width / image.width))
    resized = image.to_pil().resize((max_width, height), Image.Resampling.LANCZOS)
    return assemble(np.asarray(resized, dtype=np.uint8))


def render_image(
    image: GrayImage, console: Console | None = None, max_width: int | None = None
) -> None:
    """
    Print ``image`` at the cursor position of ``console``.

    Parameters
    ----------
    image : GrayImage
        The image to draw.
    console : rich.console.Console | None, default=None
        Where to draw. Defaults to a console on standard output.
    max_width : int | None, default=None
        The maximum number of terminal columns to use. Defaults to the ``render.max_width``
        config value, or the width of the console when that is not set.
    """
    if console is None:
        console = Console()
    if max_width is None:
        max_width = config.get("render.max_width") or console.width
    console.print(HalfBlockImage(fit_image(image, max_width)))
