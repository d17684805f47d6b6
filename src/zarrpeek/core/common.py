from __future__ import annotations

import functools
import operator
from collections.abc import Iterable
from typing import Final

ArrayShape = tuple[int, ...]
ShapeLike = Iterable[int] | int

# names of the two trailing dimensions, in order
DISPLAY_AXES: Final = ("Y", "X")
NUM_DISPLAY_AXES: Final = len(DISPLAY_AXES)


def product(tup: tuple[int, ...]) -> int:
    return functools.reduce(operator.mul, tup, 1)


def parse_shapelike(data: ShapeLike) -> tuple[int, ...]:
    if isinstance(data, int):
        if data < 0:
            raise ValueError(f"Expected a non-negative integer. Got {data} instead")
        return (data,)
    try:
        data_tuple = tuple(operator.index(v) for v in data)
    except TypeError as e:
        msg = f"Expected an integer or an iterable of integers. Got {data!r} instead."
        raise TypeError(msg) from e

    if not all(v > -1 for v in data_tuple):
        msg = f"Expected all values to be non-negative. Got {data} instead."
        raise ValueError(msg)
    return data_tuple
