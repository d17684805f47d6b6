from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, NamedTuple

import numpy as np
import numpy.typing as npt

from zarrpeek.core.config import config, parse_degenerate_policy, parse_fill_value
from zarrpeek.errors import DegenerateRangeError, InvalidQuantileError

if TYPE_CHECKING:
    from zarrpeek.core.config import DegeneratePolicy

logger = logging.getLogger(__name__)

NormalizedImage = npt.NDArray[np.uint8]

UINT8_MAX = 255


class NormalizationRange(NamedTuple):
    low: float
    high: float

    @property
    def is_degenerate(self) -> bool:
        return self.low == self.high


def parse_quantile(name: str, q: float) -> float:
    if not 0.0 <= q <= 1.0:  # also rejects NaN
        raise InvalidQuantileError(name, "a value in [0, 1]", q)
    return float(q)


def nearest_rank(q: float, n: int) -> int:
    """
    The rank of the ``q`` quantile among ``n`` sorted values, rounding half up.

    Examples
    --------
    >>> nearest_rank(0.5, 4)
    2
    >>> nearest_rank(0.999, 1000)
    998
    """
    return math.floor(q * (n - 1) + 0.5)


def nearest_rank_quantiles(data: npt.NDArray[Any], *qs: float) -> tuple[float, ...]:
    """
    The nearest-rank quantiles ``qs`` of the finite values of ``data``.

    NaN and infinite values are left out, so the quantiles are always finite.

    Raises
    ------
    DegenerateRangeError
        If ``data`` holds no finite values.
    """
    values = np.ravel(data)
    values = values[np.isfinite(values)]
    if values.size == 0:
        raise DegenerateRangeError("NaN (no finite values to normalize)")
    ranks = [nearest_rank(q, values.size) for q in qs]
    # a partial sort around the requested ranks is enough
    values = np.partition(values, sorted(set(ranks)))
    return tuple(float(values[rank]) for rank in ranks)


def normalize(
    matrix: npt.NDArray[np.floating[Any]],
    low_q: float,
    high_q: float,
    *,
    on_degenerate: DegeneratePolicy | None = None,
    fill_value: int | None = None,
) -> tuple[NormalizedImage, NormalizationRange]:
    """
    Stretch the contrast of ``matrix`` into 8-bit values.

    The ``low_q`` and ``high_q`` nearest-rank quantiles of the finite values bound the range.
    Elements are clipped to that range and mapped linearly onto [0, 255], so +inf maps to 255
    and -inf to 0. NaN elements map to 0.

    Parameters
    ----------
    matrix : ndarray
        The decoded image, as floats.
    low_q, high_q : float
        Quantiles in [0, 1] with ``low_q <= high_q``.
    on_degenerate : {"fill", "raise"} | None, default=None
        What to do when both quantiles are equal. "fill" returns a constant image of
        ``fill_value``; "raise" raises ``DegenerateRangeError``. Defaults to the
        ``normalize.on_degenerate`` config value.
    fill_value : int | None, default=None
        The byte value of a degenerate image. Defaults to the ``normalize.fill_value`` config
        value.

    Returns
    -------
    tuple[ndarray, NormalizationRange]
        The uint8 image and the quantile values used to normalize it.

    Raises
    ------
    InvalidQuantileError
        If a quantile lies outside [0, 1] or ``low_q > high_q``.
    DegenerateRangeError
        If the matrix has no finite values, or its range is degenerate and the policy is
        "raise".
    """
    low_q = parse_quantile("low", low_q)
    high_q = parse_quantile("high", high_q)
    if low_q > high_q:
        raise InvalidQuantileError("low", f"a value <= the high quantile {high_q}", low_q)
    policy = parse_degenerate_policy(
        on_degenerate if on_degenerate is not None else config.get("normalize.on_degenerate")
    )

    low, high = nearest_rank_quantiles(matrix, low_q, high_q)
    value_range = NormalizationRange(low, high)
    nan_mask = np.isnan(matrix)

    if value_range.is_degenerate:
        if policy == "raise":
            raise DegenerateRangeError(low)
        fill = parse_fill_value(
            fill_value if fill_value is not None else config.get("normalize.fill_value")
        )
        logger.warning("Degenerate normalization range at %s, filling with %d", low, fill)
        image = np.full(matrix.shape, fill, dtype=np.uint8)
        image[nan_mask] = 0
        return image, value_range

    # float64 keeps the scaling exact for float32 inputs with a large offset
    clipped = np.clip(matrix.astype(np.float64), low, high)
    scaled = np.rint((clipped - low) / (high - low) * UINT8_MAX)
    scaled[nan_mask] = 0
    image = np.clip(scaled, 0, UINT8_MAX).astype(np.uint8)
    return image, value_range
