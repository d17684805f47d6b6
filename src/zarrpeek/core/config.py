"""
The config module is responsible for managing the configuration of zarrpeek and is based on the
Donfig python library.

Example:
    The default crop size used by the command line tool and by ``zarrpeek.api.peek`` can be set
    programmatically,

    ```python
    from zarrpeek.core.config import config

    config.set({"crop_size": 256})
    ```

    or with the environment variable ``ZARRPEEK_CROP_SIZE``. The double underscore ``__`` is
    used to indicate nested access.

    ```bash
    export ZARRPEEK_QUANTILES__LOW=0.01
    ```

For more information, see the Donfig documentation at https://github.com/pytroll/donfig.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from donfig import Config as DConfig

if TYPE_CHECKING:
    from donfig.config_obj import ConfigSet

DegeneratePolicy = Literal["fill", "raise"]


class BadConfigError(ValueError):
    _msg = "bad Config: %r"


class Config(DConfig):  # type: ignore[misc]
    """The Config will collect configuration from config files and environment variables

    Example environment variables:
    Grabs environment variables of the form "ZARRPEEK_FOO__BAR_BAZ=123" and
    turns these into config variables of the form ``{"foo": {"bar-baz": 123}}``
    It transforms the key and value in the following way:

    -  Lower-cases the key text
    -  Treats ``__`` (double-underscore) as nested access
    -  Calls ``ast.literal_eval`` on the value

    """

    def reset(self) -> None:
        self.clear()
        self.refresh()

    def raise_on_degenerate(self) -> ConfigSet:
        """
        Make a collapsed normalization range an error instead of a mid-grey image.
        """
        return self.set({"normalize.on_degenerate": "raise"})


# The default configuration for zarrpeek
config = Config(
    "zarrpeek",
    defaults=[
        {
            "array_name": "/0",
            "crop_size": 720,
            "quantiles": {"low": 0.001, "high": 0.999},
            "normalize": {"on_degenerate": "fill", "fill_value": 128},
            "render": {"max_width": None},
        }
    ],
)


def parse_degenerate_policy(data: Any) -> DegeneratePolicy:
    if data in ("fill", "raise"):
        return cast("DegeneratePolicy", data)
    msg = f"Expected one of ('fill', 'raise'), got {data} instead."
    raise BadConfigError(msg)


def parse_fill_value(data: Any) -> int:
    try:
        value = int(data)
    except (TypeError, ValueError) as e:
        msg = f"Expected an integer fill value, got {data!r} instead."
        raise BadConfigError(msg) from e
    if not 0 <= value <= 255:
        msg = f"Expected a fill value in [0, 255], got {data} instead."
        raise BadConfigError(msg)
    return value


def parse_crop_size(data: Any) -> int:
    try:
        value = int(data)
    except (TypeError, ValueError) as e:
        msg = f"Expected an integer crop size, got {data!r} instead."
        raise BadConfigError(msg) from e
    if value < 1:
        msg = f"Expected a positive crop size, got {data} instead."
        raise BadConfigError(msg)
    return value
