from __future__ import annotations

import os
import pathlib
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
import pytest
import zarr
from hypothesis import HealthCheck, Verbosity, settings

from zarrpeek.core.config import config as zarrpeek_config

if TYPE_CHECKING:
    from typing import Literal

    import numpy.typing as npt

    from zarrpeek.core.indexing import Subset

    ZarrFormat = Literal[2, 3]

ArrayWriter = Callable[..., pathlib.Path]


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None]:
    zarrpeek_config.reset()
    yield
    zarrpeek_config.reset()


@pytest.fixture(params=[2, 3], ids=["zarr-v2", "zarr-v3"])
def zarr_format(request: pytest.FixtureRequest) -> ZarrFormat:
    return request.param  # type: ignore[no-any-return]


@pytest.fixture
def write_array(tmp_path: pathlib.Path, zarr_format: ZarrFormat) -> ArrayWriter:
    """
    Write a numpy array into a new Zarr group, as an OME-Zarr resolution level would be.

    Returns the path of the group.
    """

    def _write(
        data: npt.NDArray[Any],
        name: str = "0",
        chunks: tuple[int, ...] | None = None,
    ) -> pathlib.Path:
        root = tmp_path / "image.zarr"
        group = zarr.open_group(store=str(root), mode="a", zarr_format=zarr_format)
        array = group.create_array(
            name=name,
            shape=data.shape,
            dtype=data.dtype,
            chunks=chunks or data.shape,
        )
        array[...] = data
        return root

    return _write


@dataclass
class RecordingObserver:
    """Keeps every decision a subset resolution reports."""

    slices: list[tuple[int, int]] = field(default_factory=list)
    crops: list[tuple[str, int, int]] = field(default_factory=list)

    def on_slice(self, dimension: int, index: int) -> None:
        self.slices.append((dimension, index))

    def on_crop(self, axis: str, size: int, full_size: int) -> None:
        self.crops.append((axis, size, full_size))


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


class FakeArray:
    """
    An in-memory array handle.

    ``reads`` counts the subset requests; ``error`` is raised on read when set; ``result``
    replaces the data handed out on read when set.
    """

    def __init__(
        self,
        data: npt.NDArray[Any],
        *,
        error: Exception | None = None,
        result: npt.NDArray[Any] | None = None,
    ) -> None:
        self.data = data
        self.error = error
        self.result = result
        self.reads: list[tuple[slice, ...]] = []

    @property
    def shape(self) -> tuple[int, ...]:
        return self.data.shape

    @property
    def dtype(self) -> np.dtype[Any]:
        return self.data.dtype

    def __getitem__(self, selection: tuple[slice, ...]) -> npt.NDArray[Any]:
        self.reads.append(selection)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return self.data[selection]


def expected_plane(data: npt.NDArray[Any], subset: Subset) -> npt.NDArray[np.float32]:
    rows, columns = subset.display_shape
    return data[subset.selection].astype(np.float32).reshape(rows, columns)


def corrupt_chunks(root: pathlib.Path, name: str = "0") -> None:
    """Overwrite every chunk file of the array ``name`` with bytes no codec can decode."""
    metadata = {".zarray", ".zattrs", ".zgroup", "zarr.json"}
    chunks = [p for p in (root / name).rglob("*") if p.is_file() and p.name not in metadata]
    assert chunks
    for chunk in chunks:
        chunk.write_bytes(b"not a compressed chunk" * 4)


settings.register_profile(
    "default",
    parent=settings.get_profile("default"),
    max_examples=300,
    suppress_health_check=[HealthCheck.filter_too_much, HealthCheck.too_slow],
    deadline=None,
    verbosity=Verbosity.normal,
)
settings.register_profile(
    "ci",
    parent=settings.get_profile("ci"),
    max_examples=300,
    derandomize=True,  # more like regression testing
    deadline=None,
    suppress_health_check=[HealthCheck.filter_too_much, HealthCheck.too_slow],
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))
