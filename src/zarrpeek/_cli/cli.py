import logging
from typing import Annotated

import typer

import zarrpeek
from zarrpeek.api import peek
from zarrpeek.core.config import BadConfigError
from zarrpeek.errors import BasePeekError
from zarrpeek.render import render_image

app = typer.Typer(help="Peek into OME-Zarr images in the terminal.")

logger = logging.getLogger(__name__)


def _set_logging_config(*, verbose: bool) -> None:
    if verbose:
        lvl = logging.INFO
    else:
        lvl = logging.WARNING
    fmt = "%(message)s"
    logging.basicConfig(level=lvl, format=fmt)


def _parse_slice_indices(value: str | None) -> list[int] | None:
    if value is None or not value.strip():
        return None
    indices = []
    for item in value.split(","):
        try:
            index = int(item)
        except ValueError as e:
            raise typer.BadParameter(
                f"{item!r} is not an integer", param_hint="'--slice-indices'"
            ) from e
        if index < 0:
            raise typer.BadParameter(
                f"{index} is negative, slice indices are unsigned",
                param_hint="'--slice-indices'",
            )
        indices.append(index)
    return indices


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"zarrpeek {zarrpeek.__version__}")
        raise typer.Exit()


@app.command()  # type: ignore[misc]
def main(
    image_path: Annotated[
        str,
        typer.Argument(
            help="Path to the OME-Zarr group containing arrays e.g. 'data/image.ome.zarr'"
        ),
    ],
    array_name: Annotated[
        str | None,
        typer.Option(
            "--array-name", "-a", help="Name of the array (resolution level). [default: /0]"
        ),
    ] = None,
    slice_indices: Annotated[
        str | None,
        typer.Option(
            "--slice-indices",
            "-s",
            metavar="I,J,...",
            help="Comma-separated indices to slice the non-YX dimensions. Dimensions without "
            "an index are sliced at their middle.",
        ),
    ] = None,
    crop_size: Annotated[
        int | None,
        typer.Option(
            "--crop-size",
            "-c",
            min=1,
            help="Maximum size to display in each dimension. [default: 720]",
        ),
    ] = None,
    low: Annotated[
        float | None, typer.Option(help="Lower quantile for normalization. [default: 0.001]")
    ] = None,
    high: Annotated[
        float | None, typer.Option(help="Upper quantile for normalization. [default: 0.999]")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--quiet", help="Report how the array is sliced and cropped."),
    ] = True,
    show_version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """
    Peek into OME-Zarr images in the terminal. Defaults can also be set with ZARRPEEK_*
    environment variables, e.g. ZARRPEEK_CROP_SIZE=256.
    """
    _set_logging_config(verbose=verbose)
    indices = _parse_slice_indices(slice_indices)
    try:
        result = peek(
            image_path,
            array_name=array_name,
            slice_indices=indices,
            crop_size=crop_size,
            low=low,
            high=high,
        )
    except (BasePeekError, BadConfigError) as e:
        typer.secho(f"Error: {e}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from e
    logger.debug("Rendering %dx%d image", result.image.width, result.image.height)
    render_image(result.image)


if __name__ == "__main__":
    app()
