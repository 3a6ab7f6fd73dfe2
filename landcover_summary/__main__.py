"""Command-line entry point — ``python -m landcover_summary``.

All business logic lives in the package; this module only wires
command-line options to ``run_pipeline`` and prints the result.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import typer

from landcover_summary.activities.read_raster import write_raster
from landcover_summary.activities.write_summary import write_summary
from landcover_summary.core.config import PipelineConfig
from landcover_summary.core.constants import CodePolicy
from landcover_summary.core.exceptions import PipelineError
from landcover_summary.orchestrators.pipeline import run_pipeline

app = typer.Typer(no_args_is_help=True, add_completion=False)

logger = logging.getLogger("landcover_summary.cli")


@app.callback()
def main() -> None:
    """Clip a land-cover raster to a boundary and summarize its classes."""


@app.command()
def summarize(
    vector: Path = typer.Argument(..., help="Boundary vector source (Shapefile, GeoPackage, ...)."),
    raster: Path = typer.Argument(..., help="Categorical land-cover raster."),
    lookup: Path = typer.Argument(..., help="Two-column code,label lookup file."),
    attribute: str = typer.Option(..., "--attribute", "-a", help="Attribute to match."),
    value: str = typer.Option(..., "--value", "-v", help="Attribute value to match."),
    numeric: bool = typer.Option(False, "--numeric", help="Compare VALUE as a number."),
    layer: str | None = typer.Option(None, "--layer", help="Layer of a multi-layer source."),
    policy: CodePolicy | None = typer.Option(None, "--policy", help="Missing-code policy."),
    report: Path | None = typer.Option(None, "--report", help="Write the JSON report here."),
    clipped: Path | None = typer.Option(None, "--clipped", help="Write the clipped GeoTIFF here."),
) -> None:
    """Print the share of each land-cover class inside the selected boundary."""
    try:
        config = PipelineConfig.from_env()
    except PipelineError as exc:
        typer.echo(f"Configuration error: {exc.message}", err=True)
        raise typer.Exit(code=2) from exc

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if policy is not None:
        config = dataclasses.replace(config, code_policy=policy)

    match_value: str | float = _as_number(value) if numeric else value

    try:
        result = run_pipeline(
            vector,
            raster,
            lookup,
            attribute=attribute,
            value=match_value,
            config=config,
            layer=layer,
            keep_clipped=clipped is not None,
        )
        if report is not None:
            write_summary(result, report)
        if clipped is not None and result.clipped_grid is not None:
            if result.clipped_grid.is_empty:
                logger.warning("Clipped grid is empty, GeoTIFF not written | path=%s", clipped)
            else:
                write_raster(result.clipped_grid, clipped)
    except PipelineError as exc:
        logger.debug("Pipeline error payload: %s", exc.to_error_dict())
        typer.echo(f"Error [{exc.code}] in {exc.stage}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc

    width = max((len(label) for label, _ in result.pairs()), default=5)
    for label, percentage in result.pairs():
        typer.echo(f"{label:<{width}}  {percentage:5.1f}%")


def _as_number(raw: str) -> float | int:
    try:
        number = float(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"{raw!r} is not a number", param_hint="--value") from exc
    return int(number) if number.is_integer() else number


if __name__ == "__main__":
    app()
