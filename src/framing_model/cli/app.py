from __future__ import annotations

import itertools
import logging
from pathlib import Path  # noqa: TC003 - needed at runtime by Typer
from typing import Annotated, Any

import typer

from framing_model.cli._logging import configure_logging
from framing_model.cli._output import (
    console,
    print_effects_summary,
    print_error,
    print_leaderboard,
    print_model_list,
    print_surface_summary,
)
from framing_model.config import (
    create_config,
    load_effect_hyperparameters,
    load_pipeline_settings,
    load_surface_hyperparameters,
)
from framing_model.exceptions import FramingModelException
from framing_model.frames import (
    effects_frame,
    leaderboards_frame,
    prediction_rows_frame,
    surface_predictions_frame,
)
from framing_model.ingest.taken_pitches import load_frame, taken_pitches
from framing_model.persistence import SurfaceStore
from framing_model.pipeline import run_pipeline
from framing_model.surface.grid import evaluation_grid
from framing_model.surface.model import predict_surface

logger = logging.getLogger(__name__)

app = typer.Typer(name="framing", help="Called-strike surface and catcher/umpire/pitcher effect models")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
) -> None:
    """Called-strike surface and catcher/umpire/pitcher effect models."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_ConfigOpt = Annotated[str, typer.Option("--config", help="YAML configuration file")]


def _cli_overrides(**sections: dict[str, Any]) -> dict[str, object]:
    """Drop unset options so lower configuration layers still apply."""
    overrides: dict[str, object] = {}
    for section, values in sections.items():
        present = {k: v for k, v in values.items() if v is not None}
        if present:
            overrides[section] = present
    return overrides


@app.command()
def run(
    pitches: Annotated[Path, typer.Option("--pitches", help="Pitch-level CSV or parquet file")],
    umpires: Annotated[Path, typer.Option("--umpires", help="Game-to-umpire CSV or parquet file")],
    sample_size: Annotated[
        int | None, typer.Option("--sample-size", help="Pitches to fit the surface on (default: all)")
    ] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Seed for the surface subsample")] = None,
    top: Annotated[int | None, typer.Option("--top", help="Entities per leaderboard")] = None,
    output_dir: Annotated[
        Path | None, typer.Option("--output-dir", help="Write predictions and effects CSVs here")
    ] = None,
    save_surface: Annotated[
        str | None, typer.Option("--save-surface", help="Save the fitted surface under this name")
    ] = None,
    config: _ConfigOpt = "framing.yaml",
) -> None:
    """Fit the strike surface and entity effects, then print leaderboards."""
    overrides = _cli_overrides(
        surface={"sample_size": sample_size, "seed": seed},
        ranking={"top_n": top},
    )
    try:
        cfg = create_config(yaml_path=config, overrides=overrides)
        settings = load_pipeline_settings(cfg)
        records = taken_pitches(load_frame(pitches), load_frame(umpires))
        result = run_pipeline(
            records,
            sample_size=settings.sample_size,
            seed=settings.seed,
            surface_hyperparameters=load_surface_hyperparameters(cfg),
            effect_hyperparameters=load_effect_hyperparameters(cfg),
            top_n=settings.top_n,
        )
    except (FramingModelException, FileNotFoundError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_surface_summary(result.surface)
    print_effects_summary(result.effects)
    for (kind, direction), ranked in result.rankings.items():
        print_leaderboard(kind, direction, ranked)

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        prediction_rows_frame(result.rows).to_csv(output_dir / "predictions.csv", index=False)
        effects_frame(result.effects).to_csv(output_dir / "effects.csv", index=False)
        leaderboards_frame(result.rankings).to_csv(output_dir / "leaderboards.csv", index=False)
        console.print(f"  Outputs written to {output_dir}")

    if save_surface is not None:
        path = SurfaceStore(model_dir=settings.model_dir).save(result.surface, save_surface)
        console.print(f"  Surface saved to {path}")


@app.command()
def grid(
    model: Annotated[str, typer.Option("--model", help="Name of a saved surface")],
    output: Annotated[Path, typer.Option("--output", help="CSV file for the grid predictions")],
    step: Annotated[float, typer.Option("--step", help="Grid spacing in feet")] = 0.05,
    config: _ConfigOpt = "framing.yaml",
) -> None:
    """Evaluate a saved surface over a regular plate grid for each handedness pair it was fit on."""
    try:
        settings = load_pipeline_settings(create_config(yaml_path=config))
        surface = SurfaceStore(model_dir=settings.model_dir).load(model)
        pairs = list(
            itertools.product(
                sorted(surface.seen_levels["pitcher_throws"]), sorted(surface.seen_levels["batter_stands"])
            )
        )
        points = evaluation_grid(step=step, handedness_pairs=pairs)
        predictions = predict_surface(surface, points)
    except (FramingModelException, FileNotFoundError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    surface_predictions_frame(points, predictions).to_csv(output, index=False)
    console.print(f"[bold green]Wrote[/bold green] {len(points)} grid predictions to {output}")


@app.command(name="models")
def models_cmd(config: _ConfigOpt = "framing.yaml") -> None:
    """List saved surfaces."""
    settings = load_pipeline_settings(create_config(yaml_path=config))
    print_model_list(SurfaceStore(model_dir=settings.model_dir).list_models())
