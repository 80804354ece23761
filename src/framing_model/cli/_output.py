from rich.console import Console
from rich.table import Table

from framing_model.domain.effects import EntityEffectTable, EntityKind, RankDirection, RankedEffect
from framing_model.persistence import SurfaceMetadata
from framing_model.surface.model import FittedSurface

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def print_surface_summary(surface: FittedSurface) -> None:
    console.print(f"[bold green]Fitted[/bold green] strike surface on {surface.n_samples} pitches")
    console.print(f"  Smoothing penalty: {surface.lam:.4g}")
    console.print(f"  Effective degrees of freedom: {surface.edof:.1f}")


def print_effects_summary(table: EntityEffectTable) -> None:
    console.print(f"[bold green]Fitted[/bold green] entity effects on {table.n_rows} pitches")
    console.print(f"  Intercept: {table.intercept:+.3f}")
    console.print(f"  Fitted-probability coefficient: {table.probability_coefficient:+.3f}")
    for kind, sd in table.group_std.items():
        console.print(f"  {kind} sd: {sd:.3f} ({len(table.for_kind(kind))} entities)")


def print_leaderboard(kind: EntityKind, direction: RankDirection, ranked: list[RankedEffect]) -> None:
    if not ranked:
        console.print(f"No {kind} effects to rank.")
        return
    table = Table(title=f"{direction.capitalize()} {kind} effects")
    table.add_column("Rank", justify="right")
    table.add_column(kind.capitalize())
    table.add_column("Effect (log-odds)", justify="right")
    for r in ranked:
        color = "green" if r.effect > 0 else "red"
        table.add_row(str(r.rank), r.entity_id, f"[{color}]{r.effect:+.3f}[/{color}]")
    console.print(table)


def print_model_list(models: list[SurfaceMetadata]) -> None:
    if not models:
        console.print("No saved surfaces found.")
        return
    table = Table(title="Saved surfaces")
    table.add_column("Name")
    table.add_column("Pitches", justify="right")
    table.add_column("Seed", justify="right")
    table.add_column("Penalty", justify="right")
    table.add_column("EDoF", justify="right")
    table.add_column("Created")
    for m in models:
        seed = "" if m.seed is None else str(m.seed)
        table.add_row(m.name, str(m.n_samples), seed, f"{m.lam:.4g}", f"{m.edof:.1f}", m.created_at)
    console.print(table)
