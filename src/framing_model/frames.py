"""Tabular views of model outputs for the reporting layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from collections.abc import Sequence

    from framing_model.domain.effects import EntityEffectTable, EntityKind, RankDirection, RankedEffect
    from framing_model.domain.pitch import PredictionRow, SurfacePoint, SurfacePrediction


def prediction_rows_frame(rows: Sequence[PredictionRow]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "game_id": [r.record.game_id for r in rows],
            "horizontal_location": [r.record.horizontal_location for r in rows],
            "vertical_location": [r.record.vertical_location for r in rows],
            "pitcher_throws": [str(r.record.pitcher_throws) for r in rows],
            "batter_stands": [str(r.record.batter_stands) for r in rows],
            "catcher_id": [r.catcher_id for r in rows],
            "umpire_id": [r.umpire_id for r in rows],
            "pitcher_id": [r.pitcher_id for r in rows],
            "outcome": [r.outcome for r in rows],
            "fitted_probability": [r.fitted_probability for r in rows],
            "fitted_se": [r.fitted_se for r in rows],
        }
    )


def surface_predictions_frame(
    points: Sequence[SurfacePoint], predictions: Sequence[SurfacePrediction]
) -> pd.DataFrame:
    if len(points) != len(predictions):
        raise ValueError(f"got {len(points)} points but {len(predictions)} predictions")
    return pd.DataFrame(
        {
            "horizontal_location": [p.horizontal_location for p in points],
            "vertical_location": [p.vertical_location for p in points],
            "pitcher_throws": [str(p.pitcher_throws) for p in points],
            "batter_stands": [str(p.batter_stands) for p in points],
            "probability": [p.probability for p in predictions],
            "standard_error": [p.standard_error for p in predictions],
        }
    )


def effects_frame(table: EntityEffectTable) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "kind": [str(e.kind) for e in table.effects],
            "entity_id": [e.entity_id for e in table.effects],
            "effect": [e.effect for e in table.effects],
            "standard_error": [e.standard_error for e in table.effects],
        }
    )


def leaderboards_frame(boards: dict[tuple[EntityKind, RankDirection], list[RankedEffect]]) -> pd.DataFrame:
    records = [
        {"kind": str(kind), "direction": str(direction), "rank": r.rank, "entity_id": r.entity_id, "effect": r.effect}
        for (kind, direction), ranked in boards.items()
        for r in ranked
    ]
    return pd.DataFrame.from_records(records, columns=["kind", "direction", "rank", "entity_id", "effect"])
