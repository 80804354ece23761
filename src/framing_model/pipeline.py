"""End-to-end run: surface fit, full-data annotation, effect fit, rankings."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from framing_model.effects.model import fit_effects
from framing_model.effects.ranking import DEFAULT_TOP_N, leaderboards
from framing_model.surface.model import annotate_records, fit_surface

if TYPE_CHECKING:
    from collections.abc import Sequence

    from framing_model.domain.effects import EntityEffectTable, EntityKind, RankDirection, RankedEffect
    from framing_model.domain.pitch import PitchRecord, PredictionRow
    from framing_model.effects.model import EffectHyperparameters
    from framing_model.surface.model import FittedSurface, SurfaceHyperparameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    surface: FittedSurface
    rows: list[PredictionRow]
    effects: EntityEffectTable
    rankings: dict[tuple[EntityKind, RankDirection], list[RankedEffect]]


def run_pipeline(
    records: Sequence[PitchRecord],
    *,
    sample_size: int | None = None,
    seed: int | None = None,
    surface_hyperparameters: SurfaceHyperparameters | None = None,
    effect_hyperparameters: EffectHyperparameters | None = None,
    top_n: int = DEFAULT_TOP_N,
) -> PipelineResult:
    """Fit the surface on a (sub)sample, annotate every record, then fit and rank entity effects.

    Any stage failure propagates unchanged; nothing is returned for a partial run.
    """
    t0 = time.perf_counter()
    surface = fit_surface(records, sample_size, seed=seed, hyperparameters=surface_hyperparameters)
    rows = annotate_records(surface, records)
    effects = fit_effects(rows, hyperparameters=effect_hyperparameters)
    rankings = leaderboards(effects, top_n)
    logger.info("Pipeline finished in %.1fs over %d pitches", time.perf_counter() - t0, len(records))
    return PipelineResult(surface=surface, rows=rows, effects=effects, rankings=rankings)
