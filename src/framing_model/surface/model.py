"""Spatial called-strike probability surface.

A logistic GAM with a penalized tensor-product spline over the plate
location plus unpenalized right-handed contrasts for pitcher and batter.
The smoothing penalty is selected from a log-spaced grid by UBRE.
"""

from __future__ import annotations

import functools
import logging
import operator
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from framing_model.domain.pitch import PredictionRow, SurfacePoint, SurfacePrediction
from framing_model.exceptions import FitError, InputError
from framing_model.surface.design import (
    HORIZONTAL_COLUMN,
    STANDS_COLUMN,
    THROWS_COLUMN,
    VERTICAL_COLUMN,
    encode_points,
    encode_records,
    observed_levels,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pygam import LogisticGAM

    from framing_model.domain.pitch import Handedness, PitchRecord

logger = logging.getLogger(__name__)

STAGE = "surface"

_PREDICT_CHUNK_SIZE = 50_000


@dataclass(frozen=True)
class SurfaceHyperparameters:
    """Basis size, penalty grid and PIRLS settings for the surface fit."""

    n_splines: int = 10
    spline_order: int = 3
    lam_min: float = -2.0
    lam_max: float = 3.0
    lam_points: int = 11
    max_iter: int = 100
    tol: float = 1e-4

    def lam_grid(self) -> np.ndarray:
        """Candidate smoothing penalties, log10-spaced between lam_min and lam_max."""
        return np.logspace(self.lam_min, self.lam_max, self.lam_points)


@dataclass(frozen=True)
class FittedSurface:
    """A fitted called-strike surface. Use ``predict_surface`` to evaluate it."""

    gam: LogisticGAM = field(repr=False)
    seen_levels: dict[str, frozenset[Handedness]]
    n_samples: int
    seed: int | None
    lam: float
    edof: float
    hyperparameters: SurfaceHyperparameters


def _subsample(records: Sequence[PitchRecord], sample_size: int, seed: int | None) -> list[PitchRecord]:
    if sample_size == len(records):
        return list(records)
    rng = np.random.default_rng(seed)
    indices = np.sort(rng.choice(len(records), size=sample_size, replace=False))
    return [records[i] for i in indices]


def _build_gam(levels: dict[str, frozenset[Handedness]], hp: SurfaceHyperparameters) -> LogisticGAM:
    from pygam import LogisticGAM, l, te

    # A handedness contrast is only identifiable when both levels were sampled.
    linear = [
        l(column, penalties=None)
        for name, column in (("pitcher_throws", THROWS_COLUMN), ("batter_stands", STANDS_COLUMN))
        if len(levels[name]) == 2
    ]
    smooth = te(HORIZONTAL_COLUMN, VERTICAL_COLUMN, n_splines=hp.n_splines, spline_order=hp.spline_order)
    terms = functools.reduce(operator.add, [*linear, smooth])
    return LogisticGAM(terms, max_iter=hp.max_iter, tol=hp.tol)


def _selected_lam(gam: LogisticGAM) -> float:
    for term in gam.terms:
        if term.istensor:
            return float(np.mean(np.ravel(term.lam)))
    raise FitError(STAGE, "fitted model has no spatial term")


def _check_converged(gam: LogisticGAM) -> None:
    diffs = gam.logs_.get("diffs", [])
    if not diffs:
        raise FitError(STAGE, "PIRLS recorded no iterations")
    if not np.isfinite(gam.coef_).all():
        raise FitError(STAGE, "PIRLS produced non-finite coefficients")
    if diffs[-1] >= gam.tol:
        raise FitError(
            STAGE,
            f"PIRLS did not converge in {len(diffs)} iterations "
            f"(last relative change {diffs[-1]:.3g}, tolerance {gam.tol:g})",
        )


def fit_surface(
    records: Sequence[PitchRecord],
    sample_size: int | None = None,
    *,
    seed: int | None = None,
    hyperparameters: SurfaceHyperparameters | None = None,
) -> FittedSurface:
    """Fit the called-strike surface on a uniform subsample of ``records``.

    Args:
        records: Taken pitches with their calls.
        sample_size: Number of records to fit on; defaults to all of them.
        seed: Seed for the subsample draw. The same seed, records and sample
            size always produce the same surface.
        hyperparameters: Basis and penalty-grid settings.

    Raises:
        FitError: If there are no records, the sample holds a single outcome
            class, or PIRLS does not converge.
        InputError: If ``sample_size`` is not between 1 and ``len(records)``.
    """
    hp = hyperparameters or SurfaceHyperparameters()
    if not records:
        raise FitError(STAGE, "no pitch records to fit")
    if sample_size is None:
        sample_size = len(records)
    if not 1 <= sample_size <= len(records):
        raise InputError(
            f"sample_size must be between 1 and {len(records)}, got {sample_size}",
            field="sample_size",
            value=sample_size,
        )

    sample = _subsample(records, sample_size, seed)
    X, y = encode_records(sample)
    classes = np.unique(y)
    if classes.size < 2:
        raise FitError(
            STAGE,
            f"sample of {len(sample)} pitches contains only outcome {int(classes[0])}; "
            "both called strikes and called balls are required",
        )

    levels = observed_levels(sample)
    gam = _build_gam(levels, hp)
    logger.info(
        "Fitting strike surface on %d of %d pitches (%d penalty candidates)",
        len(sample),
        len(records),
        hp.lam_points,
    )
    t0 = time.perf_counter()
    try:
        gam.gridsearch(X, y, lam=hp.lam_grid(), progress=False)
    except (ValueError, np.linalg.LinAlgError) as e:
        raise FitError(STAGE, f"numerical fit failed: {e}") from e
    _check_converged(gam)

    lam = _selected_lam(gam)
    edof = float(gam.statistics_["edof"])
    logger.info("Fitted strike surface in %.1fs: lam=%.4g edof=%.1f", time.perf_counter() - t0, lam, edof)
    return FittedSurface(
        gam=gam,
        seen_levels=levels,
        n_samples=len(sample),
        seed=seed,
        lam=lam,
        edof=edof,
        hyperparameters=hp,
    )


def _predict_matrix(gam: LogisticGAM, X: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    probability = np.clip(gam.predict_mu(X), 0.0, 1.0)
    modelmat = gam.terms.build_columns(X)
    cov = gam.statistics_["cov"]
    link_var = np.asarray((modelmat @ cov) * modelmat.toarray()).sum(axis=1)
    link_se = np.sqrt(np.clip(link_var, 0.0, None))
    # Delta method onto the probability scale.
    return probability, probability * (1.0 - probability) * link_se


def predict_surface(surface: FittedSurface, points: Sequence[SurfacePoint]) -> list[SurfacePrediction]:
    """Evaluate the surface at each point.

    Returns one ``SurfacePrediction`` per point, in order, with the
    probability in [0, 1] and a non-negative response-scale standard error.

    Raises:
        PredictionError: If a point carries a handedness level the surface
            was not fit on.
        InputError: If a point has a non-finite coordinate.
    """
    if not points:
        return []
    X = encode_points(points, surface.seen_levels)
    predictions: list[SurfacePrediction] = []
    for start in range(0, len(X), _PREDICT_CHUNK_SIZE):
        probability, se = _predict_matrix(surface.gam, X[start : start + _PREDICT_CHUNK_SIZE])
        predictions.extend(SurfacePrediction(float(p), float(s)) for p, s in zip(probability, se, strict=True))
    return predictions


def annotate_records(surface: FittedSurface, records: Sequence[PitchRecord]) -> list[PredictionRow]:
    """Attach the fitted probability and its standard error to every record."""
    logger.info("Annotating %d pitches with fitted strike probability", len(records))
    predictions = predict_surface(surface, [SurfacePoint.from_record(r) for r in records])
    return [
        PredictionRow(record=record, fitted_probability=p.probability, fitted_se=p.standard_error)
        for record, p in zip(records, predictions, strict=True)
    ]
