"""Crossed random-intercept model for catcher, umpire and pitcher effects.

The linear predictor is ``intercept + slope * fitted_probability`` plus one
independent normal random intercept per catcher, umpire and pitcher. The
model is fit with statsmodels' ``BinomialBayesMixedGLM``, either by a
Laplace approximation at the posterior mode or by mean-field variational
Bayes.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import sparse

from framing_model.domain.effects import EntityEffect, EntityEffectTable, EntityKind
from framing_model.exceptions import FitError, InputError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from framing_model.domain.pitch import PredictionRow

logger = logging.getLogger(__name__)

STAGE = "effects"

FIT_METHODS = ("laplace", "vb")

_KIND_ATTRS: tuple[tuple[EntityKind, str], ...] = (
    (EntityKind.CATCHER, "catcher_id"),
    (EntityKind.UMPIRE, "umpire_id"),
    (EntityKind.PITCHER, "pitcher_id"),
)


@dataclass(frozen=True)
class EffectHyperparameters:
    """Fit settings for the entity-effect model.

    ``fe_p`` is the prior standard deviation of the fixed effects and
    ``vcp_p`` the prior standard deviation of each group's log standard
    deviation. A run whose optimizer stops without reporting success is still
    accepted when no gradient component exceeds ``grad_tol`` times the
    number of fitted rows.
    """

    method: str = "laplace"
    optimizer: str = "BFGS"
    fe_p: float = 2.0
    vcp_p: float = 1.0
    max_iter: int | None = None
    grad_tol: float = 1e-4


@dataclass(frozen=True)
class _EntityIndex:
    kind: EntityKind
    ids: np.ndarray
    codes: np.ndarray


def _validate_rows(rows: Sequence[PredictionRow]) -> None:
    if not rows:
        raise FitError(STAGE, "no prediction rows to fit")
    for i, row in enumerate(rows):
        p = row.fitted_probability
        if not (math.isfinite(p) and 0.0 <= p <= 1.0):
            raise InputError(
                f"Row {i}: fitted_probability must be in [0, 1], got {p!r}",
                field="fitted_probability",
                value=p,
            )


def _index_entities(rows: Sequence[PredictionRow]) -> list[_EntityIndex]:
    indices: list[_EntityIndex] = []
    for kind, attr in _KIND_ATTRS:
        ids, codes = np.unique(np.array([getattr(row, attr) for row in rows], dtype=str), return_inverse=True)
        if ids.size < 2:
            raise FitError(STAGE, f"{kind} group has {ids.size} distinct entity; at least 2 are required")
        indices.append(_EntityIndex(kind=kind, ids=ids, codes=codes.ravel()))
    return indices


def _random_effects_design(
    indices: list[_EntityIndex], n_rows: int
) -> tuple[sparse.csr_matrix, np.ndarray, list[str]]:
    blocks = []
    ident: list[int] = []
    names: list[str] = []
    rows = np.arange(n_rows)
    for group, index in enumerate(indices):
        q = index.ids.size
        blocks.append(sparse.csr_matrix((np.ones(n_rows), (rows, index.codes)), shape=(n_rows, q)))
        ident.extend([group] * q)
        names.extend(f"{index.kind}[{entity_id}]" for entity_id in index.ids)
    return sparse.hstack(blocks, format="csr"), np.asarray(ident, dtype=int), names


def _converged(retvals: Any, grad_tol: float, n_rows: int) -> bool:
    if retvals is None:
        return True
    if retvals.success:
        return True
    jac = getattr(retvals, "jac", None)
    if jac is None or not np.all(np.isfinite(jac)):
        return False
    return float(np.max(np.abs(jac))) <= grad_tol * n_rows


def _run_fit(model: Any, hp: EffectHyperparameters) -> Any:
    minim_opts = {"maxiter": hp.max_iter} if hp.max_iter is not None else None
    if hp.method == "laplace":
        return model.fit_map(method=hp.optimizer, minim_opts=minim_opts)
    return model.fit_vb(fit_method=hp.optimizer, minim_opts=minim_opts)


def _optional(value: float) -> float | None:
    return float(value) if math.isfinite(value) else None


def fit_effects(
    rows: Sequence[PredictionRow],
    *,
    hyperparameters: EffectHyperparameters | None = None,
) -> EntityEffectTable:
    """Estimate each catcher's, umpire's and pitcher's random intercept.

    Args:
        rows: Pitches annotated with the surface's fitted probability.
        hyperparameters: Fit method, optimizer and prior settings.

    Returns:
        One ``EntityEffect`` per distinct entity of each kind, grouped by
        kind and sorted by entity id within a kind.

    Raises:
        InputError: If a fitted probability is outside [0, 1] or the fit
            method is unknown.
        FitError: If there are no rows, a group has fewer than two
            entities, only one outcome class is present, or the optimizer
            does not converge.
    """
    hp = hyperparameters or EffectHyperparameters()
    if hp.method not in FIT_METHODS:
        raise InputError(
            f"unknown fit method {hp.method!r}; expected one of {FIT_METHODS}", field="method", value=hp.method
        )
    _validate_rows(rows)

    y = np.array([row.outcome for row in rows], dtype=float)
    if np.unique(y).size < 2:
        raise FitError(STAGE, f"all {len(rows)} rows have outcome {int(y[0])}; both outcome classes are required")
    indices = _index_entities(rows)

    probability = np.array([row.fitted_probability for row in rows], dtype=float)
    exog = np.column_stack([np.ones(len(rows)), probability])
    exog_vc, ident, vc_names = _random_effects_design(indices, len(rows))

    from statsmodels.genmod.bayes_mixed_glm import BinomialBayesMixedGLM

    model = BinomialBayesMixedGLM(
        y,
        exog,
        exog_vc,
        ident,
        vcp_p=hp.vcp_p,
        fe_p=hp.fe_p,
        fep_names=["Intercept", "fitted_probability"],
        vcp_names=[str(index.kind) for index in indices],
        vc_names=vc_names,
    )
    logger.info(
        "Fitting entity effects (%s) on %d pitches: %s",
        hp.method,
        len(rows),
        ", ".join(f"{index.ids.size} {index.kind}s" for index in indices),
    )
    t0 = time.perf_counter()
    try:
        result = _run_fit(model, hp)
    except (ValueError, np.linalg.LinAlgError) as e:
        raise FitError(STAGE, f"numerical fit failed: {e}") from e

    retvals = getattr(result, "optim_retvals", None)
    if not _converged(retvals, hp.grad_tol, len(rows)):
        raise FitError(STAGE, f"{hp.optimizer} did not converge: {getattr(retvals, 'message', 'unknown reason')}")
    if not np.all(np.isfinite(result.vc_mean)):
        raise FitError(STAGE, "optimizer produced non-finite random effects")

    group_std = {index.kind: float(np.exp(result.vcp_mean[g])) for g, index in enumerate(indices)}
    logger.info(
        "Fitted entity effects in %.1fs: %s",
        time.perf_counter() - t0,
        ", ".join(f"sd({kind})={sd:.3f}" for kind, sd in group_std.items()),
    )

    effects: list[EntityEffect] = []
    offset = 0
    for index in indices:
        for j, entity_id in enumerate(index.ids):
            effects.append(
                EntityEffect(
                    kind=index.kind,
                    entity_id=str(entity_id),
                    effect=float(result.vc_mean[offset + j]),
                    standard_error=_optional(float(result.vc_sd[offset + j])),
                )
            )
        offset += index.ids.size

    return EntityEffectTable(
        effects=tuple(effects),
        intercept=float(result.fe_mean[0]),
        probability_coefficient=float(result.fe_mean[1]),
        group_std=group_std,
        n_rows=len(rows),
    )
