"""Design-matrix encoding for the called-strike surface.

Every matrix has four columns: pitcher throws right, batter stands right,
horizontal location and vertical location. Handedness is coded 0 for left
and 1 for right so the fitted linear coefficients read as right-handed
contrasts against the left-handed baseline.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from framing_model.domain.pitch import Handedness
from framing_model.exceptions import InputError, PredictionError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from framing_model.domain.pitch import PitchRecord, SurfacePoint

THROWS_COLUMN = 0
STANDS_COLUMN = 1
HORIZONTAL_COLUMN = 2
VERTICAL_COLUMN = 3
N_COLUMNS = 4

CATEGORICAL_FIELDS: tuple[str, ...] = ("pitcher_throws", "batter_stands")

_CODES = {Handedness.LEFT: 0.0, Handedness.RIGHT: 1.0}


def encode_records(records: Sequence[PitchRecord]) -> tuple[np.ndarray, np.ndarray]:
    """Build the (X, y) training arrays for a sequence of pitch records."""
    X = np.empty((len(records), N_COLUMNS), dtype=float)
    y = np.empty(len(records), dtype=float)
    for i, record in enumerate(records):
        X[i, THROWS_COLUMN] = _CODES[Handedness(record.pitcher_throws)]
        X[i, STANDS_COLUMN] = _CODES[Handedness(record.batter_stands)]
        X[i, HORIZONTAL_COLUMN] = record.horizontal_location
        X[i, VERTICAL_COLUMN] = record.vertical_location
        y[i] = record.outcome
    return X, y


def observed_levels(records: Sequence[PitchRecord]) -> dict[str, frozenset[Handedness]]:
    return {
        name: frozenset(Handedness(getattr(record, name)) for record in records) for name in CATEGORICAL_FIELDS
    }


def _encode_level(value: object, *, index: int, field: str, seen: frozenset[Handedness]) -> float:
    try:
        hand = Handedness(value)  # type: ignore[arg-type]
    except ValueError:
        raise PredictionError("unknown factor level", index=index, field=field, value=value) from None
    if hand not in seen:
        raise PredictionError("factor level not seen during fitting", index=index, field=field, value=value)
    return _CODES[hand]


def encode_points(
    points: Sequence[SurfacePoint],
    seen_levels: Mapping[str, frozenset[Handedness]],
) -> np.ndarray:
    """Build the prediction matrix, rejecting levels the surface never saw.

    Raises:
        PredictionError: If a handedness value is unknown or unseen during fitting.
        InputError: If a location coordinate is not finite.
    """
    X = np.empty((len(points), N_COLUMNS), dtype=float)
    for i, point in enumerate(points):
        for name in ("horizontal_location", "vertical_location"):
            coordinate = float(getattr(point, name))
            if not math.isfinite(coordinate):
                raise InputError(f"Point {i}: {name} must be finite, got {coordinate!r}", field=name, value=coordinate)
        X[i, THROWS_COLUMN] = _encode_level(
            point.pitcher_throws, index=i, field="pitcher_throws", seen=seen_levels["pitcher_throws"]
        )
        X[i, STANDS_COLUMN] = _encode_level(
            point.batter_stands, index=i, field="batter_stands", seen=seen_levels["batter_stands"]
        )
        X[i, HORIZONTAL_COLUMN] = point.horizontal_location
        X[i, VERTICAL_COLUMN] = point.vertical_location
    return X
