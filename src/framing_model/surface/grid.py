from __future__ import annotations

import itertools

import numpy as np

from framing_model.domain.pitch import Handedness, SurfacePoint

DEFAULT_HORIZONTAL_RANGE = (-2.0, 2.0)
DEFAULT_VERTICAL_RANGE = (0.0, 5.0)


def _axis(bounds: tuple[float, float], step: float) -> np.ndarray:
    low, high = bounds
    if step <= 0:
        raise ValueError(f"grid step must be positive, got {step}")
    if high < low:
        raise ValueError(f"grid bounds must be increasing, got {bounds}")
    n = int(np.floor((high - low) / step + 1e-6)) + 1
    return np.round(low + step * np.arange(n), 6)


def evaluation_grid(
    *,
    horizontal_range: tuple[float, float] = DEFAULT_HORIZONTAL_RANGE,
    vertical_range: tuple[float, float] = DEFAULT_VERTICAL_RANGE,
    step: float = 0.05,
    handedness_pairs: list[tuple[Handedness, Handedness]] | None = None,
) -> list[SurfacePoint]:
    """Regular grid over the plate for each (pitcher throws, batter stands) pair.

    Points are ordered by handedness pair, then horizontal, then vertical.
    """
    if handedness_pairs is None:
        handedness_pairs = list(itertools.product(Handedness, Handedness))
    xs = _axis(horizontal_range, step)
    zs = _axis(vertical_range, step)
    return [
        SurfacePoint(float(x), float(z), throws, stands)
        for throws, stands in handedness_pairs
        for x in xs
        for z in zs
    ]
