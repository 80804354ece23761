import numpy as np
import pandas as pd
from scipy.special import expit

from framing_model.domain.pitch import Handedness, PitchRecord, PredictionRow

ZONE_HALF_WIDTH = 0.75
ZONE_BOTTOM = 1.6
ZONE_TOP = 3.4
# Labels inside this band around the zone edge are coin flips.
EDGE_BAND = 0.3

_HANDS = (Handedness.LEFT, Handedness.RIGHT)


def make_record(
    *,
    game_id: str = "g1",
    horizontal_location: float = 0.0,
    vertical_location: float = 2.5,
    pitcher_throws: Handedness = Handedness.RIGHT,
    batter_stands: Handedness = Handedness.RIGHT,
    catcher_id: str = "c1",
    umpire_id: str = "u1",
    pitcher_id: str = "p1",
    outcome: int = 1,
) -> PitchRecord:
    return PitchRecord(
        game_id=game_id,
        horizontal_location=horizontal_location,
        vertical_location=vertical_location,
        pitcher_throws=pitcher_throws,
        batter_stands=batter_stands,
        catcher_id=catcher_id,
        umpire_id=umpire_id,
        pitcher_id=pitcher_id,
        outcome=outcome,
    )


def _distance_outside_zone(x: np.ndarray, z: np.ndarray) -> np.ndarray:
    dx = np.maximum(np.abs(x) - ZONE_HALF_WIDTH, 0.0)
    dz = np.maximum(np.maximum(ZONE_BOTTOM - z, z - ZONE_TOP), 0.0)
    return np.hypot(dx, dz)


def make_zone_records(
    n: int,
    *,
    seed: int = 0,
    n_catchers: int = 6,
    n_umpires: int = 5,
    n_pitchers: int = 8,
    pitcher_throws: tuple[Handedness, ...] = _HANDS,
    batter_stands: tuple[Handedness, ...] = _HANDS,
) -> list[PitchRecord]:
    """Pitches called strikes inside a rectangular zone and balls well outside it."""
    rng = np.random.default_rng(seed)
    x = rng.uniform(-2.0, 2.0, n)
    z = rng.uniform(0.0, 5.0, n)
    distance = _distance_outside_zone(x, z)
    outcome = np.where(distance == 0.0, 1, 0)
    edge = (distance > 0.0) & (distance < EDGE_BAND)
    outcome[edge] = rng.integers(0, 2, int(edge.sum()))

    throws = rng.integers(0, len(pitcher_throws), n)
    stands = rng.integers(0, len(batter_stands), n)
    catchers = rng.integers(0, n_catchers, n)
    umpires = rng.integers(0, n_umpires, n)
    pitchers = rng.integers(0, n_pitchers, n)
    return [
        make_record(
            game_id=f"g{i // 150}",
            horizontal_location=float(x[i]),
            vertical_location=float(z[i]),
            pitcher_throws=pitcher_throws[throws[i]],
            batter_stands=batter_stands[stands[i]],
            catcher_id=f"c{catchers[i] + 1}",
            umpire_id=f"u{umpires[i] + 1}",
            pitcher_id=f"p{pitchers[i] + 1}",
            outcome=int(outcome[i]),
        )
        for i in range(n)
    ]


def make_effect_rows(
    n: int,
    *,
    seed: int = 0,
    catcher_effects: dict[str, float] | None = None,
    n_catchers: int = 8,
    n_umpires: int = 6,
    n_pitchers: int = 10,
    intercept: float = -3.0,
    slope: float = 6.0,
) -> list[PredictionRow]:
    """Annotated pitches whose calls follow a known logistic model with catcher shifts."""
    catcher_effects = catcher_effects or {}
    rng = np.random.default_rng(seed)
    probability = rng.beta(0.6, 0.6, n)
    catchers = [f"c{k + 1}" for k in rng.integers(0, n_catchers, n)]
    umpires = [f"u{k + 1}" for k in rng.integers(0, n_umpires, n)]
    pitchers = [f"p{k + 1}" for k in rng.integers(0, n_pitchers, n)]
    shift = np.array([catcher_effects.get(c, 0.0) for c in catchers])
    outcome = rng.uniform(size=n) < expit(intercept + slope * probability + shift)
    return [
        PredictionRow(
            record=make_record(
                game_id=f"g{i // 150}",
                catcher_id=catchers[i],
                umpire_id=umpires[i],
                pitcher_id=pitchers[i],
                outcome=int(outcome[i]),
            ),
            fitted_probability=float(probability[i]),
            fitted_se=0.01,
        )
        for i in range(n)
    ]


def make_statcast_frames(n: int, *, seed: int = 0) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Statcast-style pitch and umpire tables built from ``make_zone_records``.

    Every fifth pitch is relabelled as a swing so it is filtered out on ingest.
    """
    records = make_zone_records(n, seed=seed)
    games = sorted({r.game_id for r in records}, key=lambda g: int(g[1:]))
    game_pk = {g: 700000 + i for i, g in enumerate(games)}
    pitches = pd.DataFrame(
        {
            "game_pk": [game_pk[r.game_id] for r in records],
            "plate_x": [r.horizontal_location for r in records],
            "plate_z": [r.vertical_location for r in records],
            "p_throws": [str(r.pitcher_throws) for r in records],
            "stand": [str(r.batter_stands) for r in records],
            "fielder_2": [500000 + int(r.catcher_id[1:]) for r in records],
            "pitcher": [600000 + int(r.pitcher_id[1:]) for r in records],
            "description": [
                "swinging_strike" if i % 5 == 4 else ("called_strike" if r.outcome else "ball")
                for i, r in enumerate(records)
            ],
        }
    )
    umpires = pd.DataFrame(
        {
            "game_pk": [game_pk[g] for g in games],
            "umpire_id": [400000 + i % 5 for i in range(len(games))],
        }
    )
    return pitches, umpires
