"""Builds the taken-pitch analysis table from Statcast-style pitch data.

Only pitches the batter did not swing at are kept. Each pitch is joined to
the plate umpire of its game, and rows whose location, handedness or
participants cannot be resolved are dropped.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

import pandas as pd

from framing_model.domain.pitch import Handedness, PitchRecord
from framing_model.exceptions import InputError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CALLED_STRIKE = "called_strike"
TAKEN_DESCRIPTIONS = frozenset({CALLED_STRIKE, "ball", "blocked_ball"})

PITCH_COLUMNS = ("game_pk", "plate_x", "plate_z", "p_throws", "stand", "fielder_2", "pitcher", "description")
UMPIRE_COLUMNS = ("game_pk", "umpire_id")


def load_frame(path: Path) -> pd.DataFrame:
    """Read a CSV or parquet file, chosen by suffix."""
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        return pd.read_csv(path, encoding="utf-8-sig")
    raise InputError(f"Unsupported file type '{path.suffix}' for {path}", field="path", value=str(path))


def _require_columns(frame: pd.DataFrame, columns: tuple[str, ...], table: str) -> None:
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise InputError(f"{table} table is missing required columns: {missing}", field="columns", value=missing)


def _to_optional_id(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            value = int(value)
    s = str(value).strip()
    if s == "":
        return None
    return s


def _to_optional_float(value: Any) -> float | None:
    if value is None:
        return None
    f = float(value)
    if math.isnan(f):
        return None
    return f


def _to_optional_hand(value: Any) -> Handedness | None:
    if not isinstance(value, str):
        return None
    try:
        return Handedness(value.strip().upper())
    except ValueError:
        return None


def taken_pitch_mapper(row: dict[str, Any]) -> PitchRecord | None:
    """Map one joined row to a ``PitchRecord``, or None when it cannot be resolved."""
    description = row.get("description")
    if description not in TAKEN_DESCRIPTIONS:
        return None
    game_id = _to_optional_id(row.get("game_pk"))
    catcher_id = _to_optional_id(row.get("fielder_2"))
    umpire_id = _to_optional_id(row.get("umpire_id"))
    pitcher_id = _to_optional_id(row.get("pitcher"))
    horizontal = _to_optional_float(row.get("plate_x"))
    vertical = _to_optional_float(row.get("plate_z"))
    throws = _to_optional_hand(row.get("p_throws"))
    stands = _to_optional_hand(row.get("stand"))
    if (
        game_id is None
        or catcher_id is None
        or umpire_id is None
        or pitcher_id is None
        or horizontal is None
        or vertical is None
        or throws is None
        or stands is None
    ):
        return None
    return PitchRecord(
        game_id=game_id,
        horizontal_location=horizontal,
        vertical_location=vertical,
        pitcher_throws=throws,
        batter_stands=stands,
        catcher_id=catcher_id,
        umpire_id=umpire_id,
        pitcher_id=pitcher_id,
        outcome=1 if description == CALLED_STRIKE else 0,
    )


def taken_pitches(pitches: pd.DataFrame, umpires: pd.DataFrame) -> list[PitchRecord]:
    """Filter to taken pitches, join the plate umpire and map to records.

    Raises:
        InputError: If either frame lacks a required column, or a game is
            assigned more than one umpire.
    """
    _require_columns(pitches, PITCH_COLUMNS, "pitch")
    _require_columns(umpires, UMPIRE_COLUMNS, "umpire")

    assignments = umpires.loc[:, list(UMPIRE_COLUMNS)].dropna().drop_duplicates()
    duplicated = assignments["game_pk"].duplicated(keep=False)
    if duplicated.any():
        games = sorted(assignments.loc[duplicated, "game_pk"].unique().tolist())
        raise InputError(f"games assigned more than one umpire: {games[:5]}", field="game_pk", value=games)

    taken = pitches.loc[pitches["description"].isin(TAKEN_DESCRIPTIONS), list(PITCH_COLUMNS)]
    joined = taken.merge(assignments, on="game_pk", how="inner")

    records: list[PitchRecord] = []
    for row in joined.to_dict(orient="records"):
        record = taken_pitch_mapper(row)
        if record is not None:
            records.append(record)
    logger.info(
        "Kept %d taken pitches of %d (%d after umpire join)",
        len(records),
        len(pitches),
        len(joined),
    )
    return records
