import math
from dataclasses import dataclass
from enum import StrEnum

from framing_model.exceptions import InputError


class Handedness(StrEnum):
    LEFT = "L"
    RIGHT = "R"


@dataclass(frozen=True)
class PitchRecord:
    """A single taken pitch with its umpire call."""

    game_id: str
    horizontal_location: float
    vertical_location: float
    pitcher_throws: Handedness
    batter_stands: Handedness
    catcher_id: str
    umpire_id: str
    pitcher_id: str
    outcome: int

    def __post_init__(self) -> None:
        if self.outcome not in (0, 1):
            raise InputError(f"outcome must be 0 or 1, got {self.outcome!r}", field="outcome", value=self.outcome)
        for name in ("pitcher_throws", "batter_stands"):
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, Handedness(value))
            except ValueError:
                raise InputError(f"{name} must be 'L' or 'R', got {value!r}", field=name, value=value) from None
        for name in ("horizontal_location", "vertical_location"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InputError(f"{name} must be finite, got {value!r}", field=name, value=value)
        for name in ("catcher_id", "umpire_id", "pitcher_id"):
            if not getattr(self, name):
                raise InputError(f"{name} is unresolved for game {self.game_id}", field=name, value=getattr(self, name))


@dataclass(frozen=True)
class SurfacePoint:
    horizontal_location: float
    vertical_location: float
    pitcher_throws: Handedness | str
    batter_stands: Handedness | str

    @classmethod
    def from_record(cls, record: PitchRecord) -> "SurfacePoint":
        return cls(
            horizontal_location=record.horizontal_location,
            vertical_location=record.vertical_location,
            pitcher_throws=record.pitcher_throws,
            batter_stands=record.batter_stands,
        )


@dataclass(frozen=True)
class SurfacePrediction:
    probability: float
    standard_error: float


@dataclass(frozen=True)
class PredictionRow:
    """A pitch annotated with the called-strike probability of its location."""

    record: PitchRecord
    fitted_probability: float
    fitted_se: float

    @property
    def catcher_id(self) -> str:
        return self.record.catcher_id

    @property
    def umpire_id(self) -> str:
        return self.record.umpire_id

    @property
    def pitcher_id(self) -> str:
        return self.record.pitcher_id

    @property
    def outcome(self) -> int:
        return self.record.outcome
