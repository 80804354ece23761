from dataclasses import dataclass, field
from enum import StrEnum


class EntityKind(StrEnum):
    CATCHER = "catcher"
    UMPIRE = "umpire"
    PITCHER = "pitcher"


class RankDirection(StrEnum):
    HIGHEST = "highest"
    LOWEST = "lowest"


@dataclass(frozen=True)
class EntityEffect:
    """Conditional mean of one entity's random intercept, on the log-odds scale."""

    kind: EntityKind
    entity_id: str
    effect: float
    standard_error: float | None = None


@dataclass(frozen=True)
class RankedEffect:
    rank: int
    entity_id: str
    effect: float


@dataclass(frozen=True)
class EntityEffectTable:
    effects: tuple[EntityEffect, ...]
    intercept: float = 0.0
    probability_coefficient: float = 0.0
    group_std: dict[EntityKind, float] = field(default_factory=dict)
    n_rows: int = 0

    def for_kind(self, kind: EntityKind) -> list[EntityEffect]:
        return [e for e in self.effects if e.kind == kind]

    def lookup(self, kind: EntityKind, entity_id: str) -> EntityEffect | None:
        for effect in self.effects:
            if effect.kind == kind and effect.entity_id == entity_id:
                return effect
        return None

    def __len__(self) -> int:
        return len(self.effects)
