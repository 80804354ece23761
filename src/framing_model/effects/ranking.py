from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

from framing_model.domain.effects import EntityKind, RankDirection, RankedEffect
from framing_model.exceptions import InputError

if TYPE_CHECKING:
    from framing_model.domain.effects import EntityEffectTable

DEFAULT_TOP_N = 10


def rank_effects(
    effects: EntityEffectTable,
    kind: EntityKind,
    direction: RankDirection,
    n: int = DEFAULT_TOP_N,
) -> list[RankedEffect]:
    """Return the ``n`` entities of ``kind`` with the highest or lowest effect.

    Ties on the effect value are broken by ascending entity id in both
    directions, so the ordering is fully deterministic.
    """
    if n < 0:
        raise InputError(f"n must be non-negative, got {n}", field="n", value=n)
    kind = EntityKind(kind)
    direction = RankDirection(direction)
    sign = -1.0 if direction is RankDirection.HIGHEST else 1.0
    ordered = sorted(effects.for_kind(kind), key=lambda e: (sign * e.effect, e.entity_id))
    return [
        RankedEffect(rank=i + 1, entity_id=e.entity_id, effect=e.effect) for i, e in enumerate(ordered[:n])
    ]


def leaderboards(
    effects: EntityEffectTable, n: int = DEFAULT_TOP_N
) -> dict[tuple[EntityKind, RankDirection], list[RankedEffect]]:
    """Rankings for every (kind, direction) pair."""
    return {
        (kind, direction): rank_effects(effects, kind, direction, n)
        for kind, direction in itertools.product(EntityKind, RankDirection)
    }
