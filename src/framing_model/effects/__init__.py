"""Catcher, umpire and pitcher effects on the called-strike log-odds."""

from framing_model.effects.model import EffectHyperparameters, fit_effects
from framing_model.effects.ranking import DEFAULT_TOP_N, leaderboards, rank_effects

__all__ = [
    "DEFAULT_TOP_N",
    "EffectHyperparameters",
    "fit_effects",
    "leaderboards",
    "rank_effects",
]
