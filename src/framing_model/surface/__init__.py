"""Spatial called-strike probability surface."""

from framing_model.surface.grid import evaluation_grid
from framing_model.surface.model import (
    FittedSurface,
    SurfaceHyperparameters,
    annotate_records,
    fit_surface,
    predict_surface,
)

__all__ = [
    "FittedSurface",
    "SurfaceHyperparameters",
    "annotate_records",
    "evaluation_grid",
    "fit_surface",
    "predict_surface",
]
