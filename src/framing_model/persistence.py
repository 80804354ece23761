"""Saving and loading fitted strike surfaces with joblib.

Each surface is stored as ``{name}_surface.joblib`` with a JSON sidecar
``{name}_surface_meta.json`` describing the fit.
"""

from __future__ import annotations

import dataclasses
import datetime
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from framing_model.domain.pitch import Handedness
from framing_model.surface.model import FittedSurface, SurfaceHyperparameters

logger = logging.getLogger(__name__)

DEFAULT_MODEL_DIR = Path.home() / ".framing_model" / "models"

_MODEL_TYPE = "surface"


@dataclass(frozen=True)
class SurfaceMetadata:
    """Metadata about a saved surface, stored as a JSON sidecar."""

    name: str
    n_samples: int
    seed: int | None
    lam: float
    edof: float
    created_at: str
    hyperparameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SurfaceMetadata:
        return cls(
            name=data["name"],
            n_samples=data.get("n_samples", 0),
            seed=data.get("seed"),
            lam=data.get("lam", float("nan")),
            edof=data.get("edof", float("nan")),
            created_at=data.get("created_at", ""),
            hyperparameters=data.get("hyperparameters", {}),
        )


def surface_to_params(surface: FittedSurface) -> dict[str, Any]:
    """Return surface state for serialization."""
    return {
        "gam": surface.gam,
        "seen_levels": {name: sorted(str(h) for h in levels) for name, levels in surface.seen_levels.items()},
        "n_samples": surface.n_samples,
        "seed": surface.seed,
        "lam": surface.lam,
        "edof": surface.edof,
        "hyperparameters": dataclasses.asdict(surface.hyperparameters),
    }


def surface_from_params(params: dict[str, Any]) -> FittedSurface:
    """Reconstruct a surface from serialized state."""
    return FittedSurface(
        gam=params["gam"],
        seen_levels={
            name: frozenset(Handedness(h) for h in levels) for name, levels in params["seen_levels"].items()
        },
        n_samples=params["n_samples"],
        seed=params["seed"],
        lam=params["lam"],
        edof=params["edof"],
        hyperparameters=SurfaceHyperparameters(**params["hyperparameters"]),
    )


@dataclass
class SurfaceStore:
    """Stores and retrieves fitted surfaces.

    Surfaces are saved to ~/.framing_model/models/ by default.
    """

    model_dir: Path = DEFAULT_MODEL_DIR

    def __post_init__(self) -> None:
        self.model_dir.mkdir(parents=True, exist_ok=True)

    def save(self, surface: FittedSurface, name: str) -> Path:
        """Save a surface to disk.

        Returns:
            Path to the saved model file
        """
        import joblib

        model_path = self._model_path(name)
        joblib.dump(surface_to_params(surface), model_path)
        logger.info("Saved %s model to %s", _MODEL_TYPE, model_path)

        metadata = SurfaceMetadata(
            name=name,
            n_samples=surface.n_samples,
            seed=surface.seed,
            lam=surface.lam,
            edof=surface.edof,
            created_at=datetime.datetime.now(datetime.UTC).isoformat(),
            hyperparameters=dataclasses.asdict(surface.hyperparameters),
        )
        with self._meta_path(name).open("w") as f:
            json.dump(metadata.to_dict(), f, indent=2)
        return model_path

    def load(self, name: str) -> FittedSurface:
        """Load a surface from disk.

        Raises:
            FileNotFoundError: If the model does not exist
        """
        import joblib

        model_path = self._model_path(name)
        if not model_path.exists():
            raise FileNotFoundError(f"Model not found: {model_path}")
        surface = surface_from_params(joblib.load(model_path))
        logger.info("Loaded %s model from %s", _MODEL_TYPE, model_path)
        return surface

    def exists(self, name: str) -> bool:
        return self._model_path(name).exists()

    def get_metadata(self, name: str) -> SurfaceMetadata | None:
        meta_path = self._meta_path(name)
        if not meta_path.exists():
            return None
        with meta_path.open() as f:
            return SurfaceMetadata.from_dict(json.load(f))

    def list_models(self) -> list[SurfaceMetadata]:
        models: list[SurfaceMetadata] = []
        for meta_path in sorted(self.model_dir.glob(f"*_{_MODEL_TYPE}_meta.json")):
            with meta_path.open() as f:
                models.append(SurfaceMetadata.from_dict(json.load(f)))
        return models

    def _model_path(self, name: str) -> Path:
        return self.model_dir / f"{name}_{_MODEL_TYPE}.joblib"

    def _meta_path(self, name: str) -> Path:
        return self.model_dir / f"{name}_{_MODEL_TYPE}_meta.json"
