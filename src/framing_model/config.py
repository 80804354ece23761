from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from framing_model.effects.model import FIT_METHODS, EffectHyperparameters
from framing_model.exceptions import ConfigError
from framing_model.surface.model import SurfaceHyperparameters

if TYPE_CHECKING:
    from collections.abc import Callable

_T = TypeVar("_T")
_N = TypeVar("_N", int, float)

_DEFAULTS: dict[str, object] = {
    "surface": {
        # 0 fits on every record.
        "sample_size": 0,
        "seed": 42,
        "n_splines": 10,
        "spline_order": 3,
        "lam_min": -2.0,
        "lam_max": 3.0,
        "lam_points": 11,
        "max_iter": 100,
        "tol": 1e-4,
    },
    "effects": {
        "method": "laplace",
        "optimizer": "BFGS",
        "fe_p": 2.0,
        "vcp_p": 1.0,
        # 0 leaves the optimizer's own iteration limit in place.
        "max_iter": 0,
        "grad_tol": 1e-4,
    },
    "ranking": {
        "top_n": 10,
    },
    "storage": {
        "model_dir": "~/.framing_model/models",
    },
}


def create_config(
    yaml_path: str = "framing.yaml",
    env_prefix: str = "FRAMING",
    defaults: dict[str, object] | None = None,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file. A missing file is ignored.
        env_prefix: Prefix for environment variables, e.g. ``FRAMING__SURFACE__SEED``.
        defaults: Default configuration values.
        overrides: Values that win over every other layer (typically CLI options).
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))
    return ConfigurationSet(*layers)


def _get(cfg: ConfigurationSet, key: str, convert: Callable[[str], _T]) -> _T:
    raw = cfg[key]
    try:
        return convert(str(raw))
    except ValueError as e:
        raise ConfigError(key, raw, str(e)) from e


def _positive(key: str, value: _N) -> _N:
    if value <= 0:
        raise ConfigError(key, value, "must be positive")
    return value


def load_surface_hyperparameters(cfg: ConfigurationSet | None = None) -> SurfaceHyperparameters:
    if cfg is None:
        cfg = create_config()
    lam_min = _get(cfg, "surface.lam_min", float)
    lam_max = _get(cfg, "surface.lam_max", float)
    if lam_max < lam_min:
        raise ConfigError("surface.lam_max", lam_max, f"must be >= surface.lam_min ({lam_min})")
    return SurfaceHyperparameters(
        n_splines=_positive("surface.n_splines", _get(cfg, "surface.n_splines", int)),
        spline_order=_positive("surface.spline_order", _get(cfg, "surface.spline_order", int)),
        lam_min=lam_min,
        lam_max=lam_max,
        lam_points=_positive("surface.lam_points", _get(cfg, "surface.lam_points", int)),
        max_iter=_positive("surface.max_iter", _get(cfg, "surface.max_iter", int)),
        tol=_positive("surface.tol", _get(cfg, "surface.tol", float)),
    )


def load_effect_hyperparameters(cfg: ConfigurationSet | None = None) -> EffectHyperparameters:
    if cfg is None:
        cfg = create_config()
    method = str(cfg["effects.method"]).lower()
    if method not in FIT_METHODS:
        raise ConfigError("effects.method", method, f"expected one of {FIT_METHODS}")
    max_iter = _get(cfg, "effects.max_iter", int)
    return EffectHyperparameters(
        method=method,
        optimizer=str(cfg["effects.optimizer"]),
        fe_p=_positive("effects.fe_p", _get(cfg, "effects.fe_p", float)),
        vcp_p=_positive("effects.vcp_p", _get(cfg, "effects.vcp_p", float)),
        max_iter=max_iter if max_iter > 0 else None,
        grad_tol=_positive("effects.grad_tol", _get(cfg, "effects.grad_tol", float)),
    )


@dataclass(frozen=True)
class PipelineSettings:
    sample_size: int | None
    seed: int
    top_n: int
    model_dir: Path


def load_pipeline_settings(cfg: ConfigurationSet | None = None) -> PipelineSettings:
    if cfg is None:
        cfg = create_config()
    sample_size = _get(cfg, "surface.sample_size", int)
    if sample_size < 0:
        raise ConfigError("surface.sample_size", sample_size, "must be >= 0")
    top_n = _get(cfg, "ranking.top_n", int)
    if top_n < 0:
        raise ConfigError("ranking.top_n", top_n, "must be >= 0")
    return PipelineSettings(
        sample_size=sample_size or None,
        seed=_get(cfg, "surface.seed", int),
        top_n=top_n,
        model_dir=Path(str(cfg["storage.model_dir"])).expanduser(),
    )
