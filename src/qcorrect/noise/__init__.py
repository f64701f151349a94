from .channels import (
    apply_correlated_noise,
    apply_decoherence,
    apply_depolarizing,
    apply_noise,
    apply_thermal_noise,
)
from .model import NoiseModel
from .presets import DEFAULT_PRESETS, NoisePreset, load_presets

__all__ = [
    "apply_noise",
    "apply_decoherence",
    "apply_depolarizing",
    "apply_thermal_noise",
    "apply_correlated_noise",
    "NoiseModel",
    "NoisePreset",
    "load_presets",
    "DEFAULT_PRESETS",
]
