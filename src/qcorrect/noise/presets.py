"""Named noise configurations.

:func:`load_presets` turns an already parsed YAML/JSON document of the form::

    channel:
      description: Lossy link used by the reference protocol run
      family: link
      references: []
      noise:
        decoherence_rate: 0.01
        depolarizing_probability: 0.001
        thermal_noise_strength: 0.0001
        correlation_length: 1.0
        target_qubits: null

into :class:`NoisePreset` objects.  Reading the file is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from .model import NoiseModel

__all__ = [
    "NoisePreset",
    "load_presets",
    "DEFAULT_PRESETS",
]


_MODEL_KEYS = frozenset(
    (
        "decoherence_rate",
        "depolarizing_probability",
        "thermal_noise_strength",
        "correlation_length",
        "target_qubits",
    )
)
_PRESET_KEYS = frozenset(("description", "family", "references", "noise"))


def _normalise_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``params`` with stringified keys."""

    return {str(k): v for k, v in dict(params).items()}


@dataclass(frozen=True)
class NoisePreset:
    """A named :class:`NoiseModel` with descriptive metadata."""

    name: str
    model: NoiseModel
    family: str | None = None
    description: str | None = None
    references: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, name: str, mapping: Mapping[str, Any]) -> "NoisePreset":
        mapping = _normalise_params(mapping)
        unknown = set(mapping) - _PRESET_KEYS
        if unknown:
            raise ValueError(f"Preset '{name}' has unknown keys: {sorted(unknown)}")

        params = _normalise_params(mapping.get("noise") or {})
        unknown = set(params) - _MODEL_KEYS
        if unknown:
            raise ValueError(f"Preset '{name}' has unknown noise parameters: {sorted(unknown)}")
        if params.get("target_qubits") is not None:
            params["target_qubits"] = tuple(params["target_qubits"])

        return cls(
            name=name,
            model=NoiseModel(**params),
            family=mapping.get("family"),
            description=mapping.get("description"),
            references=tuple(mapping.get("references") or ()),
        )

    def to_noise_model(self) -> NoiseModel:
        """Return a fresh model with an empty correlation cache."""

        return NoiseModel(
            decoherence_rate=self.model.decoherence_rate,
            depolarizing_probability=self.model.depolarizing_probability,
            thermal_noise_strength=self.model.thermal_noise_strength,
            correlation_length=self.model.correlation_length,
            target_qubits=self.model.target_qubits,
        )


def load_presets(preset_data: Mapping[str, Any]) -> dict[str, NoisePreset]:
    """Load presets from a parsed YAML dictionary."""

    presets: dict[str, NoisePreset] = {}
    for name, mapping in preset_data.items():
        presets[str(name)] = NoisePreset.from_mapping(str(name), mapping)
    return presets


DEFAULT_PRESETS: Mapping[str, NoisePreset] = MappingProxyType(
    load_presets(
        {
            "ideal": {"description": "No noise at all", "noise": {}},
            "channel": {
                "description": "Lossy link used by the reference protocol run",
                "family": "link",
                "noise": {
                    "decoherence_rate": 0.01,
                    "depolarizing_probability": 0.001,
                    "thermal_noise_strength": 0.0001,
                    "correlation_length": 1.0,
                },
            },
        }
    )
)
