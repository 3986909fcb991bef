# noisy_qsim/noise.py
"""
Noise model applied during gate execution.

Two effects are modelled:

* gate fidelity loss: with probability ``1 - gate_fidelity`` a gate only
  takes effect with weight ``attenuation`` (see ``gates.embed``);
* decoherence: after each gate, every amplitude is independently damped by
  ``damping`` with probability ``decoherence_rate``.

Neither effect renormalizes the state. The ideal model consumes no random
numbers, so noise-free runs only draw entropy for measurement.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

import numpy as np

from .logging_config import get_logger
from .state import State

logger = get_logger(__name__)


@dataclass(frozen=True)
class NoiseModel:
    decoherence_rate: float = 0.01
    gate_fidelity: float = 0.99
    attenuation: float = 0.1
    damping: float = 0.95

    def __post_init__(self):
        for name in ("decoherence_rate", "gate_fidelity", "attenuation"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {v}")
        if not 0.0 < self.damping <= 1.0:
            raise ValueError(f"damping must be in (0, 1], got {self.damping}")

    @classmethod
    def ideal(cls) -> "NoiseModel":
        return cls(decoherence_rate=0.0, gate_fidelity=1.0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NoiseModel":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown noise keys: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})

    @property
    def is_ideal(self) -> bool:
        return self.decoherence_rate == 0.0 and self.gate_fidelity == 1.0

    def fidelity_factor(self, rng: np.random.Generator) -> float:
        """1.0 if the next gate is applied perfectly, else ``attenuation``."""
        if self.gate_fidelity >= 1.0:
            return 1.0
        if rng.random() < self.gate_fidelity:
            return 1.0
        logger.debug("Gate fidelity error: applying with weight %s", self.attenuation)
        return self.attenuation

    def perturb(self, state: State, rng: np.random.Generator) -> int:
        """Damp amplitudes in place; returns how many were damped."""
        if self.decoherence_rate <= 0.0:
            return 0
        mask = rng.random(state.psi.shape[0]) < self.decoherence_rate
        damped = int(np.count_nonzero(mask))
        if damped:
            state.psi[mask] *= self.damping
            logger.debug("Decoherence damped %d/%d amplitudes", damped, mask.size)
        return damped
