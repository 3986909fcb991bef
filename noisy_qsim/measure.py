# noisy_qsim/measure.py
from dataclasses import dataclass

import numpy as np

from .errors import DecayedState
from .logging_config import get_logger
from .state import State

logger = get_logger(__name__)


@dataclass(frozen=True)
class MeasurementOutcome:
    index: int          # sampled basis state
    probability: float  # its probability before collapse

    def bitstring(self, n: int) -> str:
        """Basis label with qubit n-1 leftmost (qubit 0 is the last character)."""
        return format(self.index, f"0{n}b")


def sample_index(probs: np.ndarray, rng: np.random.Generator) -> int:
    """Inverse-CDF sample: first index whose cumulative mass exceeds u ~ U[0, 1)."""
    cdf = np.cumsum(probs)
    total = cdf[-1]
    if total <= 0.0:
        raise DecayedState("Cannot sample from a zero distribution")
    cdf /= total
    cdf[-1] = 1.0
    u = rng.random()
    return int(np.searchsorted(cdf, u, side="right"))


def collapse(state: State, index: int):
    state.psi[:] = 0
    state.psi[index] = 1.0 + 0.0j


def measure(state: State, rng: np.random.Generator, eps: float = 1e-12) -> MeasurementOutcome:
    """Measure every qubit in the computational basis and collapse ``state``."""
    state.renormalize(eps)
    probs = state.probabilities()
    index = sample_index(probs, rng)
    outcome = MeasurementOutcome(index=index, probability=float(probs[index]))
    collapse(state, index)
    logger.info("Measured |%s> (p=%.6f)", outcome.bitstring(state.n), outcome.probability)
    return outcome
