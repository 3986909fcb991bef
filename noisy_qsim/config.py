# noisy_qsim/config.py
"""
Configuration for the circuit simulator.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

import numpy as np

BACKENDS = ("serial", "numpy", "numba")

# 2**24 complex128 amplitudes = 256 MiB; one more doubling per extra qubit.
MAX_QUBITS = 24


@dataclass
class SimulatorConfig:
    """Configuration for the quantum circuit simulator."""

    # Kernel selection: "serial" (reference loops), "numpy", "numba"
    backend: str = "numpy"
    dtype: Any = np.complex128
    num_threads: Optional[int] = None  # numba only

    # Admission bound on register size
    max_qubits: int = MAX_QUBITS

    # Normalization
    norm_tol: float = 1e-6
    decay_eps: float = 1e-12
    check_norm: bool = True

    # None -> fresh OS entropy per run
    seed: Optional[int] = None

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend {self.backend!r}; expected one of {BACKENDS}")
        self.dtype = np.dtype(self.dtype).type
        if self.dtype not in (np.complex64, np.complex128):
            raise ValueError(f"dtype must be complex64 or complex128, got {self.dtype}")
        if self.max_qubits < 1:
            raise ValueError("max_qubits must be >= 1")
        if self.norm_tol <= 0 or self.decay_eps <= 0:
            raise ValueError("norm_tol and decay_eps must be positive")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulatorConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**dict(data))


# Default configuration instance
DEFAULT_CONFIG = SimulatorConfig()
