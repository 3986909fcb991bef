# noisy_qsim/state.py
import numpy as np
from dataclasses import dataclass

from .backends import load_backend
from .config import MAX_QUBITS
from .errors import DecayedState, InvalidQubitCount
from .gates import EmbeddedGate

@dataclass
class State:
    n: int
    psi: np.ndarray  # shape (2**n,), dtype complex64/128

    @staticmethod
    def zero(n: int, dtype=np.complex128, max_qubits: int = MAX_QUBITS) -> "State":
        """|0...0> on ``n`` qubits; rejects n < 1 and n > max_qubits."""
        if n < 1 or n > max_qubits:
            raise InvalidQubitCount(
                f"qubit count must be in [1, {max_qubits}], got {n} "
                f"(state size grows as 2**n)")
        N = 1 << n
        psi = np.zeros(N, dtype=dtype)
        psi[0] = 1.0 + 0.0j
        return State(n=n, psi=psi)

    @property
    def dtype(self):
        return self.psi.dtype

    def norm2(self) -> float:
        return float(np.vdot(self.psi, self.psi).real)

    def check_normalized(self, tol=1e-6):
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: ||psi||^2={n2}")

    def probabilities(self) -> np.ndarray:
        return np.abs(self.psi).astype(np.float64)**2

    def renormalize(self, eps=1e-12):
        """Rescale to unit norm; a state with mass below ``eps`` has decayed."""
        n2 = self.norm2()
        if n2 < eps:
            raise DecayedState(f"Cannot renormalize: ||psi||^2={n2} < {eps}")
        self.psi /= np.sqrt(n2)

    def apply_unitary(self, gate: EmbeddedGate, backend: str = "numpy"):
        """Apply a gate bound to its qubit positions, in place."""
        kern = load_backend(backend)
        if gate.controlled_x:
            c, t = gate.qubits
            kern.apply_CNOT(self.psi, c, t)
        elif len(gate.qubits) == 1:
            kern.apply_single_qubit(self.psi, gate.matrix.astype(self.dtype), gate.qubits[0])
        else:
            qa, qb = gate.qubits
            kern.apply_two_qubit_4x4(self.psi, gate.matrix.astype(self.dtype), qa, qb)

    def copy(self) -> "State":
        return State(self.n, self.psi.copy())

    def as_numpy(self) -> np.ndarray:
        return self.psi
