# noisy_qsim/gates.py
import enum
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .errors import UnknownGateKind

T_ANGLE = np.pi / 4


class GateKind(enum.Enum):
    IDENTITY = "id"
    X = "x"
    Y = "y"
    Z = "z"
    H = "h"
    T = "t"
    CX = "cx"
    MEASURE = "measure"
    CUSTOM = "custom"

    @property
    def num_qubits(self) -> int:
        return 2 if self is GateKind.CX else 1

    @property
    def is_unitary(self) -> bool:
        return self not in (GateKind.MEASURE, GateKind.CUSTOM)


_ALIASES = {"i": GateKind.IDENTITY, "cnot": GateKind.CX, "m": GateKind.MEASURE}


def kind_from_tag(tag: str) -> GateKind:
    """Look up a gate kind by its textual tag (case-insensitive)."""
    key = tag.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return GateKind(key)
    except ValueError:
        raise UnknownGateKind(f"Unknown gate {tag!r}") from None


def I(dtype=np.complex128) -> np.ndarray:
    return np.eye(2, dtype=dtype)

def X(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, 1],
                     [1, 0]], dtype=dtype)

def Y(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, -1j],
                     [1j, 0]], dtype=dtype)

def Z(dtype=np.complex128) -> np.ndarray:
    return np.array([[1, 0],
                     [0, -1]], dtype=dtype)

def H(dtype=np.complex128) -> np.ndarray:
    s = np.sqrt(0.5)
    return np.array([[s, s],
                     [s, -s]], dtype=dtype)

def T(theta: float = T_ANGLE, dtype=np.complex128) -> np.ndarray:
    """Phase gate diag(1, e^{i theta}); theta=pi/4 is the T gate."""
    return np.array([[1, 0],
                     [0, np.exp(1j*theta)]], dtype=dtype)

def CNOT(dtype=np.complex128) -> np.ndarray:
    # 4x4 in order 00,01,10,11 with sub-index (control<<1)|target
    mat = np.eye(4, dtype=dtype)
    # swap |10> <-> |11>
    mat[2,2] = 0; mat[3,3] = 0
    mat[2,3] = 1; mat[3,2] = 1
    return mat


def gate_matrix(kind: GateKind, theta: Optional[float] = None, dtype=np.complex128) -> np.ndarray:
    """Unitary for ``kind`` on the qubits it acts on (2x2, or 4x4 for CX)."""
    if kind is GateKind.IDENTITY:
        return I(dtype)
    if kind is GateKind.X:
        return X(dtype)
    if kind is GateKind.Y:
        return Y(dtype)
    if kind is GateKind.Z:
        return Z(dtype)
    if kind is GateKind.H:
        return H(dtype)
    if kind is GateKind.T:
        return T(T_ANGLE if theta is None else theta, dtype)
    if kind is GateKind.CX:
        return CNOT(dtype)
    raise UnknownGateKind(f"{kind!r} has no unitary matrix")


@dataclass(frozen=True)
class EmbeddedGate:
    """A gate matrix bound to the bit positions it acts on.

    ``qubits`` is ``(k,)`` for a 2x2 matrix, or ``(qa, qb)`` for a 4x4 matrix
    whose sub-index is ``(bit_qa << 1) | bit_qb``. ``controlled_x`` marks an
    exact CNOT so backends can use the swap kernel instead of a 4x4 multiply.
    """
    matrix: np.ndarray
    qubits: Tuple[int, ...]
    controlled_x: bool = False


def embed(kind: GateKind, target: int, control: Optional[int] = None,
          theta: Optional[float] = None, factor: float = 1.0,
          dtype=np.complex128) -> EmbeddedGate:
    """Bind ``kind`` to its qubits, attenuated by ``factor`` (1.0 = exact)."""
    U = gate_matrix(kind, theta, dtype=dtype)
    if factor != 1.0:
        U = (factor*U + (1.0 - factor)*np.eye(U.shape[0])).astype(dtype)
    if kind is GateKind.CX:
        return EmbeddedGate(U, (control, target), controlled_x=(factor == 1.0))
    return EmbeddedGate(U, (target,))
