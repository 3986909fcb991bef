# noisy_qsim/ref_dense.py
"""Dense reference embedding (oracle for correctness, practical up to n ≈ 10).

Builds the full 2^n x 2^n operator of a gate from the bit positions it
addresses. Endianness: little-endian (qubit 0 = bit 0 = LSB).
"""
from __future__ import annotations

from typing import Sequence

import numpy as np


def embed_dense(U: np.ndarray, qubits: Sequence[int], n: int) -> np.ndarray:
    """Full operator for ``U`` on ``qubits``.

    The sub-index of ``U`` is formed from the addressed bits with
    ``qubits[0]`` most significant, matching ``EmbeddedGate``.
    """
    m = len(qubits)
    assert U.shape == (1 << m, 1 << m)
    N = 1 << n
    mask = 0
    for q in qubits:
        mask |= 1 << q

    def sub(i):
        s = 0
        for q in qubits:
            s = (s << 1) | ((i >> q) & 1)
        return s

    full = np.zeros((N, N), dtype=np.complex128)
    for i in range(N):
        for j in range(N):
            # entries only couple indices that agree outside the addressed bits
            if (i & ~mask) == (j & ~mask):
                full[i, j] = U[sub(i), sub(j)]
    return full


def apply_dense(psi: np.ndarray, U: np.ndarray, qubits: Sequence[int]) -> np.ndarray:
    n = psi.shape[0].bit_length() - 1
    return embed_dense(U, qubits, n) @ psi
