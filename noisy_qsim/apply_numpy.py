# noisy_qsim/apply_numpy.py
import numpy as np

# -------------------------- core kernels --------------------------

def apply_single_qubit(psi: np.ndarray, U2: np.ndarray, k: int):
    """
    Apply a single-qubit 2x2 gate U2 to qubit k (little-endian, k=0 is LSB).
    Reshape-based kernel (no index arrays), in-place.
    """
    N = psi.shape[0]
    # View psi as (right, 2, left) where the middle axis is qubit k
    left  = 1 << k
    right = N // (left << 1)
    psi3 = psi.reshape(right, 2, left)

    # out[r, a, l] = sum_b U2[a,b] * psi3[r, b, l]
    psi3[:] = np.einsum('ab,rbl->ral', U2, psi3)

def apply_two_qubit_4x4(psi: np.ndarray, U4: np.ndarray, qa: int, qb: int):
    """
    Apply a two-qubit 4x4 gate U4 to qubits (qa, qb) (little-endian).
    Basis order for U4 is |00>,|01>,|10>,|11> over (bit_qa, bit_qb).
    Reshape-based kernel, in-place.
    """
    if qa == qb:
        raise ValueError("qa and qb must differ")
    k, l = min(qa, qb), max(qa, qb)

    N = psi.shape[0]
    # Reshape psi into (outer, 2, mid, 2, inner): axis 1 is bit l, axis 3 is bit k
    inner = 1 << k
    mid   = 1 << (l - k - 1)
    outer = N >> (l + 1)
    psi5 = psi.reshape(outer, 2, mid, 2, inner)

    # U[a,b,c,d]: (a,b) output bits of (qa,qb), (c,d) input bits
    U = U4.reshape(2, 2, 2, 2)

    if qa == l:
        psi5[:] = np.einsum('abcd,ocmdi->oambi', U, psi5)
    else:
        psi5[:] = np.einsum('abcd,odmci->obmai', U, psi5)

def apply_CNOT(psi: np.ndarray, control: int, target: int):
    """Swap the target-bit pairs of every index with the control bit set."""
    if control == target:
        raise ValueError("control and target must differ")
    idx = np.arange(psi.shape[0])
    i10 = idx[((idx >> control) & 1 == 1) & ((idx >> target) & 1 == 0)]
    i11 = i10 | (1 << target)
    psi[i10], psi[i11] = psi[i11], psi[i10].copy()
