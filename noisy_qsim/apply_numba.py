# noisy_qsim/apply_numba.py
import numpy as np
from numba import config, njit, prange, set_num_threads, get_num_threads

# ---------- low-level kernels (Numba JIT) ----------

@njit(parallel=True, fastmath=True)
def _single_qubit_kernel(psi, U2, k):
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    nblocks = N // block
    for b in prange(nblocks):
        base = b * block
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = U2[0,0]*a0 + U2[0,1]*a1
            psi[i1] = U2[1,0]*a0 + U2[1,1]*a1

@njit(parallel=True, fastmath=True)
def _two_qubit_4x4_kernel(psi, U4, qa, qb):
    N = psi.shape[0]
    ma = 1 << qa
    mb = 1 << qb
    # Iterate only bases where bits qa and qb are 0 → disjoint quads.
    for i00 in prange(N):
        if (i00 & ma) == 0 and (i00 & mb) == 0:
            i01 = i00 | mb
            i10 = i00 | ma
            i11 = i00 | ma | mb
            a00 = psi[i00]; a01 = psi[i01]; a10 = psi[i10]; a11 = psi[i11]
            psi[i00] = U4[0,0]*a00 + U4[0,1]*a01 + U4[0,2]*a10 + U4[0,3]*a11
            psi[i01] = U4[1,0]*a00 + U4[1,1]*a01 + U4[1,2]*a10 + U4[1,3]*a11
            psi[i10] = U4[2,0]*a00 + U4[2,1]*a01 + U4[2,2]*a10 + U4[2,3]*a11
            psi[i11] = U4[3,0]*a00 + U4[3,1]*a01 + U4[3,2]*a10 + U4[3,3]*a11

@njit(parallel=True, fastmath=True)
def _cnot_kernel(psi, control, target):
    N = psi.shape[0]
    mc = 1 << control
    mt = 1 << target
    for base in prange(N):
        if (base & mc) == 0 and (base & mt) == 0:
            i10 = base | mc          # control=1, target=0
            i11 = i10 | mt           # control=1, target=1
            a10 = psi[i10]
            psi[i10] = psi[i11]
            psi[i11] = a10

# ---------- user-facing apply helpers ----------

def set_threads(n: int):
    # clamp to the pool size numba was launched with
    set_num_threads(max(1, min(int(n), config.NUMBA_NUM_THREADS)))

def get_threads() -> int:
    return get_num_threads()

def apply_single_qubit(psi: np.ndarray, U2: np.ndarray, k: int):
    _single_qubit_kernel(psi, np.ascontiguousarray(U2, dtype=psi.dtype), k)

def apply_two_qubit_4x4(psi: np.ndarray, U4: np.ndarray, qa: int, qb: int):
    if qa == qb:
        raise ValueError("qa and qb must differ")
    _two_qubit_4x4_kernel(psi, np.ascontiguousarray(U4, dtype=psi.dtype), qa, qb)

def apply_CNOT(psi: np.ndarray, control: int, target: int):
    if control == target:
        raise ValueError("control and target must differ")
    _cnot_kernel(psi, control, target)
