# noisy_qsim/apply_serial.py
# Reference kernels: plain Python loops over the amplitude buffer.
import numpy as np

def apply_single_qubit(psi: np.ndarray, U2: np.ndarray, k: int):
    """Apply 2x2 gate U2 to qubit k (little-endian: bit k)."""
    assert U2.shape == (2,2)
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    # iterate blocks of size 2^(k+1), update pairs (i0, i1=i0+step)
    for base in range(0, N, block):
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = U2[0,0]*a0 + U2[0,1]*a1
            psi[i1] = U2[1,0]*a0 + U2[1,1]*a1

def apply_two_qubit_4x4(psi: np.ndarray, U4: np.ndarray, qa: int, qb: int):
    """Apply 4x4 gate U4 to qubits (qa, qb); U4 sub-index is (bit_qa<<1)|bit_qb."""
    if qa == qb:
        raise ValueError("qa and qb must differ")
    assert U4.shape == (4,4)

    N = psi.shape[0]
    ma = 1 << qa
    mb = 1 << qb
    k, l = min(qa, qb), max(qa, qb)
    # loop over indices where bits k and l are 0:
    # pattern repeats every 2^(l+1); within that, chunks of 2^(k+1) below bit l.
    for base in range(0, N, 1 << (l+1)):
        for chunk in range(0, 1 << l, 1 << (k+1)):
            for off in range(1 << k):
                i00 = base + chunk + off
                i01 = i00 | mb
                i10 = i00 | ma
                i11 = i00 | ma | mb
                a00, a01, a10, a11 = psi[i00], psi[i01], psi[i10], psi[i11]
                psi[i00] = U4[0,0]*a00 + U4[0,1]*a01 + U4[0,2]*a10 + U4[0,3]*a11
                psi[i01] = U4[1,0]*a00 + U4[1,1]*a01 + U4[1,2]*a10 + U4[1,3]*a11
                psi[i10] = U4[2,0]*a00 + U4[2,1]*a01 + U4[2,2]*a10 + U4[2,3]*a11
                psi[i11] = U4[3,0]*a00 + U4[3,1]*a01 + U4[3,2]*a10 + U4[3,3]*a11

def apply_CNOT(psi: np.ndarray, control: int, target: int):
    """Flip bit ``target`` on every index whose bit ``control`` is set."""
    if control == target:
        raise ValueError("control and target must differ")
    N = psi.shape[0]
    mc = 1 << control
    mt = 1 << target
    k, l = min(control, target), max(control, target)
    for base in range(0, N, 1 << (l+1)):
        for chunk in range(0, 1 << l, 1 << (k+1)):
            for off in range(1 << k):
                i10 = (base + chunk + off) | mc   # c=1,t=0
                i11 = i10 | mt                    # c=1,t=1
                a10 = psi[i10]
                psi[i10] = psi[i11]
                psi[i11] = a10
