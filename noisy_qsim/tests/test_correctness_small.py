# noisy_qsim/tests/test_correctness_small.py
import numpy as np
from noisy_qsim.circuit import Circuit

def almost(p, q, tol=1e-9):
    return np.allclose(p, q, atol=tol, rtol=0)

def probs(psi):
    return np.abs(psi)**2

def basis(n, i):
    v = np.zeros(1 << n, dtype=np.complex128); v[i] = 1.0
    return v

def test_h_on_zero():
    res = Circuit.empty(1).h(0).run()
    assert almost(probs(res.amplitudes), np.array([0.5, 0.5]))

def test_x_flips():
    # |0> -> X -> |1>
    res = Circuit.empty(1).x(0).run()
    assert almost(res.amplitudes, basis(1, 1))

def test_y_and_z_phases():
    # Y|0> = i|1>, Z|1> = -|1>
    res = Circuit.empty(1).y(0).run()
    assert almost(res.amplitudes, np.array([0, 1j]))
    res = Circuit.empty(1).x(0).z(0).run()
    assert almost(res.amplitudes, np.array([0, -1]))

def test_t_phase_and_custom_angle():
    res = Circuit.empty(1).x(0).t(0).run()
    assert almost(res.amplitudes, np.array([0, np.exp(1j*np.pi/4)]))
    res = Circuit.empty(1).x(0).t(0, theta=np.pi/2).run()
    assert almost(res.amplitudes, np.array([0, 1j]))

def test_identity_is_noop():
    res = Circuit.empty(3).h(1).i(0).i(2).run()
    expect = np.zeros(8, dtype=np.complex128); expect[0] = expect[2] = np.sqrt(0.5)
    assert almost(res.amplitudes, expect)

def test_x_on_high_qubit():
    # qubit 2 is bit 2 -> index 4
    res = Circuit.empty(3).x(2).run()
    assert almost(res.amplitudes, basis(3, 4))

def test_cnot_control_off_noop():
    # |00> --(CNOT c=1,t=0)--> stays |00>
    res = Circuit.empty(2).cnot(1,0).run()
    assert almost(res.amplitudes, basis(2, 0))

def test_cnot_control_on_flips():
    # Prepare control=1 by X on qubit 1, then CNOT(1->0): index 2 -> index 3
    res = Circuit.empty(2).x(1).cnot(1,0).run()
    assert almost(res.amplitudes, basis(2, 3))

def test_bell_state():
    res = Circuit.empty(2).h(0).cnot(0,1).run()
    s = 1/np.sqrt(2)
    assert almost(res.amplitudes, np.array([s, 0, 0, s]))

def test_hadamard_involution_every_qubit():
    for n in range(1, 6):
        for k in range(n):
            for start in range(1 << n):
                c = Circuit.empty(n)
                for q in range(n):
                    if (start >> q) & 1:
                        c.x(q)
                res = c.h(k).h(k).run()
                assert almost(res.amplitudes, basis(n, start))

def test_normalization():
    res = Circuit.empty(2).h(0).h(1).cnot(1,0).run()
    n2 = float((res.amplitudes.conj()*res.amplitudes).sum().real)
    assert abs(1.0 - n2) < 1e-9

def test_normalization_random_circuits():
    rng = np.random.default_rng(2024)
    for n in range(1, 11):
        c = Circuit.empty(n)
        for _ in range(30):
            g = int(rng.integers(0, 6))
            k = int(rng.integers(0, n))
            if g == 5 and n > 1:
                t = (k + 1 + int(rng.integers(0, n-1))) % n
                c.cnot(k, t)
            else:
                [c.h, c.x, c.y, c.z, c.t, c.h][g](k)
        res = c.run()
        assert abs(np.sum(np.abs(res.amplitudes)**2) - 1.0) < 1e-9
