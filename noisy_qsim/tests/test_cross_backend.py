# noisy_qsim/tests/test_cross_backend.py
import numpy as np
import pytest
from noisy_qsim.circuit import Circuit
from noisy_qsim.noise import NoiseModel

def max_abs_diff(a, b):
    return float(np.max(np.abs(a - b)))

def build_random(n, depth, rng):
    c = Circuit.empty(n)
    for _ in range(depth):
        g = rng.integers(0, 4)  # 0:H,1:X,2:T,3:CNOT
        if g == 0:
            c.h(int(rng.integers(0, n)))
        elif g == 1:
            c.x(int(rng.integers(0, n)))
        elif g == 2:
            c.t(int(rng.integers(0, n)))
        else:
            c1 = int(rng.integers(0, n))
            c2 = c1
            while c2 == c1:
                c2 = int(rng.integers(0, n))
            c.cnot(c1, c2)
    return c

def test_serial_vs_numpy_small():
    # 3-qubit mixed circuit
    c = Circuit.empty(3).h(0).x(1).cnot(1,2).h(2).cnot(0,1).x(2).y(0).t(1)
    s = c.run(backend="serial")
    v = c.run(backend="numpy")
    assert max_abs_diff(s.amplitudes, v.amplitudes) < 1e-12

@pytest.mark.parametrize("backend", ["numpy", "numba"])
def test_random_circuits_match(backend):
    rng = np.random.default_rng(123)
    n = 4
    for depth in (5, 10, 20):
        c = build_random(n, depth, rng)
        s = c.run(backend="serial")
        t = c.run(backend=backend, num_threads=2 if backend == "numba" else None)
        assert np.allclose(s.amplitudes, t.amplitudes, atol=1e-10, rtol=0)

@pytest.mark.parametrize("backend", ["serial", "numpy", "numba"])
def test_noisy_runs_match_across_backends(backend):
    # same seed -> same fidelity draws and damping masks on every backend
    noise = NoiseModel(decoherence_rate=0.2, gate_fidelity=0.6)
    c = build_random(3, 15, np.random.default_rng(9))
    ref = c.run(backend="serial", noise=noise, seed=77)
    got = c.run(backend=backend, noise=noise, seed=77)
    assert np.allclose(ref.amplitudes, got.amplitudes, atol=1e-10, rtol=0)
