# noisy_qsim/tests/test_perf_sanity.py
import os
import time

import numpy as np

from noisy_qsim import bench, plot_results
from noisy_qsim.circuit import Circuit

def build_chain(n, depth):
    c = Circuit.empty(n)
    for _ in range(depth):
        for k in range(n):
            c.h(k)
        for k in range(0, n-1, 2):
            c.cnot(k, k+1)
    return c

def test_bench_runs_and_times():
    n, depth = 10, 3     # quick even for the serial loops
    c = build_chain(n, depth)
    t0 = time.perf_counter()
    s1 = c.run(backend="serial")
    t1 = time.perf_counter() - t0

    t0 = time.perf_counter()
    s2 = c.run(backend="numpy")
    t2 = time.perf_counter() - t0

    # correctness
    assert np.allclose(s1.amplitudes, s2.amplitudes, atol=1e-10, rtol=0)
    # sanity: both timings are positive
    assert t1 > 0 and t2 > 0
    # don't hard-assert speedup (machines vary); just ensure it isn't catastrophically slower
    assert t2 < 5.0 * t1

def test_noise_sweep_csv_and_plot(tmp_path):
    out = tmp_path / "numpy" / "noise.csv"
    bench.bench_noise(4, 6, [0.0, 0.1], 1.0, "numpy", str(out))
    rows = plot_results.load_rows(str(out))
    assert [r["decoherence_rate"] for r in rows] == [0.0, 0.1]
    assert rows[0]["fidelity"] == 1.0
    saved = plot_results.main(str(tmp_path))
    assert len(saved) == 1 and os.path.exists(saved[0])

def test_bench_cli_qubits(tmp_path):
    bench.main(["--data-dir", str(tmp_path), "qubits", "--ns", "2,3", "--depth", "4"])
    rows = plot_results.load_rows(str(tmp_path / "numpy" / "qubits.csv"))
    assert [r["qubits"] for r in rows] == [2, 3]
