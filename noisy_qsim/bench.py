# noisy_qsim/bench.py
import argparse, csv, os, socket, subprocess, time, platform
from datetime import datetime
import numpy as np
from .circuit import Circuit
from .noise import NoiseModel

DATA_DIR = os.path.join(os.getcwd(), "data")

def backend_dir(backend, data_dir=None):
    path = os.path.join(data_dir or DATA_DIR, backend)
    os.makedirs(path, exist_ok=True)
    return path

def warmup(circ, backend):
    # one dummy run to JIT-compile & warm caches; no norm check
    _ = circ.run(backend=backend, check_norm=False, seed=0)

# ---------------------------------------------------------------------

def meta_row():
    commit = ""
    try:
        commit = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                         stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        pass
    return {
        "hostname": socket.gethostname(),
        "commit": commit,
        "dtype": "complex128",
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "python": platform.python_version(),
    }

HEADER = ["qubits","depth","backend","decoherence_rate","gate_fidelity","gates",
          "wall_ms","fidelity","hostname","commit","dtype","timestamp"]

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, row):
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

def make_row(circ, depth, backend, noise, wall, fidelity=""):
    m = meta_row()
    return {
        "qubits": circ.n, "depth": depth, "backend": backend,
        "decoherence_rate": noise.decoherence_rate, "gate_fidelity": noise.gate_fidelity,
        "gates": len(circ.ops), "wall_ms": f"{wall:.3f}", "fidelity": fidelity,
        "hostname": m["hostname"], "commit": m["commit"], "dtype": m["dtype"], "timestamp": m["timestamp"],
    }

# ---------------------------------------------------------------------

def random_circuit(n, depth, seed=0):
    """Alternating layers of single-qubit gates and nearest-neighbour CNOTs."""
    rng = np.random.default_rng(seed)
    c = Circuit.empty(n)
    for layer in range(depth):
        if layer % 2 == 0:
            for k in range(n):
                g = rng.integers(0, 3)
                if g == 0:
                    c.h(k)
                elif g == 1:
                    c.x(k)
                else:
                    c.t(k)
        else:
            for k in range(0, n-1, 2):
                if rng.integers(0, 2) == 0:
                    c.cnot(k, k+1)
                else:
                    c.cnot(k+1, k)
    return c

def time_run(circ, backend, noise=None, seed=0):
    t0 = time.perf_counter()
    res = circ.run(backend=backend, noise=noise, seed=seed, check_norm=False)
    return (time.perf_counter() - t0) * 1e3, res  # ms

def state_fidelity(a, b):
    return float(abs(np.vdot(a, b))**2)

# ---------------------------------------------------------------------
# individual experiments

def bench_qubits(ns, depth, backend, out_path):
    print(f"[run] Qubits scaling → {out_path}")
    new_csv(out_path)
    noise = NoiseModel.ideal()
    warmup(random_circuit(min(ns), depth, seed=42), backend)
    for n in ns:
        circ = random_circuit(n, depth, seed=42)
        wall, _ = time_run(circ, backend)
        write_row(out_path, make_row(circ, depth, backend, noise, wall))
        print(f"  n={n}  wall={wall:.2f} ms")
    print("✓ done.\n")

def bench_depth(n, depths, backend, out_path):
    print(f"[run] Depth scaling → {out_path}")
    new_csv(out_path)
    noise = NoiseModel.ideal()
    warmup(random_circuit(n, min(depths), seed=7), backend)
    for d in depths:
        circ = random_circuit(n, d, seed=7)
        wall, _ = time_run(circ, backend)
        write_row(out_path, make_row(circ, d, backend, noise, wall))
        print(f"  depth={d}  wall={wall:.2f} ms")
    print("✓ done.\n")

def bench_noise(n, depth, rates, fidelity, backend, out_path, seed=0):
    """Fidelity of noisy runs against the ideal final state, per decoherence rate."""
    print(f"[run] Noise sweep → {out_path}")
    new_csv(out_path)
    circ = random_circuit(n, depth, seed=11)
    warmup(circ, backend)
    _, ideal = time_run(circ, backend)
    for r in rates:
        noise = NoiseModel(decoherence_rate=r, gate_fidelity=fidelity)
        wall, res = time_run(circ, backend, noise=noise, seed=seed)
        f = state_fidelity(ideal.amplitudes, res.amplitudes)
        write_row(out_path, make_row(circ, depth, backend, noise, wall, f"{f:.6f}"))
        print(f"  rate={r}  fidelity={f:.4f}  wall={wall:.2f} ms")
    print("✓ done.\n")

# ---------------------------------------------------------------------
def build_parser(p=None):
    p = p or argparse.ArgumentParser(description="noisy_qsim benchmarks → data/<backend>/*.csv")
    p.add_argument("--data-dir", type=str, default=None)
    sub = p.add_subparsers(dest="bench", required=True)

    p_qubits = sub.add_parser("qubits")
    p_qubits.add_argument("--ns", type=str, required=True)
    p_qubits.add_argument("--depth", type=int, default=100)
    p_qubits.add_argument("--backend", type=str, default="numpy", choices=["serial","numpy","numba"])

    p_depth = sub.add_parser("depth")
    p_depth.add_argument("--n", type=int, default=12)
    p_depth.add_argument("--depths", type=str, default="10,50,100,300,600")
    p_depth.add_argument("--backend", type=str, default="numpy", choices=["serial","numpy","numba"])

    p_noise = sub.add_parser("noise")
    p_noise.add_argument("--n", type=int, default=8)
    p_noise.add_argument("--depth", type=int, default=40)
    p_noise.add_argument("--rates", type=str, default="0,0.001,0.01,0.05,0.1")
    p_noise.add_argument("--gate-fidelity", type=float, default=1.0)
    p_noise.add_argument("--seed", type=int, default=0)
    p_noise.add_argument("--backend", type=str, default="numpy", choices=["serial","numpy","numba"])
    return p

def dispatch(args):
    base = backend_dir(args.backend, args.data_dir)

    if args.bench == "qubits":
        ns = [int(x) for x in args.ns.split(",")]
        bench_qubits(ns, args.depth, args.backend, os.path.join(base, "qubits.csv"))

    elif args.bench == "depth":
        ds = [int(x) for x in args.depths.split(",")]
        bench_depth(args.n, ds, args.backend, os.path.join(base, "depth.csv"))

    elif args.bench == "noise":
        rs = [float(x) for x in args.rates.split(",")]
        bench_noise(args.n, args.depth, rs, args.gate_fidelity, args.backend,
                    os.path.join(base, "noise.csv"), seed=args.seed)

def main(argv=None):
    dispatch(build_parser().parse_args(argv))

if __name__ == "__main__":
    main()
