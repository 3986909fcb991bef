# noisy_qsim/plot_results.py
import csv, os
from collections import defaultdict
from statistics import median

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

DATA_DIR = os.path.join(os.getcwd(), "data")

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        r = csv.DictReader(f)
        for row in r:
            row["qubits"]  = int(row["qubits"])
            row["depth"]   = int(row["depth"])
            row["decoherence_rate"] = float(row["decoherence_rate"])
            row["wall_ms"] = float(row["wall_ms"])
            row["fidelity"] = float(row["fidelity"]) if row.get("fidelity") else None
            rows.append(row)
    return rows

def median_by_key(rows, key_fields, value="wall_ms"):
    buckets = defaultdict(list)
    for r in rows:
        key = tuple(r[k] for k in key_fields)
        buckets[key].append(r[value])
    agg = []
    for key, vals in buckets.items():
        out = dict(zip(key_fields, key))
        out[value] = float(median(vals))
        agg.append(out)
    return agg

def _by_backend(rows, x):
    pts = median_by_key(rows, ["backend", x])
    by_backend = defaultdict(list)
    for r in pts:
        by_backend[r["backend"]].append((r[x], r["wall_ms"]))
    return by_backend

def plot_runtime_vs_qubits(rows, tag, out_dir):
    by_backend = _by_backend(rows, "qubits")
    if not by_backend: return None
    plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Qubits (n)")
    plt.ylabel("Runtime (ms, log scale)")
    plt.yscale("log")
    plt.title(f"Runtime vs Qubits [{tag}]")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.legend()
    path = os.path.join(out_dir, f"runtime_vs_qubits_{tag}.png")
    plt.savefig(path, dpi=200)
    plt.close()
    return path

def plot_runtime_vs_depth(rows, tag, out_dir):
    by_backend = _by_backend(rows, "depth")
    if not by_backend: return None
    plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Depth")
    plt.ylabel("Runtime (ms)")
    plt.title(f"Runtime vs Depth [{tag}]")
    plt.legend()
    plt.grid(True)
    path = os.path.join(out_dir, f"runtime_vs_depth_{tag}.png")
    plt.savefig(path, dpi=200)
    plt.close()
    return path

def plot_fidelity_vs_noise(rows, tag, out_dir):
    pts = sorted((r["decoherence_rate"], r["fidelity"]) for r in rows if r["fidelity"] is not None)
    if not pts: return None
    xs, ys = zip(*pts)
    plt.figure()
    plt.plot(xs, ys, marker="o")
    plt.xlabel("Decoherence rate")
    plt.ylabel("Fidelity vs ideal")
    plt.ylim(0, 1.05)
    plt.title(f"Fidelity vs Decoherence [{tag}]")
    plt.grid(True)
    path = os.path.join(out_dir, f"fidelity_vs_noise_{tag}.png")
    plt.savefig(path, dpi=200)
    plt.close()
    return path

def plot_probabilities(amplitudes, path, n=None, title="Basis-state probabilities"):
    """Bar chart of |amplitude|^2 per basis state."""
    probs = np.abs(np.asarray(amplitudes))**2
    if n is None:
        n = probs.shape[0].bit_length() - 1
    labels = [format(i, f"0{n}b") for i in range(probs.shape[0])]
    plt.figure(figsize=(max(4, 0.4*len(labels)), 3))
    plt.bar(range(len(labels)), probs)
    plt.xticks(range(len(labels)), labels, rotation=90 if n > 3 else 0)
    plt.ylabel("Probability")
    plt.ylim(0, 1.0)
    plt.title(title)
    plt.tight_layout()
    plt.savefig(path, dpi=200)
    plt.close()
    return path


def main(data_dir=None):
    data_dir = data_dir or DATA_DIR
    # find all CSVs recursively under data/
    csvs = []
    for root, _, files in os.walk(data_dir):
        for f in files:
            if f.endswith(".csv"):
                csvs.append(os.path.join(root, f))

    if not csvs:
        print(f"No CSV files found under {data_dir}")
        return []

    saved = []
    for path in csvs:
        tag = os.path.splitext(os.path.basename(path))[0]
        backend = os.path.basename(os.path.dirname(path))
        rows = load_rows(path)
        print(f"Plotting from {backend}/{tag}.csv ({len(rows)} rows)...")

        # send plots to the same backend folder
        out_dir = os.path.dirname(path)
        if tag.startswith("qubits"):
            saved.append(plot_runtime_vs_qubits(rows, backend, out_dir))
        elif tag.startswith("depth"):
            saved.append(plot_runtime_vs_depth(rows, backend, out_dir))
        elif tag.startswith("noise"):
            saved.append(plot_fidelity_vs_noise(rows, backend, out_dir))
    print(f"\nSaved plots under {data_dir}/<backend>/*.png")
    return [p for p in saved if p]



if __name__ == "__main__":
    main()
