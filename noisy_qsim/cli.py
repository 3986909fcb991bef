# noisy_qsim/cli.py
"""
Command-line entry point.

    noisy-qsim run bell.json --seed 7 --plot bell.png
    noisy-qsim qasm bell.json
    noisy-qsim bench qubits --ns 4,8,12
    noisy-qsim plot --data-dir data

Circuit files are JSON::

    {"qubits": 2,
     "gates": [{"gate": "h", "target": 0},
               {"gate": "cx", "control": 0, "target": 1},
               {"gate": "measure", "target": 0}],
     "noise": {"decoherence_rate": 0.01, "gate_fidelity": 0.99},
     "seed": 7}
"""
import argparse
import json
import sys

import numpy as np

from . import bench
from .circuit import CircuitSimulator, GateInstruction
from .config import BACKENDS, SimulatorConfig
from .errors import CircuitFileError, SimulatorError
from .logging_config import get_logger, setup_logging
from .noise import NoiseModel
from .qasm import to_qasm

logger = get_logger(__name__)


def load_circuit(path):
    """Read a JSON circuit file -> (qubits, instructions, noise or None, seed or None)."""
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise CircuitFileError(f"{path}: not valid JSON ({e})") from e
    try:
        n = int(data["qubits"])
        instructions = [
            GateInstruction.from_tag(g["gate"], int(g.get("target", 0)),
                                     control=g.get("control"), theta=g.get("theta"),
                                     payload=g.get("payload"))
            for g in data["gates"]
        ]
        noise = NoiseModel.from_dict(data["noise"]) if data.get("noise") else None
    except SimulatorError:
        raise
    except KeyError as e:
        raise CircuitFileError(f"{path}: missing key {e}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise CircuitFileError(f"{path}: {e}") from e
    return n, instructions, noise, data.get("seed")


def format_amplitudes(amps, tol=1e-9):
    n = amps.shape[0].bit_length() - 1
    lines = []
    for i, a in enumerate(amps):
        if abs(a) < tol:
            continue
        lines.append(f"  |{format(i, f'0{n}b')}>  {a.real:+.6f}{a.imag:+.6f}j  p={abs(a)**2:.6f}")
    return "\n".join(lines)


def cmd_run(args):
    n, instructions, noise, seed = load_circuit(args.circuit)
    if args.ideal:
        noise = NoiseModel.ideal()
    if args.seed is not None:
        seed = args.seed
    cfg = SimulatorConfig(backend=args.backend, max_qubits=args.max_qubits)
    res = CircuitSimulator(cfg, noise=noise).run(n, instructions, seed=seed)

    print("Final state:")
    print(format_amplitudes(res.amplitudes))
    if res.outcome is not None:
        print(f"Measurement: |{res.outcome.bitstring(n)}> (index {res.outcome.index}, "
              f"p={res.outcome.probability:.6f})")
    if args.save:
        np.save(args.save, res.amplitudes)
    if args.plot:
        from .plot_results import plot_probabilities
        plot_probabilities(res.amplitudes, args.plot, n=n)
    return 0


def cmd_qasm(args):
    n, instructions, _, _ = load_circuit(args.circuit)
    text = to_qasm(instructions, n)
    if args.output:
        with open(args.output, "w") as f:
            f.write(text)
    else:
        sys.stdout.write(text)
    return 0


def cmd_bench(args):
    bench.dispatch(args)
    return 0


def cmd_plot(args):
    from .plot_results import main as plot_main
    plot_main(args.data_dir)
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="noisy-qsim", description="Noisy state-vector circuit simulator")
    p.add_argument("--log-level", default="WARNING")
    p.add_argument("--log-file", default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="run a JSON circuit")
    p_run.add_argument("circuit")
    p_run.add_argument("--backend", default="numpy", choices=list(BACKENDS))
    p_run.add_argument("--seed", type=int, default=None)
    p_run.add_argument("--ideal", action="store_true", help="ignore the file's noise settings")
    p_run.add_argument("--max-qubits", type=int, default=SimulatorConfig.max_qubits)
    p_run.add_argument("--save", default=None, help="write final amplitudes (.npy)")
    p_run.add_argument("--plot", default=None, help="write probability bar chart (.png)")
    p_run.set_defaults(func=cmd_run)

    p_qasm = sub.add_parser("qasm", help="export a JSON circuit as OpenQASM 3")
    p_qasm.add_argument("circuit")
    p_qasm.add_argument("-o", "--output", default=None)
    p_qasm.set_defaults(func=cmd_qasm)

    p_bench = sub.add_parser("bench", help="timing sweeps → data/<backend>/*.csv")
    bench.build_parser(p_bench)
    p_bench.set_defaults(func=cmd_bench)

    p_plot = sub.add_parser("plot", help="plot benchmark CSVs")
    p_plot.add_argument("--data-dir", default=None)
    p_plot.set_defaults(func=cmd_plot)
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    try:
        return args.func(args)
    except SimulatorError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
