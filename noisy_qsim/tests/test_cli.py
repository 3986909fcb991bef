# noisy_qsim/tests/test_cli.py
import json

import numpy as np
import pytest

from noisy_qsim.cli import load_circuit, main
from noisy_qsim.errors import CircuitFileError

BELL = {
    "qubits": 2,
    "gates": [
        {"gate": "h", "target": 0},
        {"gate": "cx", "control": 0, "target": 1},
        {"gate": "measure", "target": 0},
    ],
    "noise": {"decoherence_rate": 0.05, "gate_fidelity": 0.9},
    "seed": 7,
}

def write(tmp_path, data, name="circ.json"):
    p = tmp_path / name
    p.write_text(json.dumps(data))
    return str(p)

def test_load_circuit(tmp_path):
    n, ins, noise, seed = load_circuit(write(tmp_path, BELL))
    assert n == 2 and seed == 7 and len(ins) == 3
    assert ins[1].qubits == (0, 1)
    assert noise.decoherence_rate == 0.05

def test_run_prints_outcome_and_saves(tmp_path, capsys):
    out = tmp_path / "amps.npy"
    assert main(["run", write(tmp_path, BELL), "--ideal", "--save", str(out)]) == 0
    text = capsys.readouterr().out
    assert "Measurement: |" in text
    amps = np.load(out)
    assert np.count_nonzero(np.abs(amps) > 1e-12) == 1
    assert np.argmax(np.abs(amps)) in (0, 3)

def test_run_plot(tmp_path):
    png = tmp_path / "p.png"
    assert main(["run", write(tmp_path, BELL), "--plot", str(png)]) == 0
    assert png.exists() and png.stat().st_size > 0

def test_qasm_export(tmp_path, capsys):
    assert main(["qasm", write(tmp_path, BELL)]) == 0
    text = capsys.readouterr().out
    assert "cx q[0], q[1];" in text
    assert "measure q[0] -> c[0];" in text

def test_bad_circuit_exits_nonzero(tmp_path):
    bad = dict(BELL, gates=[{"gate": "h", "target": 5}])
    assert main(["run", write(tmp_path, bad)]) == 1
    unknown = dict(BELL, gates=[{"gate": "swap", "target": 0}])
    assert main(["run", write(tmp_path, unknown)]) == 1

@pytest.mark.parametrize("gates", [
    [{"target": 0}],                       # no "gate" key
    [{"gate": "custom", "target": 0}],     # custom without a payload
    [{"gate": "h", "target": 0, "theta": 0.3}],
    [{"gate": "h", "target": "zero"}],
])
def test_malformed_gate_entry(tmp_path, gates):
    path = write(tmp_path, dict(BELL, gates=gates))
    with pytest.raises(CircuitFileError):
        load_circuit(path)
    assert main(["run", path]) == 1
    assert main(["qasm", path]) == 1

def test_malformed_file(tmp_path):
    no_gates = write(tmp_path, {"qubits": 2})
    with pytest.raises(CircuitFileError, match="missing key"):
        load_circuit(no_gates)
    bad_noise = write(tmp_path, dict(BELL, noise={"gate_fidelity": 2.0}), name="noise.json")
    assert main(["run", bad_noise]) == 1
    p = tmp_path / "broken.json"
    p.write_text("{\"qubits\": 2,")
    assert main(["run", str(p)]) == 1
