# noisy_qsim/tests/test_qasm.py
import numpy as np

from noisy_qsim.circuit import Circuit, GateInstruction
from noisy_qsim.gates import GateKind
from noisy_qsim.qasm import statement, to_qasm

def test_bell_with_measurement():
    c = Circuit.empty(2).h(0).cnot(0, 1).measure(0).measure(1)
    assert c.to_qasm() == (
        'OPENQASM 3.0;\n'
        'include "stdgates.inc";\n'
        '\n'
        'qubit[2] q;\n'
        'bit[2] c;\n'
        '\n'
        'h q[0];\n'
        'cx q[0], q[1];\n'
        'measure q[0] -> c[0];\n'
        'measure q[1] -> c[1];\n'
    )

def test_single_qubit_statements():
    c = Circuit.empty(3).i(0).x(1).y(2).z(0).t(1)
    assert [statement(ins) for ins in c.ops] == [
        "id q[0];", "x q[1];", "y q[2];", "z q[0];", "t q[1];",
    ]

def test_phase_angle():
    assert statement(GateInstruction(GateKind.T, 0, theta=np.pi/4)) == "t q[0];"
    assert statement(GateInstruction(GateKind.T, 2, theta=0.5)) == "p(0.5) q[2];"

def test_phase_angle_numpy_scalar():
    theta = np.linspace(0.1, 0.5, 3)[0]
    assert statement(GateInstruction(GateKind.T, 0, theta=theta)) == "p(0.1) q[0];"
    text = Circuit.empty(1).t(0, theta=np.float64(0.5)).to_qasm()
    assert "p(0.5) q[0];" in text

def test_custom_payload_verbatim():
    ins = GateInstruction(GateKind.CUSTOM, 0, payload="barrier q[0], q[1];")
    assert statement(ins) == "barrier q[0], q[1];"
    ins = GateInstruction(GateKind.CUSTOM, 0, payload="reset q[0]")
    assert statement(ins) == "reset q[0];"

def test_register_size_inferred():
    text = to_qasm([GateInstruction(GateKind.CX, 3, control=1)])
    assert "qubit[4] q;" in text
    assert "qubit[1] q;" in to_qasm([])
