# noisy_qsim/qasm.py
"""
OpenQASM 3 export.

One statement per instruction::

    h q[0];
    cx q[0], q[1];
    measure q[1] -> c[1];

Export only; there is no parser back to instructions.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np

from .gates import GateKind, T_ANGLE

HEADER = 'OPENQASM 3.0;\ninclude "stdgates.inc";\n'

_NAMES = {
    GateKind.IDENTITY: "id",
    GateKind.X: "x",
    GateKind.Y: "y",
    GateKind.Z: "z",
    GateKind.H: "h",
    GateKind.T: "t",
}


def statement(ins) -> str:
    """Render a single ``GateInstruction`` as one QASM line."""
    k = ins.kind
    if k is GateKind.CUSTOM:
        return ins.payload.strip().rstrip(";") + ";"
    if k is GateKind.MEASURE:
        return f"measure q[{ins.target}] -> c[{ins.target}];"
    if k is GateKind.CX:
        return f"cx q[{ins.control}], q[{ins.target}];"
    if k is GateKind.T and ins.theta is not None and not np.isclose(ins.theta, T_ANGLE):
        return f"p({float(ins.theta)!r}) q[{ins.target}];"
    return f"{_NAMES[k]} q[{ins.target}];"


def to_qasm(instructions: Iterable, qubit_count: Optional[int] = None) -> str:
    """Serialize instructions; the register size defaults to the highest qubit used + 1."""
    instructions = list(instructions)
    if qubit_count is None:
        qubit_count = 1 + max((max(ins.qubits) for ins in instructions), default=0)
    lines: List[str] = [HEADER, f"qubit[{qubit_count}] q;", f"bit[{qubit_count}] c;", ""]
    lines.extend(statement(ins) for ins in instructions)
    return "\n".join(lines) + "\n"
