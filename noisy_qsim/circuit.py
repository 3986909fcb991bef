# noisy_qsim/circuit.py
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

from .backends import load_backend
from .config import DEFAULT_CONFIG, SimulatorConfig
from .errors import IndexOutOfRange, UnknownGateKind
from .gates import GateKind, embed, kind_from_tag
from .logging_config import get_logger
from .measure import MeasurementOutcome, measure
from .noise import NoiseModel
from .state import State

logger = get_logger(__name__)


@dataclass(frozen=True)
class GateInstruction:
    kind: GateKind
    target: int
    control: Optional[int] = None
    theta: Optional[float] = None     # phase angle, T only
    payload: Optional[str] = None     # CUSTOM only; exported, never executed

    def __post_init__(self):
        if self.kind is GateKind.CX:
            if self.control is None:
                raise IndexOutOfRange("cx requires a control qubit")
            if self.control == self.target:
                raise IndexOutOfRange(f"control and target must differ (both {self.target})")
        elif self.control is not None:
            raise IndexOutOfRange(f"{self.kind.value} does not take a control qubit")
        if self.theta is not None and self.kind is not GateKind.T:
            raise ValueError(f"{self.kind.value} does not take an angle")
        if self.kind is GateKind.CUSTOM and not self.payload:
            raise ValueError("custom instructions need a payload")

    @classmethod
    def from_tag(cls, tag: str, target: int, control: Optional[int] = None,
                 theta: Optional[float] = None, payload: Optional[str] = None) -> "GateInstruction":
        """Build from a textual tag; unknown tags are kept as CUSTOM only if they carry a payload."""
        try:
            kind = kind_from_tag(tag)
        except UnknownGateKind:
            if payload is None:
                raise
            kind = GateKind.CUSTOM
        if kind is GateKind.CUSTOM:
            return cls(kind, target, payload=payload)
        return cls(kind, target, control=control, theta=theta)

    @property
    def qubits(self) -> tuple:
        if self.control is None:
            return (self.target,)
        return (self.control, self.target)

    def check_range(self, n: int):
        for q in self.qubits:
            if not 0 <= q < n:
                raise IndexOutOfRange(
                    f"{self.kind.value} addresses qubit {q}; register has {n} qubit(s)")


class RunResult(NamedTuple):
    amplitudes: np.ndarray
    outcome: Optional[MeasurementOutcome]


def _make_rng(rng, seed, fallback_seed=None) -> np.random.Generator:
    # an explicit seed always gets its own stream
    if seed is not None:
        return np.random.default_rng(seed)
    if rng is not None:
        return rng
    return np.random.default_rng(fallback_seed)


class CircuitSimulator:
    """
    Runs instruction lists on a fresh ``State``.

    The random source is, in order of precedence: ``default_rng(seed)`` for
    the run's ``seed``, the generator passed as ``rng``, ``config.seed``,
    and otherwise fresh OS entropy. One generator feeds both noise and
    measurement for the whole run, so the same ``seed`` always reproduces
    the same run.
    """

    def __init__(self, config: Optional[SimulatorConfig] = None,
                 noise: Optional[NoiseModel] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = config or DEFAULT_CONFIG
        self.noise = noise or NoiseModel.ideal()
        self.rng = rng
        self.state: Optional[State] = None
        if self.config.backend == "numba" and self.config.num_threads is not None:
            load_backend("numba").set_threads(int(self.config.num_threads))

    def reset(self):
        self.state = None

    def run(self, qubit_count: int, instructions: Iterable[GateInstruction],
            noise: Optional[NoiseModel] = None, seed: Optional[int] = None) -> RunResult:
        cfg = self.config
        noise = noise or self.noise
        instructions = list(instructions)

        # whole circuit is checked before the first gate runs
        st = State.zero(qubit_count, dtype=cfg.dtype, max_qubits=cfg.max_qubits)
        for ins in instructions:
            ins.check_range(qubit_count)

        rng = _make_rng(self.rng, seed, cfg.seed)
        logger.info("Running %d instruction(s) on %d qubit(s), backend=%s, noise=%s",
                    len(instructions), qubit_count, cfg.backend,
                    "ideal" if noise.is_ideal else noise)

        outcome = None
        for ins in instructions:
            if ins.kind is GateKind.MEASURE:
                outcome = measure(st, rng, eps=cfg.decay_eps)
            elif ins.kind is GateKind.CUSTOM:
                logger.debug("Skipping custom instruction %r", ins.payload)
            else:
                factor = noise.fidelity_factor(rng)
                gate = embed(ins.kind, ins.target, ins.control, ins.theta,
                             factor=factor, dtype=st.dtype)
                st.apply_unitary(gate, backend=cfg.backend)
                noise.perturb(st, rng)

        if not noise.is_ideal:
            st.renormalize(cfg.decay_eps)
        if cfg.check_norm:
            st.check_normalized(tol=cfg.norm_tol)

        self.state = st
        return RunResult(st.psi.copy(), outcome)


def run(qubit_count: int, instructions: Iterable[GateInstruction],
        noise: Optional[NoiseModel] = None, seed: Optional[int] = None,
        config: Optional[SimulatorConfig] = None) -> RunResult:
    """One-shot ``CircuitSimulator(config).run(...)``."""
    return CircuitSimulator(config).run(qubit_count, instructions, noise=noise, seed=seed)


@dataclass
class Circuit:
    n: int
    ops: List[GateInstruction] = field(default_factory=list)

    @staticmethod
    def empty(n:int) -> "Circuit":
        return Circuit(n, [])

    def _add(self, kind, k, c=None, theta=None):
        self.ops.append(GateInstruction(kind, k, control=c, theta=theta)); return self

    def i(self, k:int): return self._add(GateKind.IDENTITY, k)
    def x(self, k:int): return self._add(GateKind.X, k)
    def y(self, k:int): return self._add(GateKind.Y, k)
    def z(self, k:int): return self._add(GateKind.Z, k)
    def h(self, k:int): return self._add(GateKind.H, k)
    def t(self, k:int, theta:Optional[float]=None): return self._add(GateKind.T, k, theta=theta)
    def cnot(self, c:int, t:int): return self._add(GateKind.CX, t, c)
    cx = cnot
    def measure(self, k:int=0): return self._add(GateKind.MEASURE, k)

    def custom(self, payload:str, k:int=0):
        self.ops.append(GateInstruction(GateKind.CUSTOM, k, payload=payload)); return self

    def extend(self, instructions: Sequence[GateInstruction]):
        self.ops.extend(instructions); return self

    def run(self, backend:str="numpy", dtype=np.complex128, noise:Optional[NoiseModel]=None,
            seed:Optional[int]=None, check_norm=True, num_threads=None,
            check_norm_tol=None) -> RunResult:
        cfg = SimulatorConfig(backend=backend, dtype=dtype, check_norm=check_norm,
                              num_threads=num_threads,
                              norm_tol=DEFAULT_CONFIG.norm_tol if check_norm_tol is None
                              else check_norm_tol)
        return CircuitSimulator(cfg, noise=noise).run(self.n, self.ops, seed=seed)

    def to_qasm(self) -> str:
        from .qasm import to_qasm
        return to_qasm(self.ops, self.n)
