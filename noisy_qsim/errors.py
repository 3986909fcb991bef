# noisy_qsim/errors.py


class SimulatorError(Exception):
    """Base class for every error a circuit run can raise."""


class InvalidQubitCount(SimulatorError, ValueError):
    """Qubit count is zero or above the configured capacity."""


class IndexOutOfRange(SimulatorError, IndexError):
    """A gate addresses a qubit outside the register, or control == target."""


class UnknownGateKind(SimulatorError, ValueError):
    """Gate tag is not in the supported set (and carries no custom payload)."""


class DecayedState(SimulatorError, ArithmeticError):
    """Total probability mass fell below epsilon; the state can't be rescaled."""


class CircuitFileError(SimulatorError, ValueError):
    """A circuit file is malformed: missing keys, bad values or an invalid gate entry."""
