# noisy_qsim/backends.py
"""Kernel lookup by backend name."""
import importlib
from types import ModuleType

from .config import BACKENDS

_MODULES = {
    "serial": ".apply_serial",
    "numpy": ".apply_numpy",
    "numba": ".apply_numba",
}

def load_backend(name: str) -> ModuleType:
    """Return the kernel module for ``name``.

    Every backend module exposes ``apply_single_qubit``, ``apply_two_qubit_4x4``
    and ``apply_CNOT`` with the same signatures.
    """
    if name not in BACKENDS:
        raise NotImplementedError(f"Unknown backend: {name}")
    try:
        return importlib.import_module(_MODULES[name], __package__)
    except ImportError as e:
        if name == "numba":
            raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
        raise
