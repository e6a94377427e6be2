"""Top-level mixprec helpers."""

import jax

from mixprec import core, exceptions
from mixprec.core import *  # noqa: F401,F403
from mixprec.core import __all__ as _core_all
from mixprec.exceptions import (
    AcceleratorUnavailableError,
    DTypeMismatchError,
    MixprecError,
    PreconditionError,
    UnsupportedTypePairError,
)
from mixprec.logging import setup_logging
from mixprec.mixprec import Config, Session

# Keep JAX RNG behaviour stable across versions by pinning the threefry
# implementation; keys drawn through Generator depend on it.
jax.config.update("jax_default_prng_impl", "threefry2x32")


__all__ = [
    "core",
    "exceptions",
    "Config",
    "Session",
    "setup_logging",
    "MixprecError",
    "PreconditionError",
    "DTypeMismatchError",
    "UnsupportedTypePairError",
    "AcceleratorUnavailableError",
] + list(_core_all)
