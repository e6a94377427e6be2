"""
Execution context consulted by memory transfers.

The context is a small immutable value built once (normally by
`mixprec.Config.context()`) and passed explicitly to every call that needs
it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import jax

logger = logging.getLogger(__name__)


class ExecutionMode(Enum):
    """
    Where memory operations run
    """
    HOST = "host"
    ACCELERATOR = "accelerator"


@dataclass(frozen=True)
class ExecutionContext:
    mode: ExecutionMode = ExecutionMode.HOST
    accelerator_available: bool = False


def detect_accelerator() -> bool:
    """
    Report whether the default JAX backend runs on a non-CPU device.
    """
    try:
        devices = jax.devices()
    except RuntimeError:
        logger.debug("JAX backend initialisation failed; assuming host only")
        return False
    available = any(device.platform != "cpu" for device in devices)
    logger.debug("Detected JAX devices %s, accelerator=%s", devices, available)
    return available
