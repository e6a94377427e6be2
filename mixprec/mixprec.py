import logging
import os
from typing import Any

from mixprec.core.context import ExecutionContext, ExecutionMode, detect_accelerator
from mixprec.core.rng import Generator

logger = logging.getLogger(__name__)

MODE_ENV_VAR = "MIXPREC_MODE"


class Config:
    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "Config":
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_initialized"):
            self._initialized = True  # Prevents reinitialization
            self._generator = Generator()
            self._accelerator_available = detect_accelerator()
            self._mode = ExecutionMode(
                os.environ.get(MODE_ENV_VAR, ExecutionMode.HOST.value).strip().lower()
            )
            logger.debug(
                "Config initialised with seed %s, mode %s, accelerator=%s",
                self._generator.seed,
                self._mode.value,
                self._accelerator_available,
            )

    def set_seed(self, seed: int) -> None:
        """
        For reproducability one can set a seed for random operations
        Parameters
        ----------
        seed: int
            Seed to be used by random processes
        """
        self._generator.reseed(seed)
        logger.info("Random seed set to %s", seed)

    @property
    def random_seed(self) -> int:
        return self._generator.seed

    @property
    def generator(self) -> Generator:
        """
        Shared generator handle passed to the sampling functions
        """
        return self._generator

    @property
    def mode(self) -> ExecutionMode:
        return self._mode

    def set_mode(self, mode: ExecutionMode | str) -> None:
        """
        Select host or accelerator memory operations.

        Selecting accelerator mode without an accelerator is allowed here;
        the failure surfaces when a copy runs under that mode.
        """
        self._mode = ExecutionMode(mode)
        if self._mode is ExecutionMode.ACCELERATOR and not self._accelerator_available:
            logger.warning("Accelerator mode selected but no accelerator is available")
        else:
            logger.info("Execution mode set to %s", self._mode.value)

    @property
    def accelerator_available(self) -> bool:
        return self._accelerator_available

    def context(self) -> ExecutionContext:
        return ExecutionContext(
            mode=self._mode, accelerator_available=self._accelerator_available
        )


class Session:
    """
    Lightweight context manager to scope Config settings per run.

    Example:
        with Session(seed=0, mode="host") as cfg:
            ...
    Restores previous Config values on exit so tests/runs stay isolated.
    """

    def __init__(
        self,
        *,
        seed: int | None = None,
        mode: ExecutionMode | str | None = None,
    ) -> None:
        cfg = Config()
        self._prev = {
            "generator": cfg.generator.snapshot(),
            "mode": cfg.mode,
        }
        self._seed = seed
        self._mode = mode
        self._cfg = cfg

    def __enter__(self) -> "Config":
        if self._seed is not None:
            self._cfg.set_seed(self._seed)
        if self._mode is not None:
            self._cfg.set_mode(self._mode)
        return self._cfg

    def __exit__(self, exc_type, exc, tb) -> None:
        self._cfg.generator.restore(self._prev["generator"])
        self._cfg._mode = self._prev["mode"]  # type: ignore[attr-defined]
