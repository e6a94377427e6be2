"""
Exception types raised by mixprec operations.

Every failure surfaces synchronously to the immediate caller. Precondition
violations are programming errors; they are raised before any element is
touched.
"""


class MixprecError(Exception):
    """Base class for all mixprec errors."""


class PreconditionError(MixprecError, ValueError):
    """Negative count, malformed bounds or an unusable buffer."""


class DTypeMismatchError(MixprecError, TypeError):
    """A buffer's dtype does not match the storage type of the call."""


class UnsupportedTypePairError(MixprecError, TypeError):
    """Unknown dtype, invalid type pair, or a pair the operation does not accept."""


class AcceleratorUnavailableError(MixprecError, RuntimeError):
    """Accelerator execution was requested but no accelerator is present."""
