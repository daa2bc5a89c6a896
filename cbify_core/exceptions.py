"""Exceptions raised by the exploration engine."""


class CbifyError(Exception):
    """Base class for errors raised by cbify."""


class InvariantViolationError(CbifyError):
    """Raised when a policy is about to emit feedback that breaks unbiasedness.

    This indicates a programming error (e.g. a realized action with zero
    probability) and is never recovered from.
    """
