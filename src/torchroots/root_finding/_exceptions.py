"""Exception and warning classes for root finding module."""


class RootFindingError(Exception):
    """Base exception for root finding errors."""

    pass


class BracketError(RootFindingError):
    """Raised when bracket doesn't contain sign change."""

    pass


class DerivativeError(RootFindingError):
    """Raised when a derivative or secant slope is too close to zero."""

    pass


class DomainError(RootFindingError):
    """Raised when an iterate leaves the interval [a, b]."""

    pass


class ConvergenceError(RootFindingError):
    """Raised when the iteration cap is exhausted."""

    pass


class RootFindingWarning(RuntimeWarning):
    """Issued when root finding leaves elements unconverged."""

    pass
