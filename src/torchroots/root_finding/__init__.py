from ._bisection import bisection
from ._convergence import (
    MAXITER,
    TOLERANCE,
    bracket_converged,
    default_tolerances,
    step_converged,
)
from ._exceptions import (
    BracketError,
    ConvergenceError,
    DerivativeError,
    DomainError,
    RootFindingError,
    RootFindingWarning,
)
from ._newton_raphson import newton_raphson
from ._regula_falsi import regula_falsi
from ._result import RootResult, RootStatus
from ._secant import secant

__all__ = [
    "MAXITER",
    "TOLERANCE",
    "bisection",
    "bracket_converged",
    "default_tolerances",
    "newton_raphson",
    "regula_falsi",
    "secant",
    "step_converged",
    "BracketError",
    "ConvergenceError",
    "DerivativeError",
    "DomainError",
    "RootFindingError",
    "RootFindingWarning",
    "RootResult",
    "RootStatus",
]
