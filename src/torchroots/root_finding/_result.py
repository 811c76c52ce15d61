"""Result type and failure policy shared by the root finders."""

import enum
import warnings
from typing import Callable, NamedTuple

import torch
from torch import Tensor

from ._exceptions import (
    BracketError,
    ConvergenceError,
    DerivativeError,
    DomainError,
    RootFindingWarning,
)
from ._implicit_grad import attach_implicit_grad


class RootStatus(enum.IntEnum):
    """Per-element outcome of a root-finding call."""

    SUCCESS = 0
    NO_BRACKET = 1
    ZERO_DERIVATIVE = 2
    NEAR_ZERO_DENOMINATOR = 3
    OUT_OF_DOMAIN = 4
    NO_CONVERGENCE = 5


_STATUS_ERRORS = {
    RootStatus.NO_BRACKET: (
        BracketError,
        "f(a) and f(b) do not bracket a sign change",
    ),
    RootStatus.ZERO_DERIVATIVE: (
        DerivativeError,
        "derivative magnitude fell below dtol",
    ),
    RootStatus.NEAR_ZERO_DENOMINATOR: (
        DerivativeError,
        "|f(x_n) - f(x_{n-1})| fell below dtol",
    ),
    RootStatus.OUT_OF_DOMAIN: (
        DomainError,
        "iterate left the interval [a, b]",
    ),
    RootStatus.NO_CONVERGENCE: (
        ConvergenceError,
        "maximum number of iterations reached",
    ),
}


class RootResult(NamedTuple):
    """Result of a root-finding routine.

    Parameters
    ----------
    root : Tensor
        Located roots. For elements that did not converge this is the last
        iterate and must not be trusted.
    converged : Tensor
        Boolean tensor, True where the stop test was met.
    status : Tensor
        ``int64`` tensor of :class:`RootStatus` codes.
    num_iterations : Tensor
        ``int64`` tensor with the number of iterations spent per element.
    """

    root: Tensor
    converged: Tensor
    status: Tensor
    num_iterations: Tensor


def finalize(
    method: str,
    root: Tensor,
    status: Tensor,
    num_iterations: Tensor,
    f: Callable[[Tensor], Tensor],
    *,
    throw: bool,
    verbose: int,
) -> RootResult:
    """Build the :class:`RootResult` and apply the failure policy.

    Raises
    ------
    RootFindingError
        If ``throw`` is set and any element failed. The subclass is chosen
        from the status of the first failing element.
    """
    converged = status == RootStatus.SUCCESS
    failed = ~converged

    if torch.any(failed):
        if throw:
            first = RootStatus(int(status[failed][0]))
            error, reason = _STATUS_ERRORS[first]
            raise error(
                f"{method}: {reason} "
                f"({int(failed.sum())} of {failed.numel()} elements failed)"
            )
        if verbose > 0:
            counts = ", ".join(
                f"{s.name}={int((status == s).sum())}"
                for s in RootStatus
                if s != RootStatus.SUCCESS and torch.any(status == s)
            )
            warnings.warn(
                f"{method} did not converge for "
                f"{int(failed.sum())} of {failed.numel()} elements: {counts}",
                RootFindingWarning,
                stacklevel=3,
            )

    root = attach_implicit_grad(root, f)
    return RootResult(root, converged, status, num_iterations)
