"""Bisection root finding method."""

from typing import Callable

import torch
from torch import Tensor

from ._convergence import MAXITER, bracket_converged, resolve_tolerances
from ._result import RootResult, RootStatus, finalize
from ._validation import (
    as_tensors,
    broadcast,
    check_callable,
    check_maxiter,
    evaluate,
)


def bisection(
    f: Callable[[Tensor], Tensor],
    a: Tensor | float,
    b: Tensor | float,
    *,
    xtol: float | None = None,
    ftol: float | None = None,
    maxiter: int = MAXITER,
    throw: bool = False,
    verbose: int = 0,
) -> RootResult:
    """
    Find roots of f(x) = 0 on [a, b] by repeatedly halving the bracket.

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Elementwise function. Called with tensors of the broadcast shape of
        ``a`` and ``b``.
    a, b : Tensor or float
        Bracket endpoints. Python floats become ``float64`` tensors. The
        endpoints broadcast against each other and against ``f(a)``, so a
        scalar bracket can serve a batched ``f``.
    xtol : float, optional
        Stop when ``|b - a| < xtol``. Default: ``1e-6`` (``1e-3`` for
        float16/bfloat16).
    ftol : float, optional
        Stop when ``|f(c)| < ftol`` at the midpoint ``c``. Default as ``xtol``.
    maxiter : int, default=1_000_000
        Maximum number of halvings.
    throw : bool, default=False
        Raise a :class:`RootFindingError` subclass instead of returning when
        any element fails.
    verbose : int, default=0
        If positive, emit a :class:`RootFindingWarning` summarising failures.

    Returns
    -------
    RootResult
        ``(root, converged, status, num_iterations)``. ``status`` is
        ``NO_BRACKET`` where ``f(a) * f(b) > 0`` and ``NO_CONVERGENCE`` where
        ``maxiter`` was exhausted.

    Examples
    --------
    >>> import torch
    >>> from torchroots.root_finding import bisection
    >>> root, converged, _, _ = bisection(lambda x: x**2 - 4, 0.0, 3.0)
    >>> round(float(root), 4)
    2.0
    >>> bool(converged)
    True

    Notes
    -----
    An endpoint where ``f`` is exactly zero is returned immediately, before
    the bracket is validated, with ``num_iterations == 0``.
    :func:`regula_falsi` does not do this.

    **Iteration Cost**: the default ``maxiter`` allows a million masked
    iterations, several minutes of wall time for an element that never
    terminates. Pass a smaller ``maxiter`` to bound the cost of a call.

    See Also
    --------
    regula_falsi : Bracketed method using linear interpolation
    scipy.optimize.bisect : SciPy's scalar bisection
    """
    check_callable(f=f)
    check_maxiter(maxiter)

    a, b = as_tensors(a, b)
    tols = resolve_tolerances(a.dtype, xtol=xtol, ftol=ftol)
    xtol, ftol = tols["xtol"], tols["ftol"]

    with torch.no_grad():
        fa = evaluate(f, a)
        fb = evaluate(f, b)
        a, b, fa, fb = broadcast(a, b, fa, fb)

        status = torch.full(
            a.shape,
            RootStatus.NO_CONVERGENCE,
            dtype=torch.int64,
            device=a.device,
        )
        num_iterations = torch.zeros_like(status)

        # Roots at the endpoints are accepted before bracket validation
        at_a = fa == 0
        at_b = (fb == 0) & ~at_a
        root = torch.where(at_a, a, torch.where(at_b, b, (a + b) / 2))
        status = status.masked_fill(at_a | at_b, RootStatus.SUCCESS)

        no_bracket = fa * fb > 0
        status = status.masked_fill(no_bracket, RootStatus.NO_BRACKET)

        active = ~(at_a | at_b | no_bracket)

        for _ in range(maxiter):
            if not torch.any(active):
                break

            c = (a + b) / 2
            fc = evaluate(f, c)
            num_iterations += active

            root = torch.where(active, c, root)
            done = bracket_converged(a, b, fc, xtol, ftol) & active
            status = status.masked_fill(done, RootStatus.SUCCESS)
            active = active & ~done

            # Root lies in [c, b] when f(a) and f(c) share a sign
            move_a = (fa * fc > 0) & active
            move_b = active & ~move_a
            a = torch.where(move_a, c, a)
            fa = torch.where(move_a, fc, fa)
            b = torch.where(move_b, c, b)

    return finalize(
        "bisection",
        root,
        status,
        num_iterations,
        f,
        throw=throw,
        verbose=verbose,
    )
