"""Regula falsi (false position) root finding method."""

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


def regula_falsi(
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
    Find roots of f(x) = 0 on [a, b] using the method of false position.

    Each step replaces one endpoint with the zero of the chord through
    ``(a, f(a))`` and ``(b, f(b))``:

    c = a - f(a) * (b - a) / (f(b) - f(a))

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Elementwise function.
    a, b : Tensor or float
        Bracket endpoints. Must satisfy ``f(a) * f(b) < 0`` elementwise.
    xtol : float, optional
        Stop when ``|b - a| < xtol``. Default: ``1e-6`` (``1e-3`` for
        float16/bfloat16).
    ftol : float, optional
        Stop when ``|f(c)| < ftol``. Default as ``xtol``.
    maxiter : int, default=1_000_000
        Maximum iterations.
    throw : bool, default=False
        Raise instead of returning when any element fails.
    verbose : int, default=0
        If positive, emit a :class:`RootFindingWarning` summarising failures.

    Returns
    -------
    RootResult
        ``(root, converged, status, num_iterations)``.

    Examples
    --------
    >>> from torchroots.root_finding import regula_falsi
    >>> result = regula_falsi(lambda x: x**3 - x - 2, 1.0, 2.0)
    >>> round(float(result.root), 4)
    1.5214

    Notes
    -----
    **Strict bracket**: ``f(a) * f(b) >= 0`` is rejected with
    ``NO_BRACKET``, including the case where an endpoint is already an
    exact root. Use :func:`bisection` if endpoint roots must be accepted.

    **Bracket width**: one endpoint commonly stays fixed, so the width test
    rarely fires; termination normally comes from ``|f(c)| < ftol``.

    **Iteration Cost**: the default ``maxiter`` allows a million masked
    iterations, several minutes of wall time for an element that never
    terminates. Pass a smaller ``maxiter`` to bound the cost of a call.
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

        no_bracket = fa * fb >= 0
        status = status.masked_fill(no_bracket, RootStatus.NO_BRACKET)
        root = (a + b) / 2

        active = ~no_bracket

        for _ in range(maxiter):
            if not torch.any(active):
                break

            # f(b) != f(a) while the bracket holds a strict sign change
            denom = torch.where(active, fb - fa, torch.ones_like(fa))
            c = torch.where(active, a - fa * (b - a) / denom, root)
            fc = evaluate(f, c)
            num_iterations += active

            root = torch.where(active, c, root)
            done = bracket_converged(a, b, fc, xtol, ftol) & active
            status = status.masked_fill(done, RootStatus.SUCCESS)
            active = active & ~done

            move_a = (fa * fc > 0) & active
            move_b = active & ~move_a
            a = torch.where(move_a, c, a)
            fa = torch.where(move_a, fc, fa)
            b = torch.where(move_b, c, b)
            fb = torch.where(move_b, fc, fb)

    return finalize(
        "regula_falsi",
        root,
        status,
        num_iterations,
        f,
        throw=throw,
        verbose=verbose,
    )
