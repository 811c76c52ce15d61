"""Secant root finding method."""

from typing import Callable

import torch
from torch import Tensor

from ._convergence import MAXITER, outside, resolve_tolerances, step_converged
from ._result import RootResult, RootStatus, finalize
from ._validation import (
    as_tensors,
    broadcast,
    check_callable,
    check_maxiter,
    evaluate,
)


def secant(
    f: Callable[[Tensor], Tensor],
    a: Tensor | float,
    b: Tensor | float,
    *,
    xtol: float | None = None,
    dtol: float | None = None,
    maxiter: int = MAXITER,
    throw: bool = False,
    verbose: int = 0,
) -> RootResult:
    """
    Find roots of f(x) = 0 using the Secant method inside [a, b].

    The Secant method approximates the derivative using finite differences:
    x_{n+1} = x_n - f(x_n) * (x_n - x_{n-1}) / (f(x_n) - f(x_{n-1}))

    The endpoints double as the two starting points, ``x_{-1} = a`` and
    ``x_0 = b``, and as the domain the iterates must stay in.

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Elementwise function.
    a, b : Tensor or float
        Starting points and domain bounds.
    xtol : float, optional
        Stop when ``|x_{n+1} - x_n| < xtol``. Default: ``1e-6`` (``1e-3`` for
        float16/bfloat16).
    dtol : float, optional
        Fail with ``NEAR_ZERO_DENOMINATOR`` when
        ``|f(x_n) - f(x_{n-1})| < dtol``. Default as ``xtol``.
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
    >>> import torch
    >>> from torchroots.root_finding import secant
    >>> result = secant(lambda x: torch.cos(x) - x, 0.0, 1.0)
    >>> round(float(result.root), 6)
    0.739085

    Notes
    -----
    **Convergence**: superlinear, of order approximately 1.618 (the golden
    ratio). The stop test is on step size only.

    **Denominator Guard**: the guard compares the two function values
    rather than the finite difference quotient, so steep functions may be
    rejected even when the slope is well defined.

    **Iteration Cost**: the default ``maxiter`` allows a million masked
    iterations, several minutes of wall time for an element that never
    terminates. Pass a smaller ``maxiter`` to bound the cost of a call.
    """
    check_callable(f=f)
    check_maxiter(maxiter)

    a, b = as_tensors(a, b)
    tols = resolve_tolerances(a.dtype, xtol=xtol, dtol=dtol)
    xtol, dtol = tols["xtol"], tols["dtol"]

    with torch.no_grad():
        f_prev = evaluate(f, a)
        f_curr = evaluate(f, b)
        a, b, f_prev, f_curr = broadcast(a, b, f_prev, f_curr)
        x_prev = a.clone()
        x_curr = b.clone()

        status = torch.full(
            a.shape,
            RootStatus.NO_CONVERGENCE,
            dtype=torch.int64,
            device=a.device,
        )
        num_iterations = torch.zeros_like(status)
        root = x_curr.clone()
        active = torch.ones(a.shape, dtype=torch.bool, device=a.device)

        for _ in range(maxiter):
            if not torch.any(active):
                break

            num_iterations += active

            denom = f_curr - f_prev
            near_zero = (torch.abs(denom) < dtol) & active
            status = status.masked_fill(
                near_zero, RootStatus.NEAR_ZERO_DENOMINATOR
            )
            active = active & ~near_zero

            safe_denom = torch.where(active, denom, torch.ones_like(denom))
            x_new = torch.where(
                active,
                x_curr - f_curr * (x_curr - x_prev) / safe_denom,
                x_curr,
            )

            out_of_domain = outside(x_new, a, b) & active
            status = status.masked_fill(
                out_of_domain, RootStatus.OUT_OF_DOMAIN
            )
            active = active & ~out_of_domain

            done = step_converged(x_curr, x_new, xtol) & active
            status = status.masked_fill(done, RootStatus.SUCCESS)
            root = torch.where(done, x_new, root)
            active = active & ~done

            if not torch.any(active):
                break

            # Shift: x_{n-1} <- x_n, x_n <- x_{n+1}
            f_new = evaluate(f, x_new)
            x_prev = torch.where(active, x_curr, x_prev)
            f_prev = torch.where(active, f_curr, f_prev)
            x_curr = torch.where(active, x_new, x_curr)
            f_curr = torch.where(active, f_new, f_curr)
            root = torch.where(active, x_curr, root)

    return finalize(
        "secant",
        root,
        status,
        num_iterations,
        f,
        throw=throw,
        verbose=verbose,
    )
