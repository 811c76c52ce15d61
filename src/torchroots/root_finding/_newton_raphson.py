"""Newton-Raphson root finding method."""

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


def newton_raphson(
    f: Callable[[Tensor], Tensor],
    df: Callable[[Tensor], Tensor],
    a: Tensor | float,
    b: Tensor | float,
    x0: Tensor | float,
    *,
    xtol: float | None = None,
    dtol: float | None = None,
    maxiter: int = MAXITER,
    throw: bool = False,
    verbose: int = 0,
) -> RootResult:
    """
    Find roots of f(x) = 0 using Newton-Raphson iteration inside [a, b].

    Newton's method uses the iteration x_{n+1} = x_n - f(x_n) / f'(x_n).
    It converges quadratically when starting near a simple root, but may
    wander off if the initial guess is poor or the derivative is small.

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Elementwise function.
    df : Callable[[Tensor], Tensor]
        Explicit derivative of ``f``. No automatic differentiation is
        attempted.
    a, b : Tensor or float
        Domain bounds. An iterate outside ``[a, b]`` ends the element with
        ``OUT_OF_DOMAIN``.
    x0 : Tensor or float
        Initial guess.
    xtol : float, optional
        Stop when ``|x_{n+1} - x_n| < xtol``. Default: ``1e-6`` (``1e-3`` for
        float16/bfloat16).
    dtol : float, optional
        Fail with ``ZERO_DERIVATIVE`` when ``|f'(x_n)| < dtol``. Default as
        ``xtol``.
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
    Find the square root of 2 (solve x^2 - 2 = 0):

    >>> import torch
    >>> from torchroots.root_finding import newton_raphson
    >>> f = lambda x: x**2 - 2
    >>> df = lambda x: 2 * x
    >>> root, converged, _, _ = newton_raphson(f, df, 0.0, 2.0, 1.0)
    >>> float(root)  # doctest: +ELLIPSIS
    1.41421356...

    Batched root-finding (find sqrt(2), sqrt(3), sqrt(4)):

    >>> c = torch.tensor([2.0, 3.0, 4.0], dtype=torch.float64)
    >>> result = newton_raphson(lambda x: x**2 - c, df, 0.0, 3.0, 1.5)
    >>> [f"{v:.4f}" for v in result.root.tolist()]
    ['1.4142', '1.7321', '2.0000']

    Notes
    -----
    **Convergence**: the stop test is on step size only. ``|f(root)|`` is
    small for well-behaved functions but is not checked.

    **Autograd Support**: Gradients with respect to parameters in ``f``
    are computed via implicit differentiation using the implicit function
    theorem.

    **Iteration Cost**: the default ``maxiter`` allows a million masked
    iterations, several minutes of wall time for an element that never
    terminates. Pass a smaller ``maxiter`` to bound the cost of a call.

    See Also
    --------
    secant : Derivative-free variant
    scipy.optimize.newton : SciPy's Newton implementation
    """
    check_callable(f=f, df=df)
    check_maxiter(maxiter)

    a, b, x = as_tensors(a, b, x0)
    tols = resolve_tolerances(x.dtype, xtol=xtol, dtol=dtol)
    xtol, dtol = tols["xtol"], tols["dtol"]

    with torch.no_grad():
        fx = evaluate(f, x)
        a, b, x, fx = broadcast(a, b, x, fx)

        status = torch.full(
            x.shape,
            RootStatus.NO_CONVERGENCE,
            dtype=torch.int64,
            device=x.device,
        )
        num_iterations = torch.zeros_like(status)
        root = x.clone()
        active = torch.ones(x.shape, dtype=torch.bool, device=x.device)

        for iteration in range(maxiter):
            if not torch.any(active):
                break

            if iteration > 0:
                fx = evaluate(f, x)
            dfx = evaluate(df, x)
            num_iterations += active

            zero_derivative = (torch.abs(dfx) < dtol) & active
            status = status.masked_fill(
                zero_derivative, RootStatus.ZERO_DERIVATIVE
            )
            active = active & ~zero_derivative

            safe_dfx = torch.where(active, dfx, torch.ones_like(dfx))
            x_new = torch.where(active, x - fx / safe_dfx, x)

            out_of_domain = outside(x_new, a, b) & active
            status = status.masked_fill(
                out_of_domain, RootStatus.OUT_OF_DOMAIN
            )
            active = active & ~out_of_domain

            done = step_converged(x, x_new, xtol) & active
            status = status.masked_fill(done, RootStatus.SUCCESS)
            root = torch.where(done, x_new, root)
            active = active & ~done

            x = torch.where(active, x_new, x)
            root = torch.where(active, x, root)

    return finalize(
        "newton_raphson",
        root,
        status,
        num_iterations,
        f,
        throw=throw,
        verbose=verbose,
    )
