"""Convergence utilities for root finding."""

import torch
from torch import Tensor

TOLERANCE = 1e-6

MAXITER = 1_000_000


def default_tolerances(dtype: torch.dtype) -> dict[str, float]:
    """Return dtype-appropriate default tolerances.

    Parameters
    ----------
    dtype : torch.dtype
        The tensor dtype.

    Returns
    -------
    dict[str, float]
        Dictionary with keys 'xtol', 'ftol', 'dtol'.
    """
    if dtype in (torch.float16, torch.bfloat16):
        return {"xtol": 1e-3, "ftol": 1e-3, "dtol": 1e-3}
    else:  # float32, float64 and others
        return {"xtol": TOLERANCE, "ftol": TOLERANCE, "dtol": TOLERANCE}


def resolve_tolerances(dtype: torch.dtype, **tolerances) -> dict[str, float]:
    """Fill ``None`` tolerances from :func:`default_tolerances`.

    Raises
    ------
    ValueError
        If a supplied tolerance is negative.
    """
    defaults = default_tolerances(dtype)
    resolved = {}
    for name, value in tolerances.items():
        if value is None:
            value = defaults[name]
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")
        resolved[name] = value
    return resolved


def bracket_converged(
    a: Tensor,
    b: Tensor,
    fc: Tensor,
    xtol: float,
    ftol: float,
) -> Tensor:
    """Stop test for bracketing methods.

    Convergence is achieved when EITHER:
    - |f(c)| < ftol (f converged)
    - |b - a| < xtol (bracket collapsed)

    Parameters
    ----------
    a, b : Tensor
        Current bracket endpoints.
    fc : Tensor
        Function values at the interior point.
    xtol : float
        Tolerance on bracket width.
    ftol : float
        Tolerance on function value.

    Returns
    -------
    Tensor
        Boolean mask where True indicates convergence.
    """
    return (torch.abs(fc) < ftol) | (torch.abs(b - a) < xtol)


def step_converged(x_old: Tensor, x_new: Tensor, xtol: float) -> Tensor:
    """Stop test for open methods: |x_new - x_old| < xtol."""
    return torch.abs(x_new - x_old) < xtol


def outside(x: Tensor, a: Tensor, b: Tensor) -> Tensor:
    """Mask of elements with ``x < a`` or ``x > b``."""
    return (x < a) | (x > b)
