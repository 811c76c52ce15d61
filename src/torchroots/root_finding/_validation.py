"""Input validation shared by the root finders."""

from typing import Callable, Union

import torch
from torch import Tensor


def as_tensors(*values: Union[Tensor, float]) -> list[Tensor]:
    """Convert scalars and tensors to floating tensors sharing dtype and device.

    Python numbers adopt the dtype of the tensor arguments, or ``float64``
    when none of the arguments is a floating tensor.

    Raises
    ------
    ValueError
        If any value contains NaN or Inf.
    """
    tensors = [v for v in values if isinstance(v, Tensor)]
    dtype = torch.float64
    device = None
    if tensors:
        device = tensors[0].device
        result_dtype = tensors[0].dtype
        for t in tensors[1:]:
            result_dtype = torch.promote_types(result_dtype, t.dtype)
        if result_dtype.is_floating_point:
            dtype = result_dtype

    out = [torch.as_tensor(v, dtype=dtype, device=device) for v in values]
    if any(torch.any(~torch.isfinite(t)) for t in out):
        raise ValueError(
            "interval endpoints and initial guesses must not contain NaN or Inf"
        )
    return out


def evaluate(f: Callable[[Tensor], Tensor], x: Tensor) -> Tensor:
    """Call ``f`` and coerce the result to a tensor like ``x``.

    Scalar callables such as ``math.cos`` work on 0-d inputs this way.
    """
    return torch.as_tensor(f(x), dtype=x.dtype, device=x.device)


def broadcast(*tensors: Tensor) -> list[Tensor]:
    """Broadcast to a common shape and copy, so the results can be updated."""
    try:
        shape = torch.broadcast_shapes(*(t.shape for t in tensors))
    except RuntimeError as e:
        raise ValueError(f"inputs must broadcast to a common shape: {e}") from e
    return [t.expand(shape).clone() for t in tensors]


def check_callable(**functions) -> None:
    for name, fn in functions.items():
        if not callable(fn):
            raise TypeError(f"{name} must be callable, got {type(fn).__name__}")


def check_maxiter(maxiter: int) -> None:
    if maxiter < 1:
        raise ValueError(f"maxiter must be positive, got {maxiter}")
