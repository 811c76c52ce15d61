"""Implicit differentiation through a computed root."""

from typing import Callable

import torch
from torch import Tensor


class _RootImplicitGrad(torch.autograd.Function):
    """Custom autograd for implicit differentiation through root-finding."""

    @staticmethod
    def forward(ctx, root: Tensor, f_callable) -> Tensor:
        ctx.f_callable = f_callable
        ctx.save_for_backward(root)
        return root

    @staticmethod
    def backward(ctx, grad_output: Tensor) -> tuple[None, None]:
        (root,) = ctx.saved_tensors

        # Compute df/dx at the root
        x = root.detach().requires_grad_(True)
        with torch.enable_grad():
            fx = ctx.f_callable(x)
            df_dx = torch.autograd.grad(
                fx,
                x,
                grad_outputs=torch.ones_like(fx),
                create_graph=True,
                retain_graph=True,
            )[0]

            # Using implicit function theorem: dx*/dtheta = -[df/dx]^{-1} * df/dtheta
            # So: dL/dtheta = -dL/dx* * [df/dx]^{-1} * df/dtheta
            if fx.grad_fn is not None:
                eps = torch.finfo(df_dx.dtype).eps * 10
                safe_df_dx = torch.where(
                    torch.abs(df_dx) < eps,
                    torch.sign(df_dx) * eps,
                    df_dx,
                )
                # sign() is zero when df/dx is exactly zero
                safe_df_dx = torch.where(safe_df_dx == 0, eps, safe_df_dx)
                modified_grad = -grad_output / safe_df_dx
                torch.autograd.backward(fx, modified_grad)

        return None, None


def attach_implicit_grad(root: Tensor, f: Callable[[Tensor], Tensor]) -> Tensor:
    """Attach implicit differentiation gradient if ``f`` has trainable parameters.

    Returns
    -------
    Tensor
        ``root`` unchanged when no parameter of ``f`` requires gradients,
        otherwise ``root`` wired into the autograd graph.
    """
    # Check if any parameter of f requires gradients
    try:
        test_input = root.detach()
        with torch.enable_grad():
            test_output = f(test_input)
        needs_grad = test_output.requires_grad
    except Exception:
        needs_grad = False

    if not needs_grad:
        return root

    if not root.requires_grad:
        root = root.clone().requires_grad_(True)

    return _RootImplicitGrad.apply(root, f)
