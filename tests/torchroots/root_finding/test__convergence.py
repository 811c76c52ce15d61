# tests/torchroots/root_finding/test__convergence.py
import pytest
import torch

from torchroots.root_finding._convergence import (
    MAXITER,
    TOLERANCE,
    bracket_converged,
    default_tolerances,
    outside,
    resolve_tolerances,
    step_converged,
)


class TestDefaultTolerances:
    """Tests for dtype-aware default tolerances."""

    def test_constants(self):
        assert TOLERANCE == 1e-6
        assert MAXITER == 1_000_000

    @pytest.mark.parametrize("dtype", [torch.float32, torch.float64])
    def test_single_and_double(self, dtype):
        """float32 and float64 use the fixed 1e-6 policy."""
        tols = default_tolerances(dtype)
        assert tols == {"xtol": 1e-6, "ftol": 1e-6, "dtol": 1e-6}

    @pytest.mark.parametrize("dtype", [torch.float16, torch.bfloat16])
    def test_half(self, dtype):
        """Half precision types cannot resolve 1e-6."""
        tols = default_tolerances(dtype)
        assert tols == {"xtol": 1e-3, "ftol": 1e-3, "dtol": 1e-3}


class TestResolveTolerances:
    def test_fills_none(self):
        tols = resolve_tolerances(torch.float64, xtol=None, ftol=1e-3)
        assert tols == {"xtol": 1e-6, "ftol": 1e-3}

    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="dtol must be non-negative"):
            resolve_tolerances(torch.float64, dtol=-1e-6)


class TestBracketConverged:
    def test_converged_by_ftol(self):
        """Converged when f is small, even for a wide bracket."""
        a = torch.tensor([0.0, 0.0])
        b = torch.tensor([1.0, 1.0])
        fc = torch.tensor([1e-8, 1.0])

        converged = bracket_converged(a, b, fc, xtol=1e-6, ftol=1e-6)

        assert converged.tolist() == [True, False]

    def test_converged_by_width(self):
        """Converged when the bracket collapses, even for a large f."""
        a = torch.tensor([1.0, 2.0], dtype=torch.float64)
        b = torch.tensor([1.0 + 1e-8, 1.0], dtype=torch.float64)
        fc = torch.tensor([5.0, 5.0], dtype=torch.float64)

        converged = bracket_converged(a, b, fc, xtol=1e-6, ftol=1e-6)

        assert converged.tolist() == [True, False]


class TestStepConverged:
    def test_step(self):
        x_old = torch.tensor([1.0, 2.0], dtype=torch.float64)
        x_new = torch.tensor([1.0 - 1e-8, 2.1], dtype=torch.float64)

        assert step_converged(x_old, x_new, 1e-6).tolist() == [True, False]


class TestOutside:
    def test_bounds_inclusive(self):
        x = torch.tensor([0.0, 0.5, 1.0, -0.1, 1.1])
        a = torch.zeros(5)
        b = torch.ones(5)

        assert outside(x, a, b).tolist() == [False, False, False, True, True]
