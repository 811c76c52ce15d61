# tests/torchroots/root_finding/test__result.py
import warnings

import pytest
import torch

from torchroots.root_finding import (
    BracketError,
    ConvergenceError,
    RootFindingWarning,
    RootResult,
    RootStatus,
    bisection,
    newton_raphson,
)


class TestRootResult:
    """Tests for the result tuple returned by every root finder."""

    def test_fields(self):
        result = bisection(lambda x: x**2 - 4, 0.0, 3.0)

        assert isinstance(result, RootResult)
        assert len(result) == 4
        assert result.converged.dtype == torch.bool
        assert result.status.dtype == torch.int64
        assert result.num_iterations.dtype == torch.int64

    def test_converged_matches_status(self):
        c = torch.tensor([4.0, -1.0, 2.0], dtype=torch.float64)
        result = bisection(lambda x: x**2 - c, 0.0, 3.0)

        assert torch.equal(
            result.converged, result.status == RootStatus.SUCCESS
        )

    def test_status_codes(self):
        assert [s.value for s in RootStatus] == [0, 1, 2, 3, 4, 5]


class TestFailurePolicy:
    def test_silent_by_default(self):
        """Failures are reported through the result only."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = bisection(lambda x: x**2 + 1, -1.0, 1.0)

        assert not result.converged.item()

    def test_verbose_warns(self):
        c = torch.tensor([4.0, -1.0, -2.0], dtype=torch.float64)

        with pytest.warns(RootFindingWarning, match="2 of 3 elements"):
            bisection(lambda x: x**2 - c, 0.0, 3.0, verbose=1)

    def test_verbose_quiet_on_success(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            bisection(lambda x: x**2 - 4, 0.0, 3.0, verbose=1)

    def test_throw_uses_first_failure(self):
        c = torch.tensor([4.0, -1.0], dtype=torch.float64)

        with pytest.raises(BracketError, match="1 of 2 elements failed"):
            bisection(lambda x: x**2 - c, 0.0, 3.0, throw=True)

    def test_throw_on_iteration_cap(self):
        with pytest.raises(ConvergenceError):
            newton_raphson(
                lambda x: x**3 - 2 * x + 2,
                lambda x: 3 * x**2 - 2,
                -3.0,
                3.0,
                0.0,
                maxiter=4,
                throw=True,
            )
