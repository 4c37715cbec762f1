"""Tests for instance_selection.digamma module."""

import pytest
from scipy.special import digamma as scipy_digamma

from instance_selection.digamma import EULER_MASCHERONI, DigammaFunction


class TestDigammaFunction:
    """Tests for DigammaFunction."""

    def test_psi_one(self) -> None:
        """Test psi(1) is minus the Euler-Mascheroni constant."""
        psi = DigammaFunction()
        assert psi.value(1) == pytest.approx(-0.5772156649015329)
        assert psi.value(1) == EULER_MASCHERONI

    def test_psi_two(self) -> None:
        """Test psi(2) = 1 - gamma."""
        assert DigammaFunction().value(2) == pytest.approx(0.42278433509846713)

    def test_psi_zero_is_zero(self) -> None:
        """Test psi(0) contributes nothing."""
        assert DigammaFunction().value(0) == 0.0

    def test_negative_argument(self) -> None:
        """Test negative arguments are rejected."""
        with pytest.raises(ValueError):
            DigammaFunction().value(-1)

    def test_matches_scipy(self) -> None:
        """Test the recurrence against scipy for small integers."""
        psi = DigammaFunction(5)
        for k in range(1, 21):
            assert psi.value(k) == pytest.approx(float(scipy_digamma(k)), rel=1e-12)

    def test_grows_lazily(self) -> None:
        """Test the table extends on demand."""
        psi = DigammaFunction(3)
        assert len(psi) == 3
        psi.value(10)
        assert len(psi) == 10
