"""Tests for instance_selection.voting module."""

import numpy as np
import pytest

from instance_selection.voting import (
    distance_weighted_posterior,
    is_misclassified,
    predict_from_posterior,
)


class TestIsMisclassified:
    """Tests for is_misclassified."""

    def test_outvoted(self) -> None:
        """Test a strict majority of another class removes the instance."""
        assert is_misclassified(0, [1, 1, 0])

    def test_majority_agrees(self) -> None:
        """Test agreeing neighbours keep the instance."""
        assert not is_misclassified(0, [0, 0, 1])

    def test_tie_keeps_instance(self) -> None:
        """Test a tie is not a misclassification."""
        assert not is_misclassified(0, [0, 1])

    def test_plurality_of_other_classes(self) -> None:
        """Test any single other class beating the own class is enough."""
        assert is_misclassified(0, [0, 1, 1, 2])
        assert not is_misclassified(0, [0, 0, 1, 2])

    def test_no_neighbors(self) -> None:
        """Test an empty neighbourhood cannot outvote."""
        assert not is_misclassified(1, [])


class TestPosterior:
    """Tests for distance_weighted_posterior and predict_from_posterior."""

    def test_weights(self) -> None:
        """Test 1 / (1 + d) weighting and normalisation."""
        prob = distance_weighted_posterior([0, 1], [1.0, 5.0], 2)
        assert prob[0] == pytest.approx(0.75)
        assert prob[1] == pytest.approx(0.25)
        assert prob.sum() == pytest.approx(1.0)

    def test_no_neighbors_gives_zeros(self) -> None:
        """Test an empty neighbourhood yields all zeros."""
        prob = distance_weighted_posterior([], [], 3)
        np.testing.assert_array_equal(prob, [0.0, 0.0, 0.0])

    def test_predict(self) -> None:
        """Test the most probable class is picked."""
        assert predict_from_posterior(np.array([0.2, 0.8])) == (1, pytest.approx(0.8))

    def test_predict_tie_first_wins(self) -> None:
        """Test the lowest class wins a tie."""
        predicted, _ = predict_from_posterior(np.array([0.5, 0.5]))
        assert predicted == 0
