"""Tests for instance_selection.distances module."""

import numpy as np
import pytest

from instance_selection.distances import (
    DISTANCE_FUNCS,
    attribute_differences,
    euclidean_distance,
    manhattan_distance,
    resolve_distance,
)


class TestAttributeDifferences:
    """Tests for attribute_differences."""

    def test_numeric(self) -> None:
        """Test numeric attributes give absolute differences."""
        diff = attribute_differences(np.array([1.0, 5.0]), np.array([3.0, 2.0]))
        np.testing.assert_array_equal(diff, [2.0, 3.0])

    def test_nominal_overlap(self) -> None:
        """Test nominal attributes give 0 on a match and 1 otherwise."""
        nominal = np.array([True, True])
        diff = attribute_differences(np.array([1.0, 2.0]), np.array([1.0, 7.0]), nominal)
        np.testing.assert_array_equal(diff, [0.0, 1.0])

    def test_missing_counts_as_one(self) -> None:
        """Test a missing value on either side contributes 1."""
        diff = attribute_differences(np.array([np.nan, 0.2]), np.array([0.0, np.nan]))
        np.testing.assert_array_equal(diff, [1.0, 1.0])

    def test_broadcast_over_rows(self) -> None:
        """Test one row against a matrix."""
        diff = attribute_differences(np.array([0.0, 0.0]), np.array([[1.0, 1.0], [0.0, 2.0]]))
        assert diff.shape == (2, 2)


class TestDistanceFunctions:
    """Tests for euclidean_distance and manhattan_distance."""

    def test_euclidean(self) -> None:
        """Test a 3-4-5 triangle."""
        assert euclidean_distance(np.array([0.0, 0.0]), np.array([3.0, 4.0])) == pytest.approx(5.0)

    def test_manhattan(self) -> None:
        """Test the L1 norm."""
        assert manhattan_distance(np.array([0.0, 0.0]), np.array([3.0, 4.0])) == pytest.approx(7.0)

    def test_returns_float_for_single_row(self) -> None:
        """Test a scalar result for a single row."""
        assert isinstance(euclidean_distance(np.array([1.0]), np.array([2.0])), float)

    def test_returns_array_for_matrix(self) -> None:
        """Test one distance per row of a matrix."""
        result = manhattan_distance(np.array([0.0]), np.array([[1.0], [2.0], [3.0]]))
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_mixed_attributes(self) -> None:
        """Test numeric and nominal attributes combined."""
        nominal = np.array([False, True])
        dist = euclidean_distance(np.array([0.0, 1.0]), np.array([1.0, 2.0]), nominal)
        assert dist == pytest.approx(np.sqrt(2.0))

    def test_registry(self) -> None:
        """Test metrics are resolved by name through the registry."""
        assert DISTANCE_FUNCS["Euclidean"] is euclidean_distance
        assert resolve_distance("Manhattan") is DISTANCE_FUNCS["Manhattan"] is manhattan_distance

    def test_resolve_passes_callables_through(self) -> None:
        """Test a callable is used as given."""
        assert resolve_distance(manhattan_distance) is manhattan_distance

    def test_resolve_unknown_name(self) -> None:
        """Test an unregistered name is rejected."""
        with pytest.raises(ValueError, match="Unknown distance"):
            resolve_distance("Chebyshev")
