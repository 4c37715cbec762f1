"""Tests for instance_selection.algorithm module."""

import numpy as np
import pytest

from instance_selection.algorithm import (
    check_closed_range,
    check_num_neighbors,
    check_open_range,
    prepare_training_set,
)
from instance_selection.dataset import Dataset
from instance_selection.exceptions import NotEnoughInstancesException


class TestPrepareTrainingSet:
    """Tests for prepare_training_set."""

    def test_default_index(self) -> None:
        """Test rows are tagged 0..n-1 by default."""
        train = prepare_training_set(Dataset(np.zeros((3, 2)), index=[5, 6, 7]))
        assert train.index.tolist() == [0, 1, 2]

    def test_explicit_index(self) -> None:
        """Test an explicit origin index is applied."""
        train = prepare_training_set(Dataset(np.zeros((2, 2))), [10, 20])
        assert train.index.tolist() == [10, 20]

    def test_empty_raises(self) -> None:
        """Test an empty training set is rejected."""
        with pytest.raises(NotEnoughInstancesException, match="not enough instances"):
            prepare_training_set(Dataset(np.empty((0, 2))))

    def test_index_length_mismatch(self) -> None:
        """Test the origin index must match the rows."""
        with pytest.raises(ValueError):
            prepare_training_set(Dataset(np.zeros((2, 2))), [1])


class TestParameterChecks:
    """Tests for the parameter validators."""

    def test_num_neighbors(self) -> None:
        """Test k must be a positive integer."""
        assert check_num_neighbors(3) == 3
        with pytest.raises(ValueError):
            check_num_neighbors(0)
        with pytest.raises(ValueError):
            check_num_neighbors(1.5)

    def test_closed_range_includes_bounds(self) -> None:
        """Test closed intervals accept their bounds."""
        assert check_closed_range("alpha", 0.0, (0.0, 1.0)) == 0.0
        assert check_closed_range("alpha", 1.0, (0.0, 1.0)) == 1.0
        with pytest.raises(ValueError, match="alpha"):
            check_closed_range("alpha", 1.01, (0.0, 1.0))

    def test_open_range_excludes_bounds(self) -> None:
        """Test open intervals reject their bounds."""
        assert check_open_range("mu", 0.5, (0.0, 1.0)) == 0.5
        with pytest.raises(ValueError, match="mu"):
            check_open_range("mu", 1.0, (0.0, 1.0))
        with pytest.raises(ValueError):
            check_open_range("mu", 0.0, (0.0, 1.0))
