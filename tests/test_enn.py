"""Tests for instance_selection.enn module."""

import numpy as np
import pytest

from instance_selection.dataset import Dataset
from instance_selection.enn import ENNAlgorithm
from instance_selection.exceptions import NotEnoughInstancesException


class TestENNAlgorithm:
    """Tests for ENNAlgorithm."""

    def test_removes_outvoted_instance(self, line_classification: Dataset) -> None:
        """Test only the row whose nearest neighbour disagrees is removed."""
        enn = ENNAlgorithm(line_classification, k=1)
        enn.all_steps()
        # Row 1 is tied (A at 1, B at 1) and stays; row 2 sees only A at 1
        assert enn.output_index == [0, 1, 3]
        assert enn.solution_set.num_instances == 3

    def test_removes_cluster_noise(self, two_clusters: Dataset) -> None:
        """Test mislabelled points inside clusters are edited out."""
        enn = ENNAlgorithm(two_clusters, k=3)
        enn.all_steps()
        assert 3 not in enn.output_index
        assert 8 not in enn.output_index
        assert {0, 1, 2, 4, 5, 6, 7, 9} <= set(enn.output_index)

    def test_single_class_keeps_everything(self) -> None:
        """Test nothing is removed when every row shares one class."""
        ds = Dataset(np.array([[0.0, 0], [0.4, 0], [3.0, 0], [3.5, 0]]), class_labels=["A"])
        enn = ENNAlgorithm(ds, k=3)
        enn.all_steps()
        assert enn.output_index == [0, 1, 2, 3]

    def test_one_step_per_row(self, line_classification: Dataset) -> None:
        """Test the run ends after exactly n steps."""
        enn = ENNAlgorithm(line_classification, k=1)
        steps = 0
        while True:
            steps += 1
            if not enn.step():
                break
        assert steps == 4
        assert enn.current_instance is None
        assert not enn.step()

    def test_origin_index_is_used(self, line_classification: Dataset) -> None:
        """Test the output is expressed in the given origin index."""
        enn = ENNAlgorithm(line_classification, origin_index=[40, 41, 42, 43], k=1)
        enn.all_steps()
        assert enn.output_index == [40, 41, 43]

    def test_output_index_maps_to_rows(self, two_clusters: Dataset) -> None:
        """Test every selected row equals the input row it points to."""
        enn = ENNAlgorithm(two_clusters, k=3)
        enn.all_steps()
        solution = enn.solution_set
        np.testing.assert_array_equal(solution.values, two_clusters.values[enn.output_index])

    def test_single_instance_kept(self) -> None:
        """Test a lone instance has no neighbours to outvote it."""
        enn = ENNAlgorithm(Dataset(np.array([[1.0, 0.0]]), class_labels=["A"]))
        enn.all_steps()
        assert enn.output_index == [0]

    def test_reset_restarts(self, line_classification: Dataset) -> None:
        """Test reset starts a fresh run."""
        enn = ENNAlgorithm(line_classification, k=1)
        enn.all_steps()
        enn.reset(line_classification)
        assert enn.solution_set.num_instances == 4
        assert enn.current_instance is not None

    def test_empty_training_set(self) -> None:
        """Test an empty dataset is rejected."""
        with pytest.raises(NotEnoughInstancesException):
            ENNAlgorithm(Dataset(np.empty((0, 2)), class_labels=["A"]))

    def test_invalid_k(self) -> None:
        """Test k is validated."""
        with pytest.raises(ValueError):
            ENNAlgorithm(k=0)
