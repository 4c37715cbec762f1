"""
Edited Nearest Neighbour for regression (RegENN).

The class test of ENN becomes a tolerance test: an instance is removed
when a k-NN regressor trained on the rest of the current solution set
misses its output by more than theta, where theta is alpha times the
standard deviation of the outputs of its k nearest neighbours.
"""

import numpy as np
from typing import List, Optional, Sequence

from instance_selection.algorithm import (
    check_closed_range,
    check_num_neighbors,
    prepare_training_set,
)
from instance_selection.dataset import Dataset, Instance
from instance_selection.neighbor_search import BoundedKNeighborSearch
from instance_selection.regression import dataset_theta, is_misclassified_reg

DEFAULT_K = 1
DEFAULT_ALPHA = 0.05
REG_ENN_ALPHA_RANGE = (0.0, 100.0)


class ENNRegAlgorithm:
    """
    Step-by-step RegENN. Each step decides on one row of the training set,
    so the run ends after exactly `num_instances(train)` steps.

    Unlike ENN, earlier removals matter: the neighbours and the regressor
    of row i only see the rows still selected when row i is processed.
    """

    def __init__(self, train: Optional[Dataset] = None,
                 origin_index: Optional[Sequence[int]] = None,
                 k: int = DEFAULT_K,
                 alpha: float = DEFAULT_ALPHA,
                 alpha_range=REG_ENN_ALPHA_RANGE):
        self.alpha_range = alpha_range
        self.k = k
        self.alpha = alpha
        self.train_set: Optional[Dataset] = None
        self.selected: Optional[np.ndarray] = None
        self.current_position: int = 0
        self.last_theta: Optional[float] = None

        if train is not None:
            self.reset(train, origin_index)

    @property
    def k(self) -> int:
        return self._k

    @k.setter
    def k(self, value: int) -> None:
        self._k = check_num_neighbors(value)

    @property
    def alpha(self) -> float:
        return self._alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        self._alpha = check_closed_range("alpha", value, self.alpha_range)

    def reset(self, train: Dataset, origin_index: Optional[Sequence[int]] = None) -> None:
        self.train_set = prepare_training_set(train, origin_index)
        self.selected = np.ones(self.train_set.num_instances, dtype=bool)
        self.current_position = 0
        self.last_theta = None

    @property
    def done(self) -> bool:
        return self.train_set is None or self.current_position >= self.train_set.num_instances

    @property
    def current_instance(self) -> Optional[Instance]:
        if self.done:
            return None
        return self.train_set.instance(self.current_position)

    def step(self) -> bool:
        if self.done:
            return False

        position = self.current_position
        current = self.train_set.instance(position)

        # Neighbours come from the current solution set minus this row
        in_pool = self.selected.copy()
        in_pool[position] = False
        pool = self.train_set.subset(np.flatnonzero(in_pool))

        neighbors, _ = BoundedKNeighborSearch(pool).k_nearest_neighbors(current, self._k)
        self.last_theta = dataset_theta(neighbors, self._alpha)

        if is_misclassified_reg(current, pool, self.last_theta):
            self.selected[position] = False

        self.current_position += 1
        return not self.done

    def all_steps(self) -> None:
        while self.step():
            pass

    @property
    def solution_set(self) -> Dataset:
        return self.train_set.subset(np.flatnonzero(self.selected))

    @property
    def output_index(self) -> List[int]:
        return self.train_set.index[self.selected].tolist()
