"""
Edited Nearest Neighbour (ENN).

ENN removes an instance when the majority of its k nearest neighbours
(searched in the original training set) belong to another class. It is
primarily used for removing noise and smoothing decision boundaries.

Pseudocode:
    S = X
    for all x in S:
        find the k nearest neighbours of x in X - {x}
        if they outvote the class of x: remove x from S
    return S
"""

import numpy as np
from typing import List, Optional, Sequence

from instance_selection.algorithm import check_num_neighbors, prepare_training_set
from instance_selection.dataset import Dataset, Instance
from instance_selection.neighbor_search import BoundedKNeighborSearch
from instance_selection.voting import is_misclassified

DEFAULT_K = 1


class ENNAlgorithm:
    """
    Step-by-step ENN. Each step decides on one row of the training set, so
    the run ends after exactly `num_instances(train)` steps.

    Removed rows are only marked in `selected`; the training set itself is
    never modified while iterating.
    """

    def __init__(self, train: Optional[Dataset] = None,
                 origin_index: Optional[Sequence[int]] = None,
                 k: int = DEFAULT_K):
        self.k = k
        self.train_set: Optional[Dataset] = None
        self.selected: Optional[np.ndarray] = None
        self._search: Optional[BoundedKNeighborSearch] = None
        self.current_position: int = 0

        if train is not None:
            self.reset(train, origin_index)

    @property
    def k(self) -> int:
        return self._k

    @k.setter
    def k(self, value: int) -> None:
        self._k = check_num_neighbors(value)

    def reset(self, train: Dataset, origin_index: Optional[Sequence[int]] = None) -> None:
        self.train_set = prepare_training_set(train, origin_index)
        # Start with every instance selected
        self.selected = np.ones(self.train_set.num_instances, dtype=bool)
        self._search = BoundedKNeighborSearch(self.train_set)
        self.current_position = 0

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

        current = self.train_set.instance(self.current_position)
        neighbors, _ = self._search.k_nearest_neighbors(current, self._k)

        if is_misclassified(current.class_value, neighbors.class_values):
            self.selected[self.current_position] = False

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
