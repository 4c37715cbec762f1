"""
ENN with a probability threshold (ENNTh).

Unlike ENN, ENNTh starts from an empty solution set and *adds* the
instances it trusts: an instance is selected when the distance-weighted
vote of its k nearest neighbours predicts its own class with a
probability above `mu`.
"""

from typing import List, Optional, Sequence

from instance_selection.algorithm import (
    check_num_neighbors,
    check_open_range,
    prepare_training_set,
)
from instance_selection.dataset import Dataset, Instance
from instance_selection.neighbor_search import BoundedKNeighborSearch
from instance_selection.voting import distance_weighted_posterior, predict_from_posterior

DEFAULT_K = 1
DEFAULT_MU = 0.7
MU_RANGE = (0.0, 1.0)  # exclusive


class ENNThAlgorithm:
    """
    Step-by-step ENNTh. Each step scans one training row; the run ends
    after every row has been scanned once.
    """

    def __init__(self, train: Optional[Dataset] = None,
                 origin_index: Optional[Sequence[int]] = None,
                 k: int = DEFAULT_K,
                 mu: float = DEFAULT_MU):
        self.k = k
        self.mu = mu
        self.train_set: Optional[Dataset] = None
        self._solution_set: Optional[Dataset] = None
        self._search: Optional[BoundedKNeighborSearch] = None
        self.current_position: int = 0
        self.last_posterior = None

        if train is not None:
            self.reset(train, origin_index)

    @property
    def k(self) -> int:
        return self._k

    @k.setter
    def k(self, value: int) -> None:
        self._k = check_num_neighbors(value)

    @property
    def mu(self) -> float:
        return self._mu

    @mu.setter
    def mu(self, value: float) -> None:
        self._mu = check_open_range("mu", value, MU_RANGE)

    def reset(self, train: Dataset, origin_index: Optional[Sequence[int]] = None) -> None:
        self.train_set = prepare_training_set(train, origin_index)
        self._solution_set = self.train_set.empty_copy()
        self._search = BoundedKNeighborSearch(self.train_set)
        self.current_position = 0
        self.last_posterior = None

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
        neighbors, distances = self._search.k_nearest_neighbors(current, self._k)

        prob = distance_weighted_posterior(neighbors.class_values, distances,
                                           self.train_set.num_classes)
        predicted, max_prob = predict_from_posterior(prob)
        self.last_posterior = prob

        # Keep the instance only if its neighbours agree with it confidently
        if predicted == current.class_value and max_prob > self._mu:
            self._solution_set.append(current, self.train_set.index[self.current_position])

        self.current_position += 1
        return not self.done

    def all_steps(self) -> None:
        while self.step():
            pass

    @property
    def solution_set(self) -> Dataset:
        return self._solution_set

    @property
    def output_index(self) -> List[int]:
        return self._solution_set.index.tolist()
