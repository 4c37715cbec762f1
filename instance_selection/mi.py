"""
Mutual-information based instance selection for regression (MI).

Every instance gets a mutual-information score estimated with a
Kozachenko-Leonenko style k-NN entropy estimator. An instance is removed
when all of its k nearest neighbours are more informative than it by more
than `alpha` (scores are min-max normalised to [0, 1]).

The run has three phases. `step()` performs one unit of work at a time:
    1. COMPUTING_NEIGHBORS: k nearest neighbours of every row (one step).
    2. COMPUTING_MI: MI score of every row (one step).
    3. EDITING: the removal decision for one training row (one step each).
"""

import enum
import numpy as np
from typing import List, Optional, Sequence

from instance_selection.algorithm import (
    check_closed_range,
    check_num_neighbors,
    prepare_training_set,
)
from instance_selection.dataset import Dataset, Instance
from instance_selection.digamma import DigammaFunction
from instance_selection.distances import attribute_differences
from instance_selection.neighbor_search import BoundedKNeighborSearch

DEFAULT_K = 6
DEFAULT_ALPHA = 0.05
MI_ALPHA_RANGE = (0.0, 1.0)


class MIPhase(enum.Enum):
    COMPUTING_NEIGHBORS = "computing_neighbors"
    COMPUTING_MI = "computing_mi"
    EDITING = "editing"
    DONE = "done"


class DiffDirection(enum.Enum):
    """
    How the MI of a neighbour is compared with the MI of the instance.

    NEIGHBOR_MINUS_SELF counts the neighbours more informative than the
    instance (diff = MI(neighbour) - MI(x)). SELF_MINUS_NEIGHBOR is the
    formula as published (diff = MI(x) - MI(neighbour)).
    """
    NEIGHBOR_MINUS_SELF = "neighbor_minus_self"
    SELF_MINUS_NEIGHBOR = "self_minus_neighbor"


def normalize_mi(values: Sequence[float]) -> np.ndarray:
    """
    Min-max normalisation to [0, 1]. A constant vector maps to all zeros.
    """
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        return values.copy()

    low = values.min()
    high = values.max()
    if high == low:
        return np.zeros_like(values)

    return (values - low) / (high - low)


class MIAlgorithm:
    """
    Step-by-step MI selection.

    The run takes 2 + num_instances(train) steps: one for the neighbour
    cache, one for the MI scores and one per training row.
    """

    def __init__(self, train: Optional[Dataset] = None,
                 origin_index: Optional[Sequence[int]] = None,
                 k: int = DEFAULT_K,
                 alpha: float = DEFAULT_ALPHA,
                 diff_direction: DiffDirection = DiffDirection.NEIGHBOR_MINUS_SELF):
        self.k = k
        self.alpha = alpha
        self.diff_direction = DiffDirection(diff_direction)
        self.train_set: Optional[Dataset] = None
        self.selected: Optional[np.ndarray] = None
        self.phase: MIPhase = MIPhase.DONE
        self.current_position: int = 0
        self.nearest_neighbors: Optional[List[List[int]]] = None
        self.mi: Optional[np.ndarray] = None
        self.raw_mi: Optional[np.ndarray] = None
        self.digamma: Optional[DigammaFunction] = None

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
        self._alpha = check_closed_range("alpha", value, MI_ALPHA_RANGE)

    def reset(self, train: Dataset, origin_index: Optional[Sequence[int]] = None) -> None:
        self.train_set = prepare_training_set(train, origin_index)
        self.selected = np.ones(self.train_set.num_instances, dtype=bool)
        self.phase = MIPhase.COMPUTING_NEIGHBORS
        self.current_position = 0
        self.nearest_neighbors = None
        self.mi = np.zeros(self.train_set.num_instances)
        self.raw_mi = None
        self.digamma = DigammaFunction(self.train_set.num_instances)

    @property
    def current_instance(self) -> Optional[Instance]:
        if self.phase == MIPhase.DONE:
            return None
        return self.train_set.instance(self.current_position)

    def step(self) -> bool:
        if self.phase == MIPhase.COMPUTING_NEIGHBORS:
            self.nearest_neighbors = self.compute_nearest_neighbors()
            self.phase = MIPhase.COMPUTING_MI
        elif self.phase == MIPhase.COMPUTING_MI:
            self.mi = self.compute_mutual_information()
            self.phase = MIPhase.EDITING
        elif self.phase == MIPhase.EDITING:
            self._edit_current()
            self.current_position += 1
            if self.current_position >= self.train_set.num_instances:
                self.phase = MIPhase.DONE
                # The neighbour cache is only needed while editing
                self.nearest_neighbors = None

        return self.phase != MIPhase.DONE

    def all_steps(self) -> None:
        while self.step():
            pass

    # --- Phase 1 ---

    def compute_nearest_neighbors(self) -> List[List[int]]:
        """
        Positions of the k nearest neighbours of every row, Manhattan
        distance over the attributes (class excluded).

        Rows tied beyond the k-th neighbour are not kept. A row may have
        fewer than k neighbours when the dataset is small.
        """
        search = BoundedKNeighborSearch(self.train_set, "Manhattan")
        neighbors = []
        for i in range(self.train_set.num_instances):
            positions, _ = search.k_nearest_positions(self.train_set.instance(i), self._k)
            neighbors.append(positions[:self._k])
        return neighbors

    # --- Phase 2 ---

    def compute_mutual_information(self) -> np.ndarray:
        """
        Normalised MI score of every row.

        For row i, epsilon is the largest 1-D distance, over every attribute
        (class included) and every cached neighbour, between i and that
        neighbour. n_a(i) counts the other rows closer than epsilon to i in
        attribute a alone. Then

            MI(i) = psi(k) - (m - 1) / k + (m - 1) psi(n) - sum_a psi(n_a(i)) / n

        with m attributes and n rows, and the scores are min-max normalised.
        """
        data = self.train_set
        num_inst = data.num_instances
        num_attr = data.num_attributes
        k = self._k

        constant = (self.digamma.value(k) - (num_attr - 1) / k
                    + (num_attr - 1) * self.digamma.value(num_inst))

        raw = np.zeros(num_inst)
        for i in range(num_inst):
            row = data.values[i]
            # One 1-D space per attribute: |difference| of each row to row i
            per_attr = attribute_differences(row, data.values, data.nominal)

            neighbors = self.nearest_neighbors[i]
            max_eps = float(per_attr[neighbors].max()) if len(neighbors) else 0.0

            closer = per_attr < max_eps
            closer[i, :] = False
            counts = closer.sum(axis=0)

            total = sum(self.digamma.value(int(c)) for c in counts)
            raw[i] = constant - total / num_inst

        self.raw_mi = raw
        return normalize_mi(raw)

    # --- Phase 3 ---

    def count_more_informative(self, position: int) -> int:
        """Neighbours whose MI differs from the row's by more than alpha."""
        own = self.mi[position]
        count = 0
        for j in self.nearest_neighbors[position]:
            if self.diff_direction == DiffDirection.NEIGHBOR_MINUS_SELF:
                diff = self.mi[j] - own
            else:
                diff = own - self.mi[j]
            if diff > self._alpha:
                count += 1
        return count

    def _edit_current(self) -> None:
        if self.count_more_informative(self.current_position) >= self._k:
            self.selected[self.current_position] = False

    @property
    def solution_set(self) -> Dataset:
        return self.train_set.subset(np.flatnonzero(self.selected))

    @property
    def output_index(self) -> List[int]:
        return self.train_set.index[self.selected].tolist()
