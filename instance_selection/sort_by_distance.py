"""
Orders a dataset by the distance of each instance to its nearest enemy,
i.e. the closest instance of another class (classification) or whose
output differs by more than theta (regression).

Several selection algorithms process instances in this order. The sort
keeps an output index in step with the rows, so every row of the ordered
set can still be traced back to the input dataset.
"""

import numpy as np
from typing import List, Optional, Sequence, Union

from instance_selection.dataset import Dataset, Instance
from instance_selection.distances import DistanceFunc, euclidean_distance, resolve_distance
from instance_selection.regression import theta


def nearest_enemy_distance(target: Instance,
                           pool: Dataset,
                           distance_func: DistanceFunc = euclidean_distance) -> float:
    """
    Distance from `target` to the closest row of `pool` with another class.
    Returns inf when every row shares the target's class.
    """
    enemies = pool.class_values != target.class_value
    if not np.any(enemies):
        return np.inf

    distances = distance_func(target.features, pool.features[enemies], pool.feature_nominal)
    return float(np.min(distances))


def nearest_enemy_distance_reg(target: Instance,
                               pool: Dataset,
                               target_neighbors: Dataset,
                               alpha: float,
                               distance_func: DistanceFunc = euclidean_distance) -> float:
    """
    Regression nearest enemy: the closest row of `pool` whose output differs
    from the target's by more than theta. Returns inf when there is no such row.

    `target_neighbors` are the target's k+1 nearest neighbours; theta is
    computed from all of them but the last.
    """
    threshold = theta(target_neighbors.class_values[:-1], alpha, pool.class_is_numeric)

    enemies = np.abs(pool.class_values - target.class_value) > threshold
    if not np.any(enemies):
        return np.inf

    distances = distance_func(target.features, pool.features[enemies], pool.feature_nominal)
    return float(np.min(distances))


class SortByDistance:
    """
    Sorts a dataset by nearest-enemy distance.

    Args:
        to_order: Dataset to sort.
        input_index: Origin of every row (default: to_order.index).
        distance_func: Distance between feature vectors, a callable or a name
            in DISTANCE_FUNCS (default Euclidean).
    """

    def __init__(self,
                 to_order: Dataset,
                 input_index: Optional[Sequence[int]] = None,
                 distance_func: Union[str, DistanceFunc] = euclidean_distance):
        self.to_order_set: Dataset = to_order
        self.input_index: np.ndarray = (to_order.index.copy() if input_index is None
                                        else np.array(input_index, dtype=int))
        if len(self.input_index) != to_order.num_instances:
            raise ValueError("input_index must have one entry per row")

        self.distance_func: DistanceFunc = resolve_distance(distance_func)
        self.ordered_set: Optional[Dataset] = None
        self.distances_to_nearest_enemy: np.ndarray = np.zeros(to_order.num_instances)
        self._order: Optional[np.ndarray] = None

    @property
    def output_index(self) -> List[int]:
        if self._order is None:
            return []
        return self.input_index[self._order].tolist()

    def order_by_nearest_enemy(self, ascending: bool = True) -> Dataset:
        """Sort for classification: enemies are rows of another class."""
        data = self.to_order_set
        self.distances_to_nearest_enemy = np.array([
            nearest_enemy_distance(data.instance(i), data, self.distance_func)
            for i in range(data.num_instances)
        ])
        return self._sort(ascending)

    def order_by_nearest_enemy_reg(self,
                                   neighbors: Sequence[Dataset],
                                   ascending: bool = True,
                                   alpha: float = 0.05) -> Dataset:
        """
        Sort for regression. `neighbors[i]` holds the k+1 nearest neighbours
        of row i (e.g. `k_nearest_neighbors(row, k + 1)`); the last one is
        left out and theta is computed from the others.
        """
        data = self.to_order_set
        if len(neighbors) != data.num_instances:
            raise ValueError("neighbors must hold one neighbour set per row")

        self.distances_to_nearest_enemy = np.array([
            nearest_enemy_distance_reg(data.instance(i), data, neighbors[i], alpha,
                                       self.distance_func)
            for i in range(data.num_instances)
        ])
        return self._sort(ascending)

    def _sort(self, ascending: bool) -> Dataset:
        # Equal distances keep their input order
        order = np.argsort(self.distances_to_nearest_enemy, kind="stable")
        if not ascending:
            order = order[::-1]

        self._order = order
        self.ordered_set = self.to_order_set.subset(order).with_index(self.input_index[order])
        return self.ordered_set
