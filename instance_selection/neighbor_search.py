"""
This file contains the exact k-nearest-neighbour search used by every
instance selection algorithm.

The search scans the whole dataset once and keeps the k best candidates in
a bounded max-heap keyed by distance. Candidates tied with the current k-th
distance are not discarded: they are accumulated in a separate "tied at
k-th" list, so a query may return more than k neighbours.

Rows value-equal to the query (see Dataset.equal_mask) are skipped
when `exclude_self` is set, whatever their position.
"""

import heapq
import numpy as np
from typing import List, Optional, Tuple, Union

from instance_selection.dataset import Dataset, Instance
from instance_selection.distances import DistanceFunc, euclidean_distance, resolve_distance

# --- Type Aliases ---
# Heap entries are (-distance, -encounter_order, position) so the root is
# the farthest candidate and, among equals, the latest one seen.
HeapEntry = Tuple[float, int, int]
Neighbor = Tuple[float, int]  # (distance, position)


class _BoundedHeap:
    """
    Max-heap of at most `capacity` candidates plus the list of candidates
    tied with the current maximum.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._heap: List[HeapEntry] = []
        self._kth_nearest: List[Neighbor] = []
        self._counter = 0

    def __len__(self) -> int:
        return len(self._heap)

    def is_full(self) -> bool:
        return len(self._heap) >= self.capacity

    def max_distance(self) -> float:
        return -self._heap[0][0]

    def put(self, position: int, distance: float) -> None:
        heapq.heappush(self._heap, (-distance, -self._counter, position))
        self._counter += 1

    def put_by_substitute(self, position: int, distance: float) -> None:
        """
        Replace the current maximum with a strictly closer candidate.

        If the new maximum still equals the old one, the old head joins the
        tied list; if it dropped, the tied list no longer applies.
        """
        old = heapq.heappop(self._heap)
        old_distance = -old[0]
        self.put(position, distance)

        if old_distance == self.max_distance():
            self._kth_nearest.append((old_distance, old[2]))
        else:
            self._kth_nearest = []

    def put_kth_nearest(self, position: int, distance: float) -> None:
        self._kth_nearest.append((distance, position))

    def neighbors(self) -> List[Neighbor]:
        """
        Heap contents ascending by distance (encounter order among equals),
        followed by the tied-at-k-th candidates in encounter order.
        """
        ordered = sorted(self._heap, key=lambda e: (-e[0], -e[1]))
        result = [(-neg_dist, pos) for neg_dist, _, pos in ordered]
        return result + list(self._kth_nearest)


class BoundedKNeighborSearch:
    """
    Linear-scan k-nearest-neighbour search over a Dataset.

    Distances are computed on the feature vectors (class excluded) with the
    given distance function (Euclidean by default), passed either as a
    callable or by its name in DISTANCE_FUNCS.
    """

    def __init__(self,
                 dataset: Dataset,
                 distance_func: Union[str, DistanceFunc] = euclidean_distance):
        self.dataset: Dataset = dataset
        self.distance_func: DistanceFunc = resolve_distance(distance_func)
        self.last_distances: Optional[np.ndarray] = None

    def distances_to(self, target: Instance) -> np.ndarray:
        """Distance from `target` to every row of the dataset."""
        if self.dataset.num_instances == 0:
            return np.empty(0)
        distances = self.distance_func(target.features, self.dataset.features,
                                       self.dataset.feature_nominal)
        return np.atleast_1d(np.asarray(distances, dtype=float))

    def k_nearest_positions(self,
                            target: Instance,
                            k: int,
                            exclude_self: bool = True) -> Tuple[List[int], np.ndarray]:
        """
        Finds the k nearest rows to `target`.

        Returns:
            positions: Row positions in the searched dataset, ascending by
                distance, rows tied with the k-th distance appended last.
            distances: Parallel array of distances.
        """
        if k < 1:
            raise ValueError(f"k must be at least 1 (got {k})")

        all_distances = self.distances_to(target)
        admissible = np.ones(len(all_distances), dtype=bool)
        if exclude_self and len(all_distances):
            admissible = ~self.dataset.equal_mask(target)

        heap = _BoundedHeap(k)
        for position in np.flatnonzero(admissible):
            distance = float(all_distances[position])
            if not heap.is_full():
                heap.put(int(position), distance)
                continue

            current_max = heap.max_distance()
            if distance < current_max:
                heap.put_by_substitute(int(position), distance)
            elif distance == current_max:
                heap.put_kth_nearest(int(position), distance)

        found = heap.neighbors()
        positions = [pos for _, pos in found]
        distances = np.array([dist for dist, _ in found], dtype=float)
        self.last_distances = distances
        return positions, distances

    def k_nearest_neighbors(self,
                            target: Instance,
                            k: int,
                            exclude_self: bool = True) -> Tuple[Dataset, np.ndarray]:
        """
        Same as k_nearest_positions but returns the neighbour rows as a
        Dataset (carrying their origin index).
        """
        positions, distances = self.k_nearest_positions(target, k, exclude_self)
        return self.dataset.subset(positions), distances

    def nearest_neighbor(self, target: Instance) -> Instance:
        """
        The closest row to `target`, or `target` itself when no other row
        is available.
        """
        positions, _ = self.k_nearest_positions(target, 1)
        if not positions:
            return target
        return self.dataset.instance(positions[0])
