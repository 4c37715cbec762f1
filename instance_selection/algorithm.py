"""
This file defines the common interface of the instance selection
algorithms and the helpers they share for setup and parameter checks.

Every algorithm is a small state machine:

    created --reset(train)--> initialised --step()...--> done

`step()` performs one unit of work and returns True while work remains;
`all_steps()` drives it to completion. The result is the solution set, a
Dataset whose `index` maps each surviving row back to the original data.
"""

import numpy as np
from typing import List, Optional, Protocol, Sequence, Tuple

from instance_selection.dataset import Dataset, Instance
from instance_selection.exceptions import NotEnoughInstancesException


class SelectionAlgorithm(Protocol):
    """
    Capability shared by ENNAlgorithm, ENNThAlgorithm, ENNRegAlgorithm and
    MIAlgorithm.
    """

    def reset(self, train: Dataset, origin_index: Optional[Sequence[int]] = None) -> None:
        ...

    def step(self) -> bool:
        ...

    def all_steps(self) -> None:
        ...

    @property
    def solution_set(self) -> Dataset:
        ...

    @property
    def output_index(self) -> List[int]:
        ...

    @property
    def current_instance(self) -> Optional[Instance]:
        ...


def prepare_training_set(train: Dataset, origin_index: Optional[Sequence[int]] = None) -> Dataset:
    """
    Validates a training set and tags its rows with their origin index.

    Args:
        train: Training set to select from.
        origin_index: Position of every row in the original dataset
                      (default 0..n-1).

    Raises:
        NotEnoughInstancesException: If the training set has no rows.
        ValueError: If origin_index does not have one entry per row.
    """
    if train is None or train.num_instances == 0:
        raise NotEnoughInstancesException()

    if origin_index is None:
        origin_index = np.arange(train.num_instances)

    return train.with_index(origin_index)


def check_num_neighbors(k: int) -> int:
    if int(k) != k or k < 1:
        raise ValueError(f"The number of nearest neighbours must be greater than 0 (got {k})")
    return int(k)


def check_closed_range(name: str, value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{name} must be in the interval [{low}, {high}] (got {value})")
    return float(value)


def check_open_range(name: str, value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    if not low < value < high:
        raise ValueError(f"{name} must be in the interval ({low}, {high}) (got {value})")
    return float(value)
