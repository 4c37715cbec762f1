"""
This file contains the filters that wrap the instance selection
algorithms for use on a whole dataset:
1. InstanceSelection: classification (nominal class) - ENN, ENNTh
2. InstanceSelectionForRegression: regression (numeric class) - MI, RegENN

A filter is configured with a technique name and its parameters, builds
the matching algorithm, runs it to completion and returns the solution
set, a smaller Dataset whose `index` maps back to the input rows.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from instance_selection.algorithm import SelectionAlgorithm, check_num_neighbors
from instance_selection.dataset import Dataset
from instance_selection.enn import ENNAlgorithm
from instance_selection.enn_reg import ENNRegAlgorithm
from instance_selection.enn_th import DEFAULT_MU, ENNThAlgorithm
from instance_selection.exceptions import UnsupportedClassError
from instance_selection.mi import MIAlgorithm

# --- Type Aliases ---
AlgorithmFactory = Callable[..., SelectionAlgorithm]

# Techniques selectable by name, with the parameters each one accepts
CLASSIFICATION_TECHNIQUES: Dict[str, AlgorithmFactory] = {
    'ENN': lambda k, mu: ENNAlgorithm(k=k),
    'ENNTh': lambda k, mu: ENNThAlgorithm(k=k, mu=mu),
}
REGRESSION_TECHNIQUES: Dict[str, AlgorithmFactory] = {
    'MI': lambda k, alpha: MIAlgorithm(k=k, alpha=alpha),
    'RegENN': lambda k, alpha: ENNRegAlgorithm(k=k, alpha=alpha),
}

DEFAULT_REGRESSION_ALPHA = 0.5


class _SelectionFilter:
    """
    Shared run-and-report logic of the filters.
    """

    techniques: Dict[str, AlgorithmFactory] = {}
    numeric_class: bool = False

    def __init__(self, algorithm: str, k: int = 1):
        if algorithm not in self.techniques:
            raise ValueError(f"Unknown technique '{algorithm}'. "
                             f"Choose one of: {', '.join(self.techniques)}")
        self.technique: str = algorithm
        self.k: int = check_num_neighbors(k)
        self.algorithm: Optional[SelectionAlgorithm] = None
        self.user_time: float = 0.0

    def _build(self) -> SelectionAlgorithm:
        raise NotImplementedError

    def _describe(self) -> str:
        return f"k={self.k}"

    def _check_class(self, dataset: Dataset) -> None:
        if dataset.class_is_numeric != self.numeric_class:
            expected = "numeric" if self.numeric_class else "nominal"
            raise UnsupportedClassError(
                f"{type(self).__name__} requires a {expected} class attribute")

    def filter(self, dataset: Dataset) -> Dataset:
        """
        Runs the configured technique on `dataset` and returns the solution set.

        Raises:
            UnsupportedClassError: If the class type does not suit the filter.
            NotEnoughInstancesException: If the dataset has no rows.
        """
        self._check_class(dataset)

        print(f"  [IS] Running {self.technique} ({self._describe()})...")
        start_time = time.time()

        self.algorithm = self._build()
        self.algorithm.reset(dataset, dataset.index)
        self.algorithm.all_steps()

        self.user_time = time.time() - start_time

        solution = self.algorithm.solution_set
        reduction_pct = (1 - len(solution) / len(dataset)) * 100
        print(f"    → {self.technique} complete. Retained {len(solution)}/{len(dataset)} "
              f"({reduction_pct:.1f}% reduction) in {self.user_time:.3f}s")

        return solution

    @property
    def solution_set(self) -> Optional[Dataset]:
        return self.algorithm.solution_set if self.algorithm is not None else None

    @property
    def output_index(self) -> List[int]:
        return self.algorithm.output_index if self.algorithm is not None else []


class InstanceSelection(_SelectionFilter):
    """
    Instance selection for classification datasets (ENN or ENNTh).
    """

    techniques = CLASSIFICATION_TECHNIQUES
    numeric_class = False

    def __init__(self, algorithm: str = 'ENN', k: int = 1, mu: float = DEFAULT_MU):
        super().__init__(algorithm, k)
        self.mu: float = mu
        # Fail on bad parameters now rather than at filter time
        self._build()

    def _build(self) -> SelectionAlgorithm:
        return self.techniques[self.technique](self.k, self.mu)

    def _describe(self) -> str:
        if self.technique == 'ENNTh':
            return f"k={self.k}, mu={self.mu}"
        return super()._describe()


class InstanceSelectionForRegression(_SelectionFilter):
    """
    Instance selection for regression datasets (MI or RegENN).
    """

    techniques = REGRESSION_TECHNIQUES
    numeric_class = True

    def __init__(self, algorithm: str = 'MI', k: int = 1, alpha: float = DEFAULT_REGRESSION_ALPHA):
        super().__init__(algorithm, k)
        self.alpha: float = alpha
        self._build()

    def _build(self) -> SelectionAlgorithm:
        return self.techniques[self.technique](self.k, self.alpha)

    def _describe(self) -> str:
        return f"k={self.k}, alpha={self.alpha}"


def select_instances(dataset: Dataset, technique: str, **params: Any) -> Tuple[Dataset, List[int]]:
    """
    Applies a technique by name, picking the filter from the technique.

    Returns:
        Tuple[Dataset, List[int]]:
            - The solution set.
            - The index of every selected row in `dataset`'s origin index.
    """
    if technique in CLASSIFICATION_TECHNIQUES:
        selection_filter: _SelectionFilter = InstanceSelection(technique, **params)
    elif technique in REGRESSION_TECHNIQUES:
        selection_filter = InstanceSelectionForRegression(technique, **params)
    else:
        known = list(CLASSIFICATION_TECHNIQUES) + list(REGRESSION_TECHNIQUES)
        raise ValueError(f"Unknown technique '{technique}'. Choose one of: {', '.join(known)}")

    solution = selection_filter.filter(dataset)
    return solution, selection_filter.output_index
