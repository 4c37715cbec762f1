"""
This file provides the distance metrics used by the neighbour searches:
1. Euclidean
2. Manhattan

Both take the feature vectors only (the class attribute is removed by the
caller) and broadcast: `x2` may be a single row or a (n_rows, n_features)
matrix, in which case one distance per row is returned.

Attribute differences follow the overlap convention for heterogeneous data:
- Numeric attributes: |x1_f - x2_f| (no normalisation, the parser scales
  numeric features to [0, 1] beforehand).
- Nominal attributes (integer codes): 0 if the codes match, 1 otherwise.
- A missing value (NaN) on either side counts as a difference of 1.
"""

import numpy as np
from typing import Callable, Dict, Optional, Union

DistanceResult = Union[float, np.ndarray]
DistanceFunc = Callable[..., DistanceResult]


def attribute_differences(x1: np.ndarray,
                          x2: np.ndarray,
                          nominal: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Per-attribute absolute differences between x1 and each row of x2.
    """
    x1 = np.asarray(x1, dtype=float)
    x2 = np.asarray(x2, dtype=float)

    diff = np.abs(x1 - x2)

    if nominal is not None and np.any(nominal):
        nominal = np.asarray(nominal, dtype=bool)
        mismatch = (x1 != x2).astype(float)
        diff = np.where(nominal, mismatch, diff)

    missing = np.isnan(x1) | np.isnan(x2)
    return np.where(missing, 1.0, diff)


def euclidean_distance(x1: np.ndarray,
                       x2: np.ndarray,
                       nominal: Optional[np.ndarray] = None) -> DistanceResult:
    """
    Calculates the Euclidean distance (L2 norm).
    d(q,x) = sqrt( sum( delta(q_f, x_f)^2 ) )
    """
    squared = attribute_differences(x1, x2, nominal) ** 2
    distance = np.sqrt(squared.sum(axis=-1))
    return float(distance) if np.ndim(distance) == 0 else distance


def manhattan_distance(x1: np.ndarray,
                       x2: np.ndarray,
                       nominal: Optional[np.ndarray] = None) -> DistanceResult:
    """
    Calculates the Manhattan distance (L1 norm).
    d(q,x) = sum( delta(q_f, x_f) )
    """
    distance = attribute_differences(x1, x2, nominal).sum(axis=-1)
    return float(distance) if np.ndim(distance) == 0 else distance


DISTANCE_FUNCS: Dict[str, DistanceFunc] = {
    'Euclidean': euclidean_distance,
    'Manhattan': manhattan_distance,
}


def resolve_distance(distance: Union[str, DistanceFunc]) -> DistanceFunc:
    """Returns `distance` itself if callable, else its entry in DISTANCE_FUNCS."""
    if callable(distance):
        return distance
    if distance not in DISTANCE_FUNCS:
        raise ValueError(f"Unknown distance '{distance}'. "
                         f"Available: {', '.join(DISTANCE_FUNCS)}")
    return DISTANCE_FUNCS[distance]
