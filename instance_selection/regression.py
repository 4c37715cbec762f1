"""
Helpers for the regression variants of instance selection.

In regression two outputs "agree" when they are closer than a threshold
theta proportional to the spread of the neighbours' outputs:

    theta = alpha * std(Y(neighbours))
"""

import numpy as np
from typing import Sequence
from sklearn.neighbors import KNeighborsRegressor

from instance_selection.dataset import Dataset, Instance


def theta(class_values: Sequence[float], alpha: float, class_is_numeric: bool = True) -> float:
    """
    Regression threshold for a set of neighbour outputs.

    - One value or none: not enough data to estimate a spread, alpha is
      returned as is.
    - Non-numeric class: the threshold is undefined, 0 is returned.
    - Otherwise alpha times the sample standard deviation (n - 1).
    """
    values = np.asarray(class_values, dtype=float)

    if len(values) <= 1:
        return alpha

    if not class_is_numeric:
        return 0.0

    return float(np.std(values, ddof=1) * alpha)


def dataset_theta(neighbors: Dataset, alpha: float) -> float:
    """theta over the class values of a neighbour Dataset."""
    return theta(neighbors.class_values, alpha, neighbors.class_is_numeric)


def is_misclassified_reg(instance: Instance, pool: Dataset, threshold: float) -> bool:
    """
    Checks whether a k-NN regressor trained on `pool` misses the instance's
    output by more than `threshold`.

    The regressor uses every row of the pool (k = len(pool)), so its
    prediction is the pool mean; a pool without features predicts that mean
    directly. An empty pool cannot contradict the instance.
    """
    if pool.num_instances == 0:
        return False

    if pool.features.shape[1] == 0:
        prediction = float(np.mean(pool.class_values))
    else:
        # Missing features count as 0; with k = len(pool) every row votes anyway
        X_pool = np.nan_to_num(pool.features, nan=0.0)
        query = np.nan_to_num(instance.features, nan=0.0).reshape(1, -1)

        knn = KNeighborsRegressor(n_neighbors=pool.num_instances)
        knn.fit(X_pool, pool.class_values)
        prediction = float(knn.predict(query)[0])

    return abs(prediction - instance.class_value) > threshold
