"""
This file implements the two neighbour-agreement policies shared by the
classification editing algorithms:
1. Plurality agreement (ENN): is an instance outvoted by its neighbours?
2. Distance-weighted posterior (ENNTh): class probabilities from the
   neighbours, each weighted by 1 / (1 + distance).
"""

import numpy as np
from typing import Dict, Sequence, Tuple


def is_misclassified(own_class: float, neighbor_classes: Sequence[float]) -> bool:
    """
    Checks whether the neighbours outvote the instance's own class.

    Counts how many neighbours share the instance's class and, for every
    other class present, how many neighbours carry it. The instance is
    misclassified only if some other class has *strictly* more votes than
    its own class; a tie keeps the instance.
    """
    vote_counts: Dict[float, int] = {}
    for label in neighbor_classes:
        vote_counts[label] = vote_counts.get(label, 0) + 1

    same_class_votes = vote_counts.pop(own_class, 0)

    for votes in vote_counts.values():
        if votes > same_class_votes:
            return True

    return False


def distance_weighted_posterior(neighbor_classes: Sequence[float],
                                distances: Sequence[float],
                                num_classes: int) -> np.ndarray:
    """
    Class posterior from neighbours weighted by 1 / (1 + distance).

    The result sums to 1, except when there are no neighbours, in which
    case every class gets 0.
    """
    prob = np.zeros(num_classes, dtype=float)

    for label, distance in zip(neighbor_classes, distances):
        prob[int(label)] += 1.0 / (1.0 + distance)

    total = prob.sum()
    if total > 0:
        prob /= total

    return prob


def predict_from_posterior(prob: np.ndarray) -> Tuple[int, float]:
    """
    Most probable class and its probability. The first class wins ties.
    """
    if len(prob) == 0:
        return -1, 0.0
    pos = int(np.argmax(prob))
    return pos, float(prob[pos])
