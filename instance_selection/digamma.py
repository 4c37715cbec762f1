"""
Memoised digamma sequence for the Kozachenko-Leonenko entropy estimator.

Only integer arguments are needed, so the values are built with the
recurrence psi(k) = psi(k - 1) + 1 / (k - 1), starting at psi(1) = -gamma.
"""

from typing import List

EULER_MASCHERONI = -0.5772156649015328606


class DigammaFunction:
    """
    Digamma values for non-negative integers, computed once and cached.

    psi(0) is undefined; it is returned as 0 so that empty neighbour counts
    contribute nothing to the estimator's sums.
    """

    def __init__(self, size: int = 0):
        self._values: List[float] = []
        if size > 0:
            self._extend(size)

    def __len__(self) -> int:
        return len(self._values)

    def value(self, k: int) -> float:
        if k < 0:
            raise ValueError(f"Digamma is only tabulated for k >= 0 (got {k})")
        if k == 0:
            return 0.0
        if len(self._values) < k:
            self._extend(k)
        return self._values[k - 1]

    def _extend(self, k: int) -> None:
        # _values[i] holds psi(i + 1)
        for i in range(len(self._values), k):
            if i == 0:
                self._values.append(EULER_MASCHERONI)
            else:
                self._values.append(self._values[i - 1] + 1.0 / i)
