"""
This file contains the in-memory data model shared by every instance
selection algorithm:

- Instance: a single row (attribute values, weight, class position).
- Dataset: an ordered collection of rows sharing one attribute schema.

A Dataset stores, next to its rows, the index of every row in some
ancestor dataset (the "origin" index). Deleting or appending a row always
updates both, so len(dataset.index) == dataset.num_instances at all times.

Missing values are stored as NaN. Nominal attributes (and a nominal class)
are stored as integer codes; the labels live in `class_labels`.
"""

import numpy as np
import pandas as pd
from typing import Any, List, Optional, Sequence


class Instance:
    """
    A read-only view of one row of a Dataset.
    """

    __slots__ = ("values", "weight", "class_index")

    def __init__(self, values: np.ndarray, weight: float = 1.0, class_index: int = -1):
        self.values: np.ndarray = np.asarray(values, dtype=float)
        self.weight: float = float(weight)
        # Normalise negative positions so features can be sliced consistently
        self.class_index: int = class_index % len(self.values) if len(self.values) else 0

    @property
    def class_value(self) -> float:
        return float(self.values[self.class_index])

    @property
    def features(self) -> np.ndarray:
        """Attribute values without the class attribute."""
        return np.delete(self.values, self.class_index)

    def __repr__(self) -> str:
        return f"Instance(values={self.values.tolist()}, weight={self.weight})"


class Dataset:
    """
    An ordered set of instances with a fixed schema and an origin index.

    Args:
        values: (n_rows, n_attributes) matrix, NaN for missing values.
            A 1-D array is taken as a single row.
        class_index: Position of the class attribute (negative allowed).
        nominal: Boolean mask, True for nominal attributes.
        weights: Per-row weights (default 1.0).
        index: Origin index of every row (default 0..n-1).
        attribute_names: Column names (default "a0", "a1", ...).
        class_labels: Labels of a nominal class, position == integer code.
    """

    def __init__(self,
                 values: Any,
                 class_index: int = -1,
                 nominal: Optional[Sequence[bool]] = None,
                 weights: Optional[Sequence[float]] = None,
                 index: Optional[Sequence[int]] = None,
                 attribute_names: Optional[List[str]] = None,
                 class_labels: Optional[List[Any]] = None):
        values = np.array(values, dtype=float)
        if values.ndim == 1:
            values = values.reshape(1, -1)
        if values.ndim != 2 or values.shape[1] == 0:
            raise ValueError("values must be a 2-D matrix with at least one attribute")

        n_rows, n_attrs = values.shape
        self.values: np.ndarray = values
        self.class_index: int = class_index % n_attrs

        if nominal is None:
            nominal = np.zeros(n_attrs, dtype=bool)
            # A class with labels is nominal
            nominal[self.class_index] = class_labels is not None
        self.nominal: np.ndarray = np.array(nominal, dtype=bool)
        if self.nominal.shape != (n_attrs,):
            raise ValueError("nominal mask must have one entry per attribute")

        self.weights: np.ndarray = (np.ones(n_rows) if weights is None
                                    else np.array(weights, dtype=float))
        self.index: np.ndarray = (np.arange(n_rows) if index is None
                                  else np.array(index, dtype=int))
        if len(self.weights) != n_rows or len(self.index) != n_rows:
            raise ValueError("weights and index must have one entry per row")

        self.attribute_names: List[str] = (list(attribute_names) if attribute_names is not None
                                           else [f"a{i}" for i in range(n_attrs)])
        self.class_labels: Optional[List[Any]] = (list(class_labels) if class_labels is not None
                                                  else None)

    # --- Schema ---

    @property
    def num_instances(self) -> int:
        return self.values.shape[0]

    def __len__(self) -> int:
        return self.num_instances

    @property
    def num_attributes(self) -> int:
        return self.values.shape[1]

    @property
    def class_is_numeric(self) -> bool:
        return not bool(self.nominal[self.class_index])

    @property
    def num_classes(self) -> int:
        """Number of class labels (1 for a numeric class)."""
        if self.class_is_numeric:
            return 1
        if self.class_labels is not None:
            return len(self.class_labels)
        if self.num_instances == 0:
            return 0
        return int(np.nanmax(self.values[:, self.class_index])) + 1

    @property
    def features(self) -> np.ndarray:
        """(n_rows, n_attributes - 1) matrix without the class column."""
        return np.delete(self.values, self.class_index, axis=1)

    @property
    def feature_nominal(self) -> np.ndarray:
        return np.delete(self.nominal, self.class_index)

    @property
    def class_values(self) -> np.ndarray:
        return self.values[:, self.class_index]

    # --- Row access ---

    def instance(self, position: int) -> Instance:
        return Instance(self.values[position], self.weights[position], self.class_index)

    def __iter__(self):
        for i in range(self.num_instances):
            yield self.instance(i)

    def equal_mask(self, target: Instance) -> np.ndarray:
        """
        Boolean mask of the rows value-equal to `target`.

        A row is equal when every non-class attribute holds the same value
        (or both are missing) and the weights match. The class is ignored.
        """
        feats = self.features
        target_feats = target.features
        same = (feats == target_feats) | (np.isnan(feats) & np.isnan(target_feats))
        return np.all(same, axis=1) & (self.weights == target.weight)

    # --- Construction and mutation ---

    def _like(self, values: np.ndarray, weights: np.ndarray, index: np.ndarray) -> "Dataset":
        return Dataset(values, self.class_index, self.nominal.copy(), weights, index,
                       self.attribute_names, self.class_labels)

    def copy(self) -> "Dataset":
        return self._like(self.values.copy(), self.weights.copy(), self.index.copy())

    def empty_copy(self) -> "Dataset":
        """A dataset with the same schema and no rows."""
        return self._like(np.empty((0, self.num_attributes)), np.empty(0), np.empty(0, dtype=int))

    def subset(self, positions: Sequence[int]) -> "Dataset":
        """New dataset holding the given rows, in the given order, with their origin tags."""
        positions = np.asarray(positions, dtype=int)
        return self._like(self.values[positions].copy(), self.weights[positions].copy(),
                          self.index[positions].copy())

    def with_index(self, index: Sequence[int]) -> "Dataset":
        """Copy of this dataset with a new origin index."""
        index = np.array(index, dtype=int)
        if len(index) != self.num_instances:
            raise ValueError(f"Index has {len(index)} entries for {self.num_instances} rows")
        return self._like(self.values.copy(), self.weights.copy(), index)

    def delete(self, position: int) -> None:
        """Remove one row together with its origin tag."""
        self.values = np.delete(self.values, position, axis=0)
        self.weights = np.delete(self.weights, position)
        self.index = np.delete(self.index, position)

    def append(self, instance: Instance, origin: int) -> None:
        """Add one row together with its origin tag."""
        self.values = np.vstack([self.values, instance.values.reshape(1, -1)])
        self.weights = np.append(self.weights, instance.weight)
        self.index = np.append(self.index, int(origin))

    # --- pandas interop ---

    @classmethod
    def from_frame(cls, df: pd.DataFrame, class_column: Optional[str] = None) -> "Dataset":
        """
        Builds a Dataset from a DataFrame.

        Numeric columns are kept as floats; any other column is treated as
        nominal and encoded by order of first appearance. The class column
        defaults to the last column.
        """
        if class_column is None:
            class_column = df.columns[-1]

        columns = list(df.columns)
        values = np.empty(df.shape, dtype=float)
        nominal = np.zeros(len(columns), dtype=bool)
        class_labels = None

        for j, col in enumerate(columns):
            series = df[col]
            if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
                values[:, j] = series.to_numpy(dtype=float)
            else:
                codes, uniques = pd.factorize(series)
                encoded = codes.astype(float)
                encoded[codes < 0] = np.nan
                values[:, j] = encoded
                nominal[j] = True
                if col == class_column:
                    class_labels = list(uniques)

        return cls(values, columns.index(class_column), nominal,
                   attribute_names=[str(c) for c in columns], class_labels=class_labels)

    def to_frame(self) -> pd.DataFrame:
        """DataFrame of the rows, class decoded to its labels, indexed by origin."""
        df = pd.DataFrame(self.values, columns=self.attribute_names, index=self.index)
        if self.class_labels is not None:
            class_name = self.attribute_names[self.class_index]
            labels = np.array(self.class_labels, dtype=object)
            codes = df[class_name].to_numpy()
            df[class_name] = [labels[int(c)] if not np.isnan(c) else None for c in codes]
        return df

    def __repr__(self) -> str:
        return (f"Dataset(rows={self.num_instances}, attributes={self.num_attributes}, "
                f"class_index={self.class_index})")
