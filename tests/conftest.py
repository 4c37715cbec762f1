"""Pytest configuration and shared fixtures for instance selection tests."""

import numpy as np
import pytest

from instance_selection.dataset import Dataset


@pytest.fixture
def line_classification() -> Dataset:
    """Four points on a line, classes A A B B (codes 0 0 1 1)."""
    values = np.array([
        [0.0, 0],
        [1.0, 0],
        [2.0, 1],
        [10.0, 1],
    ])
    return Dataset(values, class_labels=["A", "B"])


@pytest.fixture
def two_clusters() -> Dataset:
    """Two well separated 2-D clusters with one mislabelled point in each."""
    values = np.array([
        [0.0, 0.0, 0],
        [0.1, 0.0, 0],
        [0.0, 0.1, 0],
        [0.1, 0.1, 1],  # noise
        [0.05, 0.05, 0],
        [5.0, 5.0, 1],
        [5.1, 5.0, 1],
        [5.0, 5.1, 1],
        [5.1, 5.1, 0],  # noise
        [5.05, 5.05, 1],
    ])
    return Dataset(values, class_labels=["neg", "pos"])


@pytest.fixture
def line_regression() -> Dataset:
    """Five points on a line, the last one with an outlying output."""
    values = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [2.0, 0.0],
        [3.0, 0.0],
        [4.0, 9.0],
    ])
    return Dataset(values)


@pytest.fixture
def smooth_regression() -> Dataset:
    """Twenty rows of a smooth function of two features."""
    rng = np.random.default_rng(7)
    features = rng.uniform(0.0, 1.0, size=(20, 2))
    target = 2.0 * features[:, 0] + features[:, 1]
    return Dataset(np.column_stack([features, target]))
