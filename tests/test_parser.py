"""Tests for instance_selection.parser module."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from instance_selection.parser import (
    load_all_folds,
    load_arff,
    load_dataset,
    preprocess_frames,
)

ARFF_TEXT = """@relation toy
@attribute x numeric
@attribute colour {red,blue}
@attribute class {yes,no}
@data
0.0,red,yes
5.0,blue,no
10.0,?,yes
"""


class TestPreprocessFrames:
    """Tests for preprocess_frames."""

    def test_classification(self) -> None:
        """Test encoding, scaling and the nominal mask."""
        train_df = pd.DataFrame({
            "x": [0.0, 5.0, 10.0],
            "colour": ["red", "blue", "red"],
            "class": ["yes", "no", "yes"],
        })
        test_df = pd.DataFrame({"x": [20.0], "colour": ["green"], "class": ["no"]})

        train, test = preprocess_frames(train_df, test_df)

        np.testing.assert_allclose(train.values[:, 0], [0.0, 0.5, 1.0])
        np.testing.assert_array_equal(train.values[:, 1], [1, 0, 1])
        assert train.nominal.tolist() == [False, True, True]
        assert train.class_labels == ["no", "yes"]
        assert not train.class_is_numeric
        np.testing.assert_array_equal(train.class_values, [1, 0, 1])

        # Scaler fitted on train only; unseen category becomes -1
        assert test.values[0, 0] == pytest.approx(2.0)
        assert test.values[0, 1] == -1
        assert test.class_values[0] == 0

    def test_regression_class_untouched(self) -> None:
        """Test a numeric class is neither encoded nor scaled."""
        train_df = pd.DataFrame({"x": [0.0, 2.0], "y": [10.0, 30.0]})
        train, _ = preprocess_frames(train_df, train_df.iloc[:0])
        assert train.class_is_numeric
        np.testing.assert_array_equal(train.class_values, [10.0, 30.0])
        np.testing.assert_allclose(train.values[:, 0], [0.0, 1.0])

    def test_missing_numeric_imputed(self) -> None:
        """Test missing numeric values take the median."""
        train_df = pd.DataFrame({"x": [0.0, np.nan, 4.0, 10.0], "y": [1.0, 2.0, 3.0, 4.0]})
        train, _ = preprocess_frames(train_df, train_df.iloc[:0], normalize=False)
        assert train.values[1, 0] == pytest.approx(4.0)


class TestArffLoading:
    """Tests for the .arff readers."""

    def test_load_arff_decodes(self, tmp_path: Path) -> None:
        """Test nominal bytes are decoded and '?' becomes missing."""
        path = tmp_path / "toy.arff"
        path.write_text(ARFF_TEXT)
        df = load_arff(str(path))
        assert df["colour"].iloc[0] == "red"
        assert pd.isna(df["colour"].iloc[2])

    def test_load_dataset(self, tmp_path: Path) -> None:
        """Test a single file becomes a ready Dataset."""
        path = tmp_path / "toy.arff"
        path.write_text(ARFF_TEXT)
        ds = load_dataset(str(path))
        assert ds.num_instances == 3
        assert ds.attribute_names == ["x", "colour", "class"]
        assert ds.class_labels == ["no", "yes"]
        np.testing.assert_allclose(ds.values[:, 0], [0.0, 0.5, 1.0])
        assert not np.isnan(ds.values).any()

    def test_load_all_folds(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test folds are discovered by name and missing ones skipped."""
        folder = tmp_path / "toy"
        folder.mkdir()
        (folder / "toy.fold.000000.train.arff").write_text(ARFF_TEXT)
        (folder / "toy.fold.000000.test.arff").write_text(ARFF_TEXT)

        folds = load_all_folds("toy", str(tmp_path))

        assert len(folds) == 1
        train, test = folds[0]
        assert train.num_instances == 3
        assert test.num_instances == 3
        assert "Skipping" in capsys.readouterr().out
