"""
This file handles data loading and preprocessing of .arff files into
Dataset objects ready for instance selection. It includes functions for:
- Loading .arff files into pandas DataFrames.
- Identifying numeric vs. categorical features.
- Imputing missing values (median for numeric, mode for categorical).
- Label encoding categorical features (and a categorical class).
- Normalizing numeric features to a [0, 1] range.
- An orchestrator to process the 10 train/test folds of a dataset.

A numeric class column is kept as is, so regression datasets go through
the same pipeline.
"""

from scipy.io import arff
import pandas as pd
import numpy as np
import os
from sklearn.preprocessing import LabelEncoder
from sklearn.preprocessing import MinMaxScaler
from typing import List, Tuple, Dict, Optional

from instance_selection.dataset import Dataset

# --- Type Aliases for clarity ---
ProcessedFold = Tuple[Dataset, Dataset]
EncoderDict = Dict[str, LabelEncoder]


def load_arff(filepath: str) -> pd.DataFrame:
    """
    Loads an .arff file from the given path into a pandas DataFrame.

    Nominal columns are loaded by scipy as bytes; they are decoded into
    'utf-8' strings, and the '?' missing marker becomes NaN.
    """
    data, meta = arff.loadarff(filepath)
    df = pd.DataFrame(data)

    for col in df.columns:
        if df[col].dtype == object:
            df[col] = df[col].str.decode('utf-8')
            df.loc[df[col] == '?', col] = np.nan

    return df


def get_class_column_name(df: pd.DataFrame) -> str:
    """
    The class is assumed to be the last column.
    """
    return df.columns[-1]


def identify_column_types(df: pd.DataFrame, class_column: str) -> Tuple[List[str], List[str]]:
    """
    Separates features into numeric and categorical lists,
    excluding the class column.
    """
    feature_columns = [col for col in df.columns if col != class_column]

    numeric_cols = []
    categorical_cols = []

    for col in feature_columns:
        if pd.api.types.is_numeric_dtype(df[col]):
            numeric_cols.append(col)
        else:
            categorical_cols.append(col)

    return numeric_cols, categorical_cols


def handle_missing_values(df: pd.DataFrame, numeric_cols: List[str], categorical_cols: List[str]) -> pd.DataFrame:
    """
    Imputes missing values in the DataFrame.
    - Numeric: Uses median, which is more robust to outliers than the mean.
    - Categorical: Uses mode (most frequent value).
    """
    df = df.copy()

    for col in numeric_cols:
        if df[col].isnull().any():
            median_value = df[col].median()
            df[col] = df[col].fillna(median_value)

    for col in categorical_cols:
        if df[col].isnull().any():
            # .mode()[0] selects the first mode if there are multiple
            mode_value = df[col].mode()[0]
            df[col] = df[col].fillna(mode_value)

    return df


def encode_categorical_variables(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    categorical_cols: List[str],
    class_column: str
) -> Tuple[pd.DataFrame, pd.DataFrame, EncoderDict]:
    """
    Applies LabelEncoder to the categorical features and, when it is not
    numeric, to the class column. Fits on the training data only.

    Feature categories unseen in training are mapped to -1.
    """
    train_df = train_df.copy()
    test_df = test_df.copy()
    encoders: EncoderDict = {}

    for col in categorical_cols:
        encoder = LabelEncoder()
        train_df[col] = encoder.fit_transform(train_df[col].astype(str))

        known = set(encoder.classes_)
        test_df[col] = [
            encoder.transform([value])[0] if value in known else -1
            for value in test_df[col].astype(str)
        ]
        encoders[col] = encoder

    if not pd.api.types.is_numeric_dtype(train_df[class_column]):
        class_encoder = LabelEncoder()
        train_df[class_column] = class_encoder.fit_transform(train_df[class_column].astype(str))
        # The test set is assumed not to contain unseen class labels
        test_df[class_column] = class_encoder.transform(test_df[class_column].astype(str))
        encoders[class_column] = class_encoder

    return train_df, test_df, encoders


def normalize_numeric_features(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    numeric_cols: List[str]
) -> Tuple[pd.DataFrame, pd.DataFrame, Optional[MinMaxScaler]]:
    """
    Applies MinMaxScaler to scale features to the [0, 1] range.
    Fit on the training data only, so no information leaks from the test set.
    """
    if not numeric_cols:
        return train_df, test_df, None

    train_df = train_df.copy()
    test_df = test_df.copy()

    scaler = MinMaxScaler(feature_range=(0, 1))
    train_df[numeric_cols] = scaler.fit_transform(train_df[numeric_cols])
    if len(test_df):
        test_df[numeric_cols] = scaler.transform(test_df[numeric_cols])

    return train_df, test_df, scaler


def to_dataset(df: pd.DataFrame, class_column: str, categorical_cols: List[str],
               encoders: EncoderDict) -> Dataset:
    """
    Wraps an encoded DataFrame in a Dataset, keeping the nominal mask and
    the class labels.
    """
    columns = list(df.columns)
    nominal = [col in categorical_cols for col in columns]

    class_labels = None
    if class_column in encoders:
        nominal[columns.index(class_column)] = True
        class_labels = list(encoders[class_column].classes_)

    return Dataset(df.to_numpy(dtype=float), columns.index(class_column), nominal,
                   attribute_names=[str(c) for c in columns], class_labels=class_labels)


def preprocess_frames(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    class_column: Optional[str] = None,
    normalize: bool = True
) -> ProcessedFold:
    """
    Runs the preprocessing pipeline on a train/test pair of DataFrames.
    """
    if class_column is None:
        class_column = get_class_column_name(train_df)

    numeric_cols, categorical_cols = identify_column_types(train_df, class_column)

    train_df = handle_missing_values(train_df, numeric_cols, categorical_cols)
    test_df = handle_missing_values(test_df, numeric_cols, categorical_cols)

    train_df, test_df, encoders = encode_categorical_variables(
        train_df, test_df, categorical_cols, class_column
    )

    # Only numeric features are scaled, never the class
    if normalize:
        train_df, test_df, _ = normalize_numeric_features(train_df, test_df, numeric_cols)

    train = to_dataset(train_df, class_column, categorical_cols, encoders)
    test = to_dataset(test_df, class_column, categorical_cols, encoders)
    return train, test


def load_dataset(filepath: str, class_column: Optional[str] = None, normalize: bool = True) -> Dataset:
    """
    Loads and preprocesses a single .arff file.
    """
    df = load_arff(filepath)
    train, _ = preprocess_frames(df, df.iloc[:0], class_column, normalize)
    return train


def preprocess_fold(
    train_path: str,
    test_path: str,
    class_column: Optional[str] = None
) -> ProcessedFold:
    """
    Loads and preprocesses one train/test fold.
    """
    train_df = load_arff(train_path)
    test_df = load_arff(test_path)
    return preprocess_frames(train_df, test_df, class_column)


def load_all_folds(
    dataset_name: str,
    data_directory: str,
    class_column: Optional[str] = None
) -> List[ProcessedFold]:
    """
    Loads and preprocesses the 10 folds of a dataset, expecting the file
    naming convention '{dataset_name}.fold.{fold_num:06d}.train.arff'.
    """
    all_folds: List[ProcessedFold] = []

    for fold_num in range(10):
        train_file = f"{dataset_name}.fold.{fold_num:06d}.train.arff"
        test_file = f"{dataset_name}.fold.{fold_num:06d}.test.arff"

        train_path = os.path.join(data_directory, dataset_name, train_file)
        test_path = os.path.join(data_directory, dataset_name, test_file)

        if not os.path.exists(train_path) or not os.path.exists(test_path):
            print(f"Warning: Files for fold {fold_num+1} not found. Skipping.")
            print(f"  Tried path: {train_path}")
            continue

        print(f"[Parser] Processing fold {fold_num+1}/10...")
        all_folds.append(preprocess_fold(train_path, test_path, class_column))

    print(f"\nSuccessfully loaded and processed {len(all_folds)} folds for dataset '{dataset_name}'.")
    return all_folds
