"""
This script runs the Instance Selection (IS) experiments.

It does the following:
1.  For each configured dataset, loads its 10 pre-defined folds.
2.  For each fold:
    a. Applies every selection technique that suits the dataset's class
       type (ENN, ENNTh for classification; MI, RegENN for regression)
       to the *training set* (the Baseline keeps it whole).
    b. Saves the indices of the selected training rows as .npy files.
    c. Trains a k-NN on the *reduced* set.
    d. Tests it on the *original* test set (accuracy for classification,
       negative MSE for regression).
3.  Saves detailed fold-by-fold results and an aggregated summary,
    comparing performance (Score, Time, Storage).
"""

# --- Path Setup ---
from pathlib import Path
import sys
from typing import Dict, List, Any

try:
    SCRIPT_DIR = Path(__file__).resolve().parent
except NameError:
    SCRIPT_DIR = Path.cwd()

PROJECT_ROOT = SCRIPT_DIR.parent
DATA_DIR = PROJECT_ROOT / 'data' / 'datasets'
RESULTS_DIR = PROJECT_ROOT / 'results' / 'is_baseline'
# Indices of the selected rows per technique / dataset / fold
NPY_SAVE_DIR = PROJECT_ROOT / 'results' / 'is_selected_indices'

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# --- End Path Setup ---

import time
from datetime import datetime
import numpy as np
import pandas as pd
from sklearn.neighbors import KNeighborsClassifier, KNeighborsRegressor

from instance_selection.parser import load_all_folds
from instance_selection.dataset import Dataset
from instance_selection.filters import InstanceSelection, InstanceSelectionForRegression

# --- Experiment Configuration ---

# k of the k-NN evaluated on the reduced training sets
DATASET_CONFIGS: Dict[str, Dict[str, Any]] = {
    'pen-based': {'task': 'classification', 'k': 5},
    'adult': {'task': 'classification', 'k': 7},
    'housing': {'task': 'regression', 'k': 5},
}

# Selection techniques and their parameters, per task.
# 'Baseline' keeps the whole training fold.
BASELINE = 'Baseline'
SELECTION_TECHNIQUES: Dict[str, Dict[str, Dict[str, Any]]] = {
    'classification': {
        BASELINE: {},
        'ENN': {'k': 3},
        'ENNTh': {'k': 3, 'mu': 0.7},
    },
    'regression': {
        BASELINE: {},
        'MI': {'k': 6, 'alpha': 0.05},
        'RegENN': {'k': 9, 'alpha': 5.0},
    },
}


# -----------------------------


def build_filter(task: str, technique: str, params: Dict[str, Any]):
    if task == 'classification':
        return InstanceSelection(technique, **params)
    return InstanceSelectionForRegression(technique, **params)


def evaluate_knn(train: Dataset, test: Dataset, task: str, k: int) -> float:
    """
    Fits a k-NN on `train` and scores it on `test`.
    Accuracy for classification, negative mean squared error for regression.
    """
    k = min(k, len(train))
    if task == 'classification':
        knn = KNeighborsClassifier(n_neighbors=k)
        knn.fit(train.features, train.class_values)
        predictions = knn.predict(test.features)
        return float(np.mean(predictions == test.class_values))

    knn = KNeighborsRegressor(n_neighbors=k)
    knn.fit(train.features, train.class_values)
    predictions = knn.predict(test.features)
    return -float(np.mean((predictions - test.class_values) ** 2))


def run_is_experiments():
    """
    Main runner for the Instance Selection experiments.
    """
    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    NPY_SAVE_DIR.mkdir(parents=True, exist_ok=True)

    all_results: List[Dict[str, Any]] = []

    for dataset_name, config in DATASET_CONFIGS.items():
        task = config['task']
        print(f"\n{'=' * 80}")
        print(f"[IS Runner] Processing Dataset: {dataset_name.upper()} ({task}, k-NN k={config['k']})")
        print(f"{'=' * 80}\n")

        if not DATA_DIR.is_dir():
            print(f"Error: Data directory not found at {DATA_DIR}")
            print("Expected structure: ./data/datasets/pen-based/...")
            continue

        folds = load_all_folds(dataset_name, str(DATA_DIR))

        for technique_name, params in SELECTION_TECHNIQUES[task].items():
            print(f"\n  --- Testing IS Technique: {technique_name} {params} ---")

            npy_dataset_dir = NPY_SAVE_DIR / technique_name / dataset_name
            npy_dataset_dir.mkdir(parents=True, exist_ok=True)

            for fold_idx, (train, test) in enumerate(folds):
                print(f"\n    --- Fold {fold_idx} ({technique_name}) ---")

                # 1. Apply Instance Selection to the training fold
                if technique_name == BASELINE:
                    reduced = train
                    selection_time = 0.0
                    selected_index = train.index.tolist()
                else:
                    selection_filter = build_filter(task, technique_name, params)
                    reduced = selection_filter.filter(train)
                    selection_time = selection_filter.user_time
                    selected_index = selection_filter.output_index
                storage_pct = (len(reduced) / len(train)) * 100.0

                # 2. Save which training rows survived
                np.save(npy_dataset_dir / f"fold_{fold_idx}_index.npy",
                        np.array(selected_index, dtype=int))

                # 3. Evaluate k-NN trained on the *reduced* set
                if len(reduced) == 0:
                    print("      Warning: empty solution set, fold scored as NaN.")
                    score = float('nan')
                    predict_time = 0.0
                else:
                    predict_start = time.time()
                    score = evaluate_knn(reduced, test, task, config['k'])
                    predict_time = time.time() - predict_start

                total_time = selection_time + predict_time
                print(f"      → Fold {fold_idx} Metrics: "
                      f"Score={score:.4f}, "
                      f"Total Time={total_time:.2f}s, "
                      f"Storage={storage_pct:.1f}%")

                all_results.append({
                    'Dataset': dataset_name,
                    'Task': task,
                    'Fold': fold_idx,
                    'K': config['k'],
                    'IS_Technique': technique_name,
                    'Params': str(params),
                    'Score': score,
                    'Selection_Time_s': selection_time,
                    'Total_Time_s': total_time,
                    'Storage_percent': storage_pct,
                    'Original_Train_Size': len(train),
                    'Reduced_Train_Size': len(reduced),
                })

    if not all_results:
        print("[IS Runner] No results collected.")
        return None, None

    # --- Save final results ---
    fold_results_df = pd.DataFrame(all_results)

    summary_df = fold_results_df.groupby(['Dataset', 'IS_Technique']).agg({
        'Score': ['mean', 'std'],
        'Total_Time_s': ['mean', 'std'],
        'Storage_percent': ['mean', 'std']
    }).reset_index()

    summary_df.columns = [
        'Dataset', 'IS_Technique',
        'Mean_Score', 'Std_Score',
        'Mean_Time_s', 'Std_Time_s',
        'Mean_Storage_pct', 'Std_Storage_pct'
    ]

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    fold_file = RESULTS_DIR / f'is_detailed_fold_results_{timestamp}.csv'
    summary_file = RESULTS_DIR / f'is_aggregated_results_{timestamp}.csv'

    fold_results_df.to_csv(fold_file, index=False)
    summary_df.to_csv(summary_file, index=False)

    print(f"\n[IS Runner] Saved fold-level results to: {fold_file.relative_to(PROJECT_ROOT)}")
    print(f"[IS Runner] Saved summary results to: {summary_file.relative_to(PROJECT_ROOT)}\n")

    print(f"{'-' * 80}")
    print("Instance Selection Experiment Summary (mean ± std)")
    print(f"{'-' * 80}")
    print(f"  {'Dataset':<12} | {'Technique':<8} | "
          f"{'Score':<20} | {'Time (s)':<14} | {'Storage %':<14}")
    print(f"  {'-' * 80}")
    for _, row in summary_df.iterrows():
        score_str = f"{row['Mean_Score']:.4f}±{row['Std_Score']:.4f}"
        time_str = f"{row['Mean_Time_s']:.2f}±{row['Std_Time_s']:.2f}"
        storage_str = f"{row['Mean_Storage_pct']:.1f}±{row['Std_Storage_pct']:.1f}"
        print(f"  {row['Dataset'].upper():<12} | {row['IS_Technique']:<8} | "
              f"{score_str:<20} | {time_str:<14} | {storage_str:<14}")
    print(f"{'-' * 80}\n")

    return fold_results_df, summary_df


# --- Main execution ---
if __name__ == "__main__":
    print("\n--- Instance Selection (IS) Experiment Runner ---")
    try:
        run_is_experiments()
        print("\n[IS Runner] All IS experiments completed successfully.")
    except KeyboardInterrupt:
        print(f"\n[IS Runner] Experiment interrupted by user.")
        print(f"Partial results may be saved in '{RESULTS_DIR}'.")
