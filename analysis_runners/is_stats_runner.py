"""
This script performs the statistical analysis comparing the Instance
Selection (IS) techniques against the full training set.

It does the following:
1.  Loads the latest detailed fold-level results written by
    'experiment_runners/is_runner.py'.
2.  For each dataset, it builds a (fold x technique) matrix with the
    'Baseline' and every IS technique run on that dataset
    (ENN, ENNTh for classification; MI, RegENN for regression).
3.  It performs this analysis for Score, Efficiency (Time), and Storage.
4.  It performs a Friedman test and a Nemenyi post-hoc test for each metric.
5.  It saves bar charts, CD diagrams, and summary tables.
"""

import pandas as pd
import scipy.stats as sp_stats
import scikit_posthocs as spc
import matplotlib.pyplot as plt
from pathlib import Path
import sys
from typing import Dict, List, Optional, Tuple

# --- Configuration ---
try:
    SCRIPT_DIR = Path(__file__).parent.resolve()
except NameError:
    SCRIPT_DIR = Path.cwd()

PROJECT_ROOT = SCRIPT_DIR.parent
RESULTS_IS_DIR = PROJECT_ROOT / "results" / "is_baseline"
# This is where the plots and final CSVs will be saved
OUTPUT_DIR = RESULTS_IS_DIR / "statistics"

METRICS = ['Score', 'Total_Time_s', 'Storage_percent']
# Score is accuracy or negative MSE: higher is better for both
LOWER_IS_BETTER = {'Total_Time_s', 'Storage_percent'}
BASELINE = 'Baseline'
NUM_FOLDS = 10
ALPHA = 0.05
# ---------------------


def find_latest_results(results_dir: Path) -> Path:
    """Newest fold-level results file of the IS runner."""
    candidates = sorted(results_dir.glob("is_detailed_fold_results_*.csv"))
    if not candidates:
        raise FileNotFoundError(f"No IS results found in {results_dir}")
    return candidates[-1]


def build_comparison_matrix(df: pd.DataFrame, dataset: str, metric: str) -> pd.DataFrame:
    """
    Builds the final (fold x technique) matrix for one dataset and one metric.
    The baseline, when present, is the first column.
    """
    print(f"  Building matrix for: {dataset.upper()} / {metric}")

    dataset_df = df[df['Dataset'].str.lower() == dataset.lower()]
    techniques: List[str] = list(dict.fromkeys(dataset_df['IS_Technique']))
    if BASELINE in techniques:
        techniques.remove(BASELINE)
        techniques.insert(0, BASELINE)

    matrix = pd.DataFrame(index=range(NUM_FOLDS))
    for technique in techniques:
        scores = dataset_df[dataset_df['IS_Technique'] == technique].sort_values(by='Fold')[metric]
        if len(scores) != NUM_FOLDS:
            print(f"  Warning: Found {len(scores)} scores for {technique} {metric}, expected {NUM_FOLDS}.")
        matrix[technique] = scores.reset_index(drop=True)

    matrix = matrix.dropna(axis=1, how='all')  # Drop techniques that never ran

    if matrix.isnull().values.any():
        print(f"  Warning: Missing values detected in matrix for {metric}. Dropping incomplete folds.")
        matrix = matrix.dropna(axis=0, how='any')

    return matrix


def plot_top_ranks_bar_chart(avg_ranks: pd.Series, metric_name: str, dataset_name: str):
    """
    Plots a horizontal bar chart of techniques by average rank.
    """
    print(f"  Generating Bar Chart for {metric_name} ({dataset_name})...")
    try:
        sorted_ranks = avg_ranks.sort_values(ascending=True)

        plt.figure(figsize=(10, max(2, len(sorted_ranks) * 0.5)))
        plt.barh(sorted_ranks.index, sorted_ranks.values, color='slateblue')
        plt.gca().invert_yaxis()  # Best at top
        plt.xlabel("Average Rank (Lower is Better)")
        plt.title(f"Technique Ranks for {metric_name} ({dataset_name})")
        plt.grid(axis='x', linestyle='--', alpha=0.7)

        for index, value in enumerate(sorted_ranks):
            plt.text(value, index, f' {value:.2f}', va='center')

        full_path = OUTPUT_DIR / f"{dataset_name}_bar_chart_ranks_{metric_name}.png"
        plt.savefig(full_path, bbox_inches='tight')
        print(f"  Saved bar chart to {full_path.relative_to(PROJECT_ROOT)}")
        plt.close()

    except (OSError, ValueError) as e:
        print(f"  Error generating bar chart: {e}")
        plt.close('all')


def plot_cd_diagram(avg_ranks: pd.Series, nemenyi_results_df: pd.DataFrame, metric_name: str, dataset_name: str):
    """
    Plots a Critical Difference diagram.
    """
    print(f"  Generating Critical Difference Diagram for {metric_name} ({dataset_name})...")

    try:
        filtered_ranks = avg_ranks.sort_values(ascending=True)
        filtered_sig_matrix = nemenyi_results_df.loc[filtered_ranks.index, filtered_ranks.index]

        fig = plt.figure(figsize=(10, max(4, len(filtered_ranks) * 0.4)))
        ax = fig.add_subplot(111)

        spc.critical_difference_diagram(
            ranks=filtered_ranks,
            sig_matrix=filtered_sig_matrix,
            ax=ax,
            label_props={'fontsize': 10}
        )

        ax.set_title(f"Critical Difference Diagram for {metric_name} ({dataset_name})", pad=20)
        plt.tight_layout()

        full_path = OUTPUT_DIR / f"{dataset_name}_cd_diagram_{metric_name}.png"
        plt.savefig(full_path, bbox_inches='tight')
        print(f"  Saved CD diagram to {full_path.relative_to(PROJECT_ROOT)}")
        plt.close()

    except (OSError, ValueError, KeyError) as e:
        print(f"  Error generating CD diagram: {e}")
        plt.close('all')


def run_statistical_analysis(
        matrix: pd.DataFrame,
        metric: str,
        dataset: str
) -> Tuple[Optional[pd.Series], Optional[pd.DataFrame]]:
    """
    Runs the Friedman and Nemenyi tests for a single metric.
    """
    num_techniques = len(matrix.columns)
    # The Friedman test needs at least three related samples
    if num_techniques < 3:
        print(f"  Only {num_techniques} techniques found. Skipping stats.")
        return None, None

    print(f"  Running Friedman test on {num_techniques} techniques...")

    # --- 1. Friedman Test ---
    stat, p_friedman = sp_stats.friedmanchisquare(*[matrix[col] for col in matrix.columns])
    print(f"  Friedman Test: chi2={stat:.4f}, p-value={p_friedman:.6e}")

    # --- 2. Calculate Ranks ---
    lower_is_better = metric in LOWER_IS_BETTER
    avg_ranks = matrix.rank(axis=1, ascending=lower_is_better, method='average').mean()
    avg_ranks = avg_ranks.sort_values()

    # --- 3. Run Post-Hoc and Plots ---
    if p_friedman < ALPHA:
        print(f"  Result: Significant difference found (p < {ALPHA}). Running post-hoc...")
        nemenyi_results = spc.posthoc_nemenyi_friedman(matrix.to_numpy())
        nemenyi_results.columns = matrix.columns
        nemenyi_results.index = matrix.columns

        n_path = OUTPUT_DIR / f"{dataset}_table_nemenyi_{metric}.csv"
        nemenyi_results.to_csv(n_path, float_format="%.6f")

        plot_cd_diagram(avg_ranks, nemenyi_results, metric, dataset)
    else:
        print(f"  Result: No significant difference found (p >= {ALPHA}).")

    plot_top_ranks_bar_chart(avg_ranks, metric, dataset)

    return avg_ranks, pd.DataFrame([{'Metric': metric, 'Friedman_chi2': stat, 'p_value': p_friedman}])


# --- Main execution ---
def main():
    pd.set_option('display.max_rows', 100)

    print("\n--- Instance Selection Statistical Analysis ---")

    try:
        results_file = find_latest_results(RESULTS_IS_DIR)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("Please run 'experiment_runners/is_runner.py' first.")
        sys.exit(1)

    print(f"[Stats-IS] Using IS results file: {results_file.name}")
    data = pd.read_csv(results_file)
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    for dataset in sorted(data['Dataset'].unique()):
        print(f"\n{'-'*80}\n[Stats-IS] STARTING ANALYSIS FOR DATASET: {dataset.upper()}\n{'-'*80}")

        all_ranks: Dict[str, pd.Series] = {}
        all_friedman = []

        for metric in METRICS:
            print(f"\n--- Analyzing Metric: {metric} ---")

            matrix = build_comparison_matrix(data, dataset, metric)
            if matrix.empty or matrix.shape[1] < 2:
                print(f"  Could not build matrix for {metric}. Skipping.")
                continue

            avg_ranks, friedman_res = run_statistical_analysis(matrix, metric, dataset)

            if avg_ranks is not None:
                all_ranks[metric] = avg_ranks
                all_friedman.append(friedman_res)

        # --- Save Summary Tables ---
        if all_friedman:
            friedman_summary = pd.concat(all_friedman, ignore_index=True)
            f_path = OUTPUT_DIR / f"{dataset}_table_friedman_summary.csv"
            friedman_summary.to_csv(f_path, index=False, float_format="%.6f")
            print(f"\nSaved Friedman summary to {f_path.relative_to(PROJECT_ROOT)}")
            print(friedman_summary.to_string(index=False))

        if all_ranks:
            ranks_summary = pd.DataFrame(all_ranks)
            ranks_summary.columns = [f"{c}_AvgRank" for c in ranks_summary.columns]
            r_path = OUTPUT_DIR / f"{dataset}_table_avg_ranks.csv"
            ranks_summary.to_csv(r_path, float_format="%.3f")
            print(f"\nSaved Avg. Ranks to {r_path.relative_to(PROJECT_ROOT)}")
            sort_column = ranks_summary.columns[0]
            print(ranks_summary.sort_values(by=sort_column).to_string(float_format="%.3f"))

    print("\n[Stats-IS] IS analysis complete.")


if __name__ == "__main__":
    main()
