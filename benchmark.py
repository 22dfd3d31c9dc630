"""
Solver comparison on a single point set.

Every solver is run on the same graph; the genetic algorithm, the only
stochastic solver, is repeated with consecutive seeds. Results are
collected into pandas DataFrames and can be written to CSV.
"""

import argparse
import os
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from brute_force import MAX_BRUTE_FORCE_POINTS
from data_generator import generate_circle_points, generate_random_points, load_graph
from solvers import SOLVERS, create_solver
from tsp_core import Graph


# ================================
# CONFIGURATION
# ================================
OUTPUT_DIR = "benchmarks"
RUNS_PER_SOLVER = 5
BASE_SEED = 42
STOCHASTIC_SOLVERS = {"ga"}
DEFAULT_SOLVER_PARAMS: Dict[str, dict] = {
    "nn": {},
    "2opt": {"max_iterations": 1000},
    "ga": {"population_size": 100, "max_generations": 300, "mutation_rate": 0.02},
    "bf": {},
}


def default_solver_names(graph: Graph) -> List[str]:
    """All registered solvers, minus brute force when the graph is too large for it."""
    names = list(SOLVERS)
    if len(graph) > MAX_BRUTE_FORCE_POINTS:
        names.remove("bf")
    return names


# =============================================================
# RUNS
# =============================================================
def run_repeated_trials(
    graph: Graph,
    solver_name: str,
    params: Optional[dict] = None,
    n_runs: int = RUNS_PER_SOLVER,
    base_seed: int = BASE_SEED,
    progress: bool = True
) -> List[dict]:
    """Run one solver ``n_runs`` times (once if deterministic) and return one row per run."""
    if solver_name not in STOCHASTIC_SOLVERS:
        n_runs = 1

    runs = range(n_runs)
    if progress:
        runs = tqdm(runs, desc=solver_name, leave=False)

    rows = []
    for r in runs:
        kwargs = dict(DEFAULT_SOLVER_PARAMS.get(solver_name, {}))
        kwargs.update(params or {})
        if solver_name in STOCHASTIC_SOLVERS:
            kwargs["seed"] = base_seed + r

        solver = create_solver(solver_name, **kwargs)
        route = solver.solve(graph)

        rows.append({
            "solver": solver.get_algorithm_name(),
            "key": solver_name,
            "run": r,
            "distance": route.get_total_distance(),
            "time": solver.last_execution_time,
            "valid": route.is_valid_tsp_route(),
            "exact": solver.is_exact_algorithm(),
        })
    return rows


def compare_solvers(
    graph: Graph,
    solver_names: Optional[List[str]] = None,
    n_runs: int = RUNS_PER_SOLVER,
    params: Optional[Dict[str, dict]] = None,
    base_seed: int = BASE_SEED,
    progress: bool = True
) -> pd.DataFrame:
    """Run every requested solver and return the per-run results."""
    names = solver_names if solver_names is not None else default_solver_names(graph)
    params = params or {}

    rows = []
    for name in names:
        rows.extend(run_repeated_trials(
            graph, name, params.get(name), n_runs=n_runs, base_seed=base_seed, progress=progress
        ))
    return pd.DataFrame(rows)


def summarize(runs: pd.DataFrame) -> pd.DataFrame:
    """
    One row per solver: best/average/std distance, average time, and
    quality = best distance of any solver / solver's average distance.
    """
    rows = []
    for key, sub in runs.groupby("key", sort=False):
        distances = sub["distance"].to_numpy()
        rows.append({
            "solver": sub["solver"].iloc[0],
            "key": key,
            "runs": len(sub),
            "best_dist": float(np.min(distances)),
            "avg_dist": float(np.mean(distances)),
            "std_dist": float(np.std(distances)),
            "avg_time": float(sub["time"].mean()),
            "exact": bool(sub["exact"].iloc[0]),
            "all_valid": bool(sub["valid"].all()),
        })

    summary = pd.DataFrame(rows)
    if not summary.empty:
        best = summary["best_dist"].min()
        summary["quality"] = best / summary["avg_dist"] * 100
    return summary


def print_summary(summary: pd.DataFrame):
    print("\n" + "=" * 70)
    print("FINAL RESULTS SUMMARY")
    print("=" * 70)
    print(f"{'Method':<22} {'Best':<12} {'Average':<12} {'Time (s)':<12} {'Quality':<10}")
    print("-" * 70)
    for _, row in summary.iterrows():
        print(f"{row['solver']:<22} {row['best_dist']:<12.2f} {row['avg_dist']:<12.2f} "
              f"{row['avg_time']:<12.4f} {row['quality']:<.1f}%")
    print("=" * 70)

    best = summary.loc[summary["best_dist"].idxmin()]
    fastest = summary.loc[summary["avg_time"].idxmin()]
    print(f"\nBest Solution: {best['solver']} with distance {best['best_dist']:.2f}")
    print(f"Fastest Method: {fastest['solver']} ({fastest['avg_time']:.4f}s)")


def save_results(runs: pd.DataFrame, summary: pd.DataFrame, output_dir: str = OUTPUT_DIR):
    os.makedirs(output_dir, exist_ok=True)
    runs.to_csv(os.path.join(output_dir, "runs.csv"), index=False)
    summary.to_csv(os.path.join(output_dir, "summary.csv"), index=False)
    print(f"\nSaved: {os.path.join(output_dir, 'runs.csv')}, {os.path.join(output_dir, 'summary.csv')}")


# =============================================================
# MAIN
# =============================================================
def main(argv=None):
    parser = argparse.ArgumentParser(description="Compare TSP solvers on one point set")
    parser.add_argument('--cities', type=int, default=8, help='Number of points to generate (default: 8)')
    parser.add_argument('--pattern', choices=['random', 'circle'], default='random')
    parser.add_argument('--seed', type=int, default=BASE_SEED, help='Seed for point generation and GA runs')
    parser.add_argument('--load', type=str, help='Load points from a file instead of generating them')
    parser.add_argument('--runs', type=int, default=RUNS_PER_SOLVER, help='Runs per stochastic solver')
    parser.add_argument('--solvers', nargs='+', choices=list(SOLVERS), help='Solvers to compare')
    parser.add_argument('--output', type=str, default=OUTPUT_DIR, help='Directory for CSV results')
    args = parser.parse_args(argv)

    if args.load:
        graph = load_graph(args.load)
    elif args.pattern == 'circle':
        graph = Graph(generate_circle_points(args.cities))
    else:
        graph = Graph(generate_random_points(args.cities, seed=args.seed))

    print(f"\nBenchmarking on {len(graph)} points...")
    runs = compare_solvers(graph, args.solvers, n_runs=args.runs, base_seed=args.seed)
    summary = summarize(runs)
    print_summary(summary)
    save_results(runs, summary, args.output)


if __name__ == "__main__":
    main()
