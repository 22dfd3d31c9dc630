"""
TSP Solver - Main Application
Command-line driver: build a point set, run one solver or compare all of
them, print the result and optionally plot or save it.
"""

import argparse
import os
import sys
from typing import List, Optional

from benchmark import compare_solvers, print_summary, summarize
from data_generator import (
    generate_circle_points,
    generate_random_points,
    load_graph,
    save_points,
    save_route,
)
from solvers import SOLVERS, create_solver
from tsp_core import Graph, Route
from tsp_exceptions import TSPException
from visualization import TSPVisualizer


def build_graph(args) -> Graph:
    if args.load:
        print(f"\nLoading points from {args.load}...")
        return load_graph(args.load)

    print(f"\nGenerating {args.cities} points in {args.pattern} pattern...")
    if args.pattern == 'circle':
        return Graph(generate_circle_points(args.cities, radius=50))
    return Graph(generate_random_points(args.cities, width=100, height=100, seed=args.seed))


def solver_params(args) -> dict:
    """Solver keyword arguments taken from the command line."""
    if args.solver == 'nn':
        return {"start_index": args.start}
    if args.solver == '2opt':
        return {"max_iterations": args.max_iterations}
    if args.solver == 'ga':
        return {
            "population_size": args.population,
            "max_generations": args.generations,
            "mutation_rate": args.mutation_rate,
            "seed": args.seed,
        }
    return {}


def benchmark_params(args) -> dict:
    """Per-solver overrides for benchmark mode."""
    return {
        "2opt": {"max_iterations": args.max_iterations},
        "ga": {
            "population_size": args.population,
            "max_generations": args.generations,
            "mutation_rate": args.mutation_rate,
        },
    }


def describe_route(route: Route) -> List[str]:
    lines = []
    for i, point in enumerate(route.points(), 1):
        lines.append(f"  {i:>3}. {point.name or point.id:<12} ({point.x:.2f}, {point.y:.2f})")
    return lines


def convergence_plot_path(route_plot: Optional[str]) -> Optional[str]:
    """``tour.png`` -> ``tour_convergence.png``; None when plots are shown instead."""
    if not route_plot:
        return None
    root, ext = os.path.splitext(route_plot)
    return f"{root}_convergence{ext or '.png'}"


def run_single_solver(graph: Graph, args, visualize: bool = True) -> Route:
    """Run the solver selected with --solver and report the route."""
    solver = create_solver(args.solver, **solver_params(args))

    print("\n" + "=" * 70)
    print(f"{solver.get_algorithm_name().upper()}")
    print("=" * 70)
    print(f"Description: {solver.get_description()}")
    print(f"Complexity:  {solver.get_time_complexity()}")
    print(f"Exact:       {'yes' if solver.is_exact_algorithm() else 'no (heuristic)'}")

    route = solver.solve(graph)

    print(f"\nDistance: {route.total_distance:.4f}")
    print(f"Time:     {route.calculation_time:.4f}s")
    print(f"Valid:    {route.is_valid_tsp_route()}")
    print("\nRoute order:")
    for line in describe_route(route):
        print(line)

    if args.save_route:
        save_route(args.save_route, route)
        print(f"\nRoute saved to {args.save_route}")

    if visualize:
        visualizer = TSPVisualizer(show=args.save_plot is None)
        visualizer.plot_route(route, title=f"{solver.get_algorithm_name()} Solution", save_path=args.save_plot)
        history = getattr(solver, "best_distance_history", None) or getattr(solver, "history", None)
        if history and len(history) > 1:
            visualizer.plot_convergence(history, title=f"{solver.get_algorithm_name()} Progress",
                                        save_path=convergence_plot_path(args.save_plot))

    return route


def main(argv=None) -> int:
    """Main entry point for the TSP solver application."""
    parser = argparse.ArgumentParser(
        description="TSP Solver - Solve the Traveling Salesman Problem using multiple algorithms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare all solvers on 8 random points
  python main.py --benchmark --cities 8

  # Run the genetic algorithm on 30 points
  python main.py --solver ga --cities 30 --generations 500

  # 2-opt on points loaded from a file, saving the tour
  python main.py --solver 2opt --load points.txt --save-route tour.txt --no-viz
        """
    )

    parser.add_argument('--benchmark', action='store_true', help='Compare all solvers')
    parser.add_argument('--solver', type=str, choices=list(SOLVERS),
                        help='Run one solver (nn=Nearest Neighbor, 2opt=2-Opt, ga=Genetic, bf=Brute Force)')
    parser.add_argument('--cities', type=int, default=10, help='Number of points to generate (default: 10)')
    parser.add_argument('--pattern', type=str, choices=['random', 'circle'], default='random',
                        help='Point placement pattern (default: random)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for point generation and the GA')
    parser.add_argument('--load', type=str, help='Load points from a text file')
    parser.add_argument('--save-points', type=str, help='Write the point set to a text file')
    parser.add_argument('--save-route', type=str, help='Write the resulting route to a text file')
    parser.add_argument('--save-plot', type=str, help='Save the route plot instead of showing it')
    parser.add_argument('--start', type=int, default=None, help='Nearest neighbor start index (default: try all)')
    parser.add_argument('--max-iterations', type=int, default=1000, help='2-opt pass limit')
    parser.add_argument('--population', type=int, default=100, help='GA population size')
    parser.add_argument('--generations', type=int, default=500, help='GA generations')
    parser.add_argument('--mutation-rate', type=float, default=0.01, help='GA mutation rate')
    parser.add_argument('--runs', type=int, default=5, help='GA runs in benchmark mode')
    parser.add_argument('--no-viz', action='store_true', help='Disable visualizations')

    args = parser.parse_args(argv)

    try:
        graph = build_graph(args)
        print(f"Graph: {graph}")

        if args.save_points:
            save_points(args.save_points, graph)
            print(f"Points saved to {args.save_points}")

        if args.solver and not args.benchmark:
            run_single_solver(graph, args, visualize=not args.no_viz)
        else:
            if not args.solver:
                print("\nNo solver specified. Running benchmark...")
            runs = compare_solvers(graph, n_runs=args.runs, params=benchmark_params(args),
                                   base_seed=args.seed if args.seed is not None else 42)
            print_summary(summarize(runs))
    except TSPException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
