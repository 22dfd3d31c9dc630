"""
2-Opt Local Search Solver
Improves an initial route by reversing segments while doing so shortens it.
"""

import time
from typing import List, Optional

from nearest_neighbor import NearestNeighborTSP
from tsp_algorithm import TSPAlgorithm
from tsp_core import Graph, Route
from tsp_exceptions import InvalidGraphError, InvalidInputError

# Smallest length gain that counts as an improvement.
IMPROVEMENT_EPSILON = 1e-10


class TwoOptTSP(TSPAlgorithm):
    """
    2-opt local search wrapped around an initial-solution solver.

    Each pass scans every pair of non-adjacent edges (i, i+1) and (j, j+1)
    of the cycle. A swap is applied as soon as it shortens the route and the
    scan continues on the modified route (first improvement). Passes repeat
    until one finds nothing, ``max_iterations`` passes have run, or
    ``time_limit`` seconds have elapsed.
    """

    name = "2-Opt"
    description = "Local search algorithm that iteratively improves the route by swapping edges"
    time_complexity = "O(n^2) per pass"
    exact = False
    PARAMETERS = {"max_iterations": int, "time_limit": float}

    def __init__(
        self,
        initial_solver: Optional[TSPAlgorithm] = None,
        max_iterations: int = 1000,
        time_limit: Optional[float] = None
    ):
        super().__init__()
        self.initial_solver = initial_solver if initial_solver is not None else NearestNeighborTSP()
        self.max_iterations = max_iterations
        self.time_limit = time_limit
        self._check_parameters()

        self.history: List[float] = []
        self.iterations = 0

    def _check_parameters(self):
        if self.max_iterations < 1:
            raise InvalidInputError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.time_limit is not None and self.time_limit <= 0:
            raise InvalidInputError(f"time_limit must be positive, got {self.time_limit}")

    def get_description(self) -> str:
        return f"{self.description} (initial solution: {self.initial_solver.get_algorithm_name()})"

    def _solve(self, graph: Graph) -> Route:
        route = self.initial_solver.solve(graph)
        return self.optimize(route, graph)

    # ---------------------------------------
    # Local search
    # ---------------------------------------

    def optimize(self, route: Route, graph: Optional[Graph] = None) -> Route:
        """Apply 2-opt to ``route`` in place and return it."""
        graph = graph if graph is not None else route.graph
        if graph is None:
            raise InvalidGraphError("route is not bound to a graph")
        if route.graph is None:
            route.graph = graph

        closed = route.is_closed()
        if closed:
            route.set_sequence(route.open_sequence())

        t0 = time.time()
        self.iterations = 0
        self.history = [route.get_total_distance(graph)]

        while self.iterations < self.max_iterations:
            if self.time_limit is not None and time.time() - t0 >= self.time_limit:
                break
            self.iterations += 1
            if not self.improve(route, graph):
                break
            self.history.append(route.get_total_distance(graph))

        if closed:
            route.close_tsp_route()
        return route

    def improve(self, route: Route, graph: Graph) -> bool:
        """Run one full pass; return True if any swap was applied."""
        n = len(route)
        if n < 4:
            return False

        matrix = graph.distance_matrix()
        seq = route.sequence
        improved = False

        for i in range(n - 2):
            for j in range(i + 2, n):
                if i == 0 and j == n - 1:
                    continue  # both edges touch seq[0]

                a, b = seq[i], seq[i + 1]
                c, d = seq[j], seq[(j + 1) % n]
                delta = matrix[a][c] + matrix[b][d] - matrix[a][b] - matrix[c][d]

                if delta < -IMPROVEMENT_EPSILON:
                    route.two_opt_swap(i + 1, j)
                    seq = route.sequence
                    improved = True

        return improved
