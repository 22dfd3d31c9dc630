"""
Brute Force Solver
Exhaustive permutation search, exact but only usable for a handful of points.
"""

from itertools import permutations

from tsp_algorithm import TSPAlgorithm
from tsp_core import Graph, Route
from tsp_exceptions import AlgorithmError, InvalidInputError

MAX_BRUTE_FORCE_POINTS = 8


class BruteForceTSP(TSPAlgorithm):
    """
    Exhaustive search.

    The smallest point (by coordinate order) is fixed as the start, since
    every rotation of a cycle has the same length, and the remaining points
    are enumerated in lexicographic permutation order. The first route with
    the strictly smallest distance wins.
    """

    name = "Brute Force"
    description = "Exhaustive search through all permutations"
    time_complexity = "O(n!)"
    exact = True
    PARAMETERS = {"max_points": int}

    def __init__(self, max_points: int = MAX_BRUTE_FORCE_POINTS):
        super().__init__()
        self.max_points = max_points
        self._check_parameters()
        self.permutations_tested = 0

    def _check_parameters(self):
        if self.max_points < 2:
            raise InvalidInputError(f"max_points must be >= 2, got {self.max_points}")

    def validate_graph(self, graph: Graph):
        super().validate_graph(graph)
        if len(graph) > self.max_points:
            raise AlgorithmError(
                f"brute force only for small graphs ({len(graph)} points, limit {self.max_points})"
            )

    def _solve(self, graph: Graph) -> Route:
        points = graph.points
        order = sorted(range(len(points)), key=lambda i: points[i])
        first, rest = order[0], order[1:]

        self.permutations_tested = 0
        best = None
        best_d = float("inf")
        for perm in permutations(rest):
            self.permutations_tested += 1
            route = Route(graph, (first,) + perm)
            d = route.get_total_distance()
            if d < best_d:
                best = route
                best_d = d
        return best
