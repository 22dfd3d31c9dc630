"""
Nearest Neighbor Solver
Greedy construction: always travel to the closest unvisited point.
"""

from typing import Optional

import numpy as np

from tsp_algorithm import TSPAlgorithm
from tsp_core import Graph, Route
from tsp_exceptions import InvalidIndexError


class NearestNeighborTSP(TSPAlgorithm):
    """
    Nearest neighbor heuristic.

    With ``start_index=None`` every point is tried as the start and the
    shortest of the resulting routes is kept (earliest start wins ties);
    otherwise only the configured start is used. Distance ties between
    candidates go to the lowest point index, so results are deterministic.
    """

    name = "Nearest Neighbor"
    description = "Greedy algorithm that always chooses the nearest unvisited city"
    time_complexity = "O(n^2) per start point, O(n^3) when all starts are tried"
    exact = False
    PARAMETERS = {"start_index": int}

    def __init__(self, start_index: Optional[int] = None):
        super().__init__()
        self.start_index = start_index

    def set_start_point(self, start_index: Optional[int]):
        self.start_index = start_index

    def get_parameters(self):
        return {"start_index": self.start_index}

    def _solve(self, graph: Graph) -> Route:
        if self.start_index is not None:
            return self.solve_from_point(graph, self.start_index)

        best = None
        best_d = float("inf")
        for start in range(len(graph)):
            route = self.solve_from_point(graph, start)
            d = route.get_total_distance()
            if d < best_d:
                best = route
                best_d = d
        return best

    def solve_from_point(self, graph: Graph, start: int) -> Route:
        """Build one greedy route beginning at ``start``."""
        n = len(graph)
        if not 0 <= start < n:
            raise InvalidIndexError(f"start index out of bounds: {start}")

        matrix = graph.distance_matrix()
        visited = np.zeros(n, dtype=bool)
        visited[start] = True
        order = [start]
        cur = start

        while len(order) < n:
            # argmin returns the first minimum, i.e. the lowest index on ties
            candidates = np.where(visited, np.inf, matrix[cur])
            nxt = int(np.argmin(candidates))
            visited[nxt] = True
            order.append(nxt)
            cur = nxt

        return Route(graph, order)
