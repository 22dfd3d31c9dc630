"""
TSP Solver - Algorithm Interface
Common contract shared by every solver: ``solve(graph) -> Route`` plus the
descriptive metadata the drivers and the benchmark display.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, Mapping

from tsp_core import Graph, Route
from tsp_exceptions import EmptyGraphError, InvalidGraphError, InvalidInputError


class TSPAlgorithm(ABC):
    """
    Base class for TSP solvers.

    ``solve`` validates the graph, delegates to ``_solve`` and stamps the
    wall-clock time on both the solver (``last_execution_time``) and the
    returned route (``calculation_time``). Subclasses list the names they
    accept in ``set_parameters`` in ``PARAMETERS``.
    """

    name = "TSP Algorithm"
    description = ""
    time_complexity = ""
    exact = False
    PARAMETERS: Dict[str, type] = {}

    def __init__(self):
        self.last_execution_time = 0.0

    def solve(self, graph: Graph) -> Route:
        self.validate_graph(graph)
        start = time.time()
        route = self._solve(graph)
        self.last_execution_time = time.time() - start
        route.calculation_time = self.last_execution_time
        return route

    @abstractmethod
    def _solve(self, graph: Graph) -> Route:
        raise NotImplementedError

    def validate_graph(self, graph: Graph):
        if graph is None or graph.is_empty():
            raise EmptyGraphError("cannot solve TSP on an empty graph")
        if not graph.is_valid_for_tsp():
            raise InvalidGraphError(f"need at least 2 points for TSP, got {len(graph)}")

    # ---------------------------------------
    # Metadata
    # ---------------------------------------

    def get_algorithm_name(self) -> str:
        return self.name

    def get_description(self) -> str:
        return self.description

    def get_time_complexity(self) -> str:
        return self.time_complexity

    def is_exact_algorithm(self) -> bool:
        return self.exact

    # ---------------------------------------
    # Parameters
    # ---------------------------------------

    def set_parameters(self, params: Mapping[str, float]):
        """
        Set numeric options by name; unknown names are rejected.

        All or nothing: if any value is rejected the previous settings are
        restored before the error propagates.
        """
        for key in params:
            if key not in self.PARAMETERS:
                raise InvalidInputError(
                    f"{self.name} has no parameter '{key}' "
                    f"(expected one of: {', '.join(sorted(self.PARAMETERS)) or 'none'})"
                )

        previous = self.get_parameters()
        try:
            for key, value in params.items():
                cast = self.PARAMETERS[key]
                try:
                    setattr(self, key, cast(value))
                except (TypeError, ValueError):
                    raise InvalidInputError(f"invalid value for '{key}': {value!r}")
            self._check_parameters()
        except InvalidInputError:
            for key, value in previous.items():
                setattr(self, key, value)
            raise

    def get_parameters(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in self.PARAMETERS}

    def _check_parameters(self):
        pass

    def __repr__(self):
        params = ", ".join(f"{k}={v}" for k, v in self.get_parameters().items())
        return f"{type(self).__name__}({params})"
