"""
Solver registry.
Maps the short names used on the command line and in benchmarks to the
four solver classes.
"""

from typing import Dict, Type

from brute_force import BruteForceTSP
from genetic_algorithm import GeneticTSP
from nearest_neighbor import NearestNeighborTSP
from tsp_algorithm import TSPAlgorithm
from tsp_exceptions import InvalidInputError
from two_opt import TwoOptTSP

SOLVERS: Dict[str, Type[TSPAlgorithm]] = {
    "nn": NearestNeighborTSP,
    "2opt": TwoOptTSP,
    "ga": GeneticTSP,
    "bf": BruteForceTSP,
}


def create_solver(name: str, **params) -> TSPAlgorithm:
    """Instantiate a solver by its short name, passing keyword parameters through."""
    key = name.lower()
    if key not in SOLVERS:
        raise InvalidInputError(f"Unknown algorithm {name} (expected one of: {', '.join(SOLVERS)})")
    return SOLVERS[key](**params)
