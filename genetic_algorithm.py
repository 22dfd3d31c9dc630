"""
Genetic Algorithm Solver
Population of routes evolved with elitism, tournament selection,
order crossover and swap mutation.
"""

import random
import time
from typing import List, Optional

import numpy as np

from tsp_algorithm import TSPAlgorithm
from tsp_core import Graph, Route
from tsp_exceptions import AlgorithmError, InvalidInputError


class Population:
    """Represents a population of route solutions over one graph."""

    def __init__(self, population_size: int, graph: Graph, rng: random.Random):
        self.population_size = population_size
        self.graph = graph
        self.rng = rng
        self.routes: List[Route] = []

    def initialize(self):
        """Initialize population with random routes."""
        self.routes = []
        self.fill_random()

    def fill_random(self):
        indices = list(range(len(self.graph)))
        while len(self.routes) < self.population_size:
            shuffled = indices.copy()
            self.rng.shuffle(shuffled)
            self.routes.append(Route(self.graph, shuffled))

    def seed_with_route(self, seed_route: Route, copies: int = 1):
        for _ in range(copies):
            route = Route(self.graph, seed_route.open_sequence())
            self.routes.append(route)

    def sort(self):
        """Sort ascending by total distance, shortest first."""
        self.routes.sort(key=lambda r: r.get_total_distance())

    def get_fittest(self) -> Route:
        return min(self.routes, key=lambda r: r.get_total_distance())

    def get_average_distance(self) -> float:
        return float(np.mean([r.get_total_distance() for r in self.routes]))

    def __len__(self):
        return len(self.routes)


class GeneticTSP(TSPAlgorithm):
    """
    Genetic Algorithm solver for TSP.

    Every generation keeps the best ``population_size // 10`` routes (at
    least one) and fills the rest with children of two tournament-selected
    parents: order crossover followed by a swap mutation with probability
    ``mutation_rate``. The random source is a ``random.Random`` seeded from
    ``seed`` (or passed in as ``rng``) so runs can be reproduced.
    ``crossover_rate`` is accepted for compatibility and ignored: every
    child is produced by crossover.
    """

    name = "Genetic Algorithm"
    description = "Evolutionary algorithm using selection, crossover and mutation"
    time_complexity = "O(g * p * n) for g generations and population p"
    exact = False
    PARAMETERS = {
        "population_size": int,
        "max_generations": int,
        "mutation_rate": float,
        "crossover_rate": float,
        "tournament_size": int,
        "time_limit": float,
    }

    def __init__(
        self,
        population_size: int = 100,
        max_generations: int = 500,
        mutation_rate: float = 0.01,
        crossover_rate: float = 1.0,
        tournament_size: int = 3,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        time_limit: Optional[float] = None
    ):
        super().__init__()
        self.population_size = population_size
        self.max_generations = max_generations
        self.mutation_rate = mutation_rate
        self.crossover_rate = crossover_rate
        self.tournament_size = tournament_size
        self.time_limit = time_limit
        self._check_parameters()

        self.seed = seed
        # an injected rng is used as is; an owned one is reseeded on every solve
        self._owns_rng = rng is None
        self.rng = rng if rng is not None else random.Random(seed)

        # GA state
        self.population: Optional[Population] = None
        self.generation = 0
        self.best_distance_history: List[float] = []

    def _check_parameters(self):
        if self.population_size < 2:
            raise InvalidInputError(f"population_size must be >= 2, got {self.population_size}")
        if self.max_generations < 0:
            raise InvalidInputError(f"max_generations must be >= 0, got {self.max_generations}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise InvalidInputError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise InvalidInputError(f"crossover_rate must be in [0, 1], got {self.crossover_rate}")
        if self.tournament_size < 1:
            raise InvalidInputError(f"tournament_size must be >= 1, got {self.tournament_size}")
        if self.time_limit is not None and self.time_limit <= 0:
            raise InvalidInputError(f"time_limit must be positive, got {self.time_limit}")

    @property
    def elite_size(self) -> int:
        return max(1, self.population_size // 10)

    # ---------------------------------------
    # Initialization
    # ---------------------------------------

    def initialize(self, graph: Graph, seed_route: Optional[Route] = None):
        self.population = Population(self.population_size, graph, self.rng)

        if seed_route is not None:
            if not seed_route.is_valid_tsp_route(graph):
                raise AlgorithmError("seed route must visit every point exactly once")
            self.population.seed_with_route(seed_route, copies=self.elite_size)
            self.population.fill_random()
        else:
            self.population.initialize()

        self.generation = 0
        self.best_distance_history = [self.population.get_fittest().get_total_distance()]

    # ---------------------------------------
    # Genetic operators
    # ---------------------------------------

    def tournament_selection(self) -> Route:
        routes = self.population.routes
        candidates = [routes[self.rng.randrange(len(routes))] for _ in range(self.tournament_size)]
        return min(candidates, key=lambda r: r.get_total_distance())

    def ordered_crossover(self, parent1: Route, parent2: Route) -> Route:
        """
        Order crossover (OX).

        A random segment of parent 1 is copied in place; the remaining slots,
        starting right after the segment and wrapping around, are filled with
        parent 2's points in the order they appear after the segment end.
        """
        seq1 = parent1.sequence
        seq2 = parent2.sequence
        size = len(seq1)

        start = self.rng.randint(0, size - 1)
        end = self.rng.randint(0, size - 1)
        if start > end:
            start, end = end, start

        child = [None] * size
        used = set()
        for i in range(start, end + 1):
            child[i] = seq1[i]
            used.add(seq1[i])

        pos = (end + 1) % size
        for k in range(size):
            point = seq2[(end + 1 + k) % size]
            if point in used:
                continue
            while child[pos] is not None:
                pos = (pos + 1) % size
            child[pos] = point
            used.add(point)

        return Route(parent1.graph, child)

    def swap_mutation(self, route: Route):
        """Exchange two random positions in place."""
        size = len(route)
        i = self.rng.randrange(size)
        j = self.rng.randrange(size)
        if i != j:
            a, b = route[i], route[j]
            route[i] = b
            route[j] = a

    # ---------------------------------------
    # Single generation evolution
    # ---------------------------------------

    def evolve_generation(self):
        if self.population is None:
            raise AlgorithmError("population not initialized")

        self.population.sort()
        new_pop = Population(self.population_size, self.population.graph, self.rng)

        # --- elitism ---
        for elite in self.population.routes[: self.elite_size]:
            new_pop.routes.append(elite.clone())

        # --- generate rest ---
        while len(new_pop) < self.population_size:
            p1 = self.tournament_selection()
            p2 = self.tournament_selection()
            child = self.ordered_crossover(p1, p2)
            if self.rng.random() < self.mutation_rate:
                self.swap_mutation(child)
            new_pop.routes.append(child)

        self.population = new_pop
        self.generation += 1
        self.best_distance_history.append(self.population.get_fittest().get_total_distance())

    # ---------------------------------------
    # Solve
    # ---------------------------------------

    def _solve(self, graph: Graph) -> Route:
        if self._owns_rng and self.seed is not None:
            self.rng = random.Random(self.seed)
        self.initialize(graph)
        start = time.time()

        while self.generation < self.max_generations:
            if self.time_limit is not None and time.time() - start >= self.time_limit:
                break
            self.evolve_generation()

        return self.get_best_route()

    def get_best_route(self) -> Optional[Route]:
        return self.population.get_fittest().clone() if self.population is not None else None
