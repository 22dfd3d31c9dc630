"""
TSP Solver - Core Module
Contains the fundamental data structures for representing the TSP problem:
points, the graph that owns them and routes (tours) over that graph.
"""

import math
import operator
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from tsp_exceptions import (
    DuplicatePointError,
    EmptyGraphError,
    InvalidGraphError,
    InvalidIndexError,
    InvalidInputError,
    PointNotFoundError,
)

# Two points closer than this on both axes are the same point.
POINT_EPSILON = 1e-9
ROUTE_EPSILON = 1e-9


def _check_coordinate(value, axis: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{axis} coordinate must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{axis} coordinate must be finite, got {value}")
    return value


def _as_index(value) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidInputError(f"expected an integer index, got {value!r}")


class Point:
    """Represents a city with x, y coordinates."""

    # tolerance based equality and mutable coordinates: not hashable
    __hash__ = None

    def __init__(self, x: float, y: float, name: str = "", point_id: Optional[int] = None):
        self._x = _check_coordinate(x, "x")
        self._y = _check_coordinate(y, "y")
        self._name = str(name) if name is not None else ""
        self.id = point_id

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float):
        self._x = _check_coordinate(value, "x")

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float):
        self._y = _check_coordinate(value, "y")

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        self._name = str(value) if value is not None else ""

    def distance_to(self, point: 'Point') -> float:
        """Calculate Euclidean distance to another point."""
        dx = self._x - point.x
        dy = self._y - point.y
        return float(np.sqrt(dx * dx + dy * dy))

    def copy(self) -> 'Point':
        return Point(self._x, self._y, self._name, self.id)

    def __eq__(self, other):
        if not isinstance(other, Point):
            return False
        return abs(self._x - other.x) < POINT_EPSILON and abs(self._y - other.y) < POINT_EPSILON

    def __lt__(self, other: 'Point'):
        if not isinstance(other, Point):
            return NotImplemented
        if abs(self._x - other.x) < POINT_EPSILON:
            return self._y < other.y
        return self._x < other.x

    def __add__(self, other: 'Point') -> 'Point':
        if not isinstance(other, Point):
            return NotImplemented
        name = other.name if not self._name else f"{self._name}+{other.name}"
        return Point(self._x + other.x, self._y + other.y, name)

    def __repr__(self):
        if self._name:
            return f'Point({self._x:g}, {self._y:g}, "{self._name}")'
        return f"Point({self._x:g}, {self._y:g})"


PointRef = Union[Point, int]


class Graph:
    """
    Complete graph over a set of unique points.

    Points are stored by value in insertion order and handed out as copies,
    so the only way to change one is through the graph (``update_point``).
    Pairwise distances are filled lazily into a cache keyed by the unordered
    index pair; every change to the point set bumps ``version`` and drops
    the cache.
    """

    def __init__(self, points: Optional[Sequence[Point]] = None):
        self._points: List[Point] = []
        self._distances: Dict[Tuple[int, int], float] = {}
        self._matrix: Optional[np.ndarray] = None
        self._matrix_version = -1
        self._next_id = 0
        self._version = 0

        for point in points or []:
            self.add_point(point)

    @property
    def version(self) -> int:
        """Counter bumped whenever the point set or a coordinate changes."""
        return self._version

    def _invalidate(self):
        self._version += 1
        self._distances.clear()
        self._matrix = None

    # ---------------------------------------
    # Point management
    # ---------------------------------------

    def add_point(self, point: Point) -> int:
        """Add a copy of ``point`` and return its index."""
        if not isinstance(point, Point):
            raise InvalidInputError(f"expected a Point, got {point!r}")
        for existing in self._points:
            if existing == point:
                raise DuplicatePointError(f"point already exists: {point}")

        stored = point.copy()
        if stored.id is None:
            stored.id = self._next_id
        elif any(p.id == stored.id for p in self._points):
            raise DuplicatePointError(f"id {stored.id} already in use")
        self._next_id = max(self._next_id, stored.id + 1)

        self._points.append(stored)
        self._invalidate()
        return len(self._points) - 1

    def remove_point(self, target: PointRef) -> Point:
        """Remove a point given by value or by id and return it."""
        if isinstance(target, Point):
            index = self.index_of(target)
        else:
            index = self._index_of_id(_as_index(target))
        removed = self._points.pop(index)
        self._invalidate()
        return removed

    def update_point(self, index: int, x: Optional[float] = None, y: Optional[float] = None,
                     name: Optional[str] = None) -> Point:
        """Edit an owned point in place; coordinate edits drop cached distances."""
        index = self._check_index(index)
        current = self._points[index]
        candidate = Point(
            current.x if x is None else x,
            current.y if y is None else y,
            current.name if name is None else name,
            current.id,
        )
        for i, existing in enumerate(self._points):
            if i != index and existing == candidate:
                raise DuplicatePointError(f"point already exists: {candidate}")

        moved = candidate.x != current.x or candidate.y != current.y
        self._points[index] = candidate
        if moved:
            self._invalidate()
        return candidate.copy()

    def clear(self):
        self._points.clear()
        self._invalidate()

    # ---------------------------------------
    # Lookups
    # ---------------------------------------

    def _check_index(self, index) -> int:
        index = _as_index(index)
        if not 0 <= index < len(self._points):
            raise InvalidIndexError(f"index out of bounds: {index}")
        return index

    def _index_of_id(self, point_id: int) -> int:
        for i, point in enumerate(self._points):
            if point.id == point_id:
                return i
        raise PointNotFoundError(f"no point with id {point_id}")

    def _resolve(self, ref: PointRef) -> int:
        if isinstance(ref, Point):
            return self.index_of(ref)
        return self._check_index(ref)

    def get_point(self, index: int) -> Point:
        return self._points[self._check_index(index)].copy()

    def get_point_by_id(self, point_id: int) -> Point:
        return self._points[self._index_of_id(_as_index(point_id))].copy()

    def find_point_by_name(self, name: str) -> Optional[Point]:
        for point in self._points:
            if point.name == name:
                return point.copy()
        return None

    def index_of(self, point: Point) -> int:
        for i, existing in enumerate(self._points):
            if existing == point:
                return i
        raise PointNotFoundError(f"point not found: {point}")

    def has_point(self, point: Point) -> bool:
        return any(existing == point for existing in self._points)

    @property
    def points(self) -> List[Point]:
        return [p.copy() for p in self._points]

    def size(self) -> int:
        return len(self._points)

    def is_empty(self) -> bool:
        return not self._points

    def is_valid_for_tsp(self) -> bool:
        return len(self._points) >= 2

    # ---------------------------------------
    # Distances
    # ---------------------------------------

    def get_distance(self, a: PointRef, b: PointRef) -> float:
        """Distance between two points given by index or by value."""
        i = self._resolve(a)
        j = self._resolve(b)
        key = (i, j) if i <= j else (j, i)
        distance = self._distances.get(key)
        if distance is None:
            distance = self._points[key[0]].distance_to(self._points[key[1]])
            self._distances[key] = distance
        return distance

    def distance_matrix(self) -> np.ndarray:
        """Dense, read-only distance matrix built from the pair cache."""
        if self._matrix is not None and self._matrix_version == self._version:
            return self._matrix

        n = len(self._points)
        matrix = np.zeros((n, n))
        for i in range(n):
            for j in range(i + 1, n):
                dist = self.get_distance(i, j)
                matrix[i][j] = dist
                matrix[j][i] = dist
        matrix.flags.writeable = False

        self._matrix = matrix
        self._matrix_version = self._version
        return matrix

    def get_nearest_neighbors(self, point: PointRef, k: int) -> List[Point]:
        """The ``k`` closest other points, nearest first, ties in insertion order."""
        index = self._resolve(point)
        if k < 0:
            raise InvalidInputError(f"k must be non-negative, got {k}")
        k = min(k, len(self._points) - 1)

        others = [i for i in range(len(self._points)) if i != index]
        others.sort(key=lambda i: self.get_distance(index, i))
        return [self._points[i].copy() for i in others[:k]]

    def find_nearest_point(self, point: PointRef) -> Point:
        if len(self._points) < 2:
            raise EmptyGraphError("no other point to compare against")
        index = self._resolve(point)

        nearest = None
        best = math.inf
        for i in range(len(self._points)):
            if i == index:
                continue
            dist = self.get_distance(index, i)
            if dist < best:
                best = dist
                nearest = i
        return self._points[nearest].copy()

    # ---------------------------------------
    # Container protocol
    # ---------------------------------------

    def __len__(self):
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __contains__(self, point):
        return isinstance(point, Point) and self.has_point(point)

    def __repr__(self):
        names = ", ".join(p.name or str(p.id) for p in self._points)
        return f"Graph[{len(self._points)} points]: {names}"


class Route:
    """
    Represents a tour as an ordered sequence of graph point indices.

    The total distance is cached together with the graph and graph version
    it was computed for; any edit to the route, or any change to the graph,
    makes the next read recompute it. Every route of two or more points is
    treated as a cycle, so the edge from the last point back to the first is
    always counted.
    """

    __hash__ = None

    def __init__(self, graph: Optional[Graph] = None, sequence: Optional[Sequence[int]] = None):
        self.graph = graph
        self._sequence: List[int] = [_as_index(i) for i in sequence] if sequence is not None else []
        self._distance: Optional[float] = None
        self._distance_graph: Optional[Graph] = None
        self._distance_version = -1
        self.calculation_time = 0.0

    # ---------------------------------------
    # Distance
    # ---------------------------------------

    def _resolve_graph(self, graph: Optional[Graph]) -> Graph:
        graph = graph if graph is not None else self.graph
        if graph is None:
            raise InvalidGraphError("route is not bound to a graph")
        return graph

    def get_total_distance(self, graph: Optional[Graph] = None) -> float:
        """Calculate the total cycle length of the route."""
        graph = self._resolve_graph(graph)
        if (self._distance is not None and self._distance_graph is graph
                and self._distance_version == graph.version):
            return self._distance

        self._distance = self._calculate_distance(graph)
        self._distance_graph = graph
        self._distance_version = graph.version
        return self._distance

    @property
    def total_distance(self) -> float:
        return self.get_total_distance()

    def _calculate_distance(self, graph: Graph) -> float:
        if len(self._sequence) < 2:
            return 0.0
        for index in self._sequence:
            if not 0 <= index < len(graph):
                raise InvalidIndexError(f"route references missing point index {index}")

        matrix = graph.distance_matrix()
        seq = np.asarray(self._sequence)
        total = matrix[seq[:-1], seq[1:]].sum() + matrix[seq[-1], seq[0]]
        return float(total)

    def invalidate_cache(self):
        """Invalidate cached distance value."""
        self._distance = None
        self._distance_graph = None

    # ---------------------------------------
    # Sequence edits
    # ---------------------------------------

    @property
    def sequence(self) -> List[int]:
        return list(self._sequence)

    def set_sequence(self, sequence: Sequence[int]):
        self._sequence = [_as_index(i) for i in sequence]
        self.invalidate_cache()

    def add_point(self, index: int):
        self._sequence.append(_as_index(index))
        self.invalidate_cache()

    def insert_point(self, position: int, index: int):
        position = _as_index(position)
        if not 0 <= position <= len(self._sequence):
            raise InvalidIndexError(f"position out of bounds: {position}")
        self._sequence.insert(position, _as_index(index))
        self.invalidate_cache()

    def remove_point(self, position: int) -> int:
        position = self._check_position(position)
        removed = self._sequence.pop(position)
        self.invalidate_cache()
        return removed

    def clear(self):
        self._sequence.clear()
        self.invalidate_cache()

    def two_opt_swap(self, i: int, k: int):
        """Reverse the segment between positions ``i`` and ``k`` inclusive."""
        if not 0 <= i < k < len(self._sequence):
            raise InvalidIndexError(
                f"2-opt swap needs 0 <= i < k < {len(self._sequence)}, got i={i}, k={k}"
            )
        self._sequence[i:k + 1] = reversed(self._sequence[i:k + 1])
        self.invalidate_cache()

    def _check_position(self, position) -> int:
        position = _as_index(position)
        if not 0 <= position < len(self._sequence):
            raise InvalidIndexError(f"position out of bounds: {position}")
        return position

    # ---------------------------------------
    # Cycle helpers
    # ---------------------------------------

    def is_closed(self) -> bool:
        return len(self._sequence) >= 2 and self._sequence[0] == self._sequence[-1]

    def close_tsp_route(self):
        """Append the start point so the cycle is explicit in the sequence.

        The closing edge then has length zero, so the total distance is the
        same as for the open form.
        """
        if self._sequence and not self.is_closed():
            self._sequence.append(self._sequence[0])
            self.invalidate_cache()

    def open_sequence(self) -> List[int]:
        """The sequence without an explicit closing point."""
        if self.is_closed():
            return self._sequence[:-1]
        return list(self._sequence)

    def is_valid_tsp_route(self, graph: Optional[Graph] = None) -> bool:
        """True if the route visits every graph point exactly once."""
        graph = self._resolve_graph(graph)
        return sorted(self.open_sequence()) == list(range(len(graph)))

    def points(self, graph: Optional[Graph] = None) -> List[Point]:
        graph = self._resolve_graph(graph)
        return [graph.get_point(i) for i in self._sequence]

    def clone(self) -> 'Route':
        """Create a copy of the route bound to the same graph."""
        route = Route(self.graph, self._sequence)
        route.calculation_time = self.calculation_time
        return route

    # ---------------------------------------
    # Operators
    # ---------------------------------------

    def __len__(self):
        return len(self._sequence)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._sequence))

    def __contains__(self, index):
        return index in self._sequence

    def __getitem__(self, position: int) -> int:
        return self._sequence[self._check_position(position)]

    def __setitem__(self, position: int, index: int):
        self._sequence[self._check_position(position)] = _as_index(index)
        self.invalidate_cache()

    def __lt__(self, other: 'Route'):
        if not isinstance(other, Route):
            return NotImplemented
        return self.total_distance < other.total_distance

    def __eq__(self, other):
        if not isinstance(other, Route):
            return False
        if self._sequence != other._sequence:
            return False
        if self.graph is None and other.graph is None:
            return True
        mine = self.graph if self.graph is not None else other.graph
        theirs = other.graph if other.graph is not None else self.graph
        return abs(self.get_total_distance(mine) - other.get_total_distance(theirs)) < ROUTE_EPSILON

    def __add__(self, other: 'Route') -> 'Route':
        """Append the other route's points that are not already visited."""
        if not isinstance(other, Route):
            return NotImplemented
        result = self.clone()
        if result.graph is None:
            result.graph = other.graph
        result += other
        return result

    def __iadd__(self, other: 'Route') -> 'Route':
        if not isinstance(other, Route):
            return NotImplemented
        for index in other._sequence:
            if index not in self._sequence:
                self._sequence.append(index)
        self.invalidate_cache()
        return self

    def __repr__(self):
        if self.graph is None:
            return f"Route({self._sequence})"
        return f"Route(points={len(self._sequence)}, distance={self.total_distance:.2f})"

    def __str__(self):
        if self.graph is None:
            return repr(self)
        labels = []
        for i in self._sequence:
            point = self.graph.get_point(i)
            labels.append(point.name or str(point.id))
        if len(self._sequence) >= 2 and not self.is_closed():
            labels.append(labels[0])
        return (f"Route[{len(self._sequence)} points, distance={self.total_distance:.2f}]: "
                + " -> ".join(labels))
