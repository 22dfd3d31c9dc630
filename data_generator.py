"""
Point generators and plain-text persistence for point sets and routes.

Point file: one point per line, ``x y [name]`` (the name may contain
spaces). Route file: a ``# distance: <value>`` header followed by one
``index x y [name]`` line per stop; only the index column is read back.
Blank lines and lines starting with ``#`` are ignored in both.
"""

import os
import re
from typing import List, Optional

import numpy as np

from tsp_core import Graph, Point, Route
from tsp_exceptions import FileIOError, InvalidInputError, TSPException


def generate_random_points(
    n: int,
    width: float = 100,
    height: float = 100,
    seed: Optional[int] = None
) -> List[Point]:
    """
    Generate random points for testing.

    Args:
        n: Number of points to generate
        width: Width of the area
        height: Height of the area
        seed: Optional seed for reproducible layouts

    Returns:
        List of randomly placed points, named P1..Pn
    """
    if n < 0:
        raise InvalidInputError(f"number of points must be non-negative, got {n}")
    rng = np.random.default_rng(seed)
    xs = rng.uniform(0, width, size=n)
    ys = rng.uniform(0, height, size=n)
    return [Point(float(x), float(y), name=f"P{i + 1}") for i, (x, y) in enumerate(zip(xs, ys))]


def generate_circle_points(n: int, radius: float = 50, center_x: float = 50, center_y: float = 50) -> List[Point]:
    """Generate points evenly spaced on a circle; the optimal tour is the circle itself."""
    if n < 0:
        raise InvalidInputError(f"number of points must be non-negative, got {n}")
    points = []
    for i in range(n):
        angle = 2 * np.pi * i / n
        x = center_x + radius * np.cos(angle)
        y = center_y + radius * np.sin(angle)
        points.append(Point(float(x), float(y), name=f"P{i + 1}"))
    return points


# --------------------------------------------
# Reading
# --------------------------------------------

def _read_lines(path: str) -> List[tuple]:
    if not os.path.exists(path):
        raise FileIOError(f"file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_lines = [(n, l.strip()) for n, l in enumerate(f, start=1)]
    except (OSError, UnicodeDecodeError) as e:
        raise FileIOError(f"cannot read {path}: {e}")
    return [(n, l) for n, l in raw_lines if l and not l.startswith("#")]


def load_points(path: str) -> List[Point]:
    """Read a point file into a list of points."""
    points = []
    for line_no, line in _read_lines(path):
        parts = re.split(r"\s+", line, maxsplit=2)
        if len(parts) < 2:
            raise FileIOError(f"{path}:{line_no}: expected 'x y [name]', got {line!r}")
        try:
            x = float(parts[0])
            y = float(parts[1])
            points.append(Point(x, y, parts[2] if len(parts) > 2 else ""))
        except (ValueError, TSPException):
            raise FileIOError(f"{path}:{line_no}: invalid coordinates in {line!r}")
    return points


def load_graph(path: str) -> Graph:
    """Read a point file straight into a graph; duplicate points are rejected."""
    return Graph(load_points(path))


def load_route(path: str, graph: Graph) -> Route:
    """Read a route file and bind it to ``graph``."""
    sequence = []
    for line_no, line in _read_lines(path):
        first = re.split(r"\s+", line, maxsplit=1)[0]
        try:
            index = int(first)
        except ValueError:
            raise FileIOError(f"{path}:{line_no}: expected a point index, got {first!r}")
        if not 0 <= index < len(graph):
            raise FileIOError(f"{path}:{line_no}: index {index} not in graph of {len(graph)} points")
        sequence.append(index)
    return Route(graph, sequence)


# --------------------------------------------
# Writing
# --------------------------------------------

def _write_lines(path: str, lines: List[str]):
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
    except OSError as e:
        raise FileIOError(f"cannot write {path}: {e}")


def save_points(path: str, points) -> None:
    """Write points (a list or a Graph) one per line."""
    lines = ["# x y name"]
    for p in points:
        lines.append(f"{p.x!r} {p.y!r} {p.name}".rstrip())
    _write_lines(path, lines)


def save_route(path: str, route: Route, graph: Optional[Graph] = None) -> None:
    graph = graph if graph is not None else route.graph
    if graph is None:
        raise FileIOError("cannot save a route that is not bound to a graph")
    lines = [f"# distance: {route.get_total_distance(graph)!r}", "# index x y name"]
    for index in route.sequence:
        p = graph.get_point(index)
        lines.append(f"{index} {p.x!r} {p.y!r} {p.name}".rstrip())
    _write_lines(path, lines)
