import itertools
import math
import unittest

from tsp_core import Graph, Point, Route
from tsp_exceptions import (
    DuplicatePointError,
    EmptyGraphError,
    InvalidGraphError,
    InvalidIndexError,
    InvalidInputError,
    PointNotFoundError,
    TSPException,
)


def square_graph():
    return Graph([
        Point(0, 0, "A"),
        Point(1, 0, "B"),
        Point(1, 1, "C"),
        Point(0, 1, "D"),
    ])


class TestPoint(unittest.TestCase):
    def test_distance(self):
        self.assertAlmostEqual(Point(0, 0).distance_to(Point(3, 4)), 5.0)

    def test_equality_uses_small_tolerance(self):
        self.assertEqual(Point(1, 2), Point(1 + 1e-12, 2 - 1e-12))
        self.assertNotEqual(Point(1, 2), Point(1.001, 2))
        self.assertNotEqual(Point(1, 2), (1, 2))

    def test_ordering_is_lexicographic(self):
        points = [Point(2, 0), Point(1, 5), Point(1, 1)]
        ordered = sorted(points)
        self.assertEqual([(p.x, p.y) for p in ordered], [(1, 1), (1, 5), (2, 0)])

    def test_non_finite_coordinates_rejected(self):
        with self.assertRaises(InvalidInputError):
            Point(float("nan"), 0)
        with self.assertRaises(InvalidInputError):
            Point(0, float("inf"))
        with self.assertRaises(InvalidInputError):
            Point("abc", 0)

    def test_setters_validate(self):
        p = Point(1, 1, "X")
        p.x = 4
        p.name = "Y"
        self.assertEqual((p.x, p.name), (4.0, "Y"))
        with self.assertRaises(InvalidInputError):
            p.y = float("nan")

    def test_add_and_repr(self):
        total = Point(1, 2, "a") + Point(3, 4, "b")
        self.assertEqual((total.x, total.y, total.name), (4.0, 6.0, "a+b"))
        self.assertEqual((Point(0, 0) + Point(1, 1, "b")).name, "b")
        self.assertEqual(repr(Point(1.5, 2, "A")), 'Point(1.5, 2, "A")')

    def test_not_hashable(self):
        with self.assertRaises(TypeError):
            hash(Point(0, 0))


class TestGraph(unittest.TestCase):
    def test_duplicate_rejected(self):
        graph = Graph()
        graph.add_point(Point(5, 5, "X"))
        with self.assertRaises(DuplicatePointError):
            graph.add_point(Point(5, 5, "X"))
        self.assertEqual(len(graph), 1)

    def test_duplicate_id_rejected(self):
        graph = Graph([Point(0, 0, point_id=7)])
        with self.assertRaises(DuplicatePointError):
            graph.add_point(Point(1, 1, point_id=7))

    def test_ids_assigned_in_order(self):
        graph = square_graph()
        self.assertEqual([p.id for p in graph], [0, 1, 2, 3])
        self.assertEqual(graph.get_point_by_id(2).name, "C")

    def test_points_are_owned_copies(self):
        original = Point(0, 0, "A")
        graph = Graph([original, Point(3, 4, "B")])
        original.x = 100
        graph.get_point(0).x = 50
        self.assertEqual(graph.get_point(0).x, 0.0)
        self.assertAlmostEqual(graph.get_distance(0, 1), 5.0)

    def test_get_point_out_of_range(self):
        graph = square_graph()
        with self.assertRaises(InvalidIndexError):
            graph.get_point(4)
        with self.assertRaises(InvalidIndexError):
            graph.get_point(-1)
        # also a plain IndexError for callers that only know the builtin
        with self.assertRaises(IndexError):
            graph.get_point(10)

    def test_remove_point(self):
        graph = square_graph()
        removed = graph.remove_point(Point(1, 0))
        self.assertEqual(removed.name, "B")
        self.assertEqual(len(graph), 3)
        graph.remove_point(3)  # by id
        self.assertEqual([p.name for p in graph], ["A", "C"])
        with self.assertRaises(PointNotFoundError):
            graph.remove_point(Point(9, 9))
        with self.assertRaises(PointNotFoundError):
            graph.remove_point(42)

    def test_distance_symmetry(self):
        graph = Graph([Point(0, 0), Point(3, 4), Point(-2.5, 7.25), Point(10, -1)])
        for a, b in itertools.permutations(range(len(graph)), 2):
            self.assertEqual(graph.get_distance(a, b), graph.get_distance(b, a))
        self.assertEqual(graph.get_distance(Point(0, 0), Point(3, 4)), 5.0)

    def test_triangle_consistency(self):
        graph = Graph([Point(0, 0), Point(3, 4), Point(-2.5, 7.25), Point(10, -1)])
        for a, b, c in itertools.permutations(range(len(graph)), 3):
            self.assertLessEqual(graph.get_distance(a, c),
                                 graph.get_distance(a, b) + graph.get_distance(b, c) + 1e-12)

    def test_cache_invalidated_on_change(self):
        graph = Graph([Point(0, 0), Point(3, 4)])
        version = graph.version
        self.assertEqual(graph.get_distance(0, 1), 5.0)
        graph.update_point(1, x=6, y=8)
        self.assertGreater(graph.version, version)
        self.assertEqual(graph.get_distance(0, 1), 10.0)
        self.assertEqual(graph.distance_matrix()[0][1], 10.0)

    def test_update_point_rejects_collision(self):
        graph = square_graph()
        with self.assertRaises(DuplicatePointError):
            graph.update_point(0, x=1, y=1)
        self.assertEqual(graph.get_point(0).x, 0.0)

    def test_distance_matrix(self):
        graph = square_graph()
        matrix = graph.distance_matrix()
        self.assertEqual(matrix.shape, (4, 4))
        self.assertEqual(matrix[0][2], graph.get_distance(2, 0))
        self.assertTrue((matrix == matrix.T).all())
        self.assertIs(graph.distance_matrix(), matrix)

    def test_nearest_neighbors(self):
        graph = Graph([Point(0, 0, "O"), Point(2, 0, "E"), Point(0, 1, "N"),
                       Point(-1, 0, "W"), Point(5, 5, "F")])
        names = [p.name for p in graph.get_nearest_neighbors(Point(0, 0), 3)]
        # N and W tie at 1; insertion order decides
        self.assertEqual(names, ["N", "W", "E"])
        self.assertEqual(len(graph.get_nearest_neighbors(0, 100)), 4)

    def test_find_nearest_point(self):
        graph = square_graph()
        self.assertEqual(graph.find_nearest_point(Point(0, 0)).name, "B")
        with self.assertRaises(EmptyGraphError):
            Graph().find_nearest_point(Point(0, 0))
        with self.assertRaises(EmptyGraphError):
            Graph([Point(1, 1)]).find_nearest_point(Point(1, 1))

    def test_is_valid_for_tsp(self):
        self.assertFalse(Graph().is_valid_for_tsp())
        self.assertFalse(Graph([Point(0, 0)]).is_valid_for_tsp())
        self.assertTrue(Graph([Point(0, 0), Point(1, 0)]).is_valid_for_tsp())

    def test_find_point_by_name(self):
        graph = square_graph()
        self.assertEqual(graph.find_point_by_name("C"), Point(1, 1))
        self.assertIsNone(graph.find_point_by_name("Z"))
        self.assertIn(Point(0, 1), graph)


class TestRoute(unittest.TestCase):
    def test_square_perimeter(self):
        graph = square_graph()
        route = Route(graph, [0, 1, 2, 3])
        self.assertAlmostEqual(route.total_distance, 4.0)
        self.assertTrue(route.is_valid_tsp_route())

    def test_two_point_route_is_a_cycle(self):
        graph = Graph([Point(0, 0), Point(3, 4)])
        self.assertAlmostEqual(Route(graph, [0, 1]).total_distance, 10.0)

    def test_short_routes(self):
        graph = square_graph()
        self.assertEqual(Route(graph).total_distance, 0.0)
        self.assertEqual(Route(graph, [2]).total_distance, 0.0)

    def test_unbound_route(self):
        route = Route(sequence=[0, 1])
        with self.assertRaises(InvalidGraphError):
            route.get_total_distance()
        self.assertAlmostEqual(route.get_total_distance(square_graph()), 2.0)

    def test_cache_invalidated_by_edits(self):
        graph = square_graph()
        route = Route(graph, [0, 2, 1, 3])
        crossed = route.total_distance
        self.assertAlmostEqual(crossed, 2 + 2 * math.sqrt(2))
        route.two_opt_swap(1, 2)
        self.assertEqual(route.sequence, [0, 1, 2, 3])
        self.assertAlmostEqual(route.total_distance, 4.0)

        route.remove_point(3)
        self.assertAlmostEqual(route.total_distance, 2 + math.sqrt(2))
        route.insert_point(1, 3)
        self.assertEqual(route.sequence, [0, 3, 1, 2])
        route.add_point(2)
        self.assertEqual(len(route), 5)

    def test_cache_invalidated_by_graph_change(self):
        graph = Graph([Point(0, 0), Point(3, 4)])
        route = Route(graph, [0, 1])
        self.assertAlmostEqual(route.total_distance, 10.0)
        graph.update_point(1, x=0, y=1)
        self.assertAlmostEqual(route.total_distance, 2.0)

    def test_invalid_positions(self):
        route = Route(square_graph(), [0, 1, 2])
        with self.assertRaises(InvalidIndexError):
            route.insert_point(4, 3)
        with self.assertRaises(InvalidIndexError):
            route.remove_point(3)
        with self.assertRaises(InvalidIndexError):
            route[5]
        with self.assertRaises(InvalidIndexError):
            route.two_opt_swap(2, 1)
        with self.assertRaises(InvalidIndexError):
            route.two_opt_swap(1, 3)

    def test_missing_graph_index(self):
        route = Route(square_graph(), [0, 1, 9])
        with self.assertRaises(InvalidIndexError):
            route.get_total_distance()

    def test_close_route(self):
        graph = square_graph()
        route = Route(graph, [0, 1, 2, 3])
        route.close_tsp_route()
        self.assertEqual(route.sequence, [0, 1, 2, 3, 0])
        self.assertAlmostEqual(route.total_distance, 4.0)
        self.assertTrue(route.is_valid_tsp_route())
        route.close_tsp_route()
        self.assertEqual(len(route), 5)
        self.assertIn("A -> B -> C -> D -> A", str(route))

    def test_validity(self):
        graph = square_graph()
        self.assertFalse(Route(graph, [0, 1, 2]).is_valid_tsp_route())
        self.assertFalse(Route(graph, [0, 1, 2, 2]).is_valid_tsp_route())
        self.assertTrue(Route(graph, [3, 1, 0, 2]).is_valid_tsp_route())

    def test_comparison(self):
        graph = square_graph()
        good = Route(graph, [0, 1, 2, 3])
        bad = Route(graph, [0, 2, 1, 3])
        self.assertLess(good, bad)
        self.assertEqual(min([bad, good]), good)
        self.assertEqual(good, Route(graph, [0, 1, 2, 3]))
        self.assertNotEqual(good, Route(graph, [1, 2, 3, 0]))

    def test_concatenation_skips_visited(self):
        graph = square_graph()
        first = Route(graph, [0, 1])
        second = Route(graph, [1, 2, 3, 0])
        joined = first + second
        self.assertEqual(joined.sequence, [0, 1, 2, 3])
        self.assertAlmostEqual(joined.total_distance, 4.0)
        self.assertEqual(first.sequence, [0, 1])

        first += Route(graph, [3])
        self.assertEqual(first.sequence, [0, 1, 3])

    def test_clone_is_independent(self):
        route = Route(square_graph(), [0, 1, 2, 3])
        copy = route.clone()
        copy.two_opt_swap(0, 3)
        self.assertEqual(route.sequence, [0, 1, 2, 3])

    def test_errors_share_a_base(self):
        for error in (DuplicatePointError, EmptyGraphError, InvalidGraphError,
                      InvalidIndexError, PointNotFoundError):
            self.assertTrue(issubclass(error, TSPException))
        self.assertTrue(str(DuplicatePointError("x")).startswith("Duplicate Point"))


if __name__ == "__main__":
    unittest.main()
