"""
Unit tests for cities, fitness evaluation and tours.
"""

import math
import random
import unittest

from tsp_evo.cities import City, CityTable, graph_length, is_closed_tour
from tsp_evo.errors import InvalidConfigurationError, InvalidInputError
from tsp_evo.evaluation import ZERO_LENGTH_FITNESS, FitnessEvaluator
from tsp_evo.tour import Tour, is_permutation


SQUARE = [(0, 0), (0, 1), (1, 1), (1, 0)]


def random_cities(n, seed=0):
    rng = random.Random(seed)
    return [(rng.uniform(0, 200), rng.uniform(0, 200)) for _ in range(n)]


class TestCityTable(unittest.TestCase):
    """Test city table construction and validation."""

    def test_distance_matrix(self):
        table = CityTable(SQUARE)
        self.assertEqual(len(table), 4)
        self.assertEqual(table.distance(0, 1), 1.0)
        self.assertAlmostEqual(table.distance(0, 2), math.sqrt(2))
        self.assertEqual(table.distance(3, 3), 0.0)

    def test_accepts_city_objects(self):
        table = CityTable([City(1, 2), City(4, 6)])
        self.assertEqual(table[1], City(4.0, 6.0))
        self.assertEqual(table.distance(0, 1), 5.0)

    def test_city_equality(self):
        self.assertEqual(City(1, 2), City(1.0, 2.0))
        self.assertNotEqual(City(1, 2), City(2, 1))

    def test_read_only(self):
        table = CityTable(SQUARE)
        with self.assertRaises(ValueError):
            table.coords[0, 0] = 5.0
        with self.assertRaises(ValueError):
            table.distance_matrix[0, 1] = 5.0

    def test_too_few_cities(self):
        with self.assertRaises(InvalidInputError):
            CityTable([])
        with self.assertRaises(InvalidInputError):
            CityTable([(0, 0)])

    def test_malformed_coordinates(self):
        with self.assertRaises(InvalidInputError):
            CityTable([(0, 0), (1, 2, 3)])
        with self.assertRaises(InvalidInputError):
            CityTable([(0, 0), (float("nan"), 1)])
        with self.assertRaises(InvalidInputError):
            CityTable([(0, 0), (float("inf"), 1)])
        with self.assertRaises(InvalidInputError):
            CityTable([(0, 0), ("a", "b")])
        with self.assertRaises(InvalidInputError):
            CityTable([City(float("nan"), 0), City(1, 1), City(2, 2)])
        with self.assertRaises(InvalidInputError):
            CityTable([City(0, 0), City(1, float("-inf"))])

    def test_tour_graph(self):
        table = CityTable(SQUARE)
        graph = table.tour_graph([0, 1, 2, 3])
        self.assertEqual(graph.number_of_nodes(), 4)
        self.assertEqual(graph.number_of_edges(), 4)
        self.assertEqual(graph.nodes[2]["pos"], (1.0, 1.0))
        self.assertTrue(is_closed_tour(graph, 4))
        self.assertEqual(graph_length(graph), 4.0)

    def test_two_city_tour_graph(self):
        table = CityTable([(0, 0), (3, 4)])
        graph = table.tour_graph([1, 0])
        self.assertTrue(is_closed_tour(graph, 2))
        self.assertEqual(graph_length(graph), 10.0)

    def test_broken_tours_are_not_closed(self):
        table = CityTable(SQUARE)
        self.assertFalse(is_closed_tour(table.tour_graph([0, 1, 2]), 4))
        self.assertFalse(is_closed_tour(table.tour_graph([0, 1, 0, 2]), 4))
        self.assertFalse(is_closed_tour(table.tour_graph([0, 1, 2, 3]), 5))


class TestFitnessEvaluator(unittest.TestCase):
    """Test closed path length computation across backends."""

    def test_square_lengths(self):
        evaluator = FitnessEvaluator(CityTable(SQUARE))
        self.assertEqual(evaluator([0, 1, 2, 3]), 4.0)
        self.assertAlmostEqual(evaluator([0, 2, 1, 3]), 2 + 2 * math.sqrt(2))

    def test_two_cities(self):
        evaluator = FitnessEvaluator(CityTable([(0, 0), (3, 4)]))
        self.assertEqual(evaluator([1, 0]), 10.0)

    def test_matches_graph_length(self):
        table = CityTable(random_cities(15))
        evaluator = FitnessEvaluator(table)
        order = list(range(15))
        random.Random(3).shuffle(order)
        self.assertAlmostEqual(evaluator(order), graph_length(table.tour_graph(order)))

    def test_reduction_agrees_with_sequential(self):
        table = CityTable(random_cities(50, seed=1))
        sequential = FitnessEvaluator(table)
        reduction = FitnessEvaluator(table, backend="reduction", workers=4, min_chunk=1)
        order = list(range(50))
        random.Random(7).shuffle(order)
        self.assertAlmostEqual(reduction(order), sequential(order), places=9)
        # Same order, same chunking, same value.
        self.assertEqual(reduction(order), reduction(order))

    def test_torch_agrees_with_sequential(self):
        table = CityTable(random_cities(20, seed=2))
        sequential = FitnessEvaluator(table)
        tensor = FitnessEvaluator(table, backend="torch")
        order = list(range(20))
        random.Random(11).shuffle(order)
        self.assertAlmostEqual(tensor(order), sequential(order), places=9)

    def test_invalid_backend(self):
        table = CityTable(SQUARE)
        with self.assertRaises(InvalidConfigurationError):
            FitnessEvaluator(table, backend="gpu")
        with self.assertRaises(InvalidConfigurationError):
            FitnessEvaluator(table, backend="reduction", workers=0)

    def test_coincident_cities_stay_finite(self):
        evaluator = FitnessEvaluator(CityTable([(0, 0), (0, 0), (3, 4)]))
        value = evaluator([0, 1, 2])
        self.assertTrue(math.isfinite(value))
        self.assertEqual(value, 10.0)

    def test_all_coincident_uses_sentinel(self):
        for backend in ("sequential", "reduction", "torch"):
            evaluator = FitnessEvaluator(CityTable([(2, 2), (2, 2), (2, 2)]), backend=backend)
            value = evaluator([2, 0, 1])
            self.assertEqual(value, ZERO_LENGTH_FITNESS)
            self.assertFalse(math.isnan(value))
            self.assertFalse(math.isinf(value))


class TestTour(unittest.TestCase):
    """Test tour construction and cached fitness."""

    def setUp(self):
        self.evaluator = FitnessEvaluator(CityTable(random_cities(12)))

    def test_explicit_order(self):
        tour = Tour([3, 1, 2, 0, 4, 5, 6, 7, 8, 9, 10, 11], self.evaluator)
        self.assertEqual(tour.order[:4], (3, 1, 2, 0))
        self.assertTrue(tour.is_valid())
        self.assertEqual(tour.length, tour.fitness)

    def test_rejects_non_permutation(self):
        with self.assertRaises(InvalidInputError):
            Tour([0] * 12, self.evaluator)
        with self.assertRaises(InvalidInputError):
            Tour(list(range(11)), self.evaluator)
        with self.assertRaises(InvalidInputError):
            Tour(list(range(1, 13)), self.evaluator)

    def test_rejects_non_integer_indices(self):
        order = list(range(12))
        for bad in (1.7, "1", None, float("nan")):
            order[1] = bad
            with self.assertRaises(InvalidInputError):
                Tour(order, self.evaluator)
        order[1] = 1.0
        self.assertEqual(Tour(order, self.evaluator).order, tuple(range(12)))

    def test_random_is_permutation(self):
        rng = random.Random(0)
        for _ in range(20):
            tour = Tour.random(self.evaluator, rng)
            self.assertTrue(is_permutation(tour.order, 12))

    def test_random_fixed_start(self):
        rng = random.Random(1)
        for _ in range(20):
            tour = Tour.random(self.evaluator, rng, fix_start=True)
            self.assertEqual(tour.order[0], 0)
            self.assertTrue(tour.is_valid())

    def test_fitness_is_idempotent(self):
        rng = random.Random(2)
        for _ in range(10):
            tour = Tour.random(self.evaluator, rng)
            cached = tour.fitness
            self.assertEqual(tour.recompute_fitness(), cached)
            self.assertEqual(self.evaluator(tour.order), cached)

    def test_cycle_and_coordinates(self):
        evaluator = FitnessEvaluator(CityTable(SQUARE))
        tour = Tour([1, 2, 3, 0], evaluator)
        self.assertEqual(tour.cycle(), [1, 2, 3, 0, 1])
        coords = tour.coordinates()
        self.assertEqual(coords[0], coords[-1])
        self.assertEqual(coords[0], (0.0, 1.0))
        self.assertEqual(tour.fitness, 4.0)


if __name__ == '__main__':
    unittest.main()
