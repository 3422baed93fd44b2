"""
Tests for building the dense distance oracle from sparse entries.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import math
import unittest
import numpy as np
from calculations.distance_oracle import build_distance_oracle, collect_nodes


def _entry(a, b, d):
    return {'from': a, 'to': b, 'distance': d}


class TestBuildDistanceOracle(unittest.TestCase):

    def setUp(self):
        self.entries = [
            _entry(10, 20, 3.0),
            _entry(30, 20, 4.5),
            _entry(10, 40, 0.0),
        ]
        self.oracle = build_distance_oracle(self.entries)

    def test_nodes_are_sorted_union_of_endpoints(self):
        self.assertEqual(self.oracle.nodes, [10, 20, 30, 40])
        self.assertEqual(collect_nodes(self.entries), [10, 20, 30, 40])
        self.assertEqual(len(self.oracle), 4)
        self.assertIn(30, self.oracle)
        self.assertNotIn(99, self.oracle)

    def test_distance_is_symmetric(self):
        self.assertEqual(self.oracle.distance(10, 20), 3.0)
        self.assertEqual(self.oracle.distance(20, 10), 3.0)
        self.assertEqual(self.oracle.distance(20, 30), 4.5)
        self.assertEqual(self.oracle.distance(30, 20), 4.5)

    def test_zero_distance_entry_is_kept(self):
        self.assertEqual(self.oracle.distance(40, 10), 0.0)

    def test_self_distance_is_zero(self):
        for node in self.oracle.nodes:
            self.assertEqual(self.oracle.distance(node, node), 0.0)

    def test_missing_pairs_are_infinite(self):
        self.assertTrue(math.isinf(self.oracle.distance(10, 30)))
        self.assertTrue(math.isinf(self.oracle.distance(40, 20)))
        self.assertEqual(self.oracle.unknown_pair_count(), 3)
        self.assertFalse(self.oracle.is_complete())

    def test_unknown_node_raises_key_error(self):
        with self.assertRaises(KeyError):
            self.oracle.distance(10, 99)
        with self.assertRaises(KeyError):
            self.oracle.distance(99, 99)

    def test_matrix_is_read_only(self):
        with self.assertRaises(ValueError):
            self.oracle.matrix[0, 1] = 1.0


def test_later_entry_overrides_earlier_pair():
    oracle = build_distance_oracle([_entry(1, 2, 5.0), _entry(2, 1, 7.0)])
    assert oracle.distance(1, 2) == 7.0
    assert oracle.distance(2, 1) == 7.0


def test_self_pair_entry_is_ignored():
    oracle = build_distance_oracle([_entry(1, 1, 9.0), _entry(1, 2, 2.0)])
    assert oracle.distance(1, 1) == 0.0


def test_complete_input_has_no_unknown_pairs():
    entries = [_entry(a, b, float(a + b)) for a in range(5) for b in range(a + 1, 5)]
    oracle = build_distance_oracle(entries)
    assert oracle.is_complete()
    assert np.isfinite(oracle.matrix).all()
    assert np.array_equal(oracle.matrix, oracle.matrix.T)
    assert (np.diag(oracle.matrix) == 0).all()


def test_submatrix_follows_requested_order():
    oracle = build_distance_oracle([_entry(1, 2, 1.0), _entry(2, 3, 2.0), _entry(1, 3, 3.0)])
    sub = oracle.submatrix([3, 1])
    assert sub.tolist() == [[0.0, 3.0], [3.0, 0.0]]


def test_explicit_node_set_adds_isolated_nodes():
    oracle = build_distance_oracle([_entry(1, 2, 1.0)], nodes=[2, 1, 7])
    assert oracle.nodes == [1, 2, 7]
    assert math.isinf(oracle.distance(1, 7))


def test_empty_entries_give_empty_oracle():
    oracle = build_distance_oracle([])
    assert len(oracle) == 0
    assert oracle.unknown_pair_count() == 0
