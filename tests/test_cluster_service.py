"""
End-to-end tests for the cluster service entry point.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json
import unittest
import pytest
from exceptions import SearchCancelledError
from calculations.cluster_service import ClusterService, NO_DATA_WARNING, result_to_json


TWO_PAIRS = [
    {'from': 0, 'to': 1, 'distance': 1.0},
    {'from': 2, 'to': 3, 'distance': 1.0},
    {'from': 0, 'to': 2, 'distance': 10.0},
    {'from': 0, 'to': 3, 'distance': 10.0},
    {'from': 1, 'to': 2, 'distance': 10.0},
    {'from': 1, 'to': 3, 'distance': 10.0},
]


def _params(min_clusters, max_clusters, min_cluster_size):
    return {'min_clusters': min_clusters, 'max_clusters': max_clusters, 'min_cluster_size': min_cluster_size}


class TestClusterService(unittest.TestCase):

    def setUp(self):
        self.service = ClusterService(max_workers=1)

    def test_empty_input_warns_without_error(self):
        result = self.service.run_clustering([], _params(2, 3, 1))
        self.assertEqual(result, {'warning': NO_DATA_WARNING})

    def test_two_pairs_are_found(self):
        result = self.service.run_clustering(TWO_PAIRS, _params(2, 2, 2), seed=42)
        self.assertEqual(result['chosen_k'], 2)
        self.assertEqual(result['chosen_clusters'], [
            {'id': 1, 'members': [0, 1]},
            {'id': 2, 'members': [2, 3]},
        ])
        self.assertEqual(result['all_metrics'], [
            {'k': 2, 'total_intra_cluster_distance': 2.0, 'number_of_valid_clusters': 2}
        ])
        self.assertNotIn('warning', result)
        self.assertNotIn('error', result)

    def test_too_few_points_warns_and_chooses_nothing(self):
        result = self.service.run_clustering(TWO_PAIRS, _params(5, 6, 3))
        self.assertIn("Cannot form 5 clusters from only 4 unique data points.", result['warning'])
        self.assertNotIn('chosen_clusters', result)
        self.assertNotIn('chosen_k', result)
        self.assertNotIn('error', result)
        self.assertEqual([m['k'] for m in result['all_metrics']], [5, 6])

    def test_inverted_range_is_an_error_with_no_metrics(self):
        result = self.service.run_clustering(TWO_PAIRS, _params(3, 2, 1))
        self.assertIn('error', result)
        self.assertNotIn('all_metrics', result)
        self.assertNotIn('chosen_clusters', result)

    def test_parameters_are_checked_before_empty_data(self):
        result = self.service.run_clustering([], _params(0, 2, 1))
        self.assertIn('error', result)
        self.assertNotIn('warning', result)

    def test_cancellation_propagates(self):
        with self.assertRaises(SearchCancelledError):
            self.service.run_clustering(TWO_PAIRS, _params(1, 2, 1), cancel_check=lambda: True)


def test_run_from_document_parses_json_text():
    service = ClusterService(max_workers=1)
    result = service.run_from_document(json.dumps(TWO_PAIRS), _params(2, 2, 2), seed=42)
    assert result['chosen_k'] == 2


def test_run_from_document_empty_array():
    result = ClusterService(max_workers=1).run_from_document("[]", _params(1, 2, 1))
    assert result == {'warning': NO_DATA_WARNING}


def test_run_from_document_reports_malformed_json():
    result = ClusterService(max_workers=1).run_from_document("{not json", _params(1, 2, 1))
    assert set(result) == {'error'}
    assert "Failed to parse" in result['error']


def test_run_from_document_reports_first_bad_entry():
    document = json.dumps([
        {'from': 0, 'to': 1, 'distance': 1.0},
        {'from': 1, 'to': 2, 'distance': -3},
        {'from': 'x', 'to': 2, 'distance': 1.0},
    ])
    result = ClusterService(max_workers=1).run_from_document(document, _params(1, 2, 1))
    assert set(result) == {'error'}
    assert result['error'].startswith("Entry 1:")
    assert "'distance'" in result['error']


def test_same_seed_same_result():
    service = ClusterService(max_workers=1)
    first = service.run_clustering(TWO_PAIRS, _params(1, 3, 1), seed=123)
    second = service.run_clustering(TWO_PAIRS, _params(1, 3, 1), seed=123)
    assert first == second


def test_result_to_json_writes_null_for_infinite_totals():
    result = ClusterService(max_workers=1).run_clustering(TWO_PAIRS, _params(1, 3, 2), seed=42)
    decoded = json.loads(result_to_json(result))
    totals = {row['k']: row['total_intra_cluster_distance'] for row in decoded['all_metrics']}
    assert totals[3] is None
    assert totals[2] == pytest.approx(2.0)
    assert decoded['chosen_k'] == 2
