"""
Tests for parameter validation and feasibility warnings.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from config import Config
from exceptions import InvalidParameterError, DataValidationError
from calculations.validation import validate_params, validate_feasibility, check_scaling_ceiling


def _params(min_clusters=2, max_clusters=4, min_cluster_size=2):
    return {'min_clusters': min_clusters, 'max_clusters': max_clusters, 'min_cluster_size': min_cluster_size}


def test_valid_params_pass():
    validate_params(_params())
    validate_params(_params(min_clusters=3, max_clusters=3, min_cluster_size=1))


def test_min_greater_than_max_is_rejected():
    with pytest.raises(InvalidParameterError) as excinfo:
        validate_params(_params(min_clusters=5, max_clusters=3))
    assert excinfo.value.parameter == 'max_clusters'
    assert "cannot be greater than" in str(excinfo.value)


@pytest.mark.parametrize("name", ['min_clusters', 'max_clusters', 'min_cluster_size'])
def test_non_positive_values_are_rejected(name):
    params = _params()
    params[name] = 0
    with pytest.raises(InvalidParameterError) as excinfo:
        validate_params(params)
    assert excinfo.value.parameter == name


def test_non_integer_and_missing_values_are_rejected():
    with pytest.raises(InvalidParameterError):
        validate_params(_params(min_cluster_size=1.5))
    with pytest.raises(InvalidParameterError):
        validate_params(_params(max_clusters=True))
    with pytest.raises(InvalidParameterError) as excinfo:
        validate_params({'min_clusters': 1, 'max_clusters': 2})
    assert excinfo.value.parameter == 'min_cluster_size'


def test_parameter_error_is_a_data_validation_error():
    with pytest.raises(DataValidationError):
        validate_params(_params(min_clusters=-1))


def test_feasible_combination_has_no_warnings():
    assert validate_feasibility(10, _params(min_clusters=2, min_cluster_size=3)) == []


def test_too_few_points_for_min_clusters():
    warnings = validate_feasibility(4, _params(min_clusters=5, max_clusters=6, min_cluster_size=3))
    assert "Cannot form 5 clusters from only 4 unique data points." in warnings
    assert not any("exceeds" in w for w in warnings)
    assert len(warnings) == 2


def test_product_of_count_and_size_exceeds_points():
    warnings = validate_feasibility(5, _params(min_clusters=2, min_cluster_size=3))
    assert len(warnings) == 1
    assert "might be impossible to form 2 clusters" in warnings[0]


def test_scaling_ceiling():
    assert check_scaling_ceiling(Config.MAX_NODES_WARNING) is None
    message = check_scaling_ceiling(Config.MAX_NODES_WARNING + 1)
    assert message is not None
    assert str(Config.MAX_NODES_WARNING) in message
