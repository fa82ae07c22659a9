import math

import pytest

from bloomset.sizing import (
    FilterParams,
    estimated_false_positive_rate,
    needed_bits,
    optimal_num_hashes,
)


def test_known_parameters():
    assert needed_bits(0.01, 1000) == 9586
    assert optimal_num_hashes(9586, 1000) == 7
    assert FilterParams.for_rate(0.01, 1000) == FilterParams(num_bits=9586, num_hashes=7)


def test_needed_bits_matches_formula():
    for rate, n in [(0.1, 10), (0.05, 777), (0.001, 500_000)]:
        expected = math.ceil(-(n * math.log(rate)) / (math.log(2) * math.log(2)))
        assert needed_bits(rate, n) == expected


def test_num_hashes_at_least_one():
    assert optimal_num_hashes(1, 1000) == 1


def test_smaller_rate_never_shrinks_filter():
    rates = [0.5, 0.2, 0.1, 0.05, 0.01, 0.001, 1e-6]
    sizes = [needed_bits(rate, 1000) for rate in rates]
    assert sizes == sorted(sizes)


@pytest.mark.parametrize("rate", [0.0, 1.0, -0.1, 1.5])
def test_rate_outside_open_interval_rejected(rate):
    with pytest.raises(ValueError):
        needed_bits(rate, 100)
    with pytest.raises(ValueError):
        FilterParams.for_rate(rate, 100)


def test_item_count_rejected():
    with pytest.raises(ValueError):
        needed_bits(0.01, 0)
    with pytest.raises(ValueError):
        needed_bits(0.01, -5)
    with pytest.raises(TypeError):
        needed_bits(0.01, 1.5)


def test_for_size_validation():
    assert FilterParams.for_size(64, 3) == FilterParams(64, 3)
    with pytest.raises(ValueError):
        FilterParams.for_size(0, 3)
    with pytest.raises(ValueError):
        FilterParams.for_size(64, 0)
    with pytest.raises(TypeError):
        FilterParams.for_size(64.0, 3)


def test_params_are_immutable():
    params = FilterParams.for_size(64, 3)
    with pytest.raises(AttributeError):
        params.num_bits = 128


def test_estimated_false_positive_rate():
    assert estimated_false_positive_rate(9586, 7, 0) == 0.0
    # At design capacity the theoretical rate sits near the target.
    assert estimated_false_positive_rate(9586, 7, 1000) == pytest.approx(0.01, rel=0.1)


def test_estimated_false_positive_rate_validation():
    with pytest.raises(ValueError):
        estimated_false_positive_rate(0, 7, 100)
    with pytest.raises(ValueError):
        estimated_false_positive_rate(100, 0, 100)
