from __future__ import annotations

import math

import numpy as np
import pytest

from gaphist.fit import evenly_spaced_quantiles, r_squared
from gaphist.histogram import Histogram


def _histogram_of(values: list[float], max_bins: int) -> Histogram:
    histogram = Histogram(max_bins)
    for value in values:
        histogram.update(value)
    return histogram


def test_query_endpoints_return_min_and_max() -> None:
    histogram = Histogram(5)
    histogram.update_many(np.random.default_rng(5).standard_normal(250))

    assert histogram.query([0.0]) == [histogram.min]
    assert histogram.query([1.0]) == [histogram.max]
    assert histogram.query([0.0, 1.0]) == [histogram.min, histogram.max]


def test_query_clamps_out_of_range_quantiles() -> None:
    histogram = _histogram_of([2.0, 4.0, 8.0], max_bins=2)

    assert histogram.query([-0.5, 1.5]) == [2.0, 8.0]


def test_query_linear_interpolation_between_equal_counts() -> None:
    histogram = _histogram_of([1.0, 2.0, 3.0], max_bins=5)

    np.testing.assert_allclose(histogram.query([0.5]), [1.5])


def test_query_quadratic_interpolation_between_unequal_counts() -> None:
    histogram = _histogram_of([0.0, 0.0, 0.0, 1.0], max_bins=2)

    result = histogram.query([0.5, 0.75])

    np.testing.assert_allclose(result[0], 0.0)
    np.testing.assert_allclose(result[1], (3.0 - math.sqrt(5.0)) / 2.0)


def test_query_cursor_is_shared_across_quantiles() -> None:
    histogram = Histogram(16)
    histogram.update_many(np.random.default_rng(9).standard_normal(400))
    quantiles = [0.1, 0.25, 0.5, 0.75, 0.9]

    together = histogram.query(quantiles)
    separately = [histogram.query([q])[0] for q in quantiles]

    np.testing.assert_allclose(together, separately, atol=1e-12)


def test_query_repeated_quantiles_return_same_value() -> None:
    histogram = Histogram(10)
    histogram.update_many(np.linspace(0.0, 1.0, 101))

    first, second = histogram.query([0.3, 0.3])

    assert first == second


def test_query_does_not_mutate_histogram() -> None:
    histogram = Histogram(6)
    histogram.update_many(np.random.default_rng(1).uniform(0.0, 10.0, 100))
    before = (list(histogram.iter_bins()), histogram.count, histogram.bins)

    histogram.query(evenly_spaced_quantiles(50))

    assert (list(histogram.iter_bins()), histogram.count, histogram.bins) == before


def test_query_is_monotonic_for_ascending_input() -> None:
    values = np.random.default_rng(21).standard_normal(50)
    histogram = Histogram(64)
    histogram.update_many(values)

    result = histogram.query(evenly_spaced_quantiles(500))

    assert all(left <= right for left, right in zip(result, result[1:]))


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_query_is_monotonic_after_merges(seed: int) -> None:
    histogram = Histogram(10)
    histogram.update_many(np.random.default_rng(seed).standard_normal(1000))

    result = histogram.query(evenly_spaced_quantiles(1000))

    assert histogram.bins == 10
    assert all(left <= right for left, right in zip(result, result[1:]))


def test_query_floors_negative_discriminant() -> None:
    histogram = _histogram_of([0.0, 0.0, 0.0, 0.0, 1.0], max_bins=2)
    assert list(histogram.iter_bins()) == [(0.0, 4), (1.0, 1)]

    # Counts 4 and 1 give the last bin more area than its linear density
    # holds; past q ~ 0.934 the root is floored and lands beyond max.
    result = histogram.query([0.9, 0.95, 0.99, 1.0])

    np.testing.assert_allclose(result[0], 1.0)
    np.testing.assert_allclose(result[1:3], [4.0 / 3.0, 4.0 / 3.0])
    assert result[3] == histogram.max == 1.0
    assert all(math.isfinite(value) for value in result)


def test_query_returns_same_length_as_input() -> None:
    histogram = _histogram_of([1.0, 2.0], max_bins=2)

    assert histogram.query([]) == []
    assert len(histogram.query(np.linspace(0.0, 1.0, 17))) == 17


def test_quantile_is_single_value_query() -> None:
    histogram = Histogram(8)
    histogram.update_many(np.arange(100, dtype=np.float64))

    assert histogram.quantile(0.42) == histogram.query([0.42])[0]


def test_query_rejects_descending_quantiles() -> None:
    histogram = _histogram_of([1.0, 2.0, 3.0], max_bins=3)

    with pytest.raises(ValueError, match="non-decreasing"):
        histogram.query([0.5, 0.25])


def test_query_rejects_nan_quantile() -> None:
    histogram = _histogram_of([1.0, 2.0, 3.0], max_bins=3)

    with pytest.raises(ValueError, match="NaN"):
        histogram.query([0.1, math.nan])


def test_query_on_empty_histogram() -> None:
    histogram = Histogram(3)

    assert histogram.query([0.0, 1.0]) == [math.inf, -math.inf]
    with pytest.raises(ValueError, match="No observations"):
        histogram.query([0.5])


@pytest.mark.parametrize("max_bins", [10, 100])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_histogram_fits_normal_sample(max_bins: int, seed: int) -> None:
    sample = np.random.default_rng(seed).standard_normal(1000)
    histogram = Histogram(max_bins)
    for value in sample:
        histogram.update(float(value))

    actual = histogram.query(evenly_spaced_quantiles(1000))

    assert r_squared(actual, np.sort(sample)) > 0.9


def test_histogram_median_of_uniform_stream() -> None:
    sample = np.random.default_rng(42).uniform(0.0, 100.0, 1000)
    histogram = Histogram(10)
    histogram.update_many(sample)

    np.testing.assert_allclose(histogram.quantile(0.5), 50.0, atol=5.0)
