import math
import random

import pytest

from barrage.quantiles import QuantileSketch


def test_empty_sketch_has_no_answer():
    s = QuantileSketch()
    assert not s
    assert s.query(0.5) is None


def test_single_value():
    s = QuantileSketch()
    s.insert(10.0)
    assert s.count == 1
    for phi in (0.0, 0.5, 1.0):
        assert s.query(phi) == 10.0


def test_rejects_out_of_range_quantile():
    s = QuantileSketch()
    s.insert(1.0)
    with pytest.raises(ValueError):
        s.query(1.5)
    with pytest.raises(ValueError):
        s.query(-0.1)


def test_error_is_clamped():
    assert QuantileSketch(0.0).error > 0
    assert QuantileSketch(5.0).error == 1.0


def test_min_and_max_are_exact():
    rng = random.Random(7)
    values = [rng.expovariate(0.1) for _ in range(3000)]
    s = QuantileSketch(0.01)
    for v in values:
        s.insert(v)
    assert s.query(0.0) == min(values)
    assert s.query(1.0) == max(values)


@pytest.mark.parametrize("error,m", [(0.01, 2000), (0.05, 1000), (0.001, 3000)])
def test_rank_error_is_bounded(error, m):
    values = list(range(m))
    random.Random(m).shuffle(values)
    s = QuantileSketch(error)
    for v in values:
        s.insert(float(v))

    for i in range(101):
        phi = i / 100
        got = s.query(phi)
        # value v has rank v + 1
        assert abs((got + 1) - math.ceil(phi * m)) <= error * m + 1


def test_quantiles_are_monotone():
    rng = random.Random(11)
    s = QuantileSketch(0.01)
    for _ in range(5000):
        s.insert(rng.gauss(50.0, 12.0))
    answers = [s.query(i / 1000) for i in range(1001)]
    assert answers == sorted(answers)


def test_compression_bounds_memory():
    s = QuantileSketch(0.01)
    for v in range(20000):
        s.insert(float(v % 977))
    assert s.count == 20000
    assert len(s) < s.count // 4


def test_duplicate_values():
    s = QuantileSketch(0.01)
    for _ in range(500):
        s.insert(3.0)
    assert s.query(0.0) == 3.0
    assert s.query(0.5) == 3.0
    assert s.query(1.0) == 3.0
