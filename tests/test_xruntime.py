import os

import pytest

from ottercache.xruntime import Hasher, fastrand, parallelism


def test_fastrand_in_uint32_range():
    values = [fastrand() for _ in range(1000)]
    assert all(0 <= v < 2**32 for v in values)
    assert len(set(values)) > 1


def test_parallelism_bounds():
    p = parallelism()
    assert 1 <= p <= (os.cpu_count() or 1)


def test_hasher_is_deterministic():
    h = Hasher()
    first = h.hash("key")
    assert 0 <= first < 2**64
    assert [h.hash("key") for _ in range(5)] == [first] * 5
    pair = h.hash((1, 2))
    assert [h.hash((1, 2)) for _ in range(5)] == [pair] * 5


def test_hasher_equal_values_equal_hashes():
    h = Hasher()
    assert h.hash(1) == h.hash(1.0)


def test_hasher_same_seed_agrees():
    a = Hasher(seed=12345)
    b = Hasher(seed=12345)
    for key in range(100):
        assert a.hash(key) == b.hash(key)


def test_hasher_range_and_spread():
    h = Hasher()
    hashes = {h.hash(i) for i in range(1000)}
    assert all(0 <= v < 2**64 for v in hashes)
    assert len(hashes) == 1000


def test_hasher_unhashable():
    with pytest.raises(TypeError):
        Hasher().hash([1, 2])