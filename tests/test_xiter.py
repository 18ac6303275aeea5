from itertools import islice

from ottercache.xiter import concat, merge_func


def cmp(a, b):
    return (a > b) - (a < b)


def cmp_first(a, b):
    return cmp(a[0], b[0])


def _endless():
    while True:
        yield 7


def test_concat_preserves_order():
    a, b, c = [1, 2], [], [3, 4, 5]
    assert list(concat(a, b, c)) == a + b + c


def test_concat_empty():
    assert list(concat()) == []


def test_concat_is_lazy():
    assert list(islice(concat([1], _endless()), 3)) == [1, 7, 7]


def test_merge_sorted():
    x = [1, 4, 6, 9]
    y = [2, 3, 7, 10, 11]
    assert list(merge_func(x, y, cmp)) == sorted(x + y)


def test_merge_ties_prefer_x():
    x = [(1, "x"), (2, "x"), (3, "x")]
    y = [(2, "y"), (3, "y"), (4, "y")]
    merged = list(merge_func(x, y, cmp_first))
    assert merged == sorted(x + y, key=lambda t: t[0])


def test_merge_with_empty_side():
    x = [1, 2, 3]
    assert list(merge_func(x, [], cmp)) == x
    assert list(merge_func([], x, cmp)) == x


def test_merge_unsorted_keeps_all_values():
    x = [5, 1, 3]
    y = [4, 2]
    merged = list(merge_func(x, y, cmp))
    assert sorted(merged) == sorted(x + y)


def test_merge_early_stop():
    merged = merge_func([1, 3, 5], [2, 4, 6], cmp)
    assert list(islice(merged, 2)) == [1, 2]