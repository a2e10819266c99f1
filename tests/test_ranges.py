import random

import pytest

from loxgen.ranges import Range, compare, flatten, normalize, subtract


def r(a, b):
    return Range(ord(a), ord(b))


def to_ranges(values):
    it = iter(values)
    return [Range(b, e) for b, e in zip(it, it)]


def shuffled(values, seed):
    ranges = to_ranges(values)
    random.Random(seed).shuffle(ranges)
    return ranges


@pytest.mark.parametrize(
    "ab, ae, bb, be, expected",
    [
        ("a", "d", "b", "e", False),
        ("b", "e", "a", "f", False),
        ("c", "d", "a", "f", False),
        ("a", "f", "c", "d", True),
        ("a", "b", "b", "c", False),
        ("b", "c", "a", "b", False),
        ("a", "b", "c", "d", False),
        ("c", "d", "a", "b", False),
        ("c", "d", "c", "d", True),
    ],
)
def test_contains(ab, ae, bb, be, expected):
    assert r(ab, ae).contains(r(bb, be)) is expected


@pytest.mark.parametrize(
    "ab, ae, bb, be, expected",
    [
        ("a", "d", "b", "e", True),
        ("b", "e", "a", "d", True),
        ("c", "d", "a", "f", True),
        ("a", "f", "c", "d", True),
        ("a", "b", "b", "c", True),
        ("b", "c", "a", "b", True),
        ("a", "b", "c", "d", False),
        ("c", "d", "a", "b", False),
    ],
)
def test_intersects(ab, ae, bb, be, expected):
    assert r(ab, ae).intersects(r(bb, be)) is expected


@pytest.mark.parametrize(
    "ab, ae, bb, be, expected",
    [
        ("a", "d", "b", "e", True),
        ("b", "e", "a", "d", True),
        ("c", "d", "a", "f", True),
        ("a", "f", "c", "d", True),
        ("a", "b", "b", "c", True),
        ("b", "c", "a", "b", True),
        ("a", "b", "c", "d", True),
        ("c", "d", "a", "b", True),
        ("a", "b", "d", "e", False),
        ("d", "e", "a", "b", False),
    ],
)
def test_touches(ab, ae, bb, be, expected):
    assert r(ab, ae).touches(r(bb, be)) is expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([0, 2, 8, 9, 1, 3], [0, 3, 8, 9]),
        ([4, 6, 0, 2, 7, 9], [0, 2, 4, 9]),
        ([4, 6, 0, 2, 8, 9], [0, 2, 4, 6, 8, 9]),
        ([9, 9, 8, 8, 7, 7, 6, 6, 4, 4, 3, 3, 2, 2], [2, 4, 6, 9]),
    ],
)
def test_flatten(values, expected):
    assert flatten(to_ranges(values)) == to_ranges(expected)


def test_flatten_reports_merges():
    calls = []
    result = flatten([Range(0, 2), Range(1, 3)], lambda a, b, n: calls.append((a, b, n)))
    assert result == [Range(0, 3)]
    assert calls == [(Range(0, 2), Range(1, 3), Range(0, 3))]


def test_flatten_leaves_input_untouched():
    original = [Range(5, 6), Range(0, 1)]
    flatten(original)
    assert original == [Range(5, 6), Range(0, 1)]


NORMALIZE_CASES = [
    ([0, 2, 0, 5], [0, 2, 3, 5]),
    ([0, 5, 3, 5], [0, 2, 3, 5]),
    ([0, 5, 3, 8], [0, 2, 3, 5, 6, 8]),
    ([0, 8, 3, 5], [0, 2, 3, 5, 6, 8]),
    ([0, 8, 3, 5, 3, 3, 8, 8, 9, 9], [0, 2, 3, 3, 4, 5, 6, 7, 8, 8, 9, 9]),
    ([2, 9, 5, 5, 6, 8, 6, 9], [2, 4, 5, 5, 6, 8, 9, 9]),
]


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("values, expected", NORMALIZE_CASES)
def test_normalize(values, expected, seed):
    result = set(to_ranges(values))

    def on_change(o, a, b, c):
        assert o in result
        result.remove(o)
        result.add(a)
        result.add(b)
        if c != b:
            result.add(c)

    normalize(shuffled(values, seed), on_change)
    assert sorted(result) == to_ranges(expected)


def test_normalize_disjoint_reports_nothing():
    calls = []
    normalize([Range(0, 1), Range(3, 4)], lambda *args: calls.append(args))
    assert calls == []


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize(
    "a, b, expected",
    [
        ([0, 4, 6, 9], [0, 1, 4, 5, 7, 8], [2, 3, 6, 6, 9, 9]),
        ([1, 4, 6, 9], [0, 2], [3, 4, 6, 9]),
        ([0, 4, 6, 9], [4, 9], [0, 3]),
        ([0, 4, 6, 9], [7, 9], [0, 4, 6, 6]),
    ],
)
def test_subtract(a, b, expected, seed):
    assert subtract(shuffled(a, seed), shuffled(b, seed + 100)) == to_ranges(expected)


def test_subtract_with_empty_operand_returns_first():
    assert subtract([Range(3, 4), Range(0, 1)], []) == [Range(3, 4), Range(0, 1)]
    assert subtract([], [Range(0, 1)]) == []


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (Range(1, 2), Range(2, 3), -1),
        (Range(2, 3), Range(1, 2), 1),
        (Range(1, 2), Range(1, 3), -1),
        (Range(1, 3), Range(1, 2), 1),
        (Range(1, 2), Range(1, 2), 0),
    ],
)
def test_compare(a, b, expected):
    assert compare(a, b) == expected


@pytest.mark.parametrize(
    "rng, text",
    [
        (Range(ord("0"), ord("9")), "0-9"),
        (Range(ord("5"), ord("5")), "5"),
        (Range(ord("-"), ord("-")), "\\-"),
        (Range(0, ord("/")), "\\u0000-/"),
        (Range(ord(":"), 0x7FFFFFFF), ":-\\u7fffffff"),
        (Range(ord("0"), 0x10FFFF), "0-\\u10ffff"),
        (Range(ord("\n"), ord("\t")), "\\n-\\t"),
    ],
)
def test_str(rng, text):
    assert str(rng) == text