"""Inclusive code-point ranges and operations over collections of them."""

from __future__ import annotations

import heapq
import unicodedata
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

MAX_RUNE = 0x10FFFF

_ESCAPES = {
    ord("\n"): r"\n",
    ord("\r"): r"\r",
    ord("\t"): r"\t",
    ord("-"): r"\-",
}

_GRAPHIC_CATEGORY_PREFIXES = ("L", "M", "N", "P", "S")


def _is_graphic(code: int) -> bool:
    if code < 0 or code > MAX_RUNE:
        return False
    category = unicodedata.category(chr(code))
    return category.startswith(_GRAPHIC_CATEGORY_PREFIXES) or category == "Zs"


def _format_code(code: int) -> str:
    if code in _ESCAPES:
        return _ESCAPES[code]
    if _is_graphic(code):
        return chr(code)
    return f"\\u{code:04x}"


@dataclass(frozen=True, order=True)
class Range:
    """An inclusive range of code points [b, e]."""

    b: int
    e: int

    def contains(self, other: Range) -> bool:
        return self.b <= other.b and self.e >= other.e

    def intersects(self, other: Range) -> bool:
        lo, hi = (self, other) if self.b <= other.b else (other, self)
        return hi.b <= lo.e

    def touches(self, other: Range) -> bool:
        lo, hi = (self, other) if self.b <= other.b else (other, self)
        return hi.b <= lo.e or hi.b - 1 == lo.e

    def __str__(self) -> str:
        if self.b == self.e:
            return _format_code(self.b)
        return f"{_format_code(self.b)}-{_format_code(self.e)}"


def compare(a: Range, b: Range) -> int:
    """Order ranges by start, then by end; returns -1, 0 or 1."""
    if a.b != b.b:
        return -1 if a.b < b.b else 1
    if a.e != b.e:
        return -1 if a.e < b.e else 1
    return 0


class _RangeHeap:
    """Min-heap of ranges that ignores ranges already queued."""

    def __init__(self, ranges: Iterable[Range]) -> None:
        self._heap: list[Range] = []
        self._members: set[Range] = set()
        for r in ranges:
            self.push(r)

    def push(self, r: Range) -> None:
        if r in self._members:
            return
        self._members.add(r)
        heapq.heappush(self._heap, r)

    def pop(self) -> Range:
        r = heapq.heappop(self._heap)
        self._members.discard(r)
        return r

    def peek(self) -> Range:
        return self._heap[0]

    def __len__(self) -> int:
        return len(self._heap)


NormalizeCallback = Callable[[Range, Range, Range, Range], None]
FlattenCallback = Callable[[Range, Range, Range], None]


def normalize(ranges: Iterable[Range], on_change: NormalizeCallback) -> None:
    """Split overlapping ranges until no two of them intersect.

    Each split is reported as ``on_change(original, a, b, c)``: the original
    range is replaced by ``a``, ``b`` and ``c`` (``c`` equals ``b`` when the
    original splits into two pieces only).
    """
    rh = _RangeHeap(ranges)

    while len(rh) > 1:
        x = rh.pop()
        y = rh.peek()

        if x == y or not x.intersects(y):
            continue

        if x.b == y.b and x.e < y.e:
            a = Range(x.e + 1, y.e)
            on_change(y, x, a, a)
            rh.pop()
            rh.push(x)
            rh.push(a)
        elif x.b < y.b and x.e == y.e:
            a = Range(x.b, y.b - 1)
            on_change(x, a, y, y)
            rh.push(a)
        elif x.b < y.b and x.e < y.e:
            a = Range(x.b, y.b - 1)
            b = Range(y.b, x.e)
            c = Range(x.e + 1, y.e)
            on_change(x, a, b, b)
            on_change(y, b, c, c)
            rh.pop()
            rh.push(a)
            rh.push(b)
            rh.push(c)
        elif x.b < y.b and x.e > y.e:
            a = Range(x.b, y.b - 1)
            b = Range(y.e + 1, x.e)
            on_change(x, a, y, b)
            rh.push(a)
            rh.push(b)
        else:
            raise AssertionError("unexpected range layout")


def flatten(
    ranges: Iterable[Range], on_change: Optional[FlattenCallback] = None
) -> list[Range]:
    """Merge overlapping or adjacent ranges into a sorted, disjoint list.

    Each merge is reported as ``on_change(first, second, merged)``.
    """
    merged: list[Range] = []
    for r in sorted(ranges):
        if merged and merged[-1].touches(r):
            tip = merged.pop()
            n = Range(min(tip.b, r.b), max(tip.e, r.e))
            merged.append(n)
            if on_change is not None:
                on_change(tip, r, n)
            continue
        merged.append(r)
    return merged


def subtract(a: Iterable[Range], b: Iterable[Range]) -> list[Range]:
    """Return the code points covered by ``a`` but not by ``b``."""
    a = list(a)
    b = list(b)
    if not a or not b:
        return a

    remaining_a = flatten(a)
    remaining_b = flatten(b)
    a_pos = 0
    b_pos = 0
    result: list[Range] = []

    while b_pos < len(remaining_b):
        eb = remaining_b[b_pos]
        if not result or result[-1].e < eb.b:
            if a_pos == len(remaining_a):
                break
            result.append(remaining_a[a_pos])
            a_pos += 1
            continue

        ea = result[-1]
        if ea.b > eb.e:
            b_pos += 1
        elif ea.b >= eb.b and ea.e <= eb.e:
            result.pop()
        elif ea.b < eb.b and ea.e > eb.e:
            result.pop()
            result.append(Range(ea.b, eb.b - 1))
            result.append(Range(eb.e + 1, ea.e))
        elif ea.b < eb.b and ea.e <= eb.e:
            result.pop()
            result.append(Range(ea.b, eb.b - 1))
        elif ea.b >= eb.b and ea.e > eb.e:
            result.pop()
            result.append(Range(eb.e + 1, ea.e))
        else:
            raise AssertionError("unexpected range layout")

    return result + remaining_a[a_pos:]