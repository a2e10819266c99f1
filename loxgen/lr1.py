"""FIRST sets, closure, goto and next-symbol computations for LR(1)."""

from __future__ import annotations

from typing import Sequence

from loxgen.grammar import EPSILON, Grammar, Item, ItemSet, Rule, Term, Terminal


def first(grammar: Grammar, syms: Sequence[Term]) -> set[Terminal]:
    """Return the terminals that can begin a derivation of ``syms``.

    EPSILON is in the result when every symbol can derive the empty string.
    """
    visited: set[int] = set()
    result: set[Terminal] = set()
    for sym in syms:
        partial = _first_of(grammar, visited, sym)
        result |= partial
        if EPSILON not in partial:
            result.discard(EPSILON)
            break
    return result


def _first_of(grammar: Grammar, visited: set[int], sym: Term) -> set[Terminal]:
    if isinstance(sym, Terminal):
        return {sym}

    # Rules may be recursive, e.g. xs = xs x | x.
    if id(sym) in visited:
        return set()
    visited.add(id(sym))

    result: set[Terminal] = set()
    for prod in sym.prods:
        if not prod.terms:
            result.add(EPSILON)
            continue

        derives_empty = True
        for term in prod.terms:
            term_first = _first_of(grammar, visited, term)
            result |= term_first - {EPSILON}
            if EPSILON not in term_first:
                derives_empty = False
                break
        if derives_empty:
            result.add(EPSILON)
    return result


def closure(grammar: Grammar, item_set: ItemSet) -> ItemSet:
    """Return the closure of ``item_set``.

    For each item [A -> α.Bβ, a] and each production B -> γ, the items
    [B -> .γ, x] for every x in FIRST(βa) are added.
    """
    result = ItemSet()
    result.add_set(item_set)
    pending = ItemSet()
    pending.add_set(item_set)

    while len(pending):
        pending_items = list(pending.items())
        pending.clear()
        for item in pending_items:
            prod = grammar.prods[item.prod]
            if item.dot == len(prod.terms):
                continue
            term_b = prod.terms[item.dot]
            if not isinstance(term_b, Rule):
                continue
            beta = prod.terms[item.dot + 1 :]
            lookahead = grammar.terminals[item.lookahead]
            first_set = first(grammar, [*beta, lookahead])
            for prod_b in term_b.prods:
                for terminal in first_set:
                    new_item = Item(prod=prod_b.index, dot=0, lookahead=terminal.index)
                    if result.add(new_item):
                        pending.add(new_item)
    return result


def goto(grammar: Grammar, from_set: ItemSet, sym: Term) -> ItemSet:
    """Return the closure of the items of ``from_set`` advanced past ``sym``."""
    to = ItemSet()
    for item in from_set:
        prod = grammar.prods[item.prod]
        if item.dot == len(prod.terms):
            continue
        if prod.terms[item.dot] is not sym:
            continue
        to.add(Item(prod=item.prod, dot=item.dot + 1, lookahead=item.lookahead))
    return closure(grammar, to)


def next_symbols(grammar: Grammar, item_set: ItemSet) -> list[Term]:
    """Return the distinct symbols right after the dot, sorted by name."""
    symbols: dict[int, Term] = {}
    for item in item_set:
        prod = grammar.prods[item.prod]
        if item.dot >= len(prod.terms):
            continue
        sym = prod.terms[item.dot]
        symbols.setdefault(id(sym), sym)
    return sorted(symbols.values(), key=lambda t: t.name)