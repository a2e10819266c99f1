"""LR(1) grammars: terminals, rules, productions and items over them."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable, Iterator, Optional, Sequence, TypeVar, Union

EOF_INDEX = 0
SPRIME_PROD_INDEX = 0
SPRIME = "S'"

_INDENT = "  "


class Associativity(IntEnum):
    LEFT = 0
    RIGHT = 1


@dataclass(eq=False)
class Terminal:
    """A terminal symbol of the grammar."""

    index: int
    name: str
    alias: str = ""
    user_data: Any = None


EPSILON = Terminal(index=-1, name="ε")


@dataclass(eq=False)
class Rule:
    """A non-terminal: a named collection of productions."""

    index: int
    name: str
    prods: list[Prod] = field(default_factory=list)
    position: Optional[Any] = None
    user_data: Any = None


Term = Union[Terminal, Rule]
T = TypeVar("T", Terminal, Rule)


@dataclass(eq=False)
class Prod:
    """A production: an ordered sequence of terms belonging to a rule."""

    index: int
    rule: Rule
    terms: list[Term] = field(default_factory=list)
    precedence: int = 0
    associativity: Associativity = Associativity.LEFT
    position: Optional[Any] = None
    user_data: Any = None


def term_names(terms: Iterable[Term]) -> list[str]:
    """Return the names of the given terms, in order."""
    return [t.name for t in terms]


def sort_terms(terms: list[T]) -> None:
    """Sort terms in place by name."""
    terms.sort(key=lambda t: t.name)


class Grammar:
    """A context-free grammar with an augmented start rule ``S'``."""

    def __init__(self) -> None:
        self.terminals: list[Terminal] = []
        self.rules: list[Rule] = []
        self.prods: list[Prod] = []
        self.eof_terminal = self.add_terminal("EOF")
        self.error_terminal = self.add_terminal("ERROR")
        sprime = self.add_rule(SPRIME)
        sprime_prod = self.add_prod(sprime)
        assert sprime_prod.index == SPRIME_PROD_INDEX

    def set_start(self, rule: Rule) -> None:
        """Make ``rule`` the symbol the grammar derives."""
        self.prods[SPRIME_PROD_INDEX].terms = [rule]

    def add_terminal(self, name: str) -> Terminal:
        terminal = Terminal(index=len(self.terminals), name=name)
        self.terminals.append(terminal)
        return terminal

    def add_rule(self, name: str) -> Rule:
        rule = Rule(index=len(self.rules), name=name)
        self.rules.append(rule)
        return rule

    def add_prod(self, rule: Rule, *args: Term) -> Prod:
        """Add a production with the given terms to ``rule``."""
        prod = Prod(index=len(self.prods), rule=rule, terms=list(args))
        self.prods.append(prod)
        rule.prods.append(prod)
        return prod

    def last_prod(self) -> Prod:
        return self.prods[-1]

    def to_text(self) -> str:
        """Render a readable listing of the grammar's terminals and rules."""
        lines = ["Terminals", "========="]
        lines.extend(t.name for t in self.terminals)
        lines.extend(["", "Rules", "====="])

        for rule in self.rules:
            if not rule.prods:
                lines.append(f"{rule.name} = <rule has no prods>")
                continue
            lines.append(f"{rule.name} = {_prod_text(rule.prods[0])}")
            for prod in rule.prods[1:]:
                lines.append(f"{_INDENT}| {_prod_text(prod)}")
        return "\n".join(lines) + "\n"


def _prod_text(prod: Prod) -> str:
    text = " ".join(t.name for t in prod.terms) if prod.terms else "ε"
    if prod.precedence > 0:
        assoc = "@right" if prod.associativity == Associativity.RIGHT else "@left"
        text += f"  {assoc}({prod.precedence})"
    return text


@dataclass(frozen=True, order=True)
class Item:
    """An LR(1) item: a production, a dot position and a lookahead terminal."""

    prod: int
    dot: int
    lookahead: int

    def is_kernel(self) -> bool:
        return self.prod == SPRIME_PROD_INDEX or self.dot != 0

    def to_string(self, grammar: Grammar) -> str:
        prod = grammar.prods[self.prod]
        parts = []
        for j, term in enumerate(prod.terms):
            parts.append("." + term.name if j == self.dot else term.name)
        body = " ".join(parts)
        if self.dot == len(prod.terms):
            body += "."
        lookahead = grammar.terminals[self.lookahead].name
        return f"{prod.rule.name} = {body}, {lookahead}"


def sort_items(items: list[Item]) -> None:
    """Sort items in place by production, dot and lookahead."""
    items.sort()


class ItemSet:
    """A set of LR(1) items; also a state of the parser automaton."""

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self.index = 0
        self._set: set[Item] = set()
        self._cached: Optional[list[Item]] = None
        for item in items:
            self.add(item)

    def add(self, item: Item) -> bool:
        """Add ``item``; return True if it was not already present."""
        if item in self._set:
            return False
        self._set.add(item)
        self._cached = None
        return True

    def add_set(self, other: ItemSet) -> bool:
        """Add every item of ``other``; return True if anything was added."""
        before = len(self._set)
        self._set.update(other._set)
        changed = len(self._set) != before
        if changed:
            self._cached = None
        return changed

    def clear(self) -> None:
        self._set.clear()
        self._cached = None

    def items(self) -> list[Item]:
        """Return the items in sorted order."""
        if self._cached is None:
            self._cached = sorted(self._set)
        return self._cached

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._set)

    def __contains__(self, item: object) -> bool:
        return item in self._set

    def to_string(self, grammar: Grammar) -> str:
        return "\n".join(item.to_string(grammar) for item in self.items())

    def lr0_key(self) -> bytes:
        """Return a key identifying the set's LR(0) kernel."""
        seen: set[tuple[int, int]] = set()
        key = bytearray()
        for item in self.items():
            if not item.is_kernel():
                continue
            lr0 = (item.prod, item.dot)
            if lr0 in seen:
                continue
            seen.add(lr0)
            key += struct.pack(">II", item.prod, item.dot)
        return bytes(key)


def _names(terms: Sequence[Term]) -> list[str]:
    return [t.name for t in terms]