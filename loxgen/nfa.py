"""Nondeterministic finite automata used to build lexers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable


class _Epsilon:
    """The empty-string input."""

    _instance: _Epsilon | None = None

    def __new__(cls) -> _Epsilon:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __str__(self) -> str:
        return "ε"

    __repr__ = __str__


EPSILON = _Epsilon()

_QUOTE_ESCAPES = {
    "\a": r"\a",
    "\b": r"\b",
    "\f": r"\f",
    "\n": r"\n",
    "\r": r"\r",
    "\t": r"\t",
    "\v": r"\v",
    "\\": r"\\",
    '"': r"\"",
}


def _dot_quote(text: str) -> str:
    out = []
    for ch in text:
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) <= 0xFFFF:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    return '"' + "".join(out) + '"'


def _shape(accept: bool, non_greedy: bool) -> str:
    if accept and non_greedy:
        return "doubleoctagon"
    if non_greedy:
        return "octagon"
    if accept:
        return "doublecircle"
    return "circle"


@dataclass(eq=False)
class State:
    """A state of an NFA; create states through a StateFactory."""

    id: int
    transitions: dict[Hashable, list[State]] = field(default_factory=dict)
    accept: bool = False
    non_greedy: bool = False
    data: Any = None

    def add_transition(self, to: State, input: Hashable) -> None:
        """Add a transition to ``to`` on ``input`` (which may be EPSILON)."""
        self.transitions.setdefault(input, []).append(to)

    def to_dot(self) -> str:
        """Render the automaton reachable from this state as a Graphviz graph."""
        edges: list[tuple[State, State, Hashable]] = []
        visited: dict[int, State] = {}
        seen: set[State] = set()
        pending = [self]
        while pending:
            state = pending.pop()
            if state in seen:
                continue
            seen.add(state)
            visited[id(state)] = state
            for input, dests in state.transitions.items():
                for dest in dests:
                    edges.append((state, dest, input))
                    pending.append(dest)

        edges.sort(key=lambda edge: (edge[0].id, edge[1].id))

        lines = ["digraph G {", '  rankdir="LR";']
        for src, dst, input in edges:
            lines.append(f"  {src.id} -> {dst.id} [label={_dot_quote(str(input))}];")
        for state in sorted(visited.values(), key=lambda s: s.id):
            shape = _shape(state.accept, state.non_greedy)
            lines.append(f'  {state.id} [label="{state.id}", shape="{shape}"];')
        lines.append("}")
        return "\n".join(lines) + "\n"


class StateFactory:
    """Creates NFA states with sequential ids."""

    def __init__(self) -> None:
        self._next_id = 0

    def new_state(self) -> State:
        state = State(id=self._next_id)
        self._next_id += 1
        return state