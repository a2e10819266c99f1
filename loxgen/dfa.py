"""Deterministic finite automata built from NFAs by subset construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable

from loxgen import nfa
from loxgen.nfa import EPSILON, _dot_quote, _shape


@dataclass(eq=False)
class State:
    """A DFA state: a set of NFA states reached on the same inputs."""

    id: int = 0
    transitions: dict[Hashable, State] = field(default_factory=dict)
    accept: bool = False
    non_greedy: bool = False
    nfa_states: list[nfa.State] = field(default_factory=list)
    data: Any = None

    def add_transition(self, to_state: State, input: Hashable) -> None:
        """Set the transition taken on ``input``."""
        self.transitions[input] = to_state

    def _signature(self) -> tuple[int, ...]:
        return tuple(s.id for s in self.nfa_states)

    def to_dot(self) -> str:
        """Render the automaton reachable from this state as a Graphviz graph."""
        edges: list[tuple[State, State, Hashable]] = []
        visited: dict[State, None] = {}
        pending = [self]
        while pending:
            state = pending.pop()
            if state in visited:
                continue
            visited[state] = None
            for input, dest in state.transitions.items():
                edges.append((state, dest, input))
                pending.append(dest)

        edges.sort(key=lambda edge: (edge[0].id, edge[1].id))

        lines = ["digraph G {", '  rankdir="LR";']
        for src, dst, input in edges:
            lines.append(f"  {src.id} -> {dst.id} [label={_dot_quote(str(input))}];")
        for state in sorted(visited, key=lambda s: s.id):
            shape = _shape(state.accept, state.non_greedy)
            lines.append(f'  {state.id} [label="{state.id}", shape="{shape}"];')
        lines.append("}")
        return "\n".join(lines) + "\n"


@dataclass
class DFA:
    """A deterministic automaton; ``states[0]`` is the start state."""

    states: list[State] = field(default_factory=list)

    def to_dot(self) -> str:
        return self.states[0].to_dot()


def e_closure(nfa_states: Iterable[nfa.State]) -> State:
    """Build a DFA state from the given NFA states and all reachable via ε."""
    dfa_state = State()
    closure: dict[int, nfa.State] = {}
    pending: list[nfa.State] = []

    for s in nfa_states:
        closure[s.id] = s
        pending.append(s)
        dfa_state.accept = dfa_state.accept or s.accept
        dfa_state.non_greedy = dfa_state.non_greedy or s.non_greedy

    while pending:
        state = pending.pop()
        for to in state.transitions.get(EPSILON, ()):
            if to.id not in closure:
                closure[to.id] = to
                pending.append(to)
                dfa_state.accept = dfa_state.accept or to.accept
                dfa_state.non_greedy = dfa_state.non_greedy or to.non_greedy

    dfa_state.nfa_states = sorted(closure.values(), key=lambda s: s.id)
    return dfa_state


def _inputs(nfa_states: Iterable[nfa.State]) -> list[Hashable]:
    inputs: dict[Hashable, None] = {}
    for nfa_state in nfa_states:
        for input in nfa_state.transitions:
            if input is not EPSILON:
                inputs[input] = None
    return list(inputs)


def _transitive_closure(start: State) -> list[State]:
    visited = {start}
    pending = [start]
    states: list[State] = []
    while pending:
        s = pending.pop()
        s.id = len(states)
        states.append(s)
        for dest in sorted(s.transitions.values(), key=lambda d: d.id):
            if dest not in visited:
                visited.add(dest)
                pending.append(dest)
    return states


def nfa_to_dfa(start: nfa.State) -> DFA:
    """Convert the NFA starting at ``start`` into a minimized DFA."""
    states: dict[tuple[int, ...], State] = {}

    first = e_closure([start])
    states[first._signature()] = first

    pending = [first]
    while pending:
        src = pending.pop()
        for input in _inputs(src.nfa_states):
            subset: dict[nfa.State, None] = {}
            for from_nfa in src.nfa_states:
                for to_nfa in from_nfa.transitions.get(input, ()):
                    subset[to_nfa] = None

            dest = e_closure(subset)
            sig = dest._signature()
            existing = states.get(sig)
            if existing is not None:
                src.add_transition(existing, input)
            else:
                states[sig] = dest
                src.add_transition(dest, input)
                pending.append(dest)

    dfa = DFA(states=_transitive_closure(first))
    _optimize(dfa)
    return dfa


class _Partitions:
    """Assignment of DFA states to numbered groups."""

    def __init__(self) -> None:
        self._state_to_group: dict[State, int] = {}
        self._group_to_states: dict[int, dict[State, None]] = {}

    def add(self, state: State, group: int) -> None:
        self._state_to_group[state] = group
        self._group_to_states.setdefault(group, {})[state] = None

    def move(self, state: State, group: int) -> None:
        del self._group_to_states[self._state_to_group[state]][state]
        self.add(state, group)

    def __len__(self) -> int:
        return len(self._group_to_states)

    def group(self, group: int) -> list[State]:
        return list(self._group_to_states[group])

    def group_of(self, state: State) -> int:
        return self._state_to_group[state]


def _accepting_nfa_states(state: State) -> set[nfa.State]:
    return {ns for ns in state.nfa_states if ns.accept}


def _sub_partition(p: _Partitions, group: int) -> None:
    def transition_group(s: State, input: Hashable) -> int:
        to_state = s.transitions.get(input)
        if to_state is None:
            return -1
        return p.group_of(to_state)

    new_group = len(p)
    states = p.group(group)

    inputs: dict[Hashable, None] = {}
    for s in states:
        for input in s.transitions:
            inputs[input] = None

    first = states[0]
    move: dict[State, None] = {}
    for s in states[1:]:
        for input in inputs:
            if transition_group(first, input) != transition_group(s, input):
                move[s] = None

        # States accepting through different NFA states stay apart so that
        # code generation can tell them apart.
        if first.accept:
            assert s.accept
            if _accepting_nfa_states(first) != _accepting_nfa_states(s):
                move[s] = None

    for s in move:
        p.move(s, new_group)


def _optimize(d: DFA) -> None:
    p = _Partitions()
    for s in d.states:
        p.add(s, 1 if s.accept else 0)

    if len(p) < 2:
        return

    count = 0
    while count != len(p):
        count = len(p)
        for group in range(count):
            _sub_partition(p, group)

    new_states = [State() for _ in range(len(p))]

    start_group = 0
    for group, merged in enumerate(new_states):
        for s in p.group(group):
            if s.id == 0:
                start_group = group
            merged.accept = merged.accept or s.accept
            merged.non_greedy = merged.non_greedy or s.non_greedy
            merged.nfa_states.extend(s.nfa_states)

    for s in d.states:
        from_state = new_states[p.group_of(s)]
        for input, to in s.transitions.items():
            from_state.add_transition(new_states[p.group_of(to)], input)

    new_states[0], new_states[start_group] = new_states[start_group], new_states[0]
    for index, state in enumerate(new_states):
        state.id = index

    d.states = new_states