"""Lexer modes: combine token rules into a single DFA and pick actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from loxgen import nfa
from loxgen.dfa import DFA, nfa_to_dfa
from loxgen.dfa import State as DFAState
from loxgen.nfa import EPSILON
from loxgen.ranges import Range, flatten, normalize


class ActionType(IntEnum):
    NONE = 0
    PUSH_MODE = 1
    POP_MODE = 2
    ACCEPT = 3
    DISCARD = 4
    ACCUM = 5


@dataclass(frozen=True)
class Action:
    """A single lexer action taken when a token is recognized."""

    type: ActionType
    terminal: int = 0
    mode: str = ""


@dataclass(frozen=True)
class Position:
    """A location in a source file: the file name and a byte offset."""

    file: str
    offset: int

    def __str__(self) -> str:
        return f"{self.file}:{self.offset}"


@dataclass
class Actions:
    """The actions attached to a rule, and where the rule was declared."""

    actions: list[Action]
    pos: Position


class ErrorLog:
    """Collects errors and informational messages."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, Optional[Position], str]] = []

    def error(self, pos: Optional[Position], message: str) -> None:
        self.entries.append(("error", pos, message))

    def info(self, pos: Optional[Position], message: str) -> None:
        self.entries.append(("info", pos, message))

    def has_error(self) -> bool:
        return any(severity == "error" for severity, _, _ in self.entries)


@dataclass
class Mode:
    """A built lexer mode."""

    name: str
    dfa: DFA
    index: int = 0


@dataclass
class NFAComposite:
    """An NFA fragment with a begin and an end state."""

    b: nfa.State
    e: nfa.State


@dataclass
class ModeBuilder:
    """Accumulates the rules of a mode and builds its DFA."""

    name: str
    state_factory: nfa.StateFactory = field(default_factory=nfa.StateFactory)
    rules: list[NFAComposite] = field(default_factory=list)

    def add_rule(self, rule: NFAComposite) -> None:
        self.rules.append(rule)

    def build(self, errs: ErrorLog) -> Optional[Mode]:
        """Build the mode's DFA; returns None if any error was reported."""
        start = self.state_factory.new_state()
        for rule in self.rules:
            start.add_transition(rule.b, EPSILON)

        normalize_inputs(start)
        d = nfa_to_dfa(start)
        merge_transitions(d)

        for state in d.states:
            state.data = self._pick_action(errs, state)

        if errs.has_error():
            return None
        return Mode(name=self.name, dfa=d)

    @staticmethod
    def _pick_action(errs: ErrorLog, state: DFAState) -> Optional[Actions]:
        candidates = [s.data for s in state.nfa_states if isinstance(s.data, Actions)]
        if not candidates:
            return None
        for actions in candidates:
            assert actions.actions, "rule has no actions"

        winner = candidates[0]
        for actions in candidates[1:]:
            if actions.pos.file != winner.pos.file:
                errs.error(winner.pos, f"Conflicting lexer actions: {winner}")
                errs.info(actions.pos, f"Conflicts with other action: {actions}")
                return None
            if actions.pos.offset < winner.pos.offset:
                winner = actions
        return winner


def new_mode(name: str) -> ModeBuilder:
    """Create a builder for a mode named ``name``."""
    return ModeBuilder(name=name)


def normalize_inputs(state: nfa.State) -> None:
    """Split range inputs of the NFA at ``state`` so no two ranges overlap."""
    graph: dict[Range, list[nfa.State]] = {}
    visited: set[nfa.State] = set()
    pending = [state]

    while pending:
        s = pending.pop()
        if s in visited:
            continue
        visited.add(s)
        for input, to_states in s.transitions.items():
            pending.extend(to_states)
            if isinstance(input, Range):
                graph.setdefault(input, []).append(s)
            elif input is not EPSILON:
                raise TypeError(f"unexpected NFA input: {input!r}")

    def on_change(o: Range, a: Range, b: Range, c: Range) -> None:
        states = graph.pop(o)
        assert states, "range without states"
        for s in states:
            for to_state in s.transitions.pop(o, []):
                s.add_transition(to_state, a)
                s.add_transition(to_state, b)
                if c != b:
                    s.add_transition(to_state, c)
        graph.setdefault(a, []).extend(states)
        graph.setdefault(b, []).extend(states)
        if c != b:
            graph.setdefault(c, []).extend(states)

    normalize(list(graph), on_change)


def _merge_into(state: DFAState, to_state: DFAState, inputs: list[Range]) -> None:
    def on_merge(oa: Range, ob: Range, n: Range) -> None:
        assert state.transitions.pop(oa) is to_state
        assert state.transitions.pop(ob) is to_state
        state.add_transition(to_state, n)

    flatten(inputs, on_merge)


def merge_transitions(dfa: DFA) -> None:
    """Merge touching ranges that lead to the same destination state."""
    for state in dfa.states:
        groups: dict[DFAState, list[Range]] = {}
        for input, to_state in state.transitions.items():
            groups.setdefault(to_state, []).append(input)
        for to_state, inputs in groups.items():
            if len(inputs) > 1:
                _merge_into(state, to_state, inputs)