"""LALR parser tables: states, transitions and the actions taken in them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from loxgen.grammar import Grammar, ItemSet, Prod, Rule, Term, Terminal
from loxgen.nfa import _dot_quote

_INDENT = "  "


class ActionType(IntEnum):
    SHIFT = 0
    REDUCE = 1
    ACCEPT = 2


@dataclass(eq=False)
class Action:
    """A parser action for one state and lookahead terminal."""

    type: ActionType
    shift_state: Optional[ItemSet] = None
    prods: list[Prod] = field(default_factory=list)

    def to_string(self, grammar: Grammar) -> str:
        if self.type == ActionType.SHIFT:
            return f"shift I{self.shift_state.index}"
        if self.type == ActionType.REDUCE:
            return f"reduce {self.prods[0].rule.name}"
        return "accept"


class ActionMap:
    """The actions of one state, grouped by lookahead terminal."""

    def __init__(self) -> None:
        self._actions: dict[Terminal, list[Action]] = {}

    def _slot(self, terminal: Terminal) -> list[Action]:
        return self._actions.setdefault(terminal, [])

    def add_shift(self, terminal: Terminal, to_state: ItemSet, prod: Prod) -> None:
        """Add a shift on ``terminal``; shifts to the same state share one action."""
        actions = self._slot(terminal)
        for action in actions:
            if action.type == ActionType.SHIFT:
                if action.shift_state is not to_state:
                    raise ValueError("impossible shift-shift conflict")
                action.prods.append(prod)
                return
        actions.append(
            Action(type=ActionType.SHIFT, shift_state=to_state, prods=[prod])
        )

    def add_reduce(self, terminal: Terminal, prod: Prod) -> None:
        self._slot(terminal).append(Action(type=ActionType.REDUCE, prods=[prod]))

    def add_accept(self, terminal: Terminal) -> None:
        actions = self._slot(terminal)
        if any(action.type == ActionType.ACCEPT for action in actions):
            raise ValueError("impossible accept-accept conflict")
        actions.append(Action(type=ActionType.ACCEPT))

    def terminals(self) -> list[Terminal]:
        """Return the terminals that have actions, sorted by name."""
        return sorted(self._actions, key=lambda t: t.name)

    def get(self, terminal: Terminal) -> list[Action]:
        """Return the (mutable) list of actions on ``terminal``."""
        actions = self._actions.get(terminal)
        return actions if actions is not None else []


class TransitionMap:
    """The goto transitions of one state, keyed by symbol."""

    def __init__(self) -> None:
        self._transitions: dict[Term, ItemSet] = {}

    def add(self, symbol: Term, to: ItemSet) -> None:
        self._transitions[symbol] = to

    def get(self, symbol: Term) -> ItemSet:
        try:
            return self._transitions[symbol]
        except KeyError:
            raise KeyError(f"no transition for input {symbol.name}") from None

    def inputs(self) -> list[Term]:
        """Return the symbols with transitions, sorted by name."""
        return sorted(self._transitions, key=lambda t: t.name)


class ParserTable:
    """The states of a parser automaton with their transitions and actions."""

    def __init__(self, grammar: Grammar) -> None:
        self.grammar = grammar
        self.has_conflicts = False
        self.states: list[ItemSet] = []
        self._state_map: dict[bytes, int] = {}
        self._transitions: dict[ItemSet, TransitionMap] = {}
        self._actions: dict[ItemSet, ActionMap] = {}

    def get_state_by_key(self, key: bytes) -> Optional[ItemSet]:
        index = self._state_map.get(key)
        return None if index is None else self.states[index]

    def get_state_by_index(self, index: int) -> ItemSet:
        return self.states[index]

    def add_state(self, key: bytes, state: ItemSet) -> None:
        """Register ``state`` under ``key`` and give it the next index."""
        if key in self._state_map:
            raise ValueError("state already exists")
        self.states.append(state)
        state.index = len(self.states) - 1
        self._state_map[key] = state.index

    def transitions(self, state: ItemSet) -> TransitionMap:
        ts = self._transitions.get(state)
        if ts is None:
            ts = self._transitions[state] = TransitionMap()
        return ts

    def actions(self, state: ItemSet) -> ActionMap:
        am = self._actions.get(state)
        if am is None:
            am = self._actions[state] = ActionMap()
        return am

    def to_text(self) -> str:
        """Render a readable listing of every state, its actions and gotos."""
        lines: list[str] = []

        def log(indent: int, text: str) -> None:
            lines.extend(_INDENT * indent + line for line in text.split("\n"))

        for index, state in enumerate(self.states):
            log(0, f"I{index}:")
            log(1, state.to_string(self.grammar))
            action_map = self.actions(state)
            for terminal in action_map.terminals():
                actions = action_map.get(terminal)
                conflict = " <== CONFLICT" if len(actions) > 1 else ""
                for action in actions:
                    log(
                        2,
                        f"on {terminal.name} "
                        f"{action.to_string(self.grammar)}{conflict}",
                    )
            transitions = self.transitions(state)
            for symbol in transitions.inputs():
                if isinstance(symbol, Rule):
                    to = transitions.get(symbol)
                    log(2, f"on {symbol.name} goto I{to.index}")
        return "\n".join(lines) + "\n"

    def to_graph(self) -> str:
        """Render the automaton as a Graphviz graph."""
        lines = ["digraph G {"]
        for state in self.states:
            label = f"I{state.index}\n{state.to_string(self.grammar)}"
            lines.append(f"{_INDENT}I{state.index} [label={_dot_quote(label)}];")
        for state in self.states:
            transitions = self.transitions(state)
            for symbol in transitions.inputs():
                to = transitions.get(symbol)
                lines.append(
                    f"{_INDENT}I{state.index} -> I{to.index} "
                    f"[label={_dot_quote(symbol.name)}];"
                )
        lines.append("}")
        return "\n".join(lines) + "\n"