"""Construction of LALR(1) parser tables."""

from __future__ import annotations

from typing import Optional

from loxgen.grammar import (
    EOF_INDEX,
    SPRIME_PROD_INDEX,
    Associativity,
    Grammar,
    Item,
    ItemSet,
    Rule,
    Terminal,
)
from loxgen.lr1 import closure, goto, next_symbols
from loxgen.table import Action, ActionType, ParserTable


def construct_lalr(grammar: Grammar) -> ParserTable:
    """Build the LALR(1) parser table for ``grammar``.

    Shift/reduce conflicts are resolved by precedence and associativity where
    possible; ``has_conflicts`` is set on the table if any remain.
    """
    table = ParserTable(grammar)

    start = closure(
        grammar, ItemSet([Item(prod=SPRIME_PROD_INDEX, dot=0, lookahead=EOF_INDEX)])
    )
    start_key = start.lr0_key()
    table.add_state(start_key, start)

    pending: set[bytes] = {start_key}
    while pending:
        keys = sorted(pending)
        pending.clear()
        for from_key in keys:
            src = table.get_state_by_key(from_key)
            for sym in next_symbols(grammar, src):
                to = goto(grammar, src, sym)
                to_key = to.lr0_key()

                # An existing state with the same kernel may need more lookaheads.
                existing = table.get_state_by_key(to_key)
                if existing is not None:
                    changed = False
                    for item in to.items():
                        changed = existing.add(item) or changed
                    table.transitions(src).add(sym, existing)
                else:
                    table.add_state(to_key, to)
                    table.transitions(src).add(sym, to)
                    changed = True
                if changed:
                    pending.add(to_key)

    _create_actions(table)
    _resolve_conflicts(table)
    return table


def _create_actions(table: ParserTable) -> None:
    grammar = table.grammar
    for state in table.states:
        for item in state.items():
            prod = grammar.prods[item.prod]
            if item.dot == len(prod.terms):
                lookahead = grammar.terminals[item.lookahead]
                if item.prod == SPRIME_PROD_INDEX:
                    table.actions(state).add_accept(lookahead)
                else:
                    table.actions(state).add_reduce(lookahead, prod)
            else:
                term = prod.terms[item.dot]
                if isinstance(term, Terminal):
                    shift_state = table.transitions(state).get(term)
                    table.actions(state).add_shift(term, shift_state, prod)


def _resolve_conflict(actions: list[Action]) -> bool:
    # Only shift/reduce conflicts can be resolved.
    if len(actions) != 2:
        return False
    shift, reduce = actions
    if shift.type != ActionType.SHIFT or reduce.type != ActionType.REDUCE:
        shift, reduce = reduce, shift
        if shift.type != ActionType.SHIFT or reduce.type != ActionType.REDUCE:
            return False

    # All productions behind the shift must share one rule and one precedence.
    shift_rule: Optional[Rule] = shift.prods[0].rule
    shift_prec = shift.prods[0].precedence
    for prod in shift.prods[1:]:
        if prod.rule is not shift_rule or prod.precedence != shift_prec:
            return False

    assert len(reduce.prods) == 1
    reduce_prod = reduce.prods[0]
    reduce_prec = reduce_prod.precedence

    if shift_rule is not reduce_prod.rule or shift_prec <= 0 or reduce_prec <= 0:
        return False

    if shift_prec < reduce_prec:
        loser = shift
    elif shift_prec > reduce_prec:
        loser = reduce
    elif (
        len(shift.prods) == 1
        and shift.prods[0] is reduce_prod
        and shift.prods[0].associativity == Associativity.RIGHT
    ):
        loser = reduce
    else:
        loser = shift

    actions[:] = [a for a in actions if a is not loser]
    return True


def _resolve_conflicts(table: ParserTable) -> None:
    for state in table.states:
        action_map = table.actions(state)
        for terminal in action_map.terminals():
            actions = action_map.get(terminal)
            assert actions
            if len(actions) != 1 and not _resolve_conflict(actions):
                table.has_conflicts = True