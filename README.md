# loxgen

Building blocks for lexer and LALR(1) parser generators.

The package covers two halves of a generator.

* **Lexer side:** Unicode code-point ranges, NFAs, NFA-to-DFA conversion with minimisation, and lexer modes.
* **Parser side:** grammars, LR(1) items and item sets, FIRST/closure/goto, and LALR(1) parser tables with precedence-based conflict resolution.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Code-point ranges (`loxgen.ranges`)

`Range(b, e)` is an inclusive range of code points. It has `contains`, `intersects` and `touches` methods. `compare` orders two ranges. `normalize` splits overlapping ranges and reports each split through a callback. `flatten` merges overlapping or adjacent ranges. `subtract` removes one set of ranges from another.

```python
from loxgen.ranges import Range, flatten, subtract

flatten([Range(0, 2), Range(8, 9), Range(1, 3)])
# [Range(b=0, e=3), Range(b=8, e=9)]

subtract([Range(0, 4), Range(6, 9)], [Range(7, 9)])
# [Range(b=0, e=4), Range(b=6, e=6)]
```

## Automata (`loxgen.nfa`, `loxgen.dfa`)

You create NFA states with `StateFactory.new_state()` and connect them with `State.add_transition(to, input)`. An input is any hashable value, or `EPSILON` for an empty-string move. `nfa_to_dfa` applies the subset construction and then minimises the result. Accepting states that are reached through different accepting NFA states are kept apart. Both NFA and DFA states can render the reachable automaton as Graphviz source with `to_dot()`.

```python
from loxgen.nfa import StateFactory
from loxgen.dfa import nfa_to_dfa
from loxgen.ranges import Range

factory = StateFactory()
s0, s1 = factory.new_state(), factory.new_state()
s0.add_transition(s1, Range(ord("a"), ord("z")))
s1.accept = True

dfa = nfa_to_dfa(s0)
print(dfa.to_dot())
```

## Lexer modes (`loxgen.mode`)

`new_mode(name)` returns a `ModeBuilder`. You add rules to it as `NFAComposite(b, e)` fragments and then call `build(errs)` with an `ErrorLog`. The builder:

1. joins all rules into one NFA;
2. splits overlapping range inputs with `normalize_inputs`;
3. converts the result to a DFA;
4. merges touching ranges that lead to the same state, using `merge_transitions`.

For each DFA state, the builder picks the `Actions` attached to its NFA states (through their `data` field). If several apply, the one declared earliest wins. Actions from different files are reported to the `ErrorLog` as a conflict. `build` returns `None` if any error was logged, and a `Mode` otherwise.

## Grammars and parser tables (`loxgen.grammar`, `loxgen.lr1`, `loxgen.table`, `loxgen.construct`)

```python
from loxgen.grammar import Grammar
from loxgen.construct import construct_lalr

g = Grammar()
c = g.add_terminal("c")
d = g.add_terminal("d")
S = g.add_rule("S")
C = g.add_rule("C")
g.set_start(S)
g.add_prod(S, C, C)
g.add_prod(C, c, C)
g.add_prod(C, d)

table = construct_lalr(g)
print(table.to_text())   # states, actions and gotos
print(table.to_graph())  # Graphviz source
print(table.has_conflicts)
```

Shift/reduce conflicts are resolved only when both of these hold:

* the productions involved belong to the same rule;
* both have a positive `precedence`.

With equal precedences, `Associativity.RIGHT` on the production favours the shift. Any conflict that remains sets `has_conflicts`.

`loxgen.lr1` exposes the underlying functions:

* `first`
* `closure`
* `goto`
* `next_symbols`

`Grammar.to_text()` lists the terminals and rules of a grammar.

## Literals (`loxgen.literal`)

`unescape` evaluates the escape sequences used in grammar literals: `\n`, `\r`, `\t`, `\'`, `\\`, `\-`, `\xHH`, `\uHHHH` and `\UHHHHHHHH`. `fix_literal` strips the surrounding quotes and then unescapes the body. Both raise `ValueError` on malformed input.

## What the package does not do

The package has no reader for grammar files apart from literal decoding. It does not generate lexer or parser source code, and it has no command-line tool. It gives you the automata and tables that such a generator would be built on.