import re

from loxgen.nfa import EPSILON, StateFactory
from loxgen.ranges import Range

_EDGE_LINE = re.compile(r'^  (\d+) -> (\d+) \[label="(.*)"\];$')
_NODE_LINE = re.compile(r'^  (\d+) \[label="(\d+)", shape="(\w+)"\];$')


def parse_dot(text):
    """Split a rendered graph into its edge and node tuples."""
    lines = text.strip().splitlines()
    assert lines[0] == "digraph G {"
    assert lines[1] == '  rankdir="LR";'
    assert lines[-1] == "}"
    edges, nodes = [], []
    for line in lines[2:-1]:
        if match := _EDGE_LINE.match(line):
            edges.append((int(match[1]), int(match[2]), match[3]))
        elif match := _NODE_LINE.match(line):
            assert match[1] == match[2]
            nodes.append((int(match[1]), match[3]))
        else:
            raise AssertionError(f"unexpected line: {line!r}")
    return edges, nodes


def build(count, edges, accepting=()):
    factory = StateFactory()
    states = [factory.new_state() for _ in range(count)]
    for src, dst, symbol in edges:
        states[src].add_transition(states[dst], symbol)
    for index in accepting:
        states[index].accept = True
    return states


# (a|b)*abb, as in the classic textbook construction.
ABB_EDGES = [
    (0, 1, EPSILON),
    (1, 2, EPSILON),
    (2, 3, "a"),
    (3, 6, EPSILON),
    (1, 4, EPSILON),
    (4, 5, "b"),
    (5, 6, EPSILON),
    (6, 7, EPSILON),
    (6, 1, EPSILON),
    (7, 8, "a"),
    (8, 9, "b"),
    (9, 10, "b"),
    (0, 7, EPSILON),
]


def test_print():
    states = build(11, ABB_EDGES, accepting=[10])
    edges, nodes = parse_dot(states[0].to_dot())
    assert edges == [
        (0, 1, "ε"),
        (0, 7, "ε"),
        (1, 2, "ε"),
        (1, 4, "ε"),
        (2, 3, "a"),
        (3, 6, "ε"),
        (4, 5, "b"),
        (5, 6, "ε"),
        (6, 1, "ε"),
        (6, 7, "ε"),
        (7, 8, "a"),
        (8, 9, "b"),
        (9, 10, "b"),
    ]
    assert nodes == [(i, "circle") for i in range(10)] + [(10, "doublecircle")]


def test_factory_assigns_sequential_ids():
    factory = StateFactory()
    ids = [factory.new_state().id for _ in range(4)]
    assert ids == [0, 1, 2, 3]


def test_add_transition_groups_by_input():
    factory = StateFactory()
    a, b, c = (factory.new_state() for _ in range(3))
    a.add_transition(b, "x")
    a.add_transition(c, "x")
    a.add_transition(c, EPSILON)
    assert a.transitions["x"] == [b, c]
    assert a.transitions[EPSILON] == [c]


def test_epsilon_instances_share_transitions():
    factory = StateFactory()
    a, b, c = (factory.new_state() for _ in range(3))
    a.add_transition(b, EPSILON)
    a.add_transition(c, type(EPSILON)())
    assert a.transitions[EPSILON] == [b, c]
    edges, _ = parse_dot(a.to_dot())
    assert edges == [(0, 1, "ε"), (0, 2, "ε")]


def test_shapes_and_range_labels():
    factory = StateFactory()
    s0, s1, s2, s3 = (factory.new_state() for _ in range(4))
    s0.add_transition(s1, Range(ord("-"), ord("-")))
    s0.add_transition(s2, Range(0, ord("/")))
    s0.add_transition(s3, '"')
    s1.non_greedy = True
    s2.accept = True
    s2.non_greedy = True
    s3.accept = True
    edges, nodes = parse_dot(s0.to_dot())
    assert edges == [
        (0, 1, r"\\-"),
        (0, 2, r"\\u0000-/"),
        (0, 3, r"\""),
    ]
    assert nodes == [
        (0, "circle"),
        (1, "octagon"),
        (2, "doubleoctagon"),
        (3, "doublecircle"),
    ]


def test_cycle_is_visited_once():
    factory = StateFactory()
    a, b = factory.new_state(), factory.new_state()
    a.add_transition(b, "x")
    b.add_transition(a, "y")
    lines = a.to_dot().splitlines()
    assert lines == [
        "digraph G {",
        '  rankdir="LR";',
        '  0 -> 1 [label="x"];',
        '  1 -> 0 [label="y"];',
        '  0 [label="0", shape="circle"];',
        '  1 [label="1", shape="circle"];',
        "}",
    ]