"""
Independent checker for a proposed guard strategy.

It replays the strategy with its own boolean-matrix arithmetic instead of
the solver's propagation code. The bit encoding is the complement of the
solver's:

    solver   : bit i = 1  <=>  vertex i is contaminated
    checker  : bit i = 1  <=>  vertex i is guarded (clean)

Input format (whitespace separated, line breaks are not significant):

    N                   number of vertices
    E                   number of edges
    u v                 E edge lines, vertices 0..N-1
    P L                 guards per round and number of rounds
    g_1 ... g_P         L + 1 lines of guard positions

Each round the current state is reported, then every vertex whose
in-neighbours are all guarded becomes clean (vertices without
in-neighbours always do). If that leaves every vertex clean the answer is
OK!, otherwise the round's guards are added to the state. Running out of
rounds gives NO.
"""
import numpy as np

from .actions import action_vertices
from .errors import CapacityExceeded, InvalidVertexIndex, MalformedInputRecord
from .graph import MAX_VERTICES, is_integer_token


class TokenReader:
    def __init__(self, lines):
        self.tokens = []
        self.line_count = 0
        for line_num, line in enumerate(lines, 1):
            self.line_count = line_num
            for token in line.split():
                self.tokens.append((line_num, line.strip(), token))
        self.pos = 0
        self.line_num = 0
        self.line = ""

    def next_int(self, what):
        if self.pos >= len(self.tokens):
            raise MalformedInputRecord(
                self.line_count + 1, "", reason=f"unexpected end of input, expected {what}"
            )
        self.line_num, self.line, token = self.tokens[self.pos]
        self.pos += 1
        if not is_integer_token(token):
            raise MalformedInputRecord(self.line_num, self.line, reason=f"expected {what}")
        return int(token)

    def next_count(self, what):
        value = self.next_int(what)
        if value < 0:
            raise MalformedInputRecord(self.line_num, self.line, reason=f"{what} must be non-negative")
        return value

    def next_vertex(self, num_nodes):
        vertex = self.next_int("a vertex index")
        if vertex < 0 or vertex >= num_nodes:
            raise InvalidVertexIndex(vertex, num_nodes, self.line_num)
        return vertex


def parse_checker_input(lines):
    """Returns (num_nodes, edges, guards) with len(guards) == L + 1."""
    reader = TokenReader(lines)

    num_nodes = reader.next_count("the vertex count")
    if num_nodes > MAX_VERTICES:
        raise CapacityExceeded(num_nodes, MAX_VERTICES)

    num_edges = reader.next_count("the edge count")
    edges = []
    for _ in range(num_edges):
        u = reader.next_vertex(num_nodes)
        v = reader.next_vertex(num_nodes)
        edges.append((u, v))

    p = reader.next_count("the number of guards")
    length = reader.next_count("the number of rounds")
    guards = []
    for _ in range(length + 1):
        guards.append([reader.next_vertex(num_nodes) for _ in range(p)])

    return num_nodes, edges, guards


def simulate(num_nodes, edges, guards):
    """
    Replays `guards` round by round.
    Returns (states, ok) where states[i] is the guarded vector at the start
    of round i.
    """
    # incoming[j, u] is set for every edge u -> j
    incoming = np.zeros((num_nodes, num_nodes), dtype=np.int64)
    for u, v in edges:
        incoming[v, u] = 1
    indegree = incoming.sum(axis=1)

    state = np.zeros(num_nodes, dtype=bool)
    states = []
    for placed in guards:
        states.append(state.copy())

        # reduced multiplication: clean iff every in-neighbour is guarded
        closure = (incoming @ state.astype(np.int64)) == indegree
        if closure.all():
            return states, True

        state = closure
        state[placed] = True

    return states, False


def format_report(states, ok):
    lines = [" ".join(str(int(bit)) for bit in state) for state in states]
    lines.append("OK!" if ok else "NO")
    return lines


def run_checker(lines):
    num_nodes, edges, guards = parse_checker_input(lines)
    return simulate(num_nodes, edges, guards)


def to_guarded_bits(configuration, n):
    """Solver configuration -> checker vector (the complement, vertex 0 first)."""
    return [0 if (configuration >> i) & 1 else 1 for i in range(n)]


def strategy_guards(actions):
    """
    One guard line per solver action, plus a closing line that repeats the
    last action: the checker only confirms a clean graph on the round after
    the final guards are placed.
    """
    guards = [action_vertices(a) for a in actions]
    if guards:
        guards.append(list(guards[-1]))
    return guards


def to_checker_input(graph, k, actions):
    """Translates a solver result into checker input lines."""
    lines = [str(graph.vertex_count()), str(graph.edge_count())]
    lines.extend(f"{u} {v}" for u, v in graph.edge_list)
    lines.append(f"{k} {len(actions)}")
    lines.extend(" ".join(str(v) for v in placed) for placed in strategy_guards(actions))
    return lines


def verify_strategy(graph, actions):
    """Checks a solver result directly against `graph`."""
    return simulate(graph.vertex_count(), graph.edge_list, strategy_guards(actions))
