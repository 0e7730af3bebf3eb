import re

import networkx as nx

from .errors import CapacityExceeded, InvalidVertexIndex, MalformedInputRecord

# --- CONFIGURATION ---
# A configuration packs one bit per vertex into a single machine word.
MAX_VERTICES = 64

# ASCII digits only; int() alone would also take '1_0', '+1' or other scripts' digits
INTEGER_TOKEN = re.compile(r"-?[0-9]+")


def is_integer_token(token):
    return INTEGER_TOKEN.fullmatch(token) is not None


class Graph:
    """
    Directed graph over vertices 0..n-1, built once from an edge stream.

    Out-neighbours are kept in insertion order, duplicates and self-loops
    included. Each vertex also gets an out-mask (bit v set for every edge
    u->v) so that propagation is a handful of integer ORs.
    """

    def __init__(self, vertex_count=None):
        if vertex_count is not None and vertex_count > MAX_VERTICES:
            raise CapacityExceeded(vertex_count, MAX_VERTICES)
        self.adj = {}
        self.out_masks = {}
        self.edge_list = []
        self.fixed_size = vertex_count is not None
        self.n = vertex_count if vertex_count is not None else 0

    def add_edge(self, u, v):
        limit = self.n if self.fixed_size else MAX_VERTICES
        for index in (u, v):
            if index < 0 or index >= limit:
                raise InvalidVertexIndex(index, limit)

        self.adj.setdefault(u, []).append(v)
        self.out_masks[u] = self.out_masks.get(u, 0) | (1 << v)
        self.edge_list.append((u, v))
        if not self.fixed_size:
            self.n = max(self.n, u + 1, v + 1)

    def vertex_count(self):
        return self.n

    def edge_count(self):
        return len(self.edge_list)

    def propagate(self, configuration, action):
        """
        Next configuration after decontaminating `action` in `configuration`.

        Every vertex that is contaminated and not targeted this round
        contaminates all of its out-neighbours. Nothing else is contaminated
        afterwards; a targeted vertex stays dirty only if some other source
        reaches it.
        """
        sources = configuration & ~action
        result = 0
        while sources:
            low_bit = sources & -sources
            result |= self.out_masks.get(low_bit.bit_length() - 1, 0)
            sources ^= low_bit
        return result

    def in_degrees(self):
        """Number of distinct in-neighbours of every vertex."""
        degrees = [0] * self.n
        for mask in self.out_masks.values():
            while mask:
                low_bit = mask & -mask
                degrees[low_bit.bit_length() - 1] += 1
                mask ^= low_bit
        return degrees

    def lower_bound(self):
        """
        A vertex with d distinct in-neighbours only turns clean when all d of
        them are clean or targeted at once, so fewer than the smallest
        in-degree never cleans anything.
        """
        degrees = self.in_degrees()
        if not degrees:
            return 1
        return max(1, min(degrees))

    def to_networkx(self):
        G = nx.MultiDiGraph()
        G.add_nodes_from(range(self.n))
        G.add_edges_from(self.edge_list)
        return G


def parse_edge_stream(lines):
    """
    Builds a graph from lines of "source target" pairs.
    Blank lines and '#' comments are skipped; anything else must be exactly
    two integers.
    """
    graph = Graph()
    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        parts = line.split()
        if len(parts) != 2 or not all(is_integer_token(p) for p in parts):
            raise MalformedInputRecord(line_num, line)
        u, v = int(parts[0]), int(parts[1])

        try:
            graph.add_edge(u, v)
        except InvalidVertexIndex as e:
            raise InvalidVertexIndex(e.index, e.limit, line_num) from None
    return graph


def load_edge_file(filepath):
    with open(filepath, 'r') as f:
        return parse_edge_stream(f)


def load_graph_matrix(filepath):
    """
    Parses an adjacency matrix file, optionally ending with a '-'.
    Example format (a '1' at row r, column c is the edge r->c):
    011
    000
    100
    -
    """
    with open(filepath, 'r') as f:
        lines = [line.strip() for line in f.readlines()]

    matrix_rows = []
    for line_num, line in enumerate(lines, 1):
        if line == '-':
            break
        if not line:
            continue
        if any(char not in '01' for char in line):
            raise MalformedInputRecord(line_num, line, reason="expected a row of 0/1 characters")
        matrix_rows.append((line_num, line))

    num_nodes = len(matrix_rows)
    graph = Graph(vertex_count=num_nodes)

    for r, (line_num, row_str) in enumerate(matrix_rows):
        if len(row_str) != num_nodes:
            raise MalformedInputRecord(
                line_num, row_str, reason=f"expected {num_nodes} columns, found {len(row_str)}"
            )
        for c, char in enumerate(row_str):
            if char == '1':
                graph.add_edge(r, c)
    return graph
