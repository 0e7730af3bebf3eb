import networkx as nx
import pytest

from decontamination.errors import CapacityExceeded, InvalidVertexIndex, MalformedInputRecord
from decontamination.graph import MAX_VERTICES, Graph, load_edge_file, load_graph_matrix, parse_edge_stream


def test_vertex_count_is_inferred_from_largest_index():
    graph = parse_edge_stream(["0 1", "4 2"])
    assert graph.vertex_count() == 5
    assert graph.edge_count() == 2
    assert graph.adj[0] == [1]
    assert 3 not in graph.adj


def test_multi_edges_and_self_loops_are_kept_in_order():
    graph = parse_edge_stream(["0 1", "0 0", "0 1"])
    assert graph.adj[0] == [1, 0, 1]
    assert graph.edge_count() == 3
    assert graph.vertex_count() == 2


def test_blank_lines_and_comments_are_skipped():
    graph = parse_edge_stream(["# a comment", "", "  1 0  ", "\n"])
    assert graph.edge_list == [(1, 0)]


@pytest.mark.parametrize("line", ["0", "0 1 2", "a b", "1 x", "1.5 2", "1_0 2", "+1 2", "\u0661 2", "0x1 2"])
def test_malformed_record_reports_line(line):
    with pytest.raises(MalformedInputRecord) as excinfo:
        parse_edge_stream(["0 1", line])
    assert excinfo.value.line_number == 2
    assert excinfo.value.line == line.strip()


def test_negative_index_is_invalid():
    with pytest.raises(InvalidVertexIndex) as excinfo:
        parse_edge_stream(["0 1", "-1 0"])
    assert excinfo.value.index == -1
    assert excinfo.value.line_number == 2


def test_index_beyond_word_width_is_invalid():
    graph = Graph()
    graph.add_edge(MAX_VERTICES - 1, 0)
    assert graph.vertex_count() == MAX_VERTICES
    with pytest.raises(InvalidVertexIndex):
        graph.add_edge(0, MAX_VERTICES)


def test_explicit_vertex_count_above_capacity():
    with pytest.raises(CapacityExceeded) as excinfo:
        Graph(vertex_count=MAX_VERTICES + 1)
    assert excinfo.value.limit == MAX_VERTICES


def test_explicit_vertex_count_bounds_edges():
    graph = Graph(vertex_count=3)
    assert graph.vertex_count() == 3
    with pytest.raises(InvalidVertexIndex):
        graph.add_edge(0, 3)


def test_propagate_spreads_from_untargeted_sources_only():
    # 0 -> 1 -> 2, 2 -> 0
    graph = parse_edge_stream(["0 1", "1 2", "2 0"])
    assert graph.propagate(0b111, 0b001) == 0b101
    assert graph.propagate(0b111, 0b000) == 0b111
    assert graph.propagate(0b010, 0b001) == 0b100


def test_targeted_vertex_can_still_be_reinfected():
    # 2-cycle: targeting 0 leaves 1 as a source, which reinfects 0
    graph = parse_edge_stream(["0 1", "1 0"])
    assert graph.propagate(0b11, 0b01) == 0b01


def test_self_loop_does_not_reinfect_targeted_vertex():
    graph = parse_edge_stream(["0 0"])
    assert graph.propagate(0b1, 0b1) == 0


def test_untargeted_vertex_without_contaminated_in_neighbour_turns_clean():
    graph = parse_edge_stream(["0 1"])
    # vertex 0 was never targeted but has no in-edges
    assert graph.propagate(0b11, 0b10) == 0b10
    assert graph.propagate(0b11, 0b01) == 0


def test_propagate_is_pure():
    graph = parse_edge_stream(["0 1", "1 2", "2 0", "2 1"])
    first = [graph.propagate(c, a) for c in range(8) for a in range(8)]
    second = [graph.propagate(c, a) for c in range(8) for a in range(8)]
    assert first == second


def test_in_degrees_count_distinct_sources():
    graph = parse_edge_stream(["0 1", "0 1", "2 1", "1 1"])
    assert graph.in_degrees() == [0, 3, 0]


def test_lower_bound():
    complete = parse_edge_stream([f"{u} {v}" for u in range(3) for v in range(3) if u != v])
    assert complete.lower_bound() == 2
    assert parse_edge_stream(["0 1"]).lower_bound() == 1
    assert Graph().lower_bound() == 1


def test_load_edge_file(tmp_path):
    path = tmp_path / "edges.txt"
    path.write_text("0 1\n1 2\n")
    graph = load_edge_file(str(path))
    assert graph.vertex_count() == 3


def test_load_graph_matrix(tmp_path):
    path = tmp_path / "graph.txt"
    path.write_text("010\n001\n000\n-\nignored\n")
    graph = load_graph_matrix(str(path))
    assert graph.vertex_count() == 3
    assert graph.edge_list == [(0, 1), (1, 2)]


def test_load_graph_matrix_keeps_isolated_vertices(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("000\n000\n000\n")
    graph = load_graph_matrix(str(path))
    assert graph.vertex_count() == 3
    assert graph.edge_count() == 0


def test_load_graph_matrix_rejects_ragged_rows(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("01\n1\n")
    with pytest.raises(MalformedInputRecord) as excinfo:
        load_graph_matrix(str(path))
    assert excinfo.value.line_number == 2


def test_load_graph_matrix_rejects_non_binary(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("02\n10\n")
    with pytest.raises(MalformedInputRecord):
        load_graph_matrix(str(path))


def test_to_networkx_keeps_parallel_edges():
    graph = parse_edge_stream(["0 1", "0 1", "2 2"])
    G = graph.to_networkx()
    assert isinstance(G, nx.MultiDiGraph)
    assert G.number_of_nodes() == 3
    assert G.number_of_edges(0, 1) == 2
    assert G.has_edge(2, 2)
