from .errors import (
    CapacityExceeded,
    DecontaminationError,
    EmptyGraph,
    InvalidVertexIndex,
    MalformedInputRecord,
)
from .graph import MAX_VERTICES, Graph, load_edge_file, load_graph_matrix, parse_edge_stream
from .solver import DecontaminationSolver

__version__ = "0.1.0"
