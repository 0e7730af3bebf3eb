class DecontaminationError(Exception):
    """Base class for every fatal input or capacity problem."""


class InvalidVertexIndex(DecontaminationError, ValueError):
    def __init__(self, index, limit, line_number=None):
        self.index = index
        self.limit = limit
        self.line_number = line_number
        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"Vertex index {index} is outside 0..{limit - 1}{where}.")


class MalformedInputRecord(DecontaminationError, ValueError):
    def __init__(self, line_number, line, reason="expected two non-negative integers"):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason}, got '{line}'.")


class CapacityExceeded(DecontaminationError):
    def __init__(self, vertex_count, limit):
        self.vertex_count = vertex_count
        self.limit = limit
        super().__init__(f"Graph has {vertex_count} vertices, the search supports at most {limit}.")


class EmptyGraph(DecontaminationError):
    def __init__(self):
        super().__init__("No valid edges found in input.")
