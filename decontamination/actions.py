"""
Enumeration of the actions available in one round: every way of picking
exactly k of the n vertices to decontaminate.

Actions are handed out as bit masks (bit i = vertex i). The order is part
of the contract: the search keeps the first action that reaches a new
configuration, so this order decides every tie. Reading the selection as a
0/1 string indexed by vertex (vertex 0 first), the first action is
"1..10..0" (vertices 0..k-1) and each next one is the lexicographically
previous arrangement, down to "0..01..1" (vertices n-k..n-1).
"""


def prev_permutation(seq):
    """
    Rearranges `seq` in place into the previous lexicographic permutation.
    Returns False (leaving `seq` untouched) when it is already the smallest.
    """
    i = len(seq) - 1
    while i > 0 and seq[i - 1] <= seq[i]:
        i -= 1
    if i <= 0:
        return False

    j = len(seq) - 1
    while seq[j] >= seq[i - 1]:
        j -= 1
    seq[i - 1], seq[j] = seq[j], seq[i - 1]
    seq[i:] = reversed(seq[i:])
    return True


def selection_to_mask(selection):
    mask = 0
    for vertex, chosen in enumerate(selection):
        if chosen:
            mask |= 1 << vertex
    return mask


def iter_actions(n, k):
    """Yields all C(n, k) action masks, fresh on every call."""
    if k < 0 or k > n:
        return
    selection = [1] * k + [0] * (n - k)
    while True:
        yield selection_to_mask(selection)
        if not prev_permutation(selection):
            return


def action_vertices(mask):
    """Vertex indices set in `mask`, ascending."""
    vertices = []
    vertex = 0
    while mask:
        if mask & 1:
            vertices.append(vertex)
        mask >>= 1
        vertex += 1
    return vertices

