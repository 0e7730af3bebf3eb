import os
import sys
import json
from collections import deque

import numpy as np

from .actions import action_vertices, iter_actions
from .errors import CapacityExceeded, EmptyGraph
from .graph import MAX_VERTICES
from .verifier import to_guarded_bits

# --- CONFIGURATION ---
CACHE_DIR = "cached_solutions"
TABLE_DIR = "search_tables"


def log(message):
    # stdout is reserved for the sequence itself
    print(message, file=sys.stderr)


def format_configuration(configuration, n):
    """n characters, vertex n-1 first and vertex 0 last; '1' = contaminated."""
    return format(configuration, f"0{n}b")


def format_action(action):
    return " ".join(str(v) for v in action_vertices(action))


class DecontaminationSolver:
    def __init__(self, graph, name="graph", export=False, max_vertices=MAX_VERTICES):
        self.graph = graph
        self.n = graph.vertex_count()
        self.name = name
        self.export = export
        self.max_vertices = max_vertices

        # Filled in by solve()
        self.k = None
        self.configurations = []
        self.actions = []
        self.explored = {}  # k -> configurations discovered during that attempt

        log(f"Graph loaded: {self.n} nodes, {graph.edge_count()} edges.")

    @property
    def initial(self):
        return (1 << self.n) - 1

    @property
    def rounds(self):
        return len(self.actions)

    def search_level(self, k):
        """
        Breadth-first search over configurations when exactly k vertices are
        decontaminated per round.

        Each configuration is recorded once, on first discovery, together with
        the configuration and action that produced it. Level order makes that
        first discovery a shortest one, and the action order from
        iter_actions decides ties.

        Returns (predecessor, action) once the clean configuration is
        dequeued, or None if the frontier empties first.
        """
        initial = self.initial
        queue = deque([initial])
        # The start is visited from the outset and keeps a None predecessor.
        predecessor = {initial: None}
        action = {}

        while queue:
            c = queue.popleft()
            if c == 0:
                self.explored[k] = len(predecessor)
                return predecessor, action

            for a in iter_actions(self.n, k):
                nc = self.graph.propagate(c, a)
                if nc not in predecessor:
                    predecessor[nc] = c
                    action[nc] = a
                    queue.append(nc)

        self.explored[k] = len(predecessor)
        return None

    def solve(self):
        if self.n == 0:
            raise EmptyGraph()
        if self.n > self.max_vertices:
            raise CapacityExceeded(self.n, self.max_vertices)

        log(f"Lower bound from in-degrees: k >= {self.graph.lower_bound()}")

        # k = n always succeeds: every vertex is withheld as a source.
        for k in range(1, self.n + 1):
            log(f"Searching with k = {k}...")
            maps = self.search_level(k)
            if maps is None:
                log(f"k = {k}: exhausted {self.explored[k]} configurations without reaching a clean graph.")
                continue

            predecessor, action = maps
            self.k = k
            self.configurations, self.actions = self.reconstruct_path(predecessor, action)
            if self.export:
                self.export_search_table(predecessor, action)
                self.export_sequence_to_json()
            self.print_verdict()
            return True

        return False

    @staticmethod
    def reconstruct_path(predecessor, action):
        """
        Walks the predecessor chain back from the clean configuration.
        Returns (configurations, actions) in chronological order, with one
        more configuration than actions.
        """
        configurations = [0]
        actions = []
        current = 0
        while predecessor[current] is not None:
            actions.append(action[current])
            current = predecessor[current]
            configurations.append(current)

        configurations.reverse()
        actions.reverse()
        return configurations, actions

    def print_verdict(self):
        log("\n--- FINAL VERDICT ---")
        log(f"RESULT: {self.k} simultaneous decontamination(s) needed.")
        log(f"Rounds: {self.rounds}")
        log(f"Configurations explored at k = {self.k}: {self.explored[self.k]}")

    def format_sequence(self):
        """Alternating configuration/action lines, all ones first, all zeros last."""
        lines = []
        for i, configuration in enumerate(self.configurations):
            if i > 0:
                lines.append(format_action(self.actions[i - 1]))
            lines.append(format_configuration(configuration, self.n))
        return lines

    def history(self):
        steps = []
        for i, configuration in enumerate(self.configurations):
            steps.append({
                'round': i,
                'configuration': format_configuration(configuration, self.n),
                'contaminated': action_vertices(configuration),
                # checker encoding, vertex 0 first, 1 = clean
                'guarded': to_guarded_bits(configuration, self.n),
                'action': action_vertices(self.actions[i]) if i < len(self.actions) else None,
            })
        return steps

    def base_name(self):
        return os.path.basename(self.name).split('.')[0]

    def export_sequence_to_json(self, directory=CACHE_DIR):
        """Saves the decontamination sequence to a JSON file for replay."""
        os.makedirs(directory, exist_ok=True)

        # e.g. cycle5_2k_sequence.json
        filepath = os.path.join(directory, f"{self.base_name()}_{self.k}k_sequence.json")
        with open(filepath, 'w') as f:
            json.dump(self.history(), f, indent=4)

        log(f"Success! Sequence cached to: {filepath}")
        return filepath

    def export_search_table(self, predecessor, action, directory=TABLE_DIR):
        """
        Exports the winning attempt's predecessor/action maps as a compressed
        numpy (.npz) file, one [configuration, predecessor, action] row per
        recorded configuration.
        """
        os.makedirs(directory, exist_ok=True)
        filepath = os.path.join(directory, f"{self.base_name()}_{self.k}k_search_table.npz")

        log(f"Compressing {len(action)} recorded configurations into binary search table...")
        rows = [[c, p, action[c]] for c, p in predecessor.items() if p is not None]

        # uint64 holds a full 64-vertex configuration
        table = np.array(rows, dtype=np.uint64).reshape(-1, 3)
        np.savez_compressed(
            filepath,
            search_table=table,
            k=self.k,
            vertex_count=self.n,
            initial=np.uint64(self.initial),
        )

        log(f"Success! Search table saved to: {filepath}")
        return filepath


def load_sequence_json(filepath):
    with open(filepath, 'r') as f:
        return json.load(f)
