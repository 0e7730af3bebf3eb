import sys

from .errors import DecontaminationError
from .graph import load_graph_matrix, parse_edge_stream
from .solver import DecontaminationSolver
from .verifier import format_report, run_checker, to_checker_input

SOLVE_FLAGS = ("--matrix", "--checker", "--export")

SOLVE_USAGE = """Usage: decontaminate [edge_file|-] [--matrix] [--checker] [--export]
  edge_file   one "source target" pair per line (stdin if omitted or '-')
  --matrix    read edge_file as a 0/1 adjacency matrix instead
  --checker   print the result as input for decontamination-verify
  --export    cache the sequence (JSON) and the search table (.npz)"""

VERIFY_USAGE = "Usage: decontamination-verify [checker_file|-]"

REPLAY_USAGE = "Usage: decontamination-replay <graph_file> <json_file> [--matrix]"


def error(message):
    print(f"Error: {message}", file=sys.stderr)
    return 1


def split_args(argv):
    flags = [a for a in argv if a.startswith('--')]
    positional = [a for a in argv if not a.startswith('--')]
    return flags, positional


def read_lines(source):
    if source == '-':
        return sys.stdin.readlines()
    with open(source, 'r') as f:
        return f.readlines()


def main(argv=None):
    """Finds the minimal k and prints the decontamination sequence."""
    flags, positional = split_args(sys.argv[1:] if argv is None else argv)
    if any(flag not in SOLVE_FLAGS for flag in flags) or len(positional) > 1:
        print(SOLVE_USAGE, file=sys.stderr)
        return 1

    source = positional[0] if positional else '-'
    if '--matrix' in flags and source == '-':
        return error("--matrix needs a file name.")

    try:
        if '--matrix' in flags:
            graph = load_graph_matrix(source)
        else:
            graph = parse_edge_stream(read_lines(source))

        name = "stdin" if source == '-' else source
        solver = DecontaminationSolver(graph, name=name, export='--export' in flags)
        solver.solve()
    except FileNotFoundError:
        return error(f"File '{source}' not found.")
    except DecontaminationError as e:
        return error(e)

    if '--checker' in flags:
        lines = to_checker_input(graph, solver.k, solver.actions)
    else:
        lines = solver.format_sequence()
    for line in lines:
        print(line)
    return 0


def verify_main(argv=None):
    """Replays a guard strategy and prints each round's state, then OK! or NO."""
    flags, positional = split_args(sys.argv[1:] if argv is None else argv)
    if flags or len(positional) > 1:
        print(VERIFY_USAGE, file=sys.stderr)
        return 1

    source = positional[0] if positional else '-'
    try:
        states, ok = run_checker(read_lines(source))
    except FileNotFoundError:
        return error(f"File '{source}' not found.")
    except DecontaminationError as e:
        return error(e)

    for line in format_report(states, ok):
        print(line)
    return 0


def replay_main(argv=None):
    flags, positional = split_args(sys.argv[1:] if argv is None else argv)
    if any(flag != '--matrix' for flag in flags) or len(positional) != 2:
        print(REPLAY_USAGE, file=sys.stderr)
        return 1

    # matplotlib is only needed here
    from .replay import replay

    graph_file, json_file = positional
    try:
        shown = replay(graph_file, json_file, matrix='--matrix' in flags)
    except FileNotFoundError as e:
        return error(f"File '{e.filename}' not found. Did you run the solver with --export first?")
    except DecontaminationError as e:
        return error(e)
    return 0 if shown else 1
