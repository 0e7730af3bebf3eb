import networkx as nx
import matplotlib.pyplot as plt
from matplotlib.widgets import Button

from .graph import load_edge_file, load_graph_matrix
from .solver import load_sequence_json, log

# --- CONFIGURATION ---
COLOR_CONTAMINATED = 'red'
COLOR_CLEAN = 'limegreen'
COLOR_TARGET_EDGE = 'black'
NODE_SIZE = 350
LAYOUT_SEED = 42


def step_colors(graph, step):
    contaminated = set(step['contaminated'])
    return [COLOR_CONTAMINATED if v in contaminated else COLOR_CLEAN for v in range(graph.vertex_count())]


def step_title(step, total):
    title = f"Round {step['round']}/{total - 1}: {step['configuration']}"
    if step['action'] is not None:
        title += f"\nDecontaminate: {' '.join(str(v) for v in step['action'])}"
    else:
        title += "\nGraph is clean"
    return title


def visualize_interactive(graph, history):
    """Interactive Matplotlib UI stepping through a decontamination sequence."""
    G = graph.to_networkx()
    pos = nx.spring_layout(G, seed=LAYOUT_SEED)

    fig, ax = plt.subplots(figsize=(12, 9))
    plt.subplots_adjust(bottom=0.2)  # room for buttons

    current_step = [0]

    def draw_step(step_idx):
        ax.clear()
        step = history[step_idx]

        nx.draw_networkx_edges(G, pos, ax=ax, edge_color='gray', arrows=True)
        nx.draw_networkx_nodes(G, pos, ax=ax, node_color=step_colors(graph, step), node_size=NODE_SIZE)
        nx.draw_networkx_labels(G, pos, ax=ax, font_size=8, font_weight='bold')

        # Outline the vertices chosen for this round
        if step['action']:
            nx.draw_networkx_nodes(G, pos, nodelist=step['action'], ax=ax, node_color='none',
                                   edgecolors=COLOR_TARGET_EDGE, linewidths=3, node_size=NODE_SIZE + 150)

        ax.set_title(step_title(step, len(history)), fontsize=14, fontweight='bold')
        ax.axis('off')
        fig.canvas.draw_idle()

    draw_step(0)

    axprev = plt.axes([0.35, 0.05, 0.1, 0.075])
    axnext = plt.axes([0.55, 0.05, 0.1, 0.075])
    bnext = Button(axnext, 'Next Round')
    bprev = Button(axprev, 'Previous')

    def next_step(event):
        if current_step[0] < len(history) - 1:
            current_step[0] += 1
            draw_step(current_step[0])

    def prev_step(event):
        if current_step[0] > 0:
            current_step[0] -= 1
            draw_step(current_step[0])

    bnext.on_clicked(next_step)
    bprev.on_clicked(prev_step)

    plt.show()


def replay(graph_filepath, json_filepath, matrix=False):
    log(f"Loading graph from: {graph_filepath}")
    graph = load_graph_matrix(graph_filepath) if matrix else load_edge_file(graph_filepath)

    log(f"Loading cached sequence from: {json_filepath}")
    history = load_sequence_json(json_filepath)

    if not history:
        log(f"Error: '{json_filepath}' holds no rounds to replay.")
        return False

    if len(history[0]['configuration']) != graph.vertex_count():
        log(f"Warning: Sequence covers {len(history[0]['configuration'])} vertices, "
            f"graph has {graph.vertex_count()}.")

    log("Launching interactive visualizer...")
    visualize_interactive(graph, history)
    return True
