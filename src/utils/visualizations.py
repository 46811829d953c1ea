"""
Charts for reviewing compiler output.

Visualizations Provided:
    - Blend node layout: where each child clip sits on the Horizontal/Vertical
      plane, the same way an animator sees a 2D directional blend tree
    - Patch coverage heatmap: share of each state's clips replaced per variant
"""

from typing import Dict, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from src.graph.model import BlendNode, MotionGraph
from src.patcher.overrides import OverridePatch
from src.utils.logging import get_logger

logger = get_logger(__name__)


def plot_blend_node(
    node: BlendNode,
    title: str = "",
    figsize: Tuple[int, int] = (6, 6),
) -> Figure:
    """
    Plot the child positions of a blend node.

    Children sharing a direction are listed together at that point.

    Args:
        node: Blend node to draw
        title: Chart title (defaults to the node name)
        figsize: Figure size tuple

    Returns:
        Matplotlib Figure object

    Example:
        >>> fig = plot_blend_node(graph.state(LogicalState.WALK).binding)
        >>> save_figure(fig, "walk_blend.png")
    """
    logger.info(f"Plotting blend node {node.name} ({len(node.children)} children)")

    labels: Dict[Tuple[float, float], list] = {}
    for child in node.children:
        labels.setdefault(tuple(child.direction), []).append(child.asset.name)

    fig, ax = plt.subplots(figsize=figsize)

    if labels:
        points = np.array(list(labels.keys()), dtype=float)
        ax.scatter(points[:, 0], points[:, 1], s=120, c="tab:blue", edgecolors="black", zorder=3)
        for (x, y), names in labels.items():
            ax.annotate(
                "\n".join(names),
                (x, y),
                textcoords="offset points",
                xytext=(0, 10),
                ha="center",
                fontsize=8,
            )

    ax.axhline(0, color="grey", linewidth=0.8)
    ax.axvline(0, color="grey", linewidth=0.8)
    ax.set_xlim(-1.5, 1.5)
    ax.set_ylim(-1.5, 1.5)
    ax.set_aspect("equal")
    ax.set_xlabel(node.horizontal_parameter)
    ax.set_ylabel(node.vertical_parameter)
    ax.set_title(title or node.name, fontsize=12, fontweight="bold")
    ax.grid(alpha=0.3)

    fig.tight_layout()
    return fig


def coverage_matrix(graph: MotionGraph, patches: Sequence[OverridePatch]) -> np.ndarray:
    """
    Fraction of each state's assets substituted by each patch.

    Returns:
        Array of shape (len(graph.states), len(patches)) with values in [0, 1]
    """
    matrix = np.zeros((len(graph.states), len(patches)), dtype=float)
    for row, node in enumerate(graph.states):
        refs = node.asset_refs()
        if not refs:
            continue
        for col, patch in enumerate(patches):
            replaced = sum(1 for ref in refs if patch.substitute_for(ref) is not None)
            matrix[row, col] = replaced / len(refs)
    return matrix


def plot_patch_coverage(
    graph: MotionGraph,
    patches: Sequence[OverridePatch],
    title: str = "Override Patch Coverage",
    figsize: Tuple[int, int] = (8, 5),
) -> Figure:
    """
    Heatmap of substitution coverage, states by variants.

    Args:
        graph: Canonical motion graph
        patches: Patches to compare, one column each
        title: Chart title
        figsize: Figure size tuple

    Returns:
        Matplotlib Figure object
    """
    logger.info(f"Plotting patch coverage for {len(patches)} variants")

    matrix = coverage_matrix(graph, patches)
    fig, ax = plt.subplots(figsize=figsize)

    image = ax.imshow(matrix, cmap="RdYlGn", vmin=0.0, vmax=1.0, aspect="auto")
    ax.set_xticks(range(len(patches)))
    ax.set_xticklabels([patch.variant for patch in patches], rotation=30, ha="right")
    ax.set_yticks(range(len(graph.states)))
    ax.set_yticklabels([node.name for node in graph.states])

    for row in range(matrix.shape[0]):
        for col in range(matrix.shape[1]):
            ax.text(col, row, f"{matrix[row, col]:.0%}", ha="center", va="center", fontsize=8)

    fig.colorbar(image, ax=ax, label="Clips substituted")
    ax.set_title(title, fontsize=12, fontweight="bold")

    fig.tight_layout()
    return fig


def close_all_figures() -> None:
    """Close all matplotlib figures to free memory."""
    plt.close("all")


def save_figure(fig: Figure, filepath: str, dpi: int = 150, **kwargs) -> None:
    """
    Save a matplotlib figure to file.

    Args:
        fig: Matplotlib Figure object
        filepath: Output file path
        dpi: Resolution (dots per inch)
        **kwargs: Additional arguments for savefig
    """
    logger.info(f"Saving figure to {filepath}")

    try:
        fig.savefig(filepath, dpi=dpi, bbox_inches="tight", **kwargs)
    except Exception as e:
        logger.error(f"Failed to save figure: {e}", exc_info=True)
        raise
