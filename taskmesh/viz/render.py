"""Matplotlib rendering of agent trajectories from ``positions.parquet``."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pyarrow.compute as pc  # noqa: E402
import pyarrow.parquet as pq  # noqa: E402

from taskmesh.config.constants import PUBLISHER_LAYER, WORKER_LAYER  # noqa: E402
from taskmesh.config.types import Rectangle  # noqa: E402

LAYER_COLORS: dict[int, str] = {WORKER_LAYER: "tab:blue", PUBLISHER_LAYER: "tab:orange"}
"""Line colour per agent layer."""

LAYER_LABELS: dict[int, str] = {WORKER_LAYER: "worker", PUBLISHER_LAYER: "publisher"}
"""Legend label per agent layer."""


def render_trajectories(
    positions_path: Path,
    output_path: Path,
    bounds: Rectangle | None = None,
) -> int:
    """Plot one polyline per agent and save a PNG; return the number of agents drawn."""
    table = pq.read_table(positions_path)
    bounds = bounds or Rectangle()
    fig, ax = plt.subplots(figsize=(6, 6))

    agent_ids = sorted(pc.unique(table["agent_id"]).to_pylist())
    labelled: set[int] = set()
    for agent_id in agent_ids:
        rows = table.filter(pc.equal(table["agent_id"], agent_id))
        order = np.argsort(rows["timestamp"].to_numpy(), kind="stable")
        xs = rows["x"].to_numpy()[order]
        ys = rows["y"].to_numpy()[order]
        layer = int(rows["layer"][0].as_py())
        label = LAYER_LABELS.get(layer, f"layer {layer}") if layer not in labelled else None
        labelled.add(layer)
        color = LAYER_COLORS.get(layer, "tab:gray")
        ax.plot(xs, ys, color=color, alpha=0.7, linewidth=1.2, label=label)
        ax.scatter(xs[-1:], ys[-1:], color=color, s=14)

    ax.set_xlim(bounds.x_min, bounds.x_max)
    ax.set_ylim(bounds.y_min, bounds.y_max)
    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.grid(True, alpha=0.3)
    if agent_ids:
        ax.legend(loc="upper right")
    ax.set_title(f"Agent trajectories (n={len(agent_ids)})")
    fig.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return len(agent_ids)
