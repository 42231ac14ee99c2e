"""Plots of two-dimensional subgrid slices."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .subgrid import SubGrid


def plot_grid_slice(
    sg: SubGrid,
    pid_index: int,
    out_path: str | Path,
    *,
    title: str | None = None,
) -> str:
    """Draw the ``(x, Q2)`` plane of one flavor of a 2D subgrid.

    Returns the path of the written image.
    """
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("Plotting requires matplotlib") from exc

    plane = sg.grid_slice(pid_index)
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(6, 4.5))
    mesh = ax.pcolormesh(sg.xs, sg.q2s, np.asarray(plane).T, shading="nearest")
    if sg.xs[0] > 0.0:
        ax.set_xscale("log")
    if sg.q2s[0] > 0.0:
        ax.set_yscale("log")
    ax.set_xlabel("x")
    ax.set_ylabel("Q$^2$")
    ax.set_title(title or f"flavor index {pid_index}")
    fig.colorbar(mesh, ax=ax, label="xf(x, Q$^2$)")
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return str(out)
