"""Tabular export of subgrid values."""

from __future__ import annotations

import numpy as np

from .constants import ALPHAS, DELTA, FLAVOR, KT, NUCLEONS, Q2, X, XI
from .subgrid import SubGrid


def subgrid_rows(sg: SubGrid, pid_index: int) -> tuple[list[str], np.ndarray]:
    """Long-format rows ``(active axes..., x, Q2, value)`` of one flavor."""
    if not 0 <= pid_index < sg.nflav:
        raise IndexError(f"flavor index {pid_index} out of range for {sg.nflav} flavors")
    axes = list(sg.config.active_axes) + [X, Q2]
    grids = np.meshgrid(*(sg.axis(name) for name in axes), indexing="ij")

    # Pinned axes sit at index 0; active ones keep their full extent.
    array = sg.grid.view()
    index = []
    for name in sg.grid.AXES:
        if name == FLAVOR:
            index.append(pid_index)
        elif name in axes:
            index.append(slice(None))
        else:
            index.append(0)
    values = array[tuple(index)]

    rows = np.column_stack([g.ravel() for g in grids] + [values.ravel()])
    return axes + ["value"], rows


def subgrid_plane(
    sg: SubGrid,
    pid_index: int,
    *,
    nucleons: int = 0,
    alphas: int = 0,
    xi: int = 0,
    delta: int = 0,
    kt: int = 0,
) -> np.ndarray:
    """``(x, Q2)`` plane of one flavor at fixed indices of the other axes.

    Unlike :meth:`SubGrid.grid_slice` this works for any dimensionality.
    """
    picks = {NUCLEONS: nucleons, ALPHAS: alphas, XI: xi, DELTA: delta, KT: kt}
    for name, i in picks.items():
        n = sg.axis(name).size
        if not 0 <= i < n:
            raise IndexError(f"{name} index {i} out of range for {n} nodes")
    if not 0 <= pid_index < sg.nflav:
        raise IndexError(f"flavor index {pid_index} out of range for {sg.nflav} flavors")
    picks[FLAVOR] = pid_index

    index = [slice(None) if name in (X, Q2) else picks[name] for name in sg.grid.AXES]
    return sg.grid.view()[tuple(index)]


def subgrid_frame(sg: SubGrid, pid_index: int):
    """Return :func:`subgrid_rows` as a ``pandas.DataFrame``."""
    try:
        import pandas as pd
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("Dataframe export requires pandas installed") from exc

    columns, rows = subgrid_rows(sg, pid_index)
    return pd.DataFrame(rows, columns=columns)
