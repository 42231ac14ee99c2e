"""Command line access to PDF grid containers."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

import numpy as np
from jsonschema.exceptions import ValidationError

from .config import LoadConfig
from .grid_io import GridContainer, read_container, resolve_set_path
from .selection import select_subgrid
from .tables import subgrid_frame, subgrid_plane

logger = logging.getLogger(__name__)


def _load(args: argparse.Namespace) -> GridContainer:
    config = LoadConfig.from_env(validate_schema=not args.no_validate)
    return read_container(resolve_set_path(args.pdf, config=config), config=config)


def _pid_index(container: GridContainer, pid: int) -> int:
    flavors = container.metadata.flavors
    if pid not in flavors:
        raise ValueError(f"PID {pid} not in set flavors {list(flavors)}")
    return flavors.index(pid)


def _cmd_metadata(args: argparse.Namespace) -> int:
    container = _load(args)
    print(container.metadata)
    return 0


def _cmd_num_subgrids(args: argparse.Namespace) -> int:
    container = _load(args)
    print(len(container.subgrids(args.member)))
    return 0


def _cmd_subgrid_info(args: argparse.Namespace) -> int:
    container = _load(args)
    sg = container.subgrid(args.member, args.subgrid)
    print(json.dumps(sg.describe(), indent=2))
    return 0


def _cmd_subgrid(args: argparse.Namespace) -> int:
    container = _load(args)
    sg = container.subgrid(args.member, args.subgrid)
    plane = subgrid_plane(
        sg,
        _pid_index(container, args.pid),
        nucleons=args.nucleon_index,
        alphas=args.alphas_index,
        xi=args.xi_index,
        delta=args.delta_index,
        kt=args.kt_index,
    )
    print("x \\ Q2 " + " ".join(f"{q: .5e}" for q in sg.q2s))
    for x, row in zip(sg.xs, np.asarray(plane)):
        print(f"{x: .5e} " + " ".join(f"{v: .5e}" for v in row))
    return 0


def _cmd_locate(args: argparse.Namespace) -> int:
    container = _load(args)
    subgrids = container.subgrids(args.member)
    index = select_subgrid(subgrids, args.point)
    sg = subgrids[index]
    result = {
        "subgrid": index,
        "config": sg.config.name,
        "inside": sg.contains_point(args.point),
        "distance2": sg.distance_to_point(args.point),
    }
    print(json.dumps(result, indent=2))
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    container = _load(args)
    sg = container.subgrid(args.member, args.subgrid)
    frame = subgrid_frame(sg, _pid_index(container, args.pid))
    frame.to_csv(args.output, index=False)
    logger.info("wrote %d rows to %s", len(frame), args.output)
    return 0


def _cmd_plot(args: argparse.Namespace) -> int:
    from .plotting import plot_grid_slice

    container = _load(args)
    sg = container.subgrid(args.member, args.subgrid)
    out = plot_grid_slice(sg, _pid_index(container, args.pid), args.output, title=f"{args.pdf} PID {args.pid}")
    logger.info("wrote %s", out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="pdfgrid", description="Inspect PDF grid containers.")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    ap.add_argument("--no-validate", action="store_true", help="Skip JSON schema validation of the descriptor")
    sub = ap.add_subparsers(dest="command", required=True)

    def add(name: str, func, help_text: str, *, member: bool = True, subgrid: bool = False, pid: bool = False):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("pdf", help="Container path or set name")
        if member:
            p.add_argument("-m", "--member", type=int, default=0, help="Member index")
        if subgrid:
            p.add_argument("-s", "--subgrid", type=int, default=0, help="Subgrid index")
        if pid:
            p.add_argument("--pid", type=int, required=True, help="Parton PDG id")
        p.set_defaults(func=func)
        return p

    add("metadata", _cmd_metadata, "Print the set metadata", member=False)
    add("num-subgrids", _cmd_num_subgrids, "Print the number of subgrids of a member")
    add("subgrid-info", _cmd_subgrid_info, "Print axes and ranges of a subgrid", subgrid=True)

    p = add("subgrid", _cmd_subgrid, "Print an (x, Q2) plane of a subgrid", subgrid=True, pid=True)
    for axis in ("nucleon", "alphas", "xi", "delta", "kt"):
        p.add_argument(f"--{axis}-index", type=int, default=0, help=f"Index on the {axis} axis")

    p = add("locate", _cmd_locate, "Find the subgrid owning a point")
    p.add_argument("point", type=float, nargs="+", help="Coordinates (active axes..., x, Q2)")

    p = add("export", _cmd_export, "Write a subgrid flavor as CSV (needs pandas)", subgrid=True, pid=True)
    p.add_argument("-o", "--output", required=True, help="CSV path")

    p = add("plot", _cmd_plot, "Plot the (x, Q2) plane of a 2D subgrid (needs matplotlib)", subgrid=True, pid=True)
    p.add_argument("-o", "--output", required=True, help="Image path")
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)
    try:
        return args.func(args)
    except (FileNotFoundError, IndexError, ValueError, ValidationError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
