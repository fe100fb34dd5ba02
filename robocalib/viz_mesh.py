"""Command that prints a link's collision mesh as line-strip markers."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Optional

from .mesh_loader import Mesh, MeshLoader
from .messages import Point
from .viz import ColorRGBA, Marker, MarkerType


def mesh_markers(mesh: Mesh, link_name: str) -> list[Marker]:
    """One closed red line strip per triangle, in the link's frame."""
    markers = []
    for t, triangle in enumerate(mesh.triangles):
        v1, v2, v3 = (Point(*(float(c) for c in mesh.vertices[i])) for i in triangle)
        markers.append(
            Marker(
                frame_id=link_name,
                ns=link_name,
                id=t,
                type=MarkerType.LINE_STRIP,
                scale=(0.005, 0.005, 0.005),
                color=ColorRGBA(1.0, 0.0, 0.0, 1.0),
                points=[v1, v2, v3, dataclasses.replace(v1)],
            )
        )
    return markers


def _package_path(text: str) -> tuple[str, str]:
    name, sep, path = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=PATH, got {text!r}")
    return name, path


def main(argv: Optional[list[str]] = None) -> int:
    """Print the collision mesh of a link as JSON markers."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("\nusage:\n  viz_mesh link_name [--urdf FILE]\n\n")
        return -1

    parser = argparse.ArgumentParser(prog="viz_mesh")
    parser.add_argument("link_name")
    parser.add_argument("--urdf", help="robot description file (default: stdin)")
    parser.add_argument(
        "--package", action="append", type=_package_path, default=[],
        metavar="NAME=PATH", help="directory of a package:// resource package",
    )
    options = parser.parse_args(args)

    if options.urdf:
        with open(options.urdf, encoding="utf-8") as stream:
            description = stream.read()
    else:
        description = sys.stdin.read()

    try:
        loader = MeshLoader(description, dict(options.package))
    except ValueError:
        sys.stderr.write("Failed to parse URDF.\n")
        return -1

    mesh = loader.get_collision_mesh(options.link_name)
    if mesh is None:
        sys.stderr.write("Unable to load mesh\n")
        return -1

    markers = mesh_markers(mesh, options.link_name)
    json.dump([dataclasses.asdict(m) for m in markers], sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())