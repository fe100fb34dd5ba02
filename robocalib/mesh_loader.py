"""Loading link collision meshes described in a URDF."""

from __future__ import annotations

import logging
import os
import struct
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence

import numpy as np

from .geometry import rotation_from_rpy

logger = logging.getLogger(__name__)

_STL_HEADER_SIZE = 80
_STL_TRIANGLE = np.dtype(
    [("normal", "<f4", (3,)), ("vertices", "<f4", (3, 3)), ("attribute", "<u2")]
)


@dataclass(eq=False)
class Mesh:
    """A triangle mesh: shared vertices and triangles indexing them."""

    vertices: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    triangles: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 3), dtype=np.int64)
    )

    def __post_init__(self) -> None:
        self.vertices = np.array(self.vertices, dtype=float).reshape(-1, 3)
        self.triangles = np.array(self.triangles, dtype=np.int64).reshape(-1, 3)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.triangles.shape[0])


def _binary_corners(data: bytes) -> np.ndarray:
    (count,) = struct.unpack_from("<I", data, _STL_HEADER_SIZE)
    records = np.frombuffer(
        data, dtype=_STL_TRIANGLE, count=count, offset=_STL_HEADER_SIZE + 4
    )
    return records["vertices"].astype(float).reshape(-1, 3)


def _ascii_corners(data: bytes) -> np.ndarray:
    corners = []
    for line in data.decode("ascii", errors="replace").splitlines():
        tokens = line.split()
        if tokens and tokens[0] == "vertex":
            if len(tokens) < 4:
                raise ValueError(f"malformed STL vertex line: {line.strip()!r}")
            try:
                corners.append([float(t) for t in tokens[1:4]])
            except ValueError:
                raise ValueError(f"malformed STL vertex line: {line.strip()!r}") from None
    if len(corners) % 3:
        raise ValueError("STL vertex count is not a multiple of three")
    return np.array(corners, dtype=float).reshape(-1, 3)


def _is_binary_stl(data: bytes) -> bool:
    if len(data) < _STL_HEADER_SIZE + 4:
        return False
    (count,) = struct.unpack_from("<I", data, _STL_HEADER_SIZE)
    return _STL_HEADER_SIZE + 4 + 50 * count == len(data)


def load_stl(path: str | os.PathLike, scale: Sequence[float] = (1.0, 1.0, 1.0)) -> Mesh:
    """Read a binary or ASCII STL file, merging identical vertices.

    Raises ValueError if the file is not a valid STL.
    """
    data = Path(path).read_bytes()
    if _is_binary_stl(data):
        corners = _binary_corners(data)
    elif data.lstrip().startswith(b"solid"):
        corners = _ascii_corners(data)
    else:
        raise ValueError(f"{path} is not an STL file")

    corners = corners * np.asarray(scale, dtype=float).reshape(3)
    if corners.shape[0] == 0:
        return Mesh()
    vertices, inverse = np.unique(corners, axis=0, return_inverse=True)
    return Mesh(vertices, np.asarray(inverse).reshape(-1, 3))


def _floats(text: Optional[str], default: Sequence[float]) -> list[float]:
    if text is None:
        return list(default)
    values = [float(v) for v in text.split()]
    if len(values) != 3:
        raise ValueError(f"expected three values, got {text!r}")
    return values


class MeshLoader:
    """Loads and caches collision meshes of URDF links.

    Mesh resources may be plain paths, ``file://`` URIs or ``package://`` URIs;
    the latter are resolved through ``package_paths`` (package name to directory).
    Meshes are returned in the link frame, with the collision origin applied.
    """

    def __init__(
        self,
        model: str | ET.Element,
        package_paths: Optional[Mapping[str, str | os.PathLike]] = None,
    ) -> None:
        if isinstance(model, str):
            try:
                model = ET.fromstring(model)
            except ET.ParseError as exc:
                raise ValueError("Failed to parse URDF.") from exc
        if model.tag != "robot":
            raise ValueError("Failed to parse URDF.")
        self._robot = model
        self._package_paths = dict(package_paths or {})
        self._meshes: dict[str, Mesh] = {}

    def _resolve(self, resource: str) -> Optional[Path]:
        if resource.startswith("package://"):
            package, _, relative = resource[len("package://"):].partition("/")
            base = self._package_paths.get(package)
            if base is None:
                logger.error("Cannot resolve package %s", package)
                return None
            return Path(base) / relative
        if resource.startswith("file://"):
            return Path(resource[len("file://"):])
        return Path(resource)

    def _find_link(self, link_name: str) -> Optional[ET.Element]:
        return next(
            (link for link in self._robot.findall("link") if link.get("name") == link_name),
            None,
        )

    def get_collision_mesh(self, link_name: str) -> Optional[Mesh]:
        """Collision mesh of a link, or None if it has none or it cannot be loaded."""
        if link_name in self._meshes:
            return self._meshes[link_name]

        link = self._find_link(link_name)
        if link is None:
            logger.error("Cannot find %s in URDF", link_name)
            return None
        collision = link.find("collision")
        geometry = collision.find("geometry") if collision is not None else None
        if geometry is None:
            logger.error("%s does not have collision geometry description.", link_name)
            return None
        mesh_xml = geometry.find("mesh")
        if mesh_xml is None or not mesh_xml.get("filename"):
            logger.error("%s does not have mesh geometry", link_name)
            return None

        path = self._resolve(mesh_xml.get("filename", ""))
        if path is None:
            return None
        if path.suffix.lower() != ".stl":
            logger.error("Unsupported mesh format: %s", path)
            return None
        scale = _floats(mesh_xml.get("scale"), (1.0, 1.0, 1.0))
        try:
            mesh = load_stl(path, scale)
        except (OSError, ValueError) as exc:
            logger.error("Unable to load %s: %s", path, exc)
            return None

        origin = collision.find("origin")
        xyz = _floats(origin.get("xyz") if origin is not None else None, (0.0, 0.0, 0.0))
        rpy = _floats(origin.get("rpy") if origin is not None else None, (0.0, 0.0, 0.0))
        rotation = rotation_from_rpy(*rpy)
        mesh.vertices = mesh.vertices @ rotation.T + np.asarray(xyz)

        logger.info("Loaded %s with %d vertices", path, mesh.vertex_count)
        self._meshes[link_name] = mesh
        return mesh