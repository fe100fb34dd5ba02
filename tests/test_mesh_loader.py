import math
import struct

import numpy as np
import pytest

from robocalib.mesh_loader import Mesh, MeshLoader, load_stl

TRIANGLE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]


def write_binary_stl(path, triangles):
    data = b"\0" * 80 + struct.pack("<I", len(triangles))
    for tri in triangles:
        data += struct.pack("<3f", 0.0, 0.0, 1.0)
        for v in tri:
            data += struct.pack("<3f", *v)
        data += struct.pack("<H", 0)
    path.write_bytes(data)
    return path


def write_ascii_stl(path, triangles):
    lines = ["solid test"]
    for tri in triangles:
        lines.append("facet normal 0 0 1")
        lines.append("outer loop")
        lines.extend(f"vertex {x} {y} {z}" for x, y, z in tri)
        lines.append("endloop")
        lines.append("endfacet")
    lines.append("endsolid test")
    path.write_text("\n".join(lines))
    return path


def corners(mesh):
    return mesh.vertices[mesh.triangles]


def test_binary_stl_round_trip(tmp_path):
    mesh = load_stl(write_binary_stl(tmp_path / "a.stl", [TRIANGLE]))
    assert mesh.vertex_count == 3
    assert mesh.triangle_count == 1
    np.testing.assert_allclose(corners(mesh)[0], np.array(TRIANGLE))


def test_ascii_stl_merges_shared_vertices(tmp_path):
    second = [(1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]
    mesh = load_stl(write_ascii_stl(tmp_path / "a.stl", [TRIANGLE, second]))
    assert mesh.triangle_count == 2
    assert mesh.vertex_count == 4
    np.testing.assert_allclose(corners(mesh), np.array([TRIANGLE, second]))


def test_scale_applied(tmp_path):
    mesh = load_stl(write_binary_stl(tmp_path / "a.stl", [TRIANGLE]), (2.0, 3.0, 4.0))
    np.testing.assert_allclose(corners(mesh)[0], np.array(TRIANGLE) * [2.0, 3.0, 4.0])


def test_not_an_stl(tmp_path):
    path = tmp_path / "bad.stl"
    path.write_bytes(b"hello world")
    with pytest.raises(ValueError):
        load_stl(path)


def test_empty_mesh_counts():
    mesh = Mesh()
    assert (mesh.vertex_count, mesh.triangle_count) == (0, 0)


def urdf(link_body):
    return f'<robot name="r"><link name="base"/><link name="tool">{link_body}</link></robot>'


def collision(filename, origin=""):
    return (
        f"<collision>{origin}<geometry><mesh filename=\"{filename}\"/></geometry></collision>"
    )


def test_collision_origin_translation(tmp_path):
    path = write_binary_stl(tmp_path / "m.stl", [TRIANGLE])
    loader = MeshLoader(urdf(collision(f"file://{path}", '<origin xyz="1 2 3"/>')))
    mesh = loader.get_collision_mesh("tool")
    np.testing.assert_allclose(corners(mesh)[0], np.array(TRIANGLE) + [1.0, 2.0, 3.0])


def test_collision_origin_rotation(tmp_path):
    path = write_binary_stl(tmp_path / "m.stl", [TRIANGLE])
    origin = f'<origin rpy="0 0 {math.pi / 2}"/>'
    mesh = MeshLoader(urdf(collision(str(path), origin))).get_collision_mesh("tool")
    rotated = corners(mesh)[0]
    np.testing.assert_allclose(rotated[1], [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(rotated[2], [-1.0, 0.0, 0.0], atol=1e-12)


def test_package_resource_and_cache(tmp_path):
    (tmp_path / "meshes").mkdir()
    write_binary_stl(tmp_path / "meshes" / "m.stl", [TRIANGLE])
    loader = MeshLoader(
        urdf(collision("package://robot/meshes/m.stl")), {"robot": tmp_path}
    )
    first = loader.get_collision_mesh("tool")
    assert first.triangle_count == 1
    assert loader.get_collision_mesh("tool") is first


def test_unknown_package_gives_none():
    loader = MeshLoader(urdf(collision("package://missing/m.stl")))
    assert loader.get_collision_mesh("tool") is None


def test_missing_link_and_geometry():
    loader = MeshLoader(
        urdf("<collision><geometry><box size=\"1 1 1\"/></geometry></collision>")
    )
    assert loader.get_collision_mesh("nothing") is None
    assert loader.get_collision_mesh("base") is None
    assert loader.get_collision_mesh("tool") is None


def test_bad_urdf():
    with pytest.raises(ValueError):
        MeshLoader("<robot")