from robocalib.messages import JointState, Point
from robocalib.offsets import OptimizationOffsets
from robocalib.viz import (
    ColorRGBA,
    MarkerType,
    build_markers,
    model_colors,
    offset_joint_state,
)

WHITE = ColorRGBA(1.0, 1.0, 1.0, 1.0)
RED = ColorRGBA(1.0, 0.0, 0.0, 1.0)
GREEN = ColorRGBA(0.0, 1.0, 0.0, 1.0)
BLUE = ColorRGBA(0.0, 0.0, 1.0, 1.0)


def test_colors_no_models():
    assert model_colors(0) == [WHITE]


def test_colors_one_model():
    assert model_colors(1) == [WHITE, RED, GREEN, BLUE]


def test_colors_cover_every_model():
    for count in range(10):
        colors = model_colors(count)
        assert len(colors) >= count + 1
        assert (len(colors) - 1) % 3 == 0


def test_offset_joint_state():
    offsets = OptimizationOffsets()
    offsets.add("j1")
    offsets.set("j1", 0.5)
    state = JointState(name=["j1", "j2"], position=[1.0, 2.0])
    result = offset_joint_state(state, offsets)
    assert result.position == [1.5, 2.0]
    assert state.position == [1.0, 2.0]


def test_build_markers_skips_empty_and_keeps_ids():
    colors = model_colors(2)
    points = [Point(1, 2, 3), Point(4, 5, 6), Point(7, 8, 9)]
    markers = build_markers([("arm", []), ("camera", points)], "base_link", colors, 3.0)
    assert len(markers) == 1
    marker = markers[0]
    assert (marker.ns, marker.id, marker.frame_id, marker.stamp) == ("camera", 1, "base_link", 3.0)
    assert marker.type is MarkerType.SPHERE_LIST
    assert marker.points == points
    assert marker.colors == [colors[0], colors[2], colors[2]]