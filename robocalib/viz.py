"""Building visualization markers for projected calibration data."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol, Sequence

from .messages import JointState, Point


class MarkerType(IntEnum):
    """Marker shapes used here, with their standard numeric codes."""

    LINE_STRIP = 4
    SPHERE_LIST = 7


@dataclass
class ColorRGBA:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0


WHITE = ColorRGBA(1.0, 1.0, 1.0, 1.0)
RED = ColorRGBA(1.0, 0.0, 0.0, 1.0)
GREEN = ColorRGBA(0.0, 1.0, 0.0, 1.0)
BLUE = ColorRGBA(0.0, 0.0, 1.0, 1.0)


@dataclass
class Marker:
    """A visualization marker made of points."""

    frame_id: str = ""
    stamp: float = 0.0
    ns: str = ""
    id: int = 0
    type: MarkerType = MarkerType.SPHERE_LIST
    orientation_w: float = 1.0
    scale: tuple[float, float, float] = (0.0, 0.0, 0.0)
    color: ColorRGBA = field(default_factory=ColorRGBA)
    points: list[Point] = field(default_factory=list)
    colors: list[ColorRGBA] = field(default_factory=list)


class _Offsets(Protocol):
    def get(self, name: str) -> float: ...


def model_colors(model_count: int) -> list[ColorRGBA]:
    """White for first points, then red, green, blue repeated for each model."""
    colors = [copy.copy(WHITE)]
    while len(colors) < model_count + 1:
        colors.extend(copy.copy(c) for c in (RED, GREEN, BLUE))
    return colors


def offset_joint_state(state: JointState, offsets: _Offsets) -> JointState:
    """Copy of ``state`` with each joint's calibration offset added."""
    result = copy.deepcopy(state)
    result.position = [
        position + offsets.get(name) for name, position in zip(result.name, result.position)
    ]
    return result


def build_markers(
    projections: Sequence[tuple[str, Sequence[Point]]],
    base_link: str,
    colors: Sequence[ColorRGBA],
    stamp: float = 0.0,
) -> list[Marker]:
    """One sphere-list marker per model with projected points.

    ``projections`` holds (model name, points) in model order; a model's
    position sets its marker id and colour. The first point of each is white.
    """
    markers = []
    for index, (name, points) in enumerate(projections):
        if not points:
            continue
        markers.append(
            Marker(
                frame_id=base_link,
                stamp=stamp,
                ns=name,
                id=index,
                type=MarkerType.SPHERE_LIST,
                scale=(0.01, 0.01, 0.01),
                points=list(points),
                colors=[colors[0]] + [colors[index + 1]] * (len(points) - 1),
            )
        )
    return markers