"""Message types exchanged during calibration capture and optimization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Point:
    """A 3D point, optionally tagged with the frame it is expressed in."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    frame_id: str = ""


@dataclass
class JointState:
    """Names and states of a set of joints."""

    name: list[str] = field(default_factory=list)
    position: list[float] = field(default_factory=list)
    velocity: list[float] = field(default_factory=list)
    effort: list[float] = field(default_factory=list)


@dataclass
class CaptureConfig:
    """A pose to move to and the features to capture there."""

    joint_states: JointState = field(default_factory=JointState)
    features: list[str] = field(default_factory=list)


@dataclass
class CameraInfo:
    """Intrinsic calibration of a pinhole camera."""

    height: int = 0
    width: int = 0
    distortion_model: str = ""
    d: list[float] = field(default_factory=list)
    k: list[float] = field(default_factory=lambda: [0.0] * 9)
    r: list[float] = field(default_factory=lambda: [0.0] * 9)
    p: list[float] = field(default_factory=lambda: [0.0] * 12)
    frame_id: str = ""


@dataclass
class ExtendedCameraInfo:
    """Camera intrinsics together with driver parameters such as depth scaling."""

    camera_info: CameraInfo = field(default_factory=CameraInfo)
    parameters: dict[str, float] = field(default_factory=dict)


@dataclass
class Observation:
    """Features seen by one sensor in one sample."""

    sensor_name: str = ""
    features: list[Point] = field(default_factory=list)
    ext_camera_info: ExtendedCameraInfo = field(default_factory=ExtendedCameraInfo)
    cloud: Any = None


@dataclass
class CalibrationData:
    """One captured sample: joint states plus every sensor's observations."""

    joint_states: JointState = field(default_factory=JointState)
    observations: list[Observation] = field(default_factory=list)


def get_sensor_index(msg: CalibrationData, sensor: str) -> int | None:
    """Return the index of the first observation from ``sensor``, or None."""
    return next(
        (i for i, obs in enumerate(msg.observations) if obs.sensor_name == sensor),
        None,
    )


def has_sensor(msg: CalibrationData, sensor: str) -> bool:
    """Return True if the sample holds an observation from ``sensor``."""
    return get_sensor_index(msg, sensor) is not None