"""Parameters describing one calibration step."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass
class FreeFrameParams:
    """Which components of a frame correction are free."""

    name: str = ""
    x: bool = False
    y: bool = False
    z: bool = False
    roll: bool = False
    pitch: bool = False
    yaw: bool = False


@dataclass
class FreeFrameInitialValue:
    """Initial xyz and rpy of a frame correction."""

    name: str = ""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0


@dataclass
class ModelParams:
    """A kinematic model used to project observations."""

    name: str = ""
    type: str = ""
    frame: str = ""
    param_name: str = ""


@dataclass
class ErrorBlockParams:
    """Common fields of every error block."""

    name: str = ""
    type: str = ""


@dataclass
class Chain3dToChain3dParams(ErrorBlockParams):
    type: str = "chain3d_to_chain3d"
    model_a: str = ""
    model_b: str = ""


@dataclass
class Chain3dToPlaneParams(ErrorBlockParams):
    type: str = "chain3d_to_plane"
    model: str = ""
    a: float = 0.0
    b: float = 0.0
    c: float = 1.0
    d: float = 0.0
    scale: float = 1.0


@dataclass
class Chain3dToMeshParams(ErrorBlockParams):
    type: str = "chain3d_to_mesh"
    model: str = ""
    link_name: str = ""


@dataclass
class PlaneToPlaneParams(ErrorBlockParams):
    type: str = "plane_to_plane"
    model_a: str = ""
    model_b: str = ""
    normal_scale: float = 1.0
    offset_scale: float = 1.0


@dataclass
class OutrageousParams(ErrorBlockParams):
    type: str = "outrageous"
    param: str = ""
    joint_scale: float = 1.0
    position_scale: float = 1.0
    rotation_scale: float = 1.0


def _flatten(parameters: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in parameters.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, name + "."))
        else:
            flat[name] = value
    return flat


class _Parameters:
    """Typed lookup of dotted parameter names with defaults."""

    def __init__(self, parameters: Mapping[str, Any]) -> None:
        self._values = _flatten(parameters)

    def _raw(self, key: str) -> Any:
        return self._values.get(key)

    def boolean(self, key: str, default: bool = False) -> bool:
        value = self._raw(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise TypeError(f"parameter {key!r} must be a bool, got {value!r}")
        return value

    def number(self, key: str, default: float) -> float:
        value = self._raw(key)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"parameter {key!r} must be a number, got {value!r}")
        return float(value)

    def integer(self, key: str, default: int) -> int:
        value = self._raw(key)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"parameter {key!r} must be an integer, got {value!r}")
        return value

    def string(self, key: str, default: str = "") -> str:
        value = self._raw(key)
        if value is None:
            return default
        if not isinstance(value, str):
            raise TypeError(f"parameter {key!r} must be a string, got {value!r}")
        return value

    def strings(self, key: str) -> list[str]:
        value = self._raw(key)
        if value is None:
            return []
        if not isinstance(value, (list, tuple)) or not all(
            isinstance(v, str) for v in value
        ):
            raise TypeError(f"parameter {key!r} must be a list of strings, got {value!r}")
        return list(value)


@dataclass
class OptimizationParams:
    """Everything one calibration step needs: free values, models, error blocks."""

    base_link: str = "base_link"
    max_num_iterations: int = 1000
    free_params: list[str] = field(default_factory=list)
    free_frames: list[FreeFrameParams] = field(default_factory=list)
    free_frames_initial_values: list[FreeFrameInitialValue] = field(default_factory=list)
    models: list[ModelParams] = field(default_factory=list)
    error_blocks: list[ErrorBlockParams] = field(default_factory=list)

    def load(self, parameters: Mapping[str, Any], parameter_ns: str) -> None:
        """Load the step ``parameter_ns`` from nested or dotted parameters.

        Raises TypeError if a parameter has the wrong type.
        """
        p = _Parameters(parameters)
        ns = parameter_ns

        self.base_link = p.string("base_link", "base_link")
        self.max_num_iterations = p.integer(f"{ns}.max_num_iterations", 1000)
        self.free_params = p.strings(f"{ns}.free_params")

        self.free_frames = []
        for name in p.strings(f"{ns}.free_frames"):
            logger.info("Adding free frame: %s", name)
            prefix = f"{ns}.{name}"
            self.free_frames.append(
                FreeFrameParams(
                    name=name,
                    **{
                        axis: p.boolean(f"{prefix}.{axis}", False)
                        for axis in ("x", "y", "z", "roll", "pitch", "yaw")
                    },
                )
            )

        self.free_frames_initial_values = []
        for name in p.strings(f"{ns}.free_frames_initial_values"):
            logger.info("Adding initial values for: %s", name)
            prefix = f"{ns}.{name}_initial_values"
            self.free_frames_initial_values.append(
                FreeFrameInitialValue(
                    name=name,
                    **{
                        axis: p.number(f"{prefix}.{axis}", 0.0)
                        for axis in ("x", "y", "z", "roll", "pitch", "yaw")
                    },
                )
            )

        self.models = []
        for name in p.strings(f"{ns}.models"):
            logger.info("Adding model: %s", name)
            prefix = f"{ns}.{name}"
            self.models.append(
                ModelParams(
                    name=name,
                    type=p.string(f"{prefix}.type"),
                    frame=p.string(f"{prefix}.frame"),
                    param_name=p.string(f"{prefix}.param_name"),
                )
            )

        self.error_blocks = []
        for name in p.strings(f"{ns}.error_blocks"):
            prefix = f"{ns}.{name}"
            block_type = p.string(f"{prefix}.type")
            logger.info("Adding %s: %s", block_type, name)
            block = self._make_block(p, prefix, name, block_type)
            if block is not None:
                self.error_blocks.append(block)

    @staticmethod
    def _make_block(
        p: _Parameters, prefix: str, name: str, block_type: str
    ) -> ErrorBlockParams | None:
        if block_type == "chain3d_to_chain3d":
            return Chain3dToChain3dParams(
                name=name,
                model_a=p.string(f"{prefix}.model_a"),
                model_b=p.string(f"{prefix}.model_b"),
            )
        if block_type == "chain3d_to_plane":
            return Chain3dToPlaneParams(
                name=name,
                model=p.string(f"{prefix}.model"),
                a=p.number(f"{prefix}.a", 0.0),
                b=p.number(f"{prefix}.b", 0.0),
                c=p.number(f"{prefix}.c", 1.0),
                d=p.number(f"{prefix}.d", 0.0),
                scale=p.number(f"{prefix}.scale", 1.0),
            )
        if block_type == "chain3d_to_mesh":
            return Chain3dToMeshParams(
                name=name,
                model=p.string(f"{prefix}.model"),
                link_name=p.string(f"{prefix}.link_name"),
            )
        if block_type == "plane_to_plane":
            return PlaneToPlaneParams(
                name=name,
                model_a=p.string(f"{prefix}.model_a"),
                model_b=p.string(f"{prefix}.model_b"),
                normal_scale=p.number(f"{prefix}.normal_scale", 1.0),
                offset_scale=p.number(f"{prefix}.offset_scale", 1.0),
            )
        if block_type == "outrageous":
            return OutrageousParams(
                name=name,
                param=p.string(f"{prefix}.param"),
                joint_scale=p.number(f"{prefix}.joint_scale", 1.0),
                position_scale=p.number(f"{prefix}.position_scale", 1.0),
                rotation_scale=p.number(f"{prefix}.rotation_scale", 1.0),
            )
        return None