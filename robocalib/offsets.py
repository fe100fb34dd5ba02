"""Offsets being estimated by calibration: joint offsets and frame corrections."""

from __future__ import annotations

import logging
import os
import re
import xml.etree.ElementTree as ET
from typing import Sequence

import numpy as np

from .geometry import (
    Frame,
    axis_magnitude_from_rotation,
    rotation_from_axis_magnitude,
    rotation_from_rpy,
    rpy_from_rotation,
)

logger = logging.getLogger(__name__)

_URDF_PRECISION = 8
_FRAME_SUFFIXES = ("_x", "_y", "_z", "_a", "_b", "_c")
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _format_fixed(values: Sequence[float]) -> str:
    return " ".join(f"{v:.{_URDF_PRECISION}f}" for v in values)


class OptimizationOffsets:
    """Named offsets, the first ``len(self)`` of which are free parameters.

    Offsets that stop being free (after :meth:`reset`) keep their values and
    still contribute through :meth:`get`.
    """

    def __init__(self) -> None:
        self._names: list[str] = []
        self._values: list[float] = []
        self._num_free = 0
        self._frame_names: list[str] = []

    def add(self, name: str) -> bool:
        """Make ``name`` a free parameter; False if it already is one."""
        value = 0.0
        try:
            index = self._names.index(name)
        except ValueError:
            pass
        else:
            if index < self._num_free:
                return False
            value = self._values.pop(index)
            self._names.pop(index)

        self._names.insert(self._num_free, name)
        self._values.insert(self._num_free, value)
        self._num_free += 1
        return True

    def add_frame(
        self,
        name: str,
        calibrate_x: bool,
        calibrate_y: bool,
        calibrate_z: bool,
        calibrate_roll: bool,
        calibrate_pitch: bool,
        calibrate_yaw: bool,
    ) -> bool:
        """Declare a frame correction and free the selected components."""
        self._frame_names.append(name)
        flags = (
            calibrate_x,
            calibrate_y,
            calibrate_z,
            calibrate_roll,
            calibrate_pitch,
            calibrate_yaw,
        )
        for suffix, flag in zip(_FRAME_SUFFIXES, flags):
            if flag:
                self.add(name + suffix)
        return True

    def set(self, name: str, value: float) -> bool:
        """Set a free parameter's value; False if ``name`` is not free."""
        for i, param in enumerate(self._names[: self._num_free]):
            if param == name:
                self._values[i] = float(value)
                return True
        return False

    def set_frame(
        self,
        name: str,
        x: float,
        y: float,
        z: float,
        roll: float,
        pitch: float,
        yaw: float,
    ) -> bool:
        """Set the free components of a frame correction from xyz and rpy."""
        a, b, c = axis_magnitude_from_rotation(rotation_from_rpy(roll, pitch, yaw))
        for suffix, value in zip(_FRAME_SUFFIXES, (x, y, z, a, b, c)):
            self.set(name + suffix, value)
        return True

    def initialize(self) -> np.ndarray:
        """Return the current values of the free parameters."""
        return np.array(self._values[: self._num_free], dtype=float)

    def update(self, free_params: Sequence[float]) -> bool:
        """Store new values for the free parameters."""
        for i in range(self._num_free):
            self._values[i] = float(free_params[i])
        return True

    def get(self, name: str) -> float:
        """Value of an offset, free or retained; 0.0 if it is unknown."""
        try:
            return self._values[self._names.index(name)]
        except ValueError:
            return 0.0

    def get_frame(self, name: str) -> Frame | None:
        """Correction for a calibrated frame, or None if it is not one."""
        if name not in self._frame_names:
            return None
        x, y, z, a, b, c = (self.get(name + suffix) for suffix in _FRAME_SUFFIXES)
        return Frame(rotation_from_axis_magnitude(a, b, c), [x, y, z])

    def __len__(self) -> int:
        return self._num_free

    def reset(self) -> bool:
        """Mark every parameter as not free, keeping the values."""
        self._num_free = 0
        return True

    def load_offset_yaml(self, filename: str | os.PathLike) -> bool:
        """Set free parameters from ``name: value`` lines in a file."""
        with open(filename, encoding="utf-8") as stream:
            for line in stream:
                tokens = line.split(None, 1)
                if len(tokens) < 2:
                    continue
                match = _LEADING_NUMBER.match(tokens[1])
                if not match:
                    continue
                param = tokens[0][:-1]
                value = float(match.group())
                logger.info("Loading '%s' with value %g", param, value)
                self.set(param, value)
        return True

    def get_offset_yaml(self) -> str:
        """Every offset as ``name: value`` lines."""
        return "".join(f"{n}: {v:g}\n" for n, v in zip(self._names, self._values))

    def update_urdf(self, urdf: str) -> str:
        """Apply joint and frame offsets to a URDF document.

        Returns the input unchanged if it cannot be parsed or has no robot.
        """
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        try:
            root = ET.fromstring(urdf, parser=parser)
        except ET.ParseError:
            return urdf
        if root.tag != "robot":
            return urdf

        for joint in root.findall("joint"):
            name = joint.get("name", "")
            self._update_calibration(joint, name)
            self._update_origin(joint, name)

        ET.indent(root, space="  ")
        return ET.tostring(root, encoding="unicode") + "\n"

    def _update_calibration(self, joint: ET.Element, name: str) -> None:
        offset = self.get(name)
        if offset == 0.0:
            return
        calibration = joint.find("calibration")
        if calibration is None:
            ET.SubElement(joint, "calibration", rising=f"{offset:g}")
            return
        rising = calibration.get("rising")
        if rising is None:
            return
        try:
            offset += float(rising)
        except ValueError:
            return
        calibration.set("rising", f"{offset:g}")

    def _update_origin(self, joint: ET.Element, name: str) -> None:
        frame_offset = self.get_frame(name)
        if frame_offset is None:
            return
        origin_xml = joint.find("origin")
        if origin_xml is None:
            origin = frame_offset
            origin_xml = ET.SubElement(joint, "origin")
        else:
            origin = Frame()
            xyz_pieces = origin_xml.get("xyz", "").split(" ")
            rpy_pieces = origin_xml.get("rpy", "").split(" ")
            if len(xyz_pieces) == 3:
                origin.position = np.array([float(p) for p in xyz_pieces])
            if len(rpy_pieces) == 3:
                origin.rotation = rotation_from_rpy(*(float(p) for p in rpy_pieces))
            origin = origin * frame_offset

        origin_xml.set("xyz", _format_fixed(origin.position.tolist()))
        origin_xml.set("rpy", _format_fixed(rpy_from_rotation(origin.rotation)))