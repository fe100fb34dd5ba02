"""Tracking depth camera intrinsics and driver depth parameters."""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Mapping, Optional

from .messages import CameraInfo, ExtendedCameraInfo
from .params import _Parameters

logger = logging.getLogger(__name__)

DEFAULT_CAMERA_INFO_TOPIC = "/head_camera/depth/camera_info"
DEFAULT_CAMERA_DRIVER = "/head_camera/driver"

# Roughly how long the camera info is waited for by default, in seconds.
DEFAULT_CAMERA_INFO_TIMEOUT = 2.4


class DepthCameraInfoManager:
    """Holds the latest camera info and the driver's depth offset and scaling.

    ``name`` selects the ``<name>.camera_info_topic`` and
    ``<name>.camera_driver`` entries of ``parameters``.
    """

    def __init__(self, name: str, parameters: Optional[Mapping[str, Any]] = None) -> None:
        p = _Parameters(parameters or {})
        self.name = name
        self.camera_info_topic = p.string(f"{name}.camera_info_topic", DEFAULT_CAMERA_INFO_TOPIC)
        self.camera_driver = p.string(f"{name}.camera_driver", DEFAULT_CAMERA_DRIVER)
        self.z_offset_mm = 0.0
        self.z_scaling = 1.0
        self._camera_info: Optional[CameraInfo] = None
        self._condition = threading.Condition()

    @property
    def camera_info_valid(self) -> bool:
        """True once camera info has been received."""
        with self._condition:
            return self._camera_info is not None

    def set_driver_parameters(self, parameters: Mapping[str, Any]) -> None:
        """Take ``z_offset_mm`` (an integer) and ``z_scaling`` from driver parameters.

        Other entries are ignored. Raises TypeError for values of the wrong type.
        """
        for key, value in parameters.items():
            if key == "z_offset_mm":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise TypeError(f"z_offset_mm must be an integer, got {value!r}")
                self.z_offset_mm = float(value)
                logger.info("Got value of %f for z_offset_mm", self.z_offset_mm)
            elif key == "z_scaling":
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise TypeError(f"z_scaling must be a number, got {value!r}")
                self.z_scaling = float(value)
                logger.info("Got value of %f for z_scaling", self.z_scaling)

    def camera_info_callback(self, camera_info: CameraInfo) -> None:
        """Store newly received camera info and wake any waiter."""
        with self._condition:
            self._camera_info = camera_info
            self._condition.notify_all()

    def wait_for_camera_info(self, timeout: float = DEFAULT_CAMERA_INFO_TIMEOUT) -> bool:
        """Wait up to ``timeout`` seconds for camera info; False on timeout."""
        with self._condition:
            received = self._condition.wait_for(
                lambda: self._camera_info is not None, timeout=max(0.0, timeout)
            )
        if not received:
            logger.warning("CameraInfo receive timed out.")
        return received

    def get_depth_camera_info(self) -> ExtendedCameraInfo:
        """Camera info plus depth parameters.

        Raises RuntimeError if no camera info has been received yet.
        """
        with self._condition:
            if self._camera_info is None:
                raise RuntimeError("no camera info has been received")
            info = copy.deepcopy(self._camera_info)
        return ExtendedCameraInfo(
            camera_info=info,
            parameters={"z_offset_mm": self.z_offset_mm, "z_scaling": self.z_scaling},
        )