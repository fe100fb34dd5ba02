"""Loading calibration poses from YAML."""

from __future__ import annotations

import logging
import os

import yaml

from .messages import CaptureConfig

logger = logging.getLogger(__name__)


def poses_from_yaml(filename: str | os.PathLike) -> list[CaptureConfig]:
    """Read a list of poses with ``joints``, ``positions`` and ``features`` keys.

    Poses without joints, or whose joint and position counts differ, are
    discarded with a warning.
    """
    logger.info("Opening %s", filename)
    with open(filename, encoding="utf-8") as stream:
        yaml_poses = yaml.safe_load(stream)

    poses: list[CaptureConfig] = []
    for pose in yaml_poses or []:
        msg = CaptureConfig()
        for key, value in (pose or {}).items():
            key = str(key)
            if key == "joints":
                msg.joint_states.name.extend(str(joint) for joint in value or [])
            elif key == "positions":
                msg.joint_states.position.extend(float(p) for p in value or [])
            elif key == "features":
                msg.features.extend(str(feature) for feature in value or [])

        names = msg.joint_states.name
        if names and len(names) == len(msg.joint_states.position):
            poses.append(msg)
        else:
            logger.warning("Discarding pose due to invalid joint_states")
    return poses