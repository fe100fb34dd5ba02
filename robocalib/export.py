"""Writing calibration results: updated URDF, camera intrinsics and offsets."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Sequence

import yaml

from .camera_info import update_camera_info
from .messages import CalibrationData, CameraInfo
from .offsets import OptimizationOffsets

logger = logging.getLogger(__name__)

_DATECODE_FORMAT = "%Y_%m_%d_%H_%M_%S"


def make_datecode(when: Optional[datetime] = None) -> str:
    """Format a local time (now by default) as ``YYYY_MM_DD_HH_MM_SS``."""
    return (when or datetime.now()).strftime(_DATECODE_FORMAT)


def _matrix(rows: int, cols: int, data: Sequence[float]) -> dict:
    return {"rows": rows, "cols": cols, "data": [float(v) for v in data]}


def write_camera_calibration(
    path: str | os.PathLike, camera_name: str, info: CameraInfo
) -> None:
    """Write camera intrinsics as a camera calibration YAML file."""
    document = {
        "image_width": int(info.width),
        "image_height": int(info.height),
        "camera_name": camera_name,
        "camera_matrix": _matrix(3, 3, info.k),
        "distortion_model": info.distortion_model,
        "distortion_coefficients": _matrix(1, len(info.d), info.d),
        "rectification_matrix": _matrix(3, 3, info.r),
        "projection_matrix": _matrix(3, 4, info.p),
    }
    with open(path, "w", encoding="utf-8") as stream:
        yaml.safe_dump(document, stream, sort_keys=False, default_flow_style=None)


def _find_camera_info(
    data: Sequence[CalibrationData], camera_name: str
) -> Optional[CameraInfo]:
    if not data:
        return None
    for obs in data[0].observations:
        if obs.sensor_name == camera_name:
            return obs.ext_camera_info.camera_info
    return None


def export_results(
    offsets: OptimizationOffsets,
    camera_names: Iterable[str],
    initial_urdf: str,
    data: Sequence[CalibrationData],
    directory: str | os.PathLike | None = None,
    datecode: Optional[str] = None,
) -> list[Path]:
    """Write the calibrated URDF, camera files and offsets YAML.

    Camera info is taken from the first sample; cameras not observed there
    are skipped. Returns the paths written, in order.
    """
    out_dir = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    code = datecode or make_datecode()
    written: list[Path] = []

    urdf_path = out_dir / f"calibrated_{code}.urdf"
    urdf_path.write_text(offsets.update_urdf(initial_urdf), encoding="utf-8")
    written.append(urdf_path)

    for name in camera_names:
        camera_info = _find_camera_info(data, name)
        if camera_info is None:
            logger.warning("Unable to export camera_info for %s", name)
            continue

        updated = update_camera_info(
            offsets.get(name + "_fx"),
            offsets.get(name + "_fy"),
            offsets.get(name + "_cx"),
            offsets.get(name + "_cy"),
            camera_info,
        )
        # The name is left out for "camera" to keep the historical file names.
        infix = "" if name == "camera" else f"{name}_"
        for kind in ("depth", "rgb"):
            path = out_dir / f"{kind}_{infix}{code}.yaml"
            write_camera_calibration(path, "", updated)
            written.append(path)

    yaml_path = out_dir / f"calibration_{code}.yaml"
    yaml_path.write_text(
        offsets.get_offset_yaml()
        + f"depth_info: depth_{code}.yaml\n"
        + f"rgb_info: rgb_{code}.yaml\n"
        + f"urdf: calibrated_{code}.urdf\n",
        encoding="utf-8",
    )
    written.append(yaml_path)
    return written