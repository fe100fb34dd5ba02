"""Applying calibrated intrinsic offsets to camera info."""

from __future__ import annotations

import copy

from .messages import CameraInfo

CAMERA_INFO_P_FX_INDEX = 0
CAMERA_INFO_P_FY_INDEX = 5
CAMERA_INFO_P_CX_INDEX = 2
CAMERA_INFO_P_CY_INDEX = 6

CAMERA_INFO_K_FX_INDEX = 0
CAMERA_INFO_K_FY_INDEX = 4
CAMERA_INFO_K_CX_INDEX = 2
CAMERA_INFO_K_CY_INDEX = 5

CAMERA_INFO_D_1 = 0
CAMERA_INFO_D_2 = 1
CAMERA_INFO_D_3 = 2
CAMERA_INFO_D_4 = 3
CAMERA_INFO_D_5 = 4

CAMERA_PARAMS_CX_INDEX = 0
CAMERA_PARAMS_CY_INDEX = 1
CAMERA_PARAMS_FX_INDEX = 2
CAMERA_PARAMS_FY_INDEX = 3
CAMERA_PARAMS_Z_SCALE_INDEX = 4
CAMERA_PARAMS_Z_OFFSET_INDEX = 5


def update_camera_info(
    camera_fx: float,
    camera_fy: float,
    camera_cx: float,
    camera_cy: float,
    info: CameraInfo,
) -> CameraInfo:
    """Return a copy of ``info`` with relative intrinsic offsets applied."""
    new_info = copy.deepcopy(info)

    new_info.p[CAMERA_INFO_P_CX_INDEX] *= camera_cx + 1.0
    new_info.p[CAMERA_INFO_P_CY_INDEX] *= camera_cy + 1.0
    new_info.p[CAMERA_INFO_P_FX_INDEX] *= camera_fx + 1.0
    new_info.p[CAMERA_INFO_P_FY_INDEX] *= camera_fy + 1.0

    new_info.k[CAMERA_INFO_K_CX_INDEX] *= camera_cx + 1.0
    new_info.k[CAMERA_INFO_K_CY_INDEX] *= camera_cy + 1.0
    new_info.k[CAMERA_INFO_K_FX_INDEX] *= camera_fx + 1.0
    new_info.k[CAMERA_INFO_K_FY_INDEX] *= camera_fy + 1.0

    return new_info