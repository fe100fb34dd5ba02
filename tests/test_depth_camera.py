import threading

import pytest

from robocalib.depth_camera import DepthCameraInfoManager
from robocalib.messages import CameraInfo


def make_info():
    return CameraInfo(height=480, width=640, k=[525.0, 0, 319.5, 0, 525.0, 239.5, 0, 0, 1])


def test_topic_and_driver_defaults():
    manager = DepthCameraInfoManager("camera")
    assert manager.camera_info_topic == "/head_camera/depth/camera_info"
    assert manager.camera_driver == "/head_camera/driver"


def test_topic_and_driver_from_parameters():
    params = {"camera": {"camera_info_topic": "/cam/info", "camera_driver": "/cam/driver"}}
    manager = DepthCameraInfoManager("camera", params)
    assert manager.camera_info_topic == "/cam/info"
    assert manager.camera_driver == "/cam/driver"


def test_default_depth_parameters():
    manager = DepthCameraInfoManager("camera")
    manager.camera_info_callback(make_info())
    info = manager.get_depth_camera_info()
    assert info.parameters == {"z_offset_mm": 0.0, "z_scaling": 1.0}
    assert info.camera_info == make_info()


def test_driver_parameters_are_applied():
    manager = DepthCameraInfoManager("camera")
    manager.set_driver_parameters({"z_offset_mm": 5, "z_scaling": 1.25, "unrelated": "x"})
    manager.camera_info_callback(make_info())
    info = manager.get_depth_camera_info()
    assert info.parameters["z_offset_mm"] == 5.0
    assert info.parameters["z_scaling"] == 1.25


def test_driver_offset_must_be_integer():
    manager = DepthCameraInfoManager("camera")
    with pytest.raises(TypeError):
        manager.set_driver_parameters({"z_offset_mm": 1.5})


def test_driver_scaling_must_be_number():
    manager = DepthCameraInfoManager("camera")
    with pytest.raises(TypeError):
        manager.set_driver_parameters({"z_scaling": "big"})


def test_wait_times_out_without_info():
    manager = DepthCameraInfoManager("camera")
    assert manager.wait_for_camera_info(0.01) is False
    assert manager.camera_info_valid is False


def test_wait_succeeds_after_callback():
    manager = DepthCameraInfoManager("camera")
    manager.camera_info_callback(make_info())
    assert manager.wait_for_camera_info(0.01) is True
    assert manager.camera_info_valid is True


def test_wait_wakes_for_info_from_another_thread():
    manager = DepthCameraInfoManager("camera")
    timer = threading.Timer(0.05, manager.camera_info_callback, args=(make_info(),))
    timer.start()
    try:
        assert manager.wait_for_camera_info(5.0) is True
    finally:
        timer.join()


def test_get_info_before_received_raises():
    manager = DepthCameraInfoManager("camera")
    with pytest.raises(RuntimeError):
        manager.get_depth_camera_info()


def test_returned_info_is_a_copy():
    manager = DepthCameraInfoManager("camera")
    manager.camera_info_callback(make_info())
    first = manager.get_depth_camera_info()
    first.camera_info.k[0] = -1.0
    second = manager.get_depth_camera_info()
    assert second.camera_info.k[0] == make_info().k[0]