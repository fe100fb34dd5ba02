from datetime import datetime

import yaml

from robocalib.camera_info import update_camera_info
from robocalib.export import export_results, make_datecode, write_camera_calibration
from robocalib.messages import (
    CalibrationData,
    CameraInfo,
    ExtendedCameraInfo,
    Observation,
)
from robocalib.offsets import OptimizationOffsets

URDF = '<robot name="r"><joint name="j1" type="revolute"/></robot>'


def _camera_info():
    return CameraInfo(
        height=480,
        width=640,
        distortion_model="plumb_bob",
        d=[0.1, 0.2, 0.0, 0.0, 0.3],
        k=[500.0, 0.0, 320.0, 0.0, 510.0, 240.0, 0.0, 0.0, 1.0],
        r=[1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0],
        p=[500.0, 0.0, 320.0, 0.0, 0.0, 510.0, 240.0, 0.0, 0.0, 0.0, 1.0, 0.0],
    )


def _data(sensor):
    obs = Observation(
        sensor_name=sensor,
        ext_camera_info=ExtendedCameraInfo(camera_info=_camera_info()),
    )
    return [CalibrationData(observations=[obs])]


def _offsets():
    offsets = OptimizationOffsets()
    offsets.add("camera_fx")
    offsets.set("camera_fx", 0.1)
    offsets.add("j1")
    offsets.set("j1", 0.5)
    return offsets


def test_make_datecode_format():
    assert make_datecode(datetime(2022, 1, 2, 3, 4, 5)) == "2022_01_02_03_04_05"


def test_make_datecode_default_is_parseable():
    code = make_datecode()
    assert datetime.strptime(code, "%Y_%m_%d_%H_%M_%S").year >= 2022


def test_write_camera_calibration_round_trip(tmp_path):
    info = _camera_info()
    path = tmp_path / "cam.yaml"
    write_camera_calibration(path, "head", info)
    doc = yaml.safe_load(path.read_text())
    assert doc["image_width"] == info.width
    assert doc["image_height"] == info.height
    assert doc["camera_name"] == "head"
    assert doc["camera_matrix"]["rows"] == 3
    assert doc["camera_matrix"]["cols"] == 3
    assert doc["camera_matrix"]["data"] == info.k
    assert doc["projection_matrix"]["cols"] == 4
    assert doc["projection_matrix"]["data"] == info.p
    assert doc["distortion_coefficients"]["data"] == info.d
    assert doc["distortion_model"] == "plumb_bob"


def test_export_results_writes_camera_files(tmp_path):
    offsets = _offsets()
    written = export_results(offsets, ["camera"], URDF, _data("camera"), tmp_path, "D")
    names = [p.name for p in written]
    assert names == ["calibrated_D.urdf", "depth_D.yaml", "rgb_D.yaml", "calibration_D.yaml"]

    expected = update_camera_info(0.1, 0.0, 0.0, 0.0, _camera_info())
    for name in ("depth_D.yaml", "rgb_D.yaml"):
        doc = yaml.safe_load((tmp_path / name).read_text())
        assert doc["camera_matrix"]["data"] == expected.k
        assert doc["projection_matrix"]["data"] == expected.p


def test_export_results_names_non_default_camera(tmp_path):
    written = export_results(_offsets(), ["head"], URDF, _data("head"), tmp_path, "D")
    names = {p.name for p in written}
    assert "depth_head_D.yaml" in names
    assert "rgb_head_D.yaml" in names


def test_export_results_skips_unobserved_camera(tmp_path):
    written = export_results(_offsets(), ["other"], URDF, _data("camera"), tmp_path, "D")
    assert [p.name for p in written] == ["calibrated_D.urdf", "calibration_D.yaml"]
    assert not (tmp_path / "depth_other_D.yaml").exists()


def test_export_results_urdf_and_offsets(tmp_path):
    offsets = _offsets()
    export_results(offsets, [], URDF, [], tmp_path, "D")
    urdf = (tmp_path / "calibrated_D.urdf").read_text()
    assert urdf == offsets.update_urdf(URDF)
    assert "calibration" in urdf

    text = (tmp_path / "calibration_D.yaml").read_text()
    assert text.startswith(offsets.get_offset_yaml())
    assert text.endswith(
        "depth_info: depth_D.yaml\nrgb_info: rgb_D.yaml\nurdf: calibrated_D.urdf\n"
    )