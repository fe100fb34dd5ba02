# robocalib

Helpers for calibrating a robot's kinematic chains and depth cameras: the
offsets being estimated, the parameters of a calibration step, capture poses,
geometry, collision meshes, visualization markers and export of the results.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `robocalib.messages`: dataclasses for the data passed around
  (`Point`, `JointState`, `CaptureConfig`, `CameraInfo`, `ExtendedCameraInfo`,
  `Observation`, `CalibrationData`) and `get_sensor_index` / `has_sensor`, which
  look up a sensor's observation in a sample (`get_sensor_index` returns `None`
  when the sensor is absent).
- `robocalib.offsets.OptimizationOffsets`: named offsets, the first `len(offsets)`
  of which are free parameters. Supports joint offsets and 6-DOF frame
  corrections, reading and writing `name: value` YAML, and applying the offsets
  to a URDF.
- `robocalib.params.OptimizationParams`: one calibration step loaded from a
  nested or dotted parameter mapping with `load(parameters, step_name)`. Error
  blocks become `Chain3dToChain3dParams`, `Chain3dToPlaneParams`,
  `Chain3dToMeshParams`, `PlaneToPlaneParams` or `OutrageousParams`; unknown
  types are skipped. A parameter of the wrong type raises `TypeError`.
- `robocalib.poses.poses_from_yaml`: loads capture poses from YAML.
- `robocalib.geometry`: `Frame` (composable with `*`, or applied to a 3-vector),
  roll/pitch/yaw and axis-magnitude conversions, and plane fitting
  (`get_matrix`, `get_centroid`, `get_plane`).
- `robocalib.camera_info.update_camera_info`: applies fitted fx/fy/cx/cy scale
  offsets to a copy of a `CameraInfo`.
- `robocalib.depth_camera.DepthCameraInfoManager`: holds the latest camera info
  and the driver's `z_offset_mm` / `z_scaling`, with a thread-safe wait for the
  first camera info.
- `robocalib.export`: `make_datecode`, `write_camera_calibration` and
  `export_results`, which writes the calibrated URDF, depth and rgb camera files
  and the offsets YAML, all stamped with one datecode (into the system temporary
  directory unless another is given).
- `robocalib.mesh_loader`: `load_stl` (binary or ASCII STL) and `MeshLoader`,
  which loads and caches a link's collision mesh from a URDF, applying the
  collision origin. Resources may be plain paths, `file://` or `package://` URIs.
- `robocalib.viz`: `model_colors`, `offset_joint_state` and `build_markers` for
  sphere-list markers of projected points.
- `robocalib.viz_mesh`: `mesh_markers` turns a mesh into one closed line strip
  per triangle.

## Command line

Convert an axis-magnitude rotation to roll, pitch and yaw:

```
robocalib-to-rpy 0.0 0.0 1.5707963
```

This prints the three angles separated by commas. With fewer than three
arguments it prints a usage message and exits with an error status.

Print the collision mesh of a URDF link as JSON line-strip markers:

```
robocalib-viz-mesh gripper_link --urdf robot.urdf --package my_robot=/path/to/my_robot
```

Without `--urdf` the robot description is read from standard input. `--package`
may be repeated to resolve `package://` mesh resources. Only STL meshes are
supported.

## Library use

```python
from robocalib.offsets import OptimizationOffsets

offsets = OptimizationOffsets()
offsets.add("shoulder_pan_joint")
offsets.add_frame("head_camera_joint", True, True, True, True, True, True)

offsets.set("shoulder_pan_joint", 0.012)
offsets.set_frame("head_camera_joint", 0.01, 0.0, -0.005, 0.0, 0.02, 0.0)

print(len(offsets))                      # number of free parameters
print(offsets.get("shoulder_pan_joint"))
print(offsets.get_offset_yaml())

with open("robot.urdf") as f:
    calibrated = offsets.update_urdf(f.read())
```

A name that is not being calibrated reads back as `0.0`, and `set` only changes
parameters that are currently free. `reset()` makes every parameter non-free
while keeping its value.

Loading capture poses:

```python
from robocalib.poses import poses_from_yaml

for pose in poses_from_yaml("calibration_poses.yaml"):
    print(pose.joint_states.name, pose.joint_states.position, pose.features)
```

The poses file is a YAML list; each entry may have `joints`, `positions` and
`features`. Poses without joints, or with different numbers of joints and
positions, are dropped.

```yaml
- joints: [shoulder_pan_joint, elbow_flex_joint]
  positions: [0.5, -1.2]
  features: [checkerboard_finder]
```

Fitting a plane:

```python
from robocalib.geometry import get_plane

normal, d = get_plane(points)   # points: 3 x N array
```

The plane is `a*x + b*y + c*z + d = 0` with `(a, b, c)` the unit normal,
oriented so that `d` is never negative.

## What this package does not do

robocalib does not talk to a robot or its sensors: it does not move joints,
wait for them to settle, run feature finders or record samples. It has no
solver that estimates the offsets from captured data, and no command that runs
a full calibration. Those steps have to be supplied by the caller; robocalib
provides the data types, parameters, offsets and export around them.