"""Robot calibration helpers: offsets, step parameters, poses, geometry, meshes and export."""

__version__ = "0.1.0"