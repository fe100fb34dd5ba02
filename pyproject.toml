[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "robocalib"
version = "0.1.0"
description = "Robot calibration helpers: offsets, URDF updates, calibration parameters, capture poses, plane fitting and result export"
requires-python = ">=3.10"
keywords = [
    "robotics",
    "calibration",
    "urdf",
    "kinematics",
    "camera",
    "mesh",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "numpy",
    "scipy",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
robocalib-to-rpy = "robocalib.to_rpy:main"
robocalib-viz-mesh = "robocalib.viz_mesh:main"

[tool.hatch.build.targets.wheel]
packages = ["robocalib"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
