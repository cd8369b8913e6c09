[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pcbmill"
version = "2.5.0"
description = "Gerber aperture geometry, arc interpolation and milling option handling for PCB isolation milling"
requires-python = ">=3.10"
keywords = ["pcb", "gerber", "gcode", "cnc", "milling", "isolation-routing", "eda"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Manufacturing",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
    "Typing :: Typed",
]
dependencies = [
    "shapely>=2.0",
    "pint>=0.20",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["pcbmill"]

[tool.hatch.build.targets.sdist]
include = ["pcbmill", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
