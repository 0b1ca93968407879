[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hbplace"
version = "0.1.0"
description = "Symmetry-aware placement of hard blocks with HB*-trees and simulated annealing"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "placement",
    "floorplanning",
    "b-star-tree",
    "hb-tree",
    "symmetry",
    "simulated-annealing",
    "eda",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
hbplace = "hbplace.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hbplace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
