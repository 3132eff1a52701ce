[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "kamayan"
version = "0.1.0"
description = "Building blocks for block-structured simulation codes: runtime options, option dispatch, runtime parameters, units, fields and mesh data packs."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "simulation",
    "runtime-parameters",
    "dispatch",
    "mesh",
    "finite-volume",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["kamayan*"]

[tool.pytest.ini_options]
addopts = "-ra"
