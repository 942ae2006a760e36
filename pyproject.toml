[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unopt"
version = "0.1.0"
description = "Building blocks for nonlinear optimization solvers: sparse vectors, symmetric matrices, Hessian models and LP/QP subproblems"
requires-python = ">=3.10"
dependencies = []
keywords = ["optimization", "nonlinear programming", "sparse matrix", "SQP", "subproblem", "inertia correction"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["unopt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
