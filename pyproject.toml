[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sparsenc"
version = "0.1.0"
description = "Sparse network coding: Galois field arithmetic, pivoting, packet encoding and wire format"
requires-python = ">=3.10"
dependencies = []
keywords = ["network coding", "galois field", "erasure code", "rlnc", "bats", "mersenne twister"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sparsenc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
