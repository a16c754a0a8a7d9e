[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rvsync"
version = "0.8.0"
description = "Version solving, install planning and library linking for R package projects"
requires-python = ">=3.10"
keywords = ["R", "packages", "dependency resolution", "SAT solver", "library sync"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rvsync"]

[tool.pytest.ini_options]
addopts = "-ra"
