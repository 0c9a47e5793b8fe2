[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "epiphyte"
version = "0.1.0"
description = "Extended-real arithmetic, differential-evolution parameter adaptation and epiphytic tree rotation for constrained global optimization"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "global optimization",
    "extended reals",
    "constraint network",
    "differential evolution",
    "epiphytic tree",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
epiphyte-rotate = "epiphyte.rotator:main"

[tool.hatch.build.targets.wheel]
packages = ["epiphyte"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
