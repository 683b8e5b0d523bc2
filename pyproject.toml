[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aicds"
version = "2.0.0"
description = "Building blocks for a networked camera system: configuration, logging, serial PTZ control, system and thermal monitoring."
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pyserial",
]
keywords = [
    "camera",
    "thermal",
    "ptz",
    "serial",
    "monitoring",
    "video",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["aicds"]

[tool.hatch.build.targets.sdist]
include = [
    "aicds",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
