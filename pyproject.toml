[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pumpctl"
version = "0.5.0"
description = "Controller for a pair of syringe pumps and a conductivity meter: gradient protocols, serial framing, a console and a command shell."
requires-python = ">=3.10"
dependencies = [
    "pyserial",
    "matplotlib",
]
keywords = [
    "syringe pump",
    "conductivity meter",
    "gradient",
    "serial",
    "laboratory",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pumpctl = "pumpctl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pumpctl"]

[tool.pytest.ini_options]
addopts = "-ra"
