[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plazza"
version = "0.1.0"
description = "A pizzeria simulation: a reception dispatches pizza orders to kitchens whose cooks share a regenerating ingredient stock."
requires-python = ">=3.10"
dependencies = []
keywords = ["simulation", "pizzeria", "threads", "ipc", "fifo"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
plazza = "plazza.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["plazza"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
