[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boardo"
version = "0.1.0"
description = "Escrowed two-player wagers on board games, settled by an arbiter"
requires-python = ">=3.10"
dependencies = []
keywords = ["board games", "wager", "escrow", "arbiter", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["boardo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
