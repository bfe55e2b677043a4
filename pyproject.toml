[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsindex"
version = "1.0.0"
description = "Learned secondary index over unsorted data, with B-tree and hash baselines"
requires-python = ">=3.10"
dependencies = []
keywords = ["index", "learned index", "secondary index", "bit packing", "radix tree"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lsindex"]

[tool.pytest.ini_options]
addopts = "-ra"
