[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "matbench"
version = "0.1.0"
description = "Time row-partitioned multi-threaded integer matrix multiplication and append the runtimes to a text file"
requires-python = ">=3.10"
dependencies = []
keywords = ["benchmark", "matrix", "multiplication", "threads"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
matbench = "matbench.benchmark:main"

[tool.hatch.build.targets.wheel]
packages = ["matbench"]

[tool.pytest.ini_options]
addopts = "-ra"
