[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icebergmeta"
version = "0.1.0"
description = "Dataclass models for reading and writing Iceberg table metadata JSON (format version 2)"
requires-python = ">=3.10"
dependencies = []
keywords = ["iceberg", "table-metadata", "schema", "partitioning", "json"]
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
    "Topic :: Database",
    "Topic :: File Formats :: JSON",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["icebergmeta"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
