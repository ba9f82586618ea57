[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edgeorm"
version = "0.1.1"
description = "SQLite building blocks: a fluent query builder, composable filters, pagination, dataclass schemas and tracked migrations."
requires-python = ">=3.10"
dependencies = []
keywords = ["orm", "sqlite", "database", "query-builder", "migrations", "dataclasses"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["edgeorm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
