[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coflow"
version = "0.1.0"
description = "Small hand-driven coroutine schedulers: an event loop with a worker thread, eager tasks, suspend strategies and a tiny TCP demo"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "coroutine",
    "event loop",
    "scheduler",
    "awaitable",
    "worker thread",
    "suspend strategy",
]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
coflow-scheduler = "coflow.scheduler:main"
coflow-netdemo = "coflow.netdemo:main"

[tool.hatch.build.targets.wheel]
packages = ["coflow"]

[tool.hatch.build.targets.sdist]
include = ["coflow", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
