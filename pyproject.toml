[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ottercache"
version = "0.1.0"
description = "Thread-safe building blocks for an in-memory cache: concurrent map, lossy buffers, timer wheel, bounded queue, loaders and options"
requires-python = ">=3.10"
dependencies = []
keywords = ["cache", "concurrency", "timer-wheel", "singleflight", "hashmap", "buffer"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ottercache"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
