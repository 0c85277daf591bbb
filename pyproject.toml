[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ordserve"
version = "0.1.0"
description = "HTTP explorer server for an ordinals chain index, with request routing, content responses and transfer log maintenance"
requires-python = ">=3.10"
keywords = ["ordinals", "inscriptions", "explorer", "http", "server", "asgi", "starlette"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Framework :: AsyncIO",
]
dependencies = [
    "starlette",
]

[project.optional-dependencies]
test = [
    "pytest",
    "httpx",
]

[project.scripts]
ordserve = "ordserve.app:main"

[tool.hatch.build.targets.wheel]
packages = ["ordserve"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
