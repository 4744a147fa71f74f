[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edgeconf"
version = "0.1.0"
description = "Configuration, request and body handling for a local edge-compute testing server"
requires-python = ">=3.11"
dependencies = []
keywords = [
    "edge",
    "compute",
    "http",
    "local-testing",
    "configuration",
    "toml",
    "backends",
    "dictionaries",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["edgeconf"]

[tool.hatch.build.targets.sdist]
include = ["edgeconf", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
