[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eposplugins"
version = "0.1.0"
description = "Populate an EPOS Platform environment with converter plugins and their relations"
requires-python = ">=3.10"
keywords = ["epos", "converter", "plugins", "populate", "gateway"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
epos-plugin-populator = "eposplugins.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["eposplugins"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
