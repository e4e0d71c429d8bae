[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swiftlog"
version = "0.1.0"
description = "Typed structured-logging fields, lazy array and error marshalers, and a pooled byte buffer."
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "structured-logging", "fields", "buffer"]
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
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["swiftlog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
