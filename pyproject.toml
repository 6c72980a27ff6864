[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ebi"
version = "0.1.0"
description = "Evaluate Before Invocation: static security analysis of shell and Python scripts"
requires-python = ">=3.10"
dependencies = []
keywords = ["security", "script analysis", "shell", "bash", "python", "static analysis"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ebi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
