[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "k0sctl"
version = "0.1.0"
description = "Cluster configuration templates, shell completion and Linux host helpers for k0s"
requires-python = ">=3.10"
keywords = ["k0s", "kubernetes", "cluster", "configuration", "linux"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "pyyaml",
    "packaging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
k0sctl = "k0sctl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["k0sctl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
