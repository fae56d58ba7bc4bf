[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "authop"
version = "0.1.0"
description = "Operator conditions, config observers, page-template selection and server-argument helpers for an OAuth server operator"
requires-python = ">=3.10"
keywords = ["oauth", "operator", "authentication", "configuration", "conditions"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration :: Authentication/Directory",
]
dependencies = [
    "pyyaml",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["authop"]

[tool.pytest.ini_options]
addopts = "-ra"
