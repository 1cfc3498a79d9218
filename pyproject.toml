[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "konjure"
version = "0.1.0"
description = "Filters, readers and writers for pipelines of Kubernetes resource documents"
requires-python = ">=3.10"
keywords = [
    "kubernetes",
    "kubectl",
    "yaml",
    "helm",
    "manifests",
    "pipeline",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pyyaml>=6.0",
    "jinja2>=3.1",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["konjure"]

[tool.hatch.build.targets.sdist]
include = [
    "konjure",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
