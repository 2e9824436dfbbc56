[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "driftwatch"
version = "0.1.0"
description = "Compare service configuration with its manifest and keep JSON records and analyses of the drift."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "configuration",
    "drift",
    "deployment",
    "manifest",
    "audit",
    "devops",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
driftwatch = "driftwatch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["driftwatch"]

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
