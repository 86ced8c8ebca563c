[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "battlereward"
version = "0.1.0"
description = "HTTP service that settles two-player battles and updates each player's Elo rating in Redis"
requires-python = ">=3.10"
keywords = ["elo", "rating", "battle", "reward", "redis", "flask", "http"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "flask",
    "redis",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
battlereward = "battlereward.server:main"

[tool.hatch.build.targets.wheel]
packages = ["battlereward"]

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
