[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "policybot"
version = "0.1.0"
description = "Pull request approval predicates and reviewer selection for code review policies"
requires-python = ">=3.10"
keywords = ["pull-request", "code-review", "policy", "approval", "reviewers"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Version Control :: Git",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["policybot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
