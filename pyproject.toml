[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gqlvalidator"
version = "0.1.0"
description = "GraphQL schema building, query validation rules and variable coercion"
requires-python = ">=3.10"
dependencies = []
keywords = ["graphql", "validation", "schema", "query", "ast"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gqlvalidator"]

[tool.hatch.build.targets.sdist]
include = ["gqlvalidator", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
