"""
Tests for the declared package dependencies
"""

import re
import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def declared_dependencies() -> set[str]:
    with PYPROJECT.open("rb") as f:
        project = tomllib.load(f)["project"]
    return {re.split(r"[\[<>=!~ ]", dep, maxsplit=1)[0].lower() for dep in project["dependencies"]}


def test_directly_imported_libraries_are_declared():
    # graphql and starlette are imported directly by the GraphQL layer
    assert {"graphql-core", "starlette", "strawberry-graphql", "fastapi"} <= declared_dependencies()
