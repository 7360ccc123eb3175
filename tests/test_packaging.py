"""Tests for the declared package metadata."""

from __future__ import annotations

import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _project() -> dict:
    with PYPROJECT.open("rb") as fh:
        return tomllib.load(fh)["project"]


def _names(requirements: list[str]) -> set[str]:
    return {r.split(">")[0].split("[")[0].strip() for r in requirements}


def test_test_client_is_test_only():
    project = _project()
    assert "httpx" not in _names(project["dependencies"])
    assert "httpx" in _names(project["optional-dependencies"]["test"])


def test_runtime_stack():
    runtime = _names(_project()["dependencies"])
    assert {"pydantic", "structlog", "fastapi", "langchain-openai"} <= runtime
