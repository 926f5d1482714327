"""Docstrings feed the OpenAPI descriptions and stay in English."""

from __future__ import annotations

import ast
import re
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
CYRILLIC = re.compile("[\u0400-\u04ff]")
DOCUMENTED = (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)


def _source_files() -> list[Path]:
    files: list[Path] = []
    for package in ("apps", "config", "shared"):
        files.extend(path for path in (ROOT / package).rglob("*.py") if "migrations" not in path.parts)
    return sorted(files)


@pytest.mark.parametrize("path", _source_files(), ids=lambda path: str(path.relative_to(ROOT)))
def test_docstrings_are_english(path: Path) -> None:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    offenders = [
        getattr(node, "name", "<module>")
        for node in ast.walk(tree)
        if isinstance(node, DOCUMENTED) and CYRILLIC.search(ast.get_docstring(node) or "")
    ]
    assert offenders == []
