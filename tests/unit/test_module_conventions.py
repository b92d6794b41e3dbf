"""Source layout rules for the `chat_gateway` package."""

from __future__ import annotations

import ast
import functools
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parents[2] / "chat_gateway"
SOURCES = sorted(p for p in PACKAGE_ROOT.rglob("*.py") if "__pycache__" not in p.parts)


def _is_all_assignment(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return any(isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets)
    if isinstance(node, ast.AnnAssign):
        return isinstance(node.target, ast.Name) and node.target.id == "__all__"
    return False


def _parse(path: Path) -> ast.Module:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


@pytest.mark.parametrize("path", SOURCES, ids=lambda p: str(p.relative_to(PACKAGE_ROOT)))
def test_all_is_single_and_last(path: Path) -> None:
    body = _parse(path).body
    positions = [idx for idx, node in enumerate(body) if _is_all_assignment(node)]
    if not positions:
        return
    assert len(positions) == 1, "multiple `__all__` assignments"
    assert positions[0] == len(body) - 1, "`__all__` must be the last top-level statement"


@pytest.mark.parametrize("path", SOURCES, ids=lambda p: str(p.relative_to(PACKAGE_ROOT)))
def test_no_function_local_imports(path: Path) -> None:
    for node in ast.walk(_parse(path)):
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        local = [n for n in ast.walk(node) if isinstance(n, (ast.Import, ast.ImportFrom))]
        assert not local, f"import inside `{node.name}` at line {local[0].lineno if local else '?'}"


def _config_constants() -> list[tuple[str, str]]:
    constants = []
    for path in sorted((PACKAGE_ROOT / "config").glob("*.py")):
        for node in _parse(path).body:
            targets = node.targets if isinstance(node, ast.Assign) else [getattr(node, "target", None)]
            for target in targets:
                if isinstance(target, ast.Name) and target.id.isupper():
                    constants.append((path.stem, target.id))
    return constants


@functools.cache
def _loaded_names() -> set[str]:
    names: set[str] = set()
    for path in SOURCES:
        for node in ast.walk(_parse(path)):
            if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load):
                names.add(node.id)
    return names


@pytest.mark.parametrize(("module", "name"), _config_constants(), ids=lambda v: v if isinstance(v, str) else "")
def test_config_constants_are_used(module: str, name: str) -> None:
    assert name in _loaded_names(), f"config.{module}.{name} is never referenced"
