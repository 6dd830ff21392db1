from __future__ import annotations

import ast
from pathlib import Path

import pytest

import ammolink.domain

DOMAIN_ROOT = Path(ammolink.domain.__file__).parent
OUTER_PACKAGES = ("ammolink.config", "ammolink.adapters", "ammolink.app")


def _imported_modules(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            modules.add(node.module)
    return modules


@pytest.mark.parametrize(
    "path",
    sorted(DOMAIN_ROOT.rglob("*.py")),
    ids=lambda path: str(path.relative_to(DOMAIN_ROOT)),
)
def test_domain_modules_do_not_import_outer_layers(path: Path) -> None:
    outer = {
        module
        for module in _imported_modules(path)
        if any(module == name or module.startswith(f"{name}.") for name in OUTER_PACKAGES)
    }

    assert outer == set()
