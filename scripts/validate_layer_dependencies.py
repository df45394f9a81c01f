#!/usr/bin/env python3
"""
Validate architectural layering via import rules.

Intended to run as a local pre-commit hook. Checks that imports inside
`src/pgconfiguration` follow the dependency direction:
- interfaces -> application -> infrastructure -> domain -> shared
- lower layers must not import higher layers
"""

from __future__ import annotations

import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGE = "pgconfiguration"
PACKAGE_ROOT = PROJECT_ROOT / "src" / PACKAGE


LAYER_FORBIDDEN: dict[str, set[str]] = {
    # Shared constants/errors/logging are the bottom layer.
    "shared": {"domain", "infrastructure", "application", "interfaces"},
    # Domain models and index building are pure: no I/O layers.
    "domain": {"infrastructure", "application", "interfaces"},
    "infrastructure": {"application", "interfaces"},
    "application": {"interfaces"},
    "interfaces": set(),
}


@dataclass(frozen=True)
class Violation:
    path: Path
    lineno: int
    layer: str
    imported: str
    message: str

    def format(self) -> str:
        return f"{self.path}:{self.lineno}: [{self.layer}] {self.message} ({self.imported!r})"


def _detect_layer(path: Path, package_root: Path) -> Optional[str]:
    try:
        rel = path.relative_to(package_root)
    except ValueError:
        return None

    if len(rel.parts) < 2:
        return None

    root = rel.parts[0]
    return root if root in LAYER_FORBIDDEN else None


def _extract_imports(tree: ast.AST) -> list[tuple[int, str]]:
    """
    Return a list of (lineno, module) for absolute imports.
    - `import x.y` -> "x.y"
    - `from x.y import z` -> "x.y"
    """
    found: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                found.append((int(node.lineno), alias.name))
        elif isinstance(node, ast.ImportFrom):
            # Relative imports stay within a package.
            if node.level and node.level > 0:
                continue
            if node.module:
                found.append((int(node.lineno), node.module))
    return found


def _imported_layer(module: str) -> Optional[str]:
    parts = module.split(".")
    if len(parts) < 2 or parts[0] != PACKAGE:
        return None
    return parts[1]


def check_file(path: Path, package_root: Path = PACKAGE_ROOT) -> list[Violation]:
    layer = _detect_layer(path, package_root)
    if not layer:
        return []

    forbidden = LAYER_FORBIDDEN[layer]
    if not forbidden:
        return []

    try:
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except (OSError, SyntaxError) as e:
        return [
            Violation(
                path=path,
                lineno=int(getattr(e, "lineno", 0) or 0),
                layer=layer,
                imported="",
                message=f"无法解析：{e}",
            )
        ]

    violations: list[Violation] = []
    for lineno, module in _extract_imports(tree):
        target = _imported_layer(module)
        if target in forbidden:
            violations.append(
                Violation(
                    path=path,
                    lineno=lineno,
                    layer=layer,
                    imported=module,
                    message=f"禁止依赖上层：{target}",
                )
            )
    return violations


def main(package_root: Path = PACKAGE_ROOT) -> int:
    violations: list[Violation] = []
    for path in sorted(package_root.rglob("*.py")):
        if "__pycache__" in path.parts:
            continue
        violations.extend(check_file(path, package_root))

    if violations:
        print("ERROR: 分层依赖校验失败：检测到不允许的跨层 import。", file=sys.stderr)
        for v in violations:
            print(f"- {v.format()}", file=sys.stderr)
        print("建议：调整依赖方向（上层依赖下层）。", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
