#!/usr/bin/env python3
"""
Fail if shopify_admin_api.core reaches past its seams.
- No module under core/ may import MCP/transport code.
- Only core/client.py (the request executor) may import httpx.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "shopify_admin_api" / "core"

TRANSPORT_PREFIXES = (
    "starlette",
    "mcp",
    "fastmcp",
    "shopify_admin_api.transports",
)
HTTP_PREFIXES = ("httpx",)
HTTP_ALLOWED = {CORE_DIR / "client.py"}


def _matches(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(module == p or module.startswith(p + ".") for p in prefixes)


def imported_modules(path: Path) -> list[str]:
    tree = ast.parse(path.read_text())
    found: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            found.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            found.append(node.module)
    return found


def scan_file(path: Path) -> list[str]:
    errors: list[str] = []
    for mod in imported_modules(path):
        if _matches(mod, TRANSPORT_PREFIXES):
            errors.append(f"{path}: transport import '{mod}' in core")
        elif _matches(mod, HTTP_PREFIXES) and path not in HTTP_ALLOWED:
            errors.append(f"{path}: '{mod}' outside the request executor")
    return errors


def main() -> int:
    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    for v in violations:
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
