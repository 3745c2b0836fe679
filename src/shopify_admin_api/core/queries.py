from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from .errors import QueryNotFoundError

GRAPHQL_DIR = Path(__file__).resolve().parent.parent / "graphql"


class QueryLoader:
    """Loads named GraphQL documents (``<name>.graphql``) from search directories."""

    def __init__(self, search_paths: Optional[Iterable[Path | str]] = None):
        paths: List[Path] = [Path(p) for p in (search_paths or [])]
        paths.append(GRAPHQL_DIR)
        self.search_paths = paths

    def __call__(self, name: str) -> str:
        return self.load(name)

    def load(self, name: str) -> str:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise QueryNotFoundError(f"Invalid query name: {name!r}")
        for base in self.search_paths:
            candidate = base / f"{name}.graphql"
            if candidate.is_file():
                return candidate.read_text(encoding="utf-8")
        searched = ", ".join(str(p) for p in self.search_paths)
        raise QueryNotFoundError(f"No GraphQL query named {name!r} in {searched}")


def load_query(name: str) -> str:
    return QueryLoader().load(name)


__all__ = ["QueryLoader", "load_query", "GRAPHQL_DIR"]
