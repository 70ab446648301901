"""Include Tree — parses requested include paths into fetch hints and walk paths.

Invariants:
    - required_relations = deduplicated first segments of every path
    - normalized_paths keep first-seen order, no duplicates, no empty segments
    - Root type must be registered (UnregisteredTypeError)
    - Never validates relation names (GraphWalker does, lazily)
"""

from collections.abc import Iterable
from dataclasses import dataclass

from shelf.core.domain_types import IncludePath
from shelf.core.registry import TypeRegistry


@dataclass(frozen=True)
class IncludeTree:
    """Parsed include request for one root type."""
    root_type: str
    required_relations: frozenset[str]
    normalized_paths: tuple[IncludePath, ...]

    @property
    def load_paths(self) -> tuple[str, ...]:
        """Dotted paths the data layer should eagerly load."""
        return tuple(".".join(path) for path in self.normalized_paths)

    def __bool__(self) -> bool:
        return bool(self.normalized_paths)


def split_include_param(raw: str | None) -> list[str]:
    """Split a comma-separated `include` query value."""
    if not raw:
        return []
    return [part for part in raw.split(",") if part.strip()]


def normalize_path(include: str) -> IncludePath:
    return tuple(
        segment.strip() for segment in include.split(".") if segment.strip()
    )


def parse_includes(
    root_type: str,
    include_paths: Iterable[str] | None,
    registry: TypeRegistry,
) -> IncludeTree:
    """Parse dotted include strings. Only the root type is checked."""
    registry.entry(root_type)
    seen: dict[IncludePath, None] = {}
    for include in include_paths or ():
        path = normalize_path(include)
        if path:
            seen.setdefault(path, None)
    paths = tuple(seen)
    return IncludeTree(
        root_type=root_type,
        required_relations=frozenset(path[0] for path in paths),
        normalized_paths=paths,
    )
