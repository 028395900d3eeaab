"""PHP source discovery for workspace-wide reference lookups."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

DEFAULT_EXTENSIONS = (".php",)


def _resolves_inside(path: Path, root: Path) -> bool:
    """Return True when ``path`` still lies under ``root`` after resolution."""
    try:
        return path.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def _gitignore_files(root: Path) -> list[Path]:
    """Return every regular .gitignore under root, shallowest paths first."""
    candidates = {root / ".gitignore", *root.rglob(".gitignore")}
    found = [
        path for path in candidates if path.is_file() and not path.is_symlink()
    ]
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    """Compose gitignore rules into one predicate over absolute path strings."""
    if not nested_gitignore:
        root_gitignore = root / ".gitignore"
        if root_gitignore.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(root_gitignore))
        return None

    matchers = [parse_gitignore(path) for path in _gitignore_files(root)]
    if not matchers:
        return None

    def ignored(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Path outside this .gitignore's base directory.
                continue
        return False

    return ignored


def _passes_globs(
    rel_path: str,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if include_patterns and not any(fnmatch(rel_path, p) for p in include_patterns):
        return False
    return not (
        exclude_patterns and any(fnmatch(rel_path, p) for p in exclude_patterns)
    )


def find_php_files(
    directory: Path,
    *,
    extensions: list[str] | None = None,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find PHP sources under ``directory`` in a stable order.

    Symlinked files and directories are never followed, so every result
    stays inside the workspace.

    Args:
        directory: Workspace root to walk
        extensions: Accepted suffixes (default ``.php``), compared
            case-insensitively
        include_patterns: Optional fnmatch patterns over the root-relative
            POSIX path; when given, a file must match one of them
        exclude_patterns: Optional fnmatch patterns; matching files are dropped
        nested_gitignore: Honour every .gitignore in the tree instead of only
            the root one

    Yields:
        Paths sorted by their root-relative POSIX form.
    """
    suffixes = tuple(ext.lower() for ext in (extensions or DEFAULT_EXTENSIONS))
    ignored = _build_gitignore_matcher(directory, nested_gitignore=nested_gitignore)

    selected: list[tuple[str, Path]] = []
    for path in directory.rglob("*"):
        if path.suffix.lower() not in suffixes:
            continue
        if path.is_symlink() or not path.is_file():
            continue
        if not _resolves_inside(path, directory):
            continue
        if ignored is not None and ignored(str(path)):
            continue

        rel_path = path.relative_to(directory).as_posix()
        if _passes_globs(rel_path, include_patterns, exclude_patterns):
            selected.append((rel_path, path))

    selected.sort()
    for _rel_path, path in selected:
        yield path


__all__ = ["DEFAULT_EXTENSIONS", "find_php_files"]
