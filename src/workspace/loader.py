"""File-system text access for resolution runs."""

from __future__ import annotations

from pathlib import Path

from resolve.errors import FileLoadFailure


class FileSystemLoader:
    """Reads workspace files by their root-relative POSIX path."""

    def __init__(self, root: Path, *, encoding: str = "utf-8") -> None:
        self.root = root.resolve()
        self.encoding = encoding

    def resolve(self, file_id: str) -> Path:
        """Return the absolute path for ``file_id``, refusing root escapes."""
        path = (self.root / file_id).resolve()
        try:
            path.relative_to(self.root)
        except ValueError as exc:
            raise FileLoadFailure(file_id, "path escapes the workspace root") from exc
        return path

    def file_id(self, path: Path) -> str:
        return path.resolve().relative_to(self.root).as_posix()

    def load_text(self, file_id: str) -> str:
        path = self.resolve(file_id)
        try:
            return path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise FileLoadFailure(file_id, str(exc)) from exc


__all__ = ["FileSystemLoader"]
