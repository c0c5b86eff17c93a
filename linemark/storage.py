"""Filesystem access for the project directory and SID reservations."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from . import sid as sid_module

PROJECT_DIR = ".linemark"


class ProjectNotFoundError(FileNotFoundError):
    """Raised when no enclosing directory holds a .linemark/ directory."""


@dataclass
class ProjectFiles:
    """Reads and changes the document files directly under a project root."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    def list_files(self) -> list[str]:
        """Names of the entries in the root that are not directories, sorted."""
        with os.scandir(self.root) as entries:
            return sorted(
                entry.name for entry in entries if not entry.is_dir(follow_symlinks=False)
            )

    def write_file(self, filename: str, content: str) -> None:
        """Write ``content`` to ``filename``, creating directories as needed."""
        path = self.root / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8", errors="surrogateescape"))

    def delete_file(self, filename: str) -> None:
        """Remove ``filename`` from the root."""
        os.remove(self.root / filename)

    def rename_file(self, old_name: str, new_name: str) -> None:
        """Rename a file within the root, replacing any existing target."""
        os.replace(self.root / old_name, self.root / new_name)

    def read_file(self, filename: str) -> str:
        """The full content of ``filename``."""
        return (self.root / filename).read_bytes().decode(
            "utf-8", errors="surrogateescape"
        )


@dataclass
class ReservationStore:
    """Marker files under ``.linemark/ids`` recording reserved SIDs."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    def _path(self, sid: str) -> Path:
        return self.root / PROJECT_DIR / "ids" / sid

    def has_reservation(self, sid: str) -> bool:
        """Whether a reservation marker exists for ``sid``."""
        try:
            os.stat(self._path(sid))
        except FileNotFoundError:
            return False
        return True

    def create_reservation(self, sid: str) -> None:
        """Create the reservation marker for ``sid``."""
        path = self._path(sid)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")


@dataclass
class RandomSIDReserver:
    """Produces new SIDs from a random byte source (the OS by default)."""

    reader: BinaryIO | None = None

    def reserve(self) -> str:
        """A freshly generated SID."""
        return sid_module.generate(self.reader)


def find_project_root(start: str | Path | None = None) -> Path:
    """Walk up from ``start`` (the working directory by default) to the project root."""
    origin = Path.cwd() if start is None else Path(start).absolute()
    for directory in (origin, *origin.parents):
        if (directory / PROJECT_DIR).is_dir():
            return directory
    raise ProjectNotFoundError(f"no {PROJECT_DIR}/ directory found")