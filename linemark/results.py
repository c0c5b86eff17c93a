"""Errors, result records and collaborator interfaces of outline operations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .model import Finding, FindingType, Outline


class OutlineError(Exception):
    """Base class of errors raised by outline operations."""


class NodeNotFoundError(OutlineError):
    """Raised when a selector matches no node."""

    def __init__(self, message: str = "node not found") -> None:
        super().__init__(message)


class AmbiguousSelectorError(OutlineError):
    """Raised when a selector matches more than one node."""

    def __init__(self, message: str = "ambiguous selector") -> None:
        super().__init__(message)


class NodeHasChildrenError(OutlineError):
    """Raised when deleting a node with children in the default mode."""

    def __init__(
        self, message: str = "node has children; use --recursive or --promote"
    ) -> None:
        super().__init__(message)


class InsufficientGapsError(OutlineError):
    """Raised when there are too few sibling slots for promoted children."""

    def __init__(self, need: int | None = None, available: int | None = None) -> None:
        self.need = need
        self.available = available
        message = "insufficient gaps for promoted children"
        if need is not None and available is not None:
            message += f": need {need} slots, have {available}"
        super().__init__(message)


class CycleDetectedError(OutlineError):
    """Raised when a move would place a node beneath itself."""

    def __init__(self, source_mp: str | None = None, target_mp: str | None = None) -> None:
        self.source_mp = source_mp
        self.target_mp = target_mp
        message = "cycle detected"
        if source_mp is not None and target_mp is not None:
            message = f"cannot move {source_mp} to descendant {target_mp}: {message}"
        super().__init__(message)


class TypeAlreadyExistsError(OutlineError):
    """Raised when adding a document type a node already has."""

    def __init__(self, message: str = "type already exists") -> None:
        super().__init__(message)


class EmptyTitleError(OutlineError):
    """Raised when a title is empty or only whitespace."""

    def __init__(self, message: str = "title must not be empty") -> None:
        super().__init__(message)


class RenameError(OutlineError):
    """Raised when a batch of renames fails part way through.

    ``rollback_errors`` lists failures met while undoing earlier renames.
    """

    def __init__(
        self,
        old: str,
        new: str,
        cause: BaseException,
        rollback_errors: Iterable[str] = (),
    ) -> None:
        self.old = old
        self.new = new
        self.cause = cause
        self.rollback_errors = tuple(rollback_errors)
        message = f"rename {old} -> {new}: {cause}"
        if self.rollback_errors:
            message += "; rollback failed: " + "\n".join(self.rollback_errors)
        super().__init__(message)


@dataclass
class ModifyResult:
    """Outcome of adding or removing a document type."""

    filename: str = ""
    node_mp: str = ""
    node_sid: str = ""


@dataclass
class ListResult:
    """The document types of a node."""

    types: list[str] = field(default_factory=list)
    node_mp: str = ""
    node_sid: str = ""


@dataclass
class CheckResult:
    """Findings from checking the outline."""

    findings: list[Finding] = field(default_factory=list)


@dataclass
class RepairAction:
    """A single repair that was applied."""

    type: FindingType
    old: str = ""
    new: str = ""


@dataclass
class RepairResult:
    """Repairs applied and findings left unrepaired."""

    repairs: list[RepairAction] = field(default_factory=list)
    unrepaired: list[Finding] = field(default_factory=list)


@dataclass
class CompactResult:
    """Renames planned or made by compacting."""

    renames: dict[str, str] = field(default_factory=dict)


@dataclass
class RenameResult:
    """Outcome of retitling a node."""

    mp: str = ""
    sid: str = ""
    old_title: str = ""
    new_title: str = ""
    renames: dict[str, str] = field(default_factory=dict)


@dataclass
class LoadResult:
    """The outline read from disk with findings about it."""

    outline: Outline = field(default_factory=Outline)
    findings: list[Finding] = field(default_factory=list)


@dataclass
class AddResult:
    """The node created by an add."""

    sid: str = ""
    mp: str = ""
    filename: str = ""


@dataclass
class MoveResult:
    """Renames planned or made by a move."""

    renames: dict[str, str] = field(default_factory=dict)


@dataclass
class DeleteResult:
    """Files deleted and renamed, and SIDs kept reserved, by a delete."""

    files_deleted: list[str] = field(default_factory=list)
    files_renamed: dict[str, str] = field(default_factory=dict)
    sids_preserved: list[str] = field(default_factory=list)


@runtime_checkable
class DirectoryReader(Protocol):
    """Lists the filenames in the project directory."""

    def list_files(self) -> list[str]: ...


@runtime_checkable
class FileWriter(Protocol):
    """Writes files in the project directory."""

    def write_file(self, filename: str, content: str) -> None: ...


@runtime_checkable
class FileDeleter(Protocol):
    """Deletes files from the project directory."""

    def delete_file(self, filename: str) -> None: ...


@runtime_checkable
class FileRenamer(Protocol):
    """Renames files within the project directory."""

    def rename_file(self, old_name: str, new_name: str) -> None: ...


@runtime_checkable
class ContentReader(Protocol):
    """Reads file contents from the project directory."""

    def read_file(self, filename: str) -> str: ...


@runtime_checkable
class Locker(Protocol):
    """Advisory lock held around mutating operations."""

    def try_lock(self) -> None: ...

    def unlock(self) -> None: ...


@runtime_checkable
class SIDReserver(Protocol):
    """Produces new stable IDs."""

    def reserve(self) -> str: ...


@runtime_checkable
class ReservationStoreLike(Protocol):
    """Persists SID reservation markers."""

    def has_reservation(self, sid: str) -> bool: ...

    def create_reservation(self, sid: str) -> None: ...


@runtime_checkable
class FrontmatterHandler(Protocol):
    """Frontmatter parsing and serialization."""

    def get_title(self, text: str) -> str: ...

    def set_title(self, text: str, new_title: str) -> str: ...

    def encode_yaml_value(self, value: str) -> str: ...

    def serialize(self, fm: str, body: str) -> str: ...