"""FileRecord - a normalized, immutable description of one filesystem entry."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from pathlib import PurePosixPath

from patternkit.utils import split_order

ROLE_DIRECTORY = "directory"
ROLE_VIEW = "view"
ROLE_VARIANT_VIEW = "variant-view"
ROLE_CONFIG = "config"
ROLE_README = "readme"
ROLE_ASSET = "asset"
ROLE_OTHER = "other"


@dataclass(frozen=True)
class FileRecord:
    """One file or directory as read from the component source.

    ``relative_path`` is POSIX-style and relative to the source root (the
    root record itself has ``""``). ``role`` and ``scope`` are filled in by
    the tree builder, which hands out annotated copies; records coming
    straight from a reader leave them unset.
    """

    path: str
    relative_path: str
    mtime_ns: int = 0
    contents: bytes | None = None
    is_directory: bool = False
    children: tuple["FileRecord", ...] = ()
    role: str | None = None
    scope: str | None = None

    # Derived -----------------------------------------------------------------

    @property
    def filename(self) -> str:
        """Last path segment, including any order prefix and extension."""
        if not self.relative_path:
            return PurePosixPath(self.path.replace("\\", "/")).name
        return PurePosixPath(self.relative_path).name

    @property
    def ext(self) -> str:
        """Lowercased final suffix (``.hbs``); empty for directories."""
        if self.is_directory:
            return ""
        return PurePosixPath(self.filename).suffix.lower()

    @property
    def stem(self) -> str:
        """Filename without its final suffix (order prefix kept)."""
        if self.is_directory:
            return self.filename
        return PurePosixPath(self.filename).stem

    @property
    def order(self) -> float:
        """Order from a leading ``NN-`` prefix; ``inf`` when absent."""
        return split_order(self.stem)[0]

    @property
    def name(self) -> str:
        """Stem with any order prefix removed (``_01-button.hbs`` -> ``button``)."""
        return split_order(self.stem)[1]

    @property
    def base(self) -> str:
        """Name plus extension, with the order prefix removed."""
        return self.name + self.ext

    @property
    def hidden(self) -> bool:
        """True if any segment of the relative path starts with an underscore."""
        return any(seg.startswith("_") for seg in self.relative_path.split("/") if seg)

    @property
    def mtime(self) -> float:
        return self.mtime_ns / 1e9

    # Children ----------------------------------------------------------------

    def files(self) -> list["FileRecord"]:
        return [c for c in self.children if not c.is_directory]

    def directories(self) -> list["FileRecord"]:
        return [c for c in self.children if c.is_directory]

    def has_children(self) -> bool:
        return bool(self.children)

    def walk(self) -> Iterator["FileRecord"]:
        """Yield this record and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    # Content -----------------------------------------------------------------

    def read_text(self, encoding: str = "utf-8") -> str | None:
        if self.contents is None:
            return None
        return self.contents.decode(encoding, errors="replace")

    def annotate(self, role: str, scope: str | None) -> "FileRecord":
        """Return a copy carrying ``role`` and ``scope``."""
        return replace(self, role=role, scope=scope)

    def to_json(self) -> dict:
        return {
            "path": self.path,
            "relativePath": self.relative_path,
            "base": self.base,
            "ext": self.ext,
            "isDirectory": self.is_directory,
            "role": self.role,
            "scope": self.scope,
        }


def make_record(
    relative_path: str,
    contents: bytes | str | None = None,
    *,
    children: list[FileRecord] | tuple[FileRecord, ...] | None = None,
    is_directory: bool | None = None,
    root: str = "/src",
    mtime_ns: int = 0,
) -> FileRecord:
    """Build a record in memory, mostly for tests and embedding.

    A record is a directory if ``children`` is given or ``is_directory`` is
    set explicitly.
    """
    if isinstance(contents, str):
        contents = contents.encode("utf-8")
    if is_directory is None:
        is_directory = children is not None
    relative_path = relative_path.strip("/")
    path = f"{root.rstrip('/')}/{relative_path}" if relative_path else root
    return FileRecord(
        path=path,
        relative_path=relative_path,
        mtime_ns=mtime_ns,
        contents=None if is_directory else contents,
        is_directory=is_directory,
        children=tuple(children or ()),
    )


def tree_signature(root: FileRecord) -> list[tuple[str, int]]:
    """Sorted ``(relative path, mtime_ns)`` pairs for every record under ``root``."""
    return sorted((r.relative_path, r.mtime_ns) for r in root.walk() if r.relative_path)

