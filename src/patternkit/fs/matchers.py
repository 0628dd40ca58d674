"""Filename classification for component sources."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from patternkit.config.loader import detect_format

from .record import (
    ROLE_ASSET,
    ROLE_CONFIG,
    ROLE_DIRECTORY,
    ROLE_README,
    ROLE_VARIANT_VIEW,
    ROLE_VIEW,
    FileRecord,
)

if TYPE_CHECKING:
    from patternkit.config.settings import CompilerSettings


class Matchers:
    """Classifies FileRecords using the view extension, splitter and config naming."""

    def __init__(self, settings: CompilerSettings):
        self.view_ext = settings.view_ext
        self.splitter = settings.splitter
        self.config_suffix = settings.config_suffix
        self.readme_names = set(settings.readme_names)

    def is_config(self, record: FileRecord) -> bool:
        if record.is_directory or detect_format(record.filename) is None:
            return False
        return self.config_target(record) is not None

    def config_target(self, record: FileRecord) -> str | None:
        """Name a config file applies to.

        ``button.config.yml`` -> ``button``; a bare ``config.yml`` -> ``""``
        (the enclosing directory); anything else -> None.
        """
        name = record.name
        if name == "config":
            return ""
        if self.config_suffix and name.endswith(self.config_suffix):
            target = name[: -len(self.config_suffix)]
            return target or None
        return None

    def is_readme(self, record: FileRecord) -> bool:
        return not record.is_directory and record.filename.lower() in self.readme_names

    def is_view(self, record: FileRecord) -> bool:
        """A component view: right extension, no variant splitter."""
        return (
            not record.is_directory
            and record.ext == self.view_ext
            and self.splitter not in record.name
        )

    def is_variant_view(self, record: FileRecord) -> bool:
        """A variant view named ``<component><splitter><variant><ext>``."""
        if record.is_directory or record.ext != self.view_ext:
            return False
        component, sep, variant = record.name.partition(self.splitter)
        return bool(sep and component and variant)

    def split_variant(self, record: FileRecord) -> tuple[str, str]:
        """``button--large.hbs`` -> ``("button", "large")``."""
        component, _, variant = record.name.partition(self.splitter)
        return component, variant

    def variant_views_for(self, name: str, files: Iterable[FileRecord]) -> list[FileRecord]:
        return [
            f for f in files if self.is_variant_view(f) and self.split_variant(f)[0] == name
        ]

    def config_for(self, name: str, files: Iterable[FileRecord]) -> FileRecord | None:
        """First config file among ``files`` targeting ``name``."""
        for f in files:
            if self.is_config(f) and self.config_target(f) == name:
                return f
        return None

    def directory_config(self, directory: FileRecord) -> FileRecord | None:
        """Config of a directory: ``config.*`` or ``<dirname>.config.*`` inside it."""
        files = directory.files()
        return self.config_for("", files) or self.config_for(directory.name, files)

    def readme_for(self, files: Iterable[FileRecord]) -> FileRecord | None:
        for f in files:
            if self.is_readme(f):
                return f
        return None

    def has_views(self, directory: FileRecord) -> bool:
        """True if any view or variant view exists under ``directory``."""
        return any(
            not r.is_directory and r.ext == self.view_ext for r in directory.walk()
        )

    def role_for(self, record: FileRecord) -> str:
        if record.is_directory:
            return ROLE_DIRECTORY
        if self.is_config(record):
            return ROLE_CONFIG
        if self.is_readme(record):
            return ROLE_README
        if self.is_variant_view(record):
            return ROLE_VARIANT_VIEW
        if self.is_view(record):
            return ROLE_VIEW
        return ROLE_ASSET
