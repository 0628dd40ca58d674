"""Filesystem records and readers."""

from .matchers import Matchers
from .reader import FileSystemReader, StaticReader, TreeReader, read_tree, scan_signature
from .record import (
    ROLE_ASSET,
    ROLE_CONFIG,
    ROLE_DIRECTORY,
    ROLE_OTHER,
    ROLE_README,
    ROLE_VARIANT_VIEW,
    ROLE_VIEW,
    FileRecord,
    make_record,
    tree_signature,
)

__all__ = [
    "FileRecord",
    "FileSystemReader",
    "Matchers",
    "StaticReader",
    "TreeReader",
    "make_record",
    "read_tree",
    "scan_signature",
    "tree_signature",
    "ROLE_ASSET",
    "ROLE_CONFIG",
    "ROLE_DIRECTORY",
    "ROLE_OTHER",
    "ROLE_README",
    "ROLE_VARIANT_VIEW",
    "ROLE_VIEW",
]
