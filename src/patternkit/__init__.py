"""Patternkit - compiles a directory of UI components into an entity graph."""

from ._version import __version__
from .compiler import BuildCache, Compiler, ContextResolver, EventChannel, TreeBuilder
from .config import CompilerSettings, StatusInfo
from .entities import Collection, Component, Variant, VariantCollection
from .exceptions import (
    ComponentNotFoundError,
    ConfigParseError,
    EntityFileNotFoundError,
    InvariantError,
    PatternkitError,
    ReferenceResolutionWarning,
    SettingsError,
    VariantNotFoundError,
)
from .fs import FileRecord, FileSystemReader, StaticReader, make_record, read_tree
from .scaffold import create_component

__all__ = [
    "__version__",
    "BuildCache",
    "Collection",
    "Compiler",
    "CompilerSettings",
    "Component",
    "ComponentNotFoundError",
    "ConfigParseError",
    "EntityFileNotFoundError",
    "ContextResolver",
    "EventChannel",
    "FileRecord",
    "FileSystemReader",
    "InvariantError",
    "PatternkitError",
    "ReferenceResolutionWarning",
    "SettingsError",
    "StaticReader",
    "StatusInfo",
    "TreeBuilder",
    "Variant",
    "VariantCollection",
    "VariantNotFoundError",
    "create_component",
    "make_record",
    "read_tree",
]
