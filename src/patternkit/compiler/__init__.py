"""Compiler pipeline: tree builder, context resolver, build cache."""

from .cache import BuildCache
from .compiler import Compiler, load_plugin
from .events import EventChannel
from .resolver import ContextResolver, is_reference, parse_reference
from .transform import TreeBuilder

__all__ = [
    "BuildCache",
    "Compiler",
    "ContextResolver",
    "EventChannel",
    "TreeBuilder",
    "is_reference",
    "load_plugin",
    "parse_reference",
]
