"""Patternkit Exceptions

Errors raised while compiling a component library and looking up entities.
"""

from __future__ import annotations

from pathlib import Path


class PatternkitError(Exception):
    """Base exception for all patternkit errors."""

    pass


class ConfigParseError(PatternkitError):
    """Raised when a config file cannot be parsed into a mapping.

    The tree builder reports it as a warning and carries on with an empty
    config for the affected subtree.
    """

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Could not parse config file {self.path}: {reason}")


class SettingsError(PatternkitError):
    """Raised when compiler settings fail validation."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Invalid settings in {self.path}: {reason}")


class ComponentNotFoundError(PatternkitError):
    """Raised when an explicit lookup names an unknown component."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Component not found: {ref}")


class VariantNotFoundError(PatternkitError):
    """Raised when an explicit lookup names an unknown variant."""

    def __init__(self, component: str, variant: str):
        self.component = component
        self.variant = variant
        super().__init__(f"Variant '{variant}' of component '{component}' not found")


class EntityFileNotFoundError(PatternkitError):
    """Raised when an entity has no file with the requested name."""

    def __init__(self, entity: str, filename: str):
        self.entity = entity
        self.filename = filename
        super().__init__(f"No file '{filename}' in {entity}")


class InvariantError(PatternkitError):
    """Raised when a constructed entity breaks a structural guarantee."""

    pass


class ReferenceResolutionWarning(UserWarning):
    """A context reference that could not be resolved.

    Never raised: it is logged and emitted on the compiler's event channel,
    and the reference resolves to ``None``.
    """

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Could not resolve reference {reference}: {reason}")
