"""Configuration: compiler settings, config file parsing and cascade rules."""

from .cascade import (
    ADDON_KEYS,
    CASCADE_KEYS,
    cascade_addons,
    cascade_entity_config,
    inheritable,
)
from .loader import ConfigLoader, detect_format, parse_config, split_frontmatter
from .settings import (
    LOCAL_SETTINGS_FILENAME,
    SETTINGS_FILENAME,
    CompilerSettings,
    StatusInfo,
    find_settings_file,
)

__all__ = [
    "ADDON_KEYS",
    "CASCADE_KEYS",
    "CompilerSettings",
    "ConfigLoader",
    "LOCAL_SETTINGS_FILENAME",
    "SETTINGS_FILENAME",
    "StatusInfo",
    "cascade_addons",
    "cascade_entity_config",
    "detect_format",
    "find_settings_file",
    "inheritable",
    "parse_config",
    "split_frontmatter",
]
