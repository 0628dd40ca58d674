"""Compiler settings loaded from patternkit.yaml

Schema:
- view_ext: extension of component view files (default ``.hbs``)
- splitter: separator between component and variant name in variant views
- config_suffix: suffix marking a named config file (``button.config.yml``)
- readme_names: filenames treated as readmes (case-insensitive)
- default_status / statuses: status handles and their display info
- default_preview / default_context / default_display: root cascade seeds
- sort_types: tie-break order of entity types among siblings
- plugins: ``module:function`` hooks called after every build

A ``.patternkit.local.yaml`` next to the settings file is merged on top.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from patternkit.exceptions import SettingsError
from patternkit.utils import titlize

from .cascade import ADDON_KEYS, cascade_addons

SETTINGS_FILENAME = "patternkit.yaml"
LOCAL_SETTINGS_FILENAME = ".patternkit.local.yaml"


class StatusInfo(BaseModel):
    """Display information for a status handle."""

    label: str
    description: str | None = None
    color: str | None = None


def _default_statuses() -> dict[str, StatusInfo]:
    return {
        "prototype": StatusInfo(
            label="Prototype",
            description="Do not implement.",
            color="#FF3333",
        ),
        "wip": StatusInfo(
            label="WIP",
            description="Work in progress. Implement with caution.",
            color="#FF9233",
        ),
        "ready": StatusInfo(
            label="Ready",
            description="Ready to implement.",
            color="#29CC29",
        ),
    }


class CompilerSettings(BaseModel):
    """Settings for one component library."""

    model_config = {"extra": "forbid"}

    view_ext: str = Field(default=".hbs", description="Extension of view files")
    splitter: str = Field(
        default="--", description="Separator between component and variant names"
    )
    config_suffix: str = Field(
        default=".config", description="Suffix marking a named config file"
    )
    readme_names: list[str] = Field(
        default_factory=lambda: ["readme.md", "readme.markdown"],
        description="Filenames treated as readmes",
    )
    default_status: str = Field(default="ready", description="Status when none is set")
    statuses: dict[str, StatusInfo] = Field(default_factory=_default_statuses)
    default_preview: str | None = Field(
        default=None, description="Preview layout reference seeding the cascade"
    )
    default_context: dict[str, Any] = Field(default_factory=dict)
    default_display: dict[str, Any] = Field(default_factory=dict)
    sort_types: list[str] = Field(
        default_factory=lambda: ["component", "collection"],
        description="Order of entity types among siblings with equal order",
    )
    plugins: list[str] = Field(
        default_factory=list, description="Post-build hooks as module:function"
    )

    @field_validator("view_ext")
    @classmethod
    def normalize_view_ext(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("view_ext must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("splitter")
    @classmethod
    def check_splitter(cls, value: str) -> str:
        if not value:
            raise ValueError("splitter must not be empty")
        return value

    @field_validator("readme_names")
    @classmethod
    def lowercase_readme_names(cls, value: list[str]) -> list[str]:
        return [v.lower() for v in value]

    @classmethod
    def load(cls, path: Path | str | None) -> "CompilerSettings":
        """Load settings from a YAML file.

        A missing file (or ``None``) yields defaults. Local overrides from
        ``.patternkit.local.yaml`` in the same directory are merged on top.
        """
        if path is None:
            return cls()
        path = Path(path)
        if not path.exists():
            return cls()

        data = _read_yaml(path)
        local = _read_yaml(path.parent / LOCAL_SETTINGS_FILENAME)
        try:
            settings = cls.model_validate(data)
            return settings.with_overlay(local) if local else settings
        except ValidationError as e:
            raise SettingsError(path, str(e)) from e

    def with_overlay(self, overlay: dict[str, Any]) -> "CompilerSettings":
        """Return new settings with ``overlay`` merged in.

        Add-on lists (``plugins``) are concatenated parent-first; mappings
        are merged one level deep; everything else is replaced.
        """
        data = self.model_dump()
        for key, value in overlay.items():
            if key in ADDON_KEYS:
                continue
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value
        data.update(cascade_addons(data, overlay))
        return type(self).model_validate(data)

    def status_info(self, handle: str | None) -> StatusInfo:
        """Status info for ``handle``, or for the default status when unset."""
        handle = handle or self.default_status
        if handle in self.statuses:
            return self.statuses[handle]
        return StatusInfo(label=titlize(handle))

    def root_cascade(self) -> dict[str, Any]:
        """Config inherited by the root collection."""
        cascade: dict[str, Any] = {
            "context": dict(self.default_context),
            "display": dict(self.default_display),
            "status": self.default_status,
        }
        if self.default_preview is not None:
            cascade["preview"] = self.default_preview
        return cascade


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(path, f"invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(path, "top level must be a mapping")
    return data


def find_settings_file(start: Path | None = None) -> Path | None:
    """Find patternkit.yaml in ``start`` or its parents."""
    cwd = (start or Path.cwd()).resolve()
    for parent in [cwd] + list(cwd.parents):
        candidate = parent / SETTINGS_FILENAME
        if candidate.exists():
            return candidate
    return None
