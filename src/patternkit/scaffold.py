"""Scaffolding of new component directories."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from jinja2 import BaseLoader, Environment

from patternkit.config.settings import CompilerSettings
from patternkit.exceptions import PatternkitError
from patternkit.utils import split_order, titlize

log = logging.getLogger(__name__)

VIEW_TEMPLATE = """<div class="{{ handle }}">
  <p>{{ label }} component</p>
</div>
"""


def create_component(
    root: Path | str,
    rel_path: str,
    settings: CompilerSettings | None = None,
    *,
    label: str | None = None,
) -> Path:
    """Create ``<root>/<rel_path>/`` with a starter view and config.

    Writes ``<name><view_ext>`` and ``<name>.config.yml``. Refuses to touch
    an existing directory. Returns the new directory.
    """
    settings = settings or CompilerSettings()
    target = Path(root) / rel_path.strip("/")
    if target.exists():
        raise PatternkitError(f"Cannot create component: {target} already exists")

    _, name = split_order(target.name)
    label = label or titlize(name)

    env = Environment(loader=BaseLoader(), autoescape=False, keep_trailing_newline=True)
    view = env.from_string(VIEW_TEMPLATE).render(handle=name, label=label)

    target.mkdir(parents=True)
    (target / f"{name}{settings.view_ext}").write_text(view, encoding="utf-8")
    with open(target / f"{name}{settings.config_suffix}.yml", "w") as f:
        yaml.safe_dump({"label": label}, f, sort_keys=False, default_flow_style=False)

    log.info(f"Created component {name} in {target}")
    return target
