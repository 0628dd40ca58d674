"""Shared fixtures: in-memory and on-disk component trees."""

from pathlib import Path

import pytest

from patternkit.compiler import EventChannel
from patternkit.fs import FileRecord, make_record


def _records(spec: dict, prefix: str = "") -> list[FileRecord]:
    records = []
    for name, value in spec.items():
        rel = f"{prefix}/{name}" if prefix else name
        if isinstance(value, dict):
            records.append(make_record(rel, children=_records(value, rel)))
        else:
            records.append(make_record(rel, value))
    return records


def _tree(spec: dict) -> FileRecord:
    """Root record from a nested dict; dicts are directories, strings files."""
    return make_record("", children=_records(spec))


def _write(root: Path, spec: dict) -> Path:
    for name, value in spec.items():
        path = root / name
        if isinstance(value, dict):
            path.mkdir(parents=True, exist_ok=True)
            _write(path, value)
        else:
            path.write_text(value)
    return root


@pytest.fixture
def make_tree():
    return _tree


@pytest.fixture
def write_tree():
    return _write


@pytest.fixture
def events():
    """EventChannel that records every warning it sees."""
    channel = EventChannel()
    channel.warnings = []
    channel.on("warning", channel.warnings.append)
    return channel


LIBRARY = {
    "button": {
        "button.hbs": "<button class=\"{{ size }}\">{{ text }}</button>\n",
        "button--large.hbs": "<button class=\"large\">{{ text }}</button>\n",
        "button.config.yml": (
            "label: Button\n"
            "tags: [actions]\n"
            "context:\n"
            "  text: Click me\n"
            "  size: md\n"
            "variants:\n"
            "  - name: large\n"
            "    context:\n"
            "      size: lg\n"
        ),
        "README.md": "# Button\n\nA plain button.\n",
    },
    "forms": {
        "config.yml": "label: Form Elements\ncontext:\n  theme: light\n",
        "input.hbs": "<input>\n",
        "input.config.yml": "status: wip\n",
    },
    "card": {
        "card.hbs": "<div>{{ size }}</div>\n",
        "card.config.json": '{"context": {"size": "@button:large.context.size"}}',
    },
}


@pytest.fixture
def library(make_tree):
    """A small library: a button with a large variant, a form input, a card."""
    return make_tree(LIBRARY)


@pytest.fixture
def library_dir(tmp_path):
    """The same library written to ``<tmp>/components``."""
    source = tmp_path / "components"
    source.mkdir()
    return _write(source, LIBRARY)
