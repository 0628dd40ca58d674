"""Tests for config parsing, cascade rules and compiler settings."""

import pytest

from patternkit.config import (
    CompilerSettings,
    ConfigLoader,
    cascade_addons,
    cascade_entity_config,
    detect_format,
    parse_config,
    split_frontmatter,
)
from patternkit.exceptions import ConfigParseError, SettingsError
from patternkit.fs import make_record


def test_detect_format():
    assert detect_format("config.json") == "json"
    assert detect_format("button.config.YML") == "yaml"
    assert detect_format("button.config.yaml") == "yaml"
    assert detect_format("config.py") == "py"
    assert detect_format("button.hbs") is None
    assert detect_format("Makefile") is None


def test_parse_json_and_yaml():
    assert parse_config(b'{"label": "Button"}', "json") == {"label": "Button"}
    assert parse_config("label: Button\ntags: [a, b]\n", "yaml") == {
        "label": "Button",
        "tags": ["a", "b"],
    }


def test_parse_empty_is_empty_mapping():
    assert parse_config("", "yaml") == {}
    assert parse_config("   \n", "json") == {}
    assert parse_config("# only a comment\n", "yaml") == {}


def test_parse_python_config():
    assert parse_config("config = {'label': 'Py'}\n", "py") == {"label": "Py"}


def test_parse_python_config_callable():
    source = "def config():\n    return {'status': 'wip'}\n"
    assert parse_config(source, "py") == {"status": "wip"}


@pytest.mark.parametrize(
    "data, fmt",
    [
        ("{not json", "json"),
        ("label: [unclosed", "yaml"),
        ("- a\n- b\n", "yaml"),
        ("x = 1\n", "py"),
        ("config = [1, 2]\n", "py"),
        ("raise RuntimeError('boom')\n", "py"),
    ],
)
def test_parse_failures_raise_config_parse_error(data, fmt):
    with pytest.raises(ConfigParseError) as exc:
        parse_config(data, fmt, source="button/config")
    assert exc.value.path == "button/config"


def test_split_frontmatter():
    config, body = split_frontmatter("---\nlabel: Fancy\n---\n<b>hi</b>\n")
    assert config == {"label": "Fancy"}
    assert body == "<b>hi</b>\n"


def test_split_frontmatter_without_block():
    text = "<b>hi</b>\n---\n"
    assert split_frontmatter(text) == ({}, text)


def test_split_frontmatter_unclosed_is_plain_text():
    text = "---\nlabel: x\n<b>"
    assert split_frontmatter(text) == ({}, text)


def test_loader_caches_by_content():
    loader = ConfigLoader()
    record = make_record("button/config.yml", "context:\n  size: md\n")
    first = loader.load(record)
    first["context"]["size"] = "mutated"
    second = loader.load(record)
    assert second == {"context": {"size": "md"}}
    assert len(loader) == 1

    loader.clear()
    assert len(loader) == 0


def test_loader_does_not_cache_failures():
    loader = ConfigLoader()
    record = make_record("button/config.json", "{bad")
    with pytest.raises(ConfigParseError):
        loader.load(record)
    assert len(loader) == 0


def test_loader_frontmatter():
    loader = ConfigLoader()
    view = make_record("button.hbs", "---\nstatus: wip\n---\n<button>")
    assert loader.frontmatter(view) == ({"status": "wip"}, "<button>")


def test_cascade_only_restricted_keys():
    """Test that only context/preview/status/display flow to children."""
    parent = {
        "context": {"theme": "dark", "size": "md"},
        "display": {"padding": "1em"},
        "preview": "@preview",
        "status": "wip",
        "label": "Parent",
        "tags": ["forms"],
        "notes": "Parent notes",
    }
    own = {"context": {"size": "lg"}, "label": "Child"}
    merged = cascade_entity_config(parent, own)
    assert merged == {
        "context": {"size": "lg", "theme": "dark"},
        "display": {"padding": "1em"},
        "preview": "@preview",
        "status": "wip",
        "label": "Child",
    }


def test_cascade_own_values_win():
    merged = cascade_entity_config(
        {"preview": "@a", "status": "wip"}, {"preview": "@b", "status": "ready"}
    )
    assert merged == {"preview": "@b", "status": "ready"}


def test_cascade_does_not_modify_inputs():
    parent = {"context": {"a": {"b": 1}}}
    merged = cascade_entity_config(parent, {})
    merged["context"]["a"]["b"] = 2
    assert parent == {"context": {"a": {"b": 1}}}


def test_cascade_addons_concatenates_parent_first():
    merged = cascade_addons({"plugins": ["a:x", "b:y"]}, {"plugins": ["b:y", "c:z"]})
    assert merged == {"plugins": ["a:x", "b:y", "c:z"]}
    assert cascade_addons({"context": {}}, {}) == {}


def test_settings_defaults():
    settings = CompilerSettings()
    assert settings.view_ext == ".hbs"
    assert settings.splitter == "--"
    assert settings.default_status == "ready"
    assert set(settings.statuses) == {"prototype", "wip", "ready"}
    assert settings.root_cascade() == {"context": {}, "display": {}, "status": "ready"}


def test_settings_normalize_view_ext():
    assert CompilerSettings(view_ext="NJK").view_ext == ".njk"


def test_status_info():
    settings = CompilerSettings()
    assert settings.status_info("wip").label == "WIP"
    assert settings.status_info(None).label == "Ready"
    assert settings.status_info("needs-review").label == "Needs Review"


def test_settings_load_missing_file_gives_defaults(tmp_path):
    assert CompilerSettings.load(tmp_path / "patternkit.yaml") == CompilerSettings()
    assert CompilerSettings.load(None) == CompilerSettings()


def test_settings_load(tmp_path):
    path = tmp_path / "patternkit.yaml"
    path.write_text("view_ext: .njk\ndefault_preview: '@preview'\ndefault_context:\n  lang: en\n")
    settings = CompilerSettings.load(path)
    assert settings.view_ext == ".njk"
    assert settings.root_cascade() == {
        "context": {"lang": "en"},
        "display": {},
        "status": "ready",
        "preview": "@preview",
    }


def test_settings_local_overrides(tmp_path):
    """Test that .patternkit.local.yaml is merged over patternkit.yaml."""
    path = tmp_path / "patternkit.yaml"
    path.write_text("plugins: ['a:hook']\ndefault_context:\n  lang: en\n")
    (tmp_path / ".patternkit.local.yaml").write_text(
        "plugins: ['b:hook']\ndefault_status: wip\ndefault_context:\n  debug: true\n"
    )
    settings = CompilerSettings.load(path)
    assert settings.plugins == ["a:hook", "b:hook"]
    assert settings.default_status == "wip"
    assert settings.default_context == {"lang": "en", "debug": True}


def test_settings_unknown_key_is_settings_error(tmp_path):
    path = tmp_path / "patternkit.yaml"
    path.write_text("no_such_option: 1\n")
    with pytest.raises(SettingsError):
        CompilerSettings.load(path)


def test_settings_invalid_yaml_is_settings_error(tmp_path):
    path = tmp_path / "patternkit.yaml"
    path.write_text("view_ext: [\n")
    with pytest.raises(SettingsError):
        CompilerSettings.load(path)
