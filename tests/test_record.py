"""Tests for FileRecord and the tree readers."""

import os

from patternkit.fs import (
    FileSystemReader,
    StaticReader,
    make_record,
    read_tree,
    scan_signature,
    tree_signature,
)


def test_order_prefix_is_parsed_and_stripped():
    """Test that a leading NN- prefix sets order and is removed from the name."""
    record = make_record("components/_01-button.hbs", "<button>")
    assert record.order == 1
    assert record.name == "button"
    assert record.base == "button.hbs"
    assert record.filename == "_01-button.hbs"


def test_missing_order_sorts_last():
    record = make_record("button.hbs", "")
    assert record.order == float("inf")
    assert record.name == "button"


def test_hidden_when_any_segment_starts_with_underscore():
    assert make_record("_private/button/button.hbs", "").hidden
    assert make_record("forms/_input.hbs", "").hidden
    assert not make_record("forms/input.hbs", "").hidden


def test_ext_is_lowercased():
    record = make_record("Button.HBS", "")
    assert record.ext == ".hbs"
    assert record.stem == "Button"


def test_directory_records():
    """Test that children make a record a directory without contents."""
    child = make_record("forms/input.hbs", "<input>")
    sub = make_record("forms/group", children=[])
    directory = make_record("forms", children=[child, sub])
    assert directory.is_directory
    assert directory.contents is None
    assert directory.ext == ""
    assert directory.files() == [child]
    assert directory.directories() == [sub]
    assert [r.relative_path for r in directory.walk()] == [
        "forms",
        "forms/input.hbs",
        "forms/group",
    ]


def test_annotate_returns_copy():
    record = make_record("button.hbs", "x")
    annotated = record.annotate("view", "button")
    assert annotated.role == "view"
    assert annotated.scope == "button"
    assert record.role is None
    assert annotated.contents == record.contents


def test_read_text():
    assert make_record("a.hbs", "héllo").read_text() == "héllo"
    assert make_record("dir", children=[]).read_text() is None


def test_to_json():
    data = make_record("forms/input.hbs", "x").annotate("view", "forms/input").to_json()
    assert data["relativePath"] == "forms/input.hbs"
    assert data["base"] == "input.hbs"
    assert data["role"] == "view"
    assert data["isDirectory"] is False


def test_read_tree_skips_dotfiles(tmp_path, write_tree):
    write_tree(
        tmp_path,
        {
            "button": {"button.hbs": "<button>", ".DS_Store": "junk"},
            ".git": {"HEAD": "ref"},
        },
    )
    root = read_tree(tmp_path)
    assert root.is_directory
    assert root.relative_path == ""
    paths = [r.relative_path for r in root.walk()]
    assert paths == ["", "button", "button/button.hbs"]
    view = root.directories()[0].files()[0]
    assert view.contents == b"<button>"
    assert view.mtime_ns > 0


def test_scan_signature_matches_tree_signature(tmp_path, write_tree):
    write_tree(tmp_path, {"a": {"a.hbs": "a", "b.hbs": "b"}, "c.hbs": "c"})
    assert scan_signature(tmp_path) == tree_signature(read_tree(tmp_path))


def test_signature_changes_with_mtime(tmp_path, write_tree):
    write_tree(tmp_path, {"a.hbs": "a"})
    reader = FileSystemReader(tmp_path)
    before = reader.signature()
    st = os.stat(tmp_path / "a.hbs")
    os.utime(tmp_path / "a.hbs", ns=(st.st_atime_ns, st.st_mtime_ns + 10**9))
    assert reader.signature() != before


def test_scan_signature_of_missing_directory(tmp_path):
    assert scan_signature(tmp_path / "nope") == []


def test_static_reader(make_tree):
    root = make_tree({"a.hbs": "a"})
    reader = StaticReader(root)
    assert reader.read() is root
    assert reader.signature() == [("a.hbs", 0)]
