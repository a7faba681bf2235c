"""
Unit tests for dbimport.discovery.
"""
import os

import pytest

from dbimport.discovery import find_sql_files
from dbimport.errors import FileAccessError


@pytest.fixture
def tree(tmp_path):
    for rel in ["a.sql", "z.sql", "sub/b.SQL", "sub/c.txt", "sub/deeper/d.sql"]:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("SELECT 1;")
    return tmp_path


def test_walks_depth_first_in_name_order(tree) -> None:
    assert find_sql_files(tree) == [
        tree / "a.sql",
        tree / "sub" / "b.SQL",
        tree / "sub" / "deeper" / "d.sql",
        tree / "z.sql",
    ]


def test_argument_order_and_nested_lists(tree) -> None:
    found = find_sql_files([str(tree / "z.sql"), [tree / "a.sql"]])
    assert found == [tree / "z.sql", tree / "a.sql"]


def test_relative_paths_become_absolute(tree, monkeypatch) -> None:
    monkeypatch.chdir(tree)
    assert find_sql_files("a.sql") == [tree / "a.sql"]


def test_explicit_non_sql_file_is_ignored(tree) -> None:
    assert find_sql_files(tree / "sub" / "c.txt") == []


def test_symlinks_are_skipped(tree) -> None:
    os.symlink(tree / "a.sql", tree / "sub" / "link.sql")
    assert tree / "sub" / "link.sql" not in find_sql_files(tree)


def test_missing_path(tree) -> None:
    with pytest.raises(FileAccessError) as info:
        find_sql_files(tree / "a.sql", tree / "nope")
    assert info.value.path == str(tree / "nope")


def test_deeply_nested_tree(tmp_path) -> None:
    deep = tmp_path
    for _ in range(100):
        deep = deep / "d"
        deep.mkdir()
    (deep / "bottom.sql").write_text("SELECT 1;")
    assert find_sql_files(tmp_path) == [deep / "bottom.sql"]
