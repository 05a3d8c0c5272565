"""Test locked append and atomic replace helpers."""

import os

from diploma_registry.core.file_io import atomic_write_text, safe_append_line


class TestSafeAppendLine:
    def test_creates_parent_and_appends(self, tmp_path):
        path = tmp_path / "nested" / "log.jsonl"
        safe_append_line(path, '{"a": 1}')
        safe_append_line(path, '{"a": 2}')
        assert path.read_text() == '{"a": 1}\n{"a": 2}\n'


class TestAtomicWriteText:
    def test_writes(self, tmp_path):
        path = tmp_path / "state" / "registry.json"
        atomic_write_text(path, "{}")
        assert path.read_text() == "{}"

    def test_replaces(self, tmp_path):
        path = tmp_path / "registry.json"
        atomic_write_text(path, "old")
        atomic_write_text(path, "new")
        assert path.read_text() == "new"

    def test_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "registry.json"
        atomic_write_text(path, "x")
        assert os.listdir(tmp_path) == ["registry.json"]
