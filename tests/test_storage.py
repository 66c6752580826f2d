"""Tests for storage backends."""

import pytest

from manga_catalog.errors import StorageError
from manga_catalog.storage import JsonFileStorage, MemoryStorage


def test_file_storage_missing_key_reads_none(tmp_path):
    storage = JsonFileStorage(tmp_path)
    assert storage.read_raw("mangas") is None


def test_file_storage_write_creates_directory(tmp_path):
    storage = JsonFileStorage(tmp_path / "nested" / "data")

    storage.write_raw("mangas", "[]")

    assert storage.path_for("mangas") == tmp_path / "nested" / "data" / "mangas.json"
    assert storage.read_raw("mangas") == "[]"


def test_file_storage_overwrites_and_keeps_unicode(tmp_path):
    storage = JsonFileStorage(tmp_path)
    storage.write_raw("mangas", "first")
    storage.write_raw("mangas", '[{"name": "進撃の巨人"}]')

    assert storage.read_raw("mangas") == '[{"name": "進撃の巨人"}]'
    assert not (tmp_path / "mangas.json.tmp").exists()


def test_keys_are_independent(tmp_path):
    storage = JsonFileStorage(tmp_path)
    storage.write_raw("a", "1")
    storage.write_raw("b", "2")

    assert storage.read_raw("a") == "1"
    assert storage.read_raw("b") == "2"


def test_memory_storage():
    storage = MemoryStorage({"mangas": "[]"})

    assert storage.read_raw("mangas") == "[]"
    assert storage.read_raw("other") is None
    storage.write_raw("other", "x")
    assert storage.data["other"] == "x"


def test_file_storage_undecodable_bytes_raise_storage_error(tmp_path):
    (tmp_path / "mangas.json").write_bytes(b'[{"name": "\xff\xfe"}]')

    with pytest.raises(StorageError):
        JsonFileStorage(tmp_path).read_raw("mangas")
