import os

import pytest

from crm.hubspot import LocalStorage, ResultStore, StorageError


class TestResultStore:
    def test_round_trip(self, store):
        records = [{"id": "1", "name": "Acme"}, {"id": "2", "name": "Ünïcode"}]
        uri = store.store(records)
        assert uri.startswith("file://")
        assert uri.endswith(".jsonl")
        assert list(store.read(uri)) == records

    def test_each_call_gets_its_own_artifact(self, store):
        assert store.store([{"a": 1}]) != store.store([{"a": 1}])

    def test_artifacts_are_grouped_by_day(self, tmp_path, store):
        store.store([{"a": 1}])
        day_dirs = os.listdir(tmp_path / "artifacts")
        assert len(day_dirs) == 1
        assert len(day_dirs[0]) == len("2024-01-01")

    def test_scratch_file_removed(self, tmp_path, store):
        store.store([{"a": 1}])
        assert os.listdir(tmp_path / "scratch") == []

    def test_generator_input(self, store):
        uri = store.store({"n": i} for i in range(3))
        assert [r["n"] for r in store.read(uri)] == [0, 1, 2]

    def test_non_mapping_record_raises(self, tmp_path, store):
        with pytest.raises(StorageError):
            store.store([["not", "a", "mapping"], 5])
        assert os.listdir(tmp_path / "scratch") == []

    def test_commit_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        store = ResultStore(LocalStorage(str(blocker)), scratch_dir=str(tmp_path))
        with pytest.raises(StorageError):
            store.store([{"a": 1}])

    def test_read_unknown_scheme(self, store):
        with pytest.raises(StorageError):
            list(store.read("s3://bucket/key.jsonl"))

    def test_read_missing_file(self, tmp_path, store):
        with pytest.raises(StorageError):
            list(store.read((tmp_path / "missing.jsonl").as_uri()))
