"""
Tests for key-value stores and write application.
"""

import pytest
import yaml

from dreamlist.core.errors import StoreWriteError
from dreamlist.persistence.store import InMemoryStore, StoreWrite, YamlFileStore, apply_writes


class TestInMemoryStore:
    def test_get_absent(self, store):
        assert store.get("missing") is None

    def test_typed_getters(self, store):
        store.set("flag", True)
        store.set("count", 3)
        store.set("name", "Shark")

        assert store.get_bool("flag") is True
        assert store.get_int("count") == 3
        assert store.get_string("name") == "Shark"

    def test_typed_getters_reject_other_types(self, store):
        store.set("flag", True)
        store.set("count", 3)

        assert store.get_int("flag") is None
        assert store.get_bool("count") is False
        assert store.get_string("count") is None
        assert store.get_bool("missing") is False


class TestYamlFileStore:
    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "dreams.yaml"
        store = YamlFileStore(path)
        store.set("rowsQuantity", 0)
        store.set("description0", "Dream 1")
        store.set("modelInitialized", True)

        reopened = YamlFileStore(path)
        assert reopened.get_int("rowsQuantity") == 0
        assert reopened.get_string("description0") == "Dream 1"
        assert reopened.get_bool("modelInitialized") is True
        assert reopened.keys() == ["description0", "modelInitialized", "rowsQuantity"]

    def test_missing_file_is_empty(self, tmp_path):
        store = YamlFileStore(tmp_path / "nested" / "dreams.yaml")
        assert store.keys() == []

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dreams.yaml"
        YamlFileStore(path).set("a", 1)
        assert yaml.safe_load(path.read_text(encoding="utf-8")) == {"a": 1}

    def test_rejects_non_mapping_file(self, tmp_path):
        path = tmp_path / "dreams.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            YamlFileStore(path)

    def test_write_failure_raises_store_write_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = YamlFileStore(blocker / "dreams.yaml")

        with pytest.raises(StoreWriteError) as exc_info:
            store.set("description0", "Dream 1")

        assert exc_info.value.key == "description0"
        assert store.get("description0") is None


class TestApplyWrites:
    def test_applies_in_order(self, store):
        writes = [StoreWrite(key="a", value=1), StoreWrite(key="a", value=2)]
        report = apply_writes(store, writes)

        assert report.ok
        assert store.get("a") == 2
        assert report.applied == writes

    def test_failures_do_not_stop_batch(self, flaky_store):
        store = flaky_store("b")
        writes = [StoreWrite(key=k, value=k) for k in ("a", "b", "c")]

        report = apply_writes(store, writes)

        assert not report.ok
        assert store.attempts == ["a", "b", "c"]
        assert report.failed_writes == [writes[1]]
        assert store.get("c") == "c"
        assert report.failures[0].error.key == "b"

    def test_retry_only_failed(self, flaky_store):
        store = flaky_store("b")
        report = apply_writes(store, [StoreWrite(key=k, value=k) for k in ("a", "b", "c")])

        store.failing_keys.clear()
        store.attempts.clear()
        retried = report.retry(store)

        assert retried.ok
        assert store.attempts == ["b"]
        assert store.get("b") == "b"

    def test_succeeded(self, flaky_store):
        store = flaky_store("b")
        report = apply_writes(store, [StoreWrite(key=k, value=1) for k in ("a", "b")])

        assert report.succeeded("a")
        assert not report.succeeded("b")
        assert not report.succeeded("never-written")

    def test_store_write_keeps_value_types(self):
        assert StoreWrite(key="k", value=True).value is True
        assert StoreWrite(key="k", value=0).value == 0
        assert isinstance(StoreWrite(key="k", value="1").value, str)


class OSErrorStore(InMemoryStore):
    """Host-style backend that raises plain OSError for selected keys."""

    def __init__(self, failing_keys):
        super().__init__()
        self.failing_keys = set(failing_keys)
        self.attempts = []

    def set(self, key, value):
        self.attempts.append(key)
        if key in self.failing_keys:
            raise OSError("disk full")
        super().set(key, value)


class BrokenBatchStore(InMemoryStore):
    def set_many(self, items):
        raise ConnectionError("backend offline")


class TestBatchedWrites:
    """Batches reach the backend through set_many."""

    def test_yaml_store_flushes_once_per_batch(self, tmp_path, monkeypatch):
        store = YamlFileStore(tmp_path / "dreams.yaml")
        flushes = []
        original_flush = store._flush
        monkeypatch.setattr(store, "_flush", lambda: (flushes.append(1), original_flush()))

        writes = [StoreWrite(key=f"description{i}", value=f"Dream {i}") for i in range(50)]
        report = apply_writes(store, writes)

        assert report.ok
        assert len(flushes) == 1
        assert YamlFileStore(tmp_path / "dreams.yaml").get("description49") == "Dream 49"

    def test_batch_keeps_order_for_repeated_keys(self, tmp_path):
        store = YamlFileStore(tmp_path / "dreams.yaml")
        apply_writes(store, [StoreWrite(key="a", value=1), StoreWrite(key="a", value=2)])

        assert YamlFileStore(tmp_path / "dreams.yaml").get("a") == 2

    def test_failed_flush_fails_every_key_and_retry_reflushes(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = YamlFileStore(blocker / "dreams.yaml")
        writes = [StoreWrite(key=k, value=k) for k in ("a", "b", "c")]

        report = apply_writes(store, writes)

        assert report.failed_writes == writes
        assert all(isinstance(f.error.cause, OSError) for f in report.failures)
        assert store.keys() == []

        blocker.unlink()
        retried = report.retry(store)

        assert retried.ok
        assert YamlFileStore(blocker / "dreams.yaml").keys() == ["a", "b", "c"]

    def test_empty_batch_does_not_touch_file(self, tmp_path):
        path = tmp_path / "dreams.yaml"
        report = apply_writes(YamlFileStore(path), [])

        assert report.ok
        assert not path.exists()


class TestHostBackendErrors:
    """Backends raising arbitrary exceptions still yield a per-key report."""

    def test_os_error_recorded_and_batch_continues(self, encoder, single_dream_model, dream_two):
        from dreamlist.core.diff import diff_models

        store = OSErrorStore({"description0"})
        writes = encoder.encode(diff_models(single_dream_model, single_dream_model.append(dream_two)), True).writes

        report = apply_writes(store, writes)

        assert store.attempts == [write.key for write in writes]
        assert [w.key for w in report.failed_writes] == ["description0"]
        assert len(report.applied) == len(writes) - 1
        error = report.failures[0].error
        assert isinstance(error, StoreWriteError)
        assert error.key == "description0"
        assert isinstance(error.cause, OSError)

    def test_os_error_key_retryable(self):
        store = OSErrorStore({"b"})
        report = apply_writes(store, [StoreWrite(key=k, value=k) for k in ("a", "b", "c")])

        store.failing_keys.clear()
        assert report.retry(store).ok
        assert store.get("b") == "b"

    def test_set_many_raising_fails_whole_batch(self):
        writes = [StoreWrite(key=k, value=1) for k in ("a", "b")]
        report = apply_writes(BrokenBatchStore(), writes)

        assert report.failed_writes == writes
        assert isinstance(report.failures[0].error.cause, ConnectionError)
