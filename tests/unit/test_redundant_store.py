import hashlib
import threading
from collections.abc import Generator, Mapping
from unittest.mock import MagicMock

import pytest

from docprov.exceptions import BackendUnavailableError, InvalidInputError, NotFoundError
from docprov.storage.base import BaseContentBackend, BaseObjectBackend
from docprov.storage.exceptions import ContentNotFoundError, StorageUnavailableError
from docprov.storage.memory_backend import MemoryContentBackend, MemoryObjectBackend
from docprov.storage.models import DeletionReport
from docprov.storage.store import RedundantStore, fallback_address, mirror_prefix

DATA = b"%PDF-1.7 registered passport scan"


def _down_primary() -> MagicMock:
    backend = MagicMock(spec=BaseContentBackend)
    backend.kind = "ipfs"
    backend.add.side_effect = StorageUnavailableError("ipfs unreachable")
    backend.cat.side_effect = StorageUnavailableError("ipfs unreachable")
    backend.pin.side_effect = StorageUnavailableError("ipfs unreachable")
    backend.unpin.side_effect = StorageUnavailableError("ipfs unreachable")
    return backend


def _down_secondary() -> MagicMock:
    backend = MagicMock(spec=BaseObjectBackend)
    backend.kind = "s3"
    backend.put_object.side_effect = StorageUnavailableError("s3 unreachable")
    backend.list_keys.side_effect = StorageUnavailableError("s3 unreachable")
    backend.stats.side_effect = StorageUnavailableError("s3 unreachable")
    return backend


@pytest.fixture()
def primary() -> MemoryContentBackend:
    return MemoryContentBackend()


@pytest.fixture()
def secondary() -> MemoryObjectBackend:
    return MemoryObjectBackend()


@pytest.fixture()
def store(
    primary: MemoryContentBackend, secondary: MemoryObjectBackend
) -> Generator[RedundantStore, None, None]:
    s = RedundantStore(primary, secondary, max_workers=2)
    yield s
    s.close()


class TestPut:
    def test_put_returns_primary_address(
        self, store: RedundantStore, primary: MemoryContentBackend
    ) -> None:
        address = store.put(DATA)
        assert primary.cat(address) == DATA
        assert primary.is_pinned(address)

    def test_put_mirrors_with_checksum_metadata(
        self, store: RedundantStore, secondary: MemoryObjectBackend
    ) -> None:
        address = store.put(DATA)
        assert store.drain(timeout=5)

        keys = secondary.list_keys(mirror_prefix(address))
        assert len(keys) == 1
        data, metadata = secondary.get_object(keys[0])
        assert data == DATA
        assert metadata["checksum-sha256"] == hashlib.sha256(DATA).hexdigest()
        assert metadata["content-address"] == address
        assert "upload-timestamp" in metadata

    def test_index_records_both_locations(self, store: RedundantStore) -> None:
        address = store.put(DATA)
        store.drain(timeout=5)

        obj = store.describe(address)

        assert obj is not None
        assert obj.byte_size == len(DATA)
        assert obj.pinned is True
        assert obj.backend_kinds() == ["memory-content", "memory-object"]

    def test_same_bytes_same_address(self, store: RedundantStore) -> None:
        assert store.put(DATA) == store.put(DATA)

    def test_empty_content_rejected(self, store: RedundantStore) -> None:
        with pytest.raises(InvalidInputError):
            store.put(b"")

    def test_mirror_failure_does_not_fail_put(self, primary: MemoryContentBackend) -> None:
        store = RedundantStore(primary, _down_secondary())
        try:
            address = store.put(DATA)
            store.drain(timeout=5)

            assert address
            obj = store.describe(address)
            assert obj is not None
            assert len(obj.locations) == 1
            stats = store.stats()
            assert stats.primary.indexed_objects == 1
            assert stats.secondary.indexed_objects == 0
            assert stats.secondary.error is not None
        finally:
            store.close()

    def test_primary_down_uses_content_derived_address(
        self, secondary: MemoryObjectBackend
    ) -> None:
        store = RedundantStore(_down_primary(), secondary)
        try:
            address = store.put(DATA)

            assert address == fallback_address(DATA)
            assert address == "sha256-" + hashlib.sha256(DATA).hexdigest()
            obj = store.describe(address)
            assert obj is not None
            assert obj.pinned is False
            assert obj.backend_kinds() == ["memory-object"]
        finally:
            store.close()

    def test_fallback_address_is_stable(self, secondary: MemoryObjectBackend) -> None:
        store = RedundantStore(_down_primary(), secondary)
        try:
            assert store.put(DATA) == store.put(DATA)
        finally:
            store.close()

    def test_both_backends_down_raises(self) -> None:
        store = RedundantStore(_down_primary(), _down_secondary())
        try:
            with pytest.raises(BackendUnavailableError):
                store.put(DATA)
        finally:
            store.close()


class TestGet:
    def test_round_trip_from_primary(self, store: RedundantStore) -> None:
        address = store.put(DATA)
        assert store.get(address) == DATA

    def test_falls_back_to_mirror(
        self, store: RedundantStore, primary: MemoryContentBackend
    ) -> None:
        address = store.put(DATA)
        store.drain(timeout=5)
        primary.unpin(address)

        assert store.get(address) == DATA

    def test_round_trip_when_primary_was_down(self, secondary: MemoryObjectBackend) -> None:
        down = _down_primary()
        store = RedundantStore(down, secondary)
        try:
            address = store.put(DATA)
            assert store.get(address) == DATA
            down.cat.assert_not_called()
        finally:
            store.close()

    def test_missing_everywhere_raises_not_found(self, store: RedundantStore) -> None:
        with pytest.raises(NotFoundError):
            store.get("bafkunknown")

    def test_corrupt_mirror_is_rejected(
        self, store: RedundantStore, primary: MemoryContentBackend, secondary: MemoryObjectBackend
    ) -> None:
        address = store.put(DATA)
        store.drain(timeout=5)
        primary.unpin(address)
        key = secondary.list_keys(mirror_prefix(address))[0]
        _, metadata = secondary.get_object(key)
        secondary.put_object(key, b"tampered", metadata)

        with pytest.raises(ContentNotFoundError):
            store.get(address)


class TestPin:
    def test_pin_marks_index(self, secondary: MemoryObjectBackend) -> None:
        primary = MagicMock(spec=BaseContentBackend)
        primary.kind = "ipfs"
        primary.add.return_value = "bafyabc"
        primary.cat.return_value = DATA
        store = RedundantStore(primary, secondary)
        try:
            store.put(DATA)
            store.pin("bafyabc")
            primary.pin.assert_called_once_with("bafyabc")
        finally:
            store.close()

    def test_pin_failure_propagates(self, secondary: MemoryObjectBackend) -> None:
        store = RedundantStore(_down_primary(), secondary)
        try:
            with pytest.raises(BackendUnavailableError):
                store.pin("bafyabc")
        finally:
            store.close()


class TestDelete:
    def test_delete_removes_everywhere(
        self, store: RedundantStore, primary: MemoryContentBackend, secondary: MemoryObjectBackend
    ) -> None:
        address = store.put(DATA)
        store.drain(timeout=5)

        report = store.delete(address)

        assert report.success
        assert report.removed["memory-content"] == [address]
        assert len(report.removed["memory-object"]) == 1
        assert not primary.is_pinned(address)
        assert secondary.list_keys(mirror_prefix(address)) == []
        assert store.describe(address) is None

    def test_partial_failure_is_reported(self, secondary: MemoryObjectBackend) -> None:
        primary = MemoryContentBackend()
        store = RedundantStore(primary, secondary)
        try:
            address = store.put(DATA)
            store.drain(timeout=5)
            primary.unpin(address)

            report = store.delete(address)

            assert not report.success
            assert "memory-content" in report.errors
            assert "memory-object" in report.removed
            assert store.describe(address) is None
        finally:
            store.close()

    def test_both_failures_are_reported(self) -> None:
        store = RedundantStore(_down_primary(), _down_secondary())
        try:
            report = store.delete("bafyabc")
            assert set(report.errors) == {"ipfs", "s3"}
        finally:
            store.close()


class GatedObjectBackend(MemoryObjectBackend):
    """Object store whose writes wait until the test opens the gate."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.gate = threading.Event()

    def put_object(self, key: str, data: bytes, metadata: Mapping[str, str]) -> str:
        self.entered.set()
        assert self.gate.wait(timeout=5)
        return super().put_object(key, data, metadata)


class TestDeleteWithPendingMirror:
    def test_delete_waits_for_running_mirror(self) -> None:
        secondary = GatedObjectBackend()
        store = RedundantStore(MemoryContentBackend(), secondary, max_workers=1)
        try:
            address = store.put(DATA)
            assert secondary.entered.wait(timeout=5)

            reports: list[DeletionReport] = []
            deleter = threading.Thread(target=lambda: reports.append(store.delete(address)))
            deleter.start()
            secondary.gate.set()
            deleter.join(timeout=5)

            assert store.drain(timeout=5)
            assert reports[0].success
            assert len(reports[0].removed[secondary.kind]) == 1
            assert secondary.list_keys(mirror_prefix(address)) == []
        finally:
            secondary.gate.set()
            store.close()

    def test_queued_mirror_is_cancelled(self) -> None:
        secondary = GatedObjectBackend()
        store = RedundantStore(MemoryContentBackend(), secondary, max_workers=1)
        try:
            store.put(b"first document occupies the only worker")
            assert secondary.entered.wait(timeout=5)
            address = store.put(DATA)

            report = store.delete(address)
            secondary.gate.set()
            assert store.drain(timeout=5)

            assert report.success
            assert secondary.list_keys(mirror_prefix(address)) == []
        finally:
            secondary.gate.set()
            store.close()

    def test_mirror_outlasting_wait_is_reported(self) -> None:
        secondary = GatedObjectBackend()
        store = RedundantStore(
            MemoryContentBackend(), secondary, max_workers=1, delete_wait_seconds=0.05
        )
        try:
            address = store.put(DATA)
            assert secondary.entered.wait(timeout=5)

            report = store.delete(address)

            assert not report.success
            assert "still in progress" in report.errors[secondary.kind]
        finally:
            secondary.gate.set()
            store.close()


class TestStats:
    def test_counts_and_sizes(self, store: RedundantStore) -> None:
        store.put(DATA)
        store.put(b"second document")
        store.drain(timeout=5)

        stats = store.stats()

        assert stats.cached_objects == 2
        assert stats.cached_bytes == len(DATA) + len(b"second document")
        assert stats.primary.indexed_objects == 2
        assert stats.primary.pinned_objects == 2
        assert stats.secondary.indexed_objects == 2
        assert stats.secondary.remote is not None
        assert stats.secondary.remote.object_count == 2
        assert stats.average_object_size == stats.cached_bytes / 2

    def test_empty_store(self, store: RedundantStore) -> None:
        stats = store.stats()
        assert stats.cached_objects == 0
        assert stats.average_object_size == 0.0


class TestClose:
    def test_close_releases_primary_client(self) -> None:
        primary = MagicMock(spec=BaseContentBackend)
        primary.kind = "ipfs"
        RedundantStore(primary, MemoryObjectBackend()).close()
        primary.close.assert_called_once()
