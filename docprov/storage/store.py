import hashlib
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone

from docprov.exceptions import InvalidInputError
from docprov.logging.logger import Log
from docprov.storage.base import BaseContentBackend, BaseObjectBackend
from docprov.storage.exceptions import (
    ChecksumMismatchError,
    ContentNotFoundError,
    StorageError,
    StorageUnavailableError,
)
from docprov.storage.index import StorageIndex
from docprov.storage.models import (
    BackendStats,
    DeletionReport,
    StorageLocation,
    StorageObject,
    StorageStats,
)

MIRROR_PREFIX = "documents"
FALLBACK_PREFIX = "sha256-"


def fallback_address(data: bytes) -> str:
    """Content-derived address used when the primary network is unreachable."""
    return FALLBACK_PREFIX + hashlib.sha256(data).hexdigest()


def mirror_prefix(content_address: str) -> str:
    return f"{MIRROR_PREFIX}/{content_address}/"


class RedundantStore:
    """Content-addressed blob store with write-through mirroring and read failover.

    put: primary (pinned) -> local index -> mirror copy in the background.
    get: primary -> secondary by content-address prefix.
    """

    def __init__(
        self,
        primary: BaseContentBackend,
        secondary: BaseObjectBackend,
        index: StorageIndex | None = None,
        max_workers: int = 4,
        delete_wait_seconds: float = 30.0,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._index = index if index is not None else StorageIndex()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="docprov-mirror"
        )
        self._delete_wait_seconds = delete_wait_seconds
        self._pending: dict[Future[None], str] = {}
        self._deleting: set[str] = set()
        self._pending_lock = threading.Lock()

    def put(self, data: bytes) -> str:
        """Persist data and return its content address.

        Raises:
            InvalidInputError: if data is empty.
            StorageUnavailableError: if neither backend accepted the bytes.
        """
        if not data:
            raise InvalidInputError("Cannot store empty content")
        checksum = hashlib.sha256(data).hexdigest()
        uploaded_at = datetime.now(timezone.utc)

        try:
            address = self._primary.add(data, pin=True)
        except StorageError as exc:
            Log.warning(f"Primary {self._primary.kind} upload failed, using mirror only: {exc}")
            return self._put_secondary_only(data, checksum, uploaded_at)

        self._index.upsert(
            StorageObject(
                content_address=address,
                byte_size=len(data),
                checksum=checksum,
                locations=(StorageLocation(self._primary.kind, address),),
                pinned=True,
                uploaded_at=uploaded_at,
            )
        )
        self._submit_mirror(address, data, checksum, uploaded_at)
        Log.info("Stored content", address=address, size=len(data))
        return address

    def get(self, content_address: str) -> bytes:
        """Read from the primary, falling back to the mirror.

        Raises:
            ContentNotFoundError: if no backend can serve the address.
        """
        if not content_address.startswith(FALLBACK_PREFIX):
            try:
                return self._primary.cat(content_address)
            except StorageError as exc:
                Log.warning(
                    f"Primary read of {content_address} failed, "
                    f"trying {self._secondary.kind}: {exc}"
                )
        try:
            return self._read_mirror(content_address)
        except StorageError as exc:
            raise ContentNotFoundError(
                f"{content_address} is not available on any backend: {exc}"
            ) from exc

    def pin(self, content_address: str) -> None:
        """Refresh retention on the primary backend."""
        self._primary.pin(content_address)
        self._index.mark_pinned(content_address)
        Log.info(f"Pinned {content_address} on {self._primary.kind}")

    def delete(self, content_address: str) -> DeletionReport:
        """Remove content_address from both backends and the index.

        Mirror writes still pending for the address are cancelled or waited
        for, up to delete_wait_seconds, before the secondary is listed. One
        that is still running after that is reported as a secondary error.
        """
        report = DeletionReport(content_address=content_address)
        with self._pending_lock:
            self._deleting.add(content_address)
            in_flight = [f for f, a in self._pending.items() if a == content_address]
        try:
            running = [f for f in in_flight if not f.cancel()]
            _, not_done = wait(running, timeout=self._delete_wait_seconds)

            if not content_address.startswith(FALLBACK_PREFIX):
                try:
                    self._primary.unpin(content_address)
                    report.removed[self._primary.kind] = [content_address]
                except StorageError as exc:
                    report.errors[self._primary.kind] = str(exc)

            if not_done:
                report.errors[self._secondary.kind] = (
                    f"{len(not_done)} mirror write(s) for {content_address} still in progress"
                )
            else:
                try:
                    keys = self._secondary.list_keys(mirror_prefix(content_address))
                    self._secondary.delete_objects(keys)
                    report.removed[self._secondary.kind] = keys
                except StorageError as exc:
                    report.errors[self._secondary.kind] = str(exc)

            self._index.remove(content_address)
        finally:
            with self._pending_lock:
                self._deleting.discard(content_address)
        if report.success:
            Log.info(f"Deleted {content_address} from all backends")
        else:
            Log.error(f"Partial delete of {content_address}", **report.errors)
        return report

    def describe(self, content_address: str) -> StorageObject | None:
        return self._index.get(content_address)

    def stats(self) -> StorageStats:
        objects = self._index.snapshot()
        remote = None
        error = None
        try:
            remote = self._secondary.stats()
        except StorageError as exc:
            error = str(exc)

        primary = [o for o in objects if self._primary.kind in o.backend_kinds()]
        secondary = [o for o in objects if self._secondary.kind in o.backend_kinds()]
        return StorageStats(
            primary=BackendStats(
                kind=self._primary.kind,
                indexed_objects=len(primary),
                indexed_bytes=sum(o.byte_size for o in primary),
                pinned_objects=sum(1 for o in primary if o.pinned),
            ),
            secondary=BackendStats(
                kind=self._secondary.kind,
                indexed_objects=len(secondary),
                indexed_bytes=sum(o.byte_size for o in secondary),
                remote=remote,
                error=error,
            ),
            cached_objects=len(objects),
            cached_bytes=sum(o.byte_size for o in objects),
        )

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight mirror writes. Returns False on timeout."""
        with self._pending_lock:
            pending = set(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self._primary.close()

    def _put_secondary_only(self, data: bytes, checksum: str, uploaded_at: datetime) -> str:
        address = fallback_address(data)
        try:
            location = self._write_mirror(address, data, checksum, uploaded_at)
        except StorageError as exc:
            raise StorageUnavailableError(
                f"No backend accepted content {address}: {exc}"
            ) from exc
        self._index.upsert(
            StorageObject(
                content_address=address,
                byte_size=len(data),
                checksum=checksum,
                locations=(StorageLocation(self._secondary.kind, location),),
                pinned=False,
                uploaded_at=uploaded_at,
            )
        )
        Log.info(f"Stored {len(data)} bytes as {address} on {self._secondary.kind} only")
        return address

    def _submit_mirror(
        self, address: str, data: bytes, checksum: str, uploaded_at: datetime
    ) -> None:
        with self._pending_lock:
            future = self._executor.submit(self._mirror, address, data, checksum, uploaded_at)
            self._pending[future] = address
        future.add_done_callback(self._mirror_done)

    def _mirror(self, address: str, data: bytes, checksum: str, uploaded_at: datetime) -> None:
        with self._pending_lock:
            if address in self._deleting:
                Log.info(f"Skipping mirror of {address}, it is being deleted")
                return
        try:
            location = self._write_mirror(address, data, checksum, uploaded_at)
        except StorageError as exc:
            Log.error(f"Mirror of {address} to {self._secondary.kind} failed: {exc}")
            return
        self._index.add_location(address, StorageLocation(self._secondary.kind, location))
        Log.debug(f"Mirrored {address} to {location}")

    def _mirror_done(self, future: Future[None]) -> None:
        with self._pending_lock:
            self._pending.pop(future, None)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            Log.error(f"Mirror task crashed: {exc!r}")

    def _write_mirror(
        self, address: str, data: bytes, checksum: str, uploaded_at: datetime
    ) -> str:
        return self._secondary.put_object(
            f"{mirror_prefix(address)}{checksum}",
            data,
            {
                "content-address": address,
                "upload-timestamp": uploaded_at.isoformat(),
                "checksum-sha256": checksum,
            },
        )

    def _read_mirror(self, content_address: str) -> bytes:
        keys = self._secondary.list_keys(mirror_prefix(content_address))
        if not keys:
            raise ContentNotFoundError(
                f"{content_address} not found on {self._secondary.kind}"
            )
        data, metadata = self._secondary.get_object(keys[0])
        expected = metadata.get("checksum-sha256")
        if expected and hashlib.sha256(data).hexdigest() != expected:
            raise ChecksumMismatchError(f"Mirrored copy of {content_address} is corrupt")
        return data
