import base64
import hashlib
import threading
from collections.abc import Mapping

from docprov.storage.base import BaseContentBackend, BaseObjectBackend
from docprov.storage.exceptions import ContentNotFoundError
from docprov.storage.models import RemoteStats


def memory_content_address(data: bytes) -> str:
    """CIDv1-style address: multibase 'b' + base32 of a sha2-256 multihash."""
    multihash = b"\x12\x20" + hashlib.sha256(data).digest()
    encoded = base64.b32encode(b"\x01\x55" + multihash).decode("ascii")
    return "b" + encoded.lower().rstrip("=")


class MemoryContentBackend(BaseContentBackend):
    """Process-local content-addressed store for development and tests."""

    kind = "memory-content"

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._pins: set[str] = set()
        self._lock = threading.Lock()

    def add(self, data: bytes, *, pin: bool = True) -> str:
        address = memory_content_address(data)
        with self._lock:
            self._blobs[address] = bytes(data)
            if pin:
                self._pins.add(address)
        return address

    def cat(self, content_address: str) -> bytes:
        with self._lock:
            data = self._blobs.get(content_address)
        if data is None:
            raise ContentNotFoundError(f"{content_address} not found in memory store")
        return data

    def pin(self, content_address: str) -> None:
        with self._lock:
            if content_address not in self._blobs:
                raise ContentNotFoundError(f"{content_address} not found in memory store")
            self._pins.add(content_address)

    def unpin(self, content_address: str) -> None:
        with self._lock:
            if content_address not in self._pins:
                raise ContentNotFoundError(f"{content_address} is not pinned")
            self._pins.discard(content_address)
            # unpinned blobs are collected immediately
            self._blobs.pop(content_address, None)

    def is_pinned(self, content_address: str) -> bool:
        with self._lock:
            return content_address in self._pins


class MemoryObjectBackend(BaseObjectBackend):
    """Process-local object store for development and tests."""

    kind = "memory-object"

    def __init__(self) -> None:
        self._objects: dict[str, tuple[bytes, dict[str, str]]] = {}
        self._lock = threading.Lock()

    def put_object(self, key: str, data: bytes, metadata: Mapping[str, str]) -> str:
        with self._lock:
            self._objects[key] = (bytes(data), dict(metadata))
        return f"memory://{key}"

    def get_object(self, key: str) -> tuple[bytes, dict[str, str]]:
        with self._lock:
            entry = self._objects.get(key)
        if entry is None:
            raise ContentNotFoundError(f"Object {key} not found")
        data, metadata = entry
        return data, dict(metadata)

    def list_keys(self, prefix: str) -> list[str]:
        with self._lock:
            return sorted(k for k in self._objects if k.startswith(prefix))

    def delete_objects(self, keys: list[str]) -> None:
        with self._lock:
            for key in keys:
                self._objects.pop(key, None)

    def stats(self) -> RemoteStats:
        with self._lock:
            sizes = [len(data) for data, _ in self._objects.values()]
        return RemoteStats(object_count=len(sizes), total_size=sum(sizes))
