import dataclasses
import threading

from docprov.storage.models import StorageLocation, StorageObject


class StorageIndex:
    """Thread-safe local index of known objects, keyed by content address."""

    def __init__(self) -> None:
        self._objects: dict[str, StorageObject] = {}
        self._lock = threading.Lock()

    def upsert(self, obj: StorageObject) -> None:
        with self._lock:
            self._objects[obj.content_address] = obj

    def get(self, content_address: str) -> StorageObject | None:
        with self._lock:
            return self._objects.get(content_address)

    def add_location(self, content_address: str, location: StorageLocation) -> None:
        with self._lock:
            obj = self._objects.get(content_address)
            if obj is None or location in obj.locations:
                return
            self._objects[content_address] = dataclasses.replace(
                obj, locations=(*obj.locations, location)
            )

    def mark_pinned(self, content_address: str) -> None:
        with self._lock:
            obj = self._objects.get(content_address)
            if obj is not None:
                self._objects[content_address] = dataclasses.replace(obj, pinned=True)

    def remove(self, content_address: str) -> StorageObject | None:
        with self._lock:
            return self._objects.pop(content_address, None)

    def snapshot(self) -> list[StorageObject]:
        with self._lock:
            return list(self._objects.values())
