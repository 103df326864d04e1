from abc import ABC, abstractmethod
from collections.abc import Mapping

from docprov.storage.models import RemoteStats


class BaseContentBackend(ABC):
    """Contract for the primary, content-addressed storage network."""

    kind: str = ""

    @abstractmethod
    def add(self, data: bytes, *, pin: bool = True) -> str:
        """Store data and return its content address.

        Raises:
            StorageUnavailableError: if the backend cannot be reached.
        """

    @abstractmethod
    def cat(self, content_address: str) -> bytes:
        """Return the bytes stored under content_address.

        Raises:
            ContentNotFoundError: if the address is unknown.
            StorageUnavailableError: if the backend cannot be reached.
        """

    @abstractmethod
    def pin(self, content_address: str) -> None:
        """Request durable retention for content_address."""

    @abstractmethod
    def unpin(self, content_address: str) -> None:
        """Release retention for content_address."""

    def close(self) -> None:
        """Release client resources. Backends without any keep the default."""


class BaseObjectBackend(ABC):
    """Contract for the secondary key/value object store used as a mirror."""

    kind: str = ""

    @abstractmethod
    def put_object(self, key: str, data: bytes, metadata: Mapping[str, str]) -> str:
        """Store data under key and return a location string for it."""

    @abstractmethod
    def get_object(self, key: str) -> tuple[bytes, dict[str, str]]:
        """Return the object body and its user metadata."""

    @abstractmethod
    def list_keys(self, prefix: str) -> list[str]:
        """Return keys starting with prefix, in lexical order."""

    @abstractmethod
    def delete_objects(self, keys: list[str]) -> None:
        """Delete every key in keys."""

    @abstractmethod
    def stats(self) -> RemoteStats:
        """Return object count and total size for the whole store."""
