from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class StorageLocation:
    backend_kind: str
    location: str


@dataclass(frozen=True)
class StorageObject:
    """Local index entry for one stored blob."""

    content_address: str
    byte_size: int
    checksum: str
    locations: tuple[StorageLocation, ...]
    pinned: bool
    uploaded_at: datetime

    def backend_kinds(self) -> list[str]:
        return [loc.backend_kind for loc in self.locations]


@dataclass(frozen=True)
class RemoteStats:
    """Totals reported by a backend about its own contents."""

    object_count: int
    total_size: int


@dataclass(frozen=True)
class BackendStats:
    kind: str
    indexed_objects: int
    indexed_bytes: int
    pinned_objects: int = 0
    remote: RemoteStats | None = None
    error: str | None = None


@dataclass(frozen=True)
class StorageStats:
    primary: BackendStats
    secondary: BackendStats
    cached_objects: int
    cached_bytes: int

    @property
    def average_object_size(self) -> float:
        return self.cached_bytes / self.cached_objects if self.cached_objects else 0.0


@dataclass
class DeletionReport:
    """Per-backend outcome of a delete. Failures are listed, never dropped."""

    content_address: str
    removed: dict[str, list[str]] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors
