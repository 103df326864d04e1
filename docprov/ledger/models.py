from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class DocumentRecord:
    """One ledger entry binding a content hash to its issuer and storage pointer."""

    content_hash: str
    transaction_id: str
    sequence_number: int
    issuer: str
    document_type: str
    storage_pointer: str
    metadata: Mapping[str, object]
    timestamp: datetime
    confirmations: int
    confirmed: bool = True

    def to_dict(self) -> dict[str, object]:
        return {
            "content_hash": self.content_hash,
            "transaction_id": self.transaction_id,
            "sequence_number": self.sequence_number,
            "issuer": self.issuer,
            "document_type": self.document_type,
            "storage_pointer": self.storage_pointer,
            "metadata": dict(self.metadata),
            "timestamp": self.timestamp.isoformat(),
            "confirmations": self.confirmations,
            "confirmed": self.confirmed,
        }


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a ledger lookup. An absent hash is a normal negative result."""

    exists: bool
    record: DocumentRecord | None = None
    message: str = ""


@dataclass(frozen=True)
class RegistryPage:
    records: list[DocumentRecord]
    page: int
    total_pages: int
    total: int


@dataclass(frozen=True)
class LedgerStats:
    total_documents: int
    current_sequence: int
    network: str
    average_confirmations: float
    last_registration: datetime | None = None
    head_root: str | None = None


@dataclass(frozen=True)
class MerkleBatch:
    """Ordered transaction hashes and the root digest committing to them."""

    transaction_hashes: list[str] = field(default_factory=list)
    root: str = ""
