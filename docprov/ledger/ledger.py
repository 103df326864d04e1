import math
import secrets
import threading
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from types import MappingProxyType

from docprov.exceptions import InvalidInputError
from docprov.ledger.exceptions import DuplicateRecordError
from docprov.ledger.merkle import build_merkle_batch, compute_merkle_root
from docprov.ledger.models import (
    DocumentRecord,
    LedgerStats,
    MerkleBatch,
    RegistryPage,
    VerificationResult,
)
from docprov.logging.logger import Log
from docprov.signals.base import BaseSignalProvider

DUPLICATE_POLICIES = ("reject", "supersede")


class Ledger:
    """In-memory, single-writer, append-only registry of document records.

    Records live in an ordered log keyed by sequence number; a second index
    maps each content hash to the sequence number of its current record.
    Every mutation and every read snapshot is taken under one lock, and a
    record is fully built before it is published to either index.
    """

    def __init__(
        self,
        signals: BaseSignalProvider,
        *,
        network: str = "docprov-simulated",
        initial_sequence: int = 1_000_000,
        duplicate_policy: str = "reject",
    ) -> None:
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unknown duplicate policy '{duplicate_policy}'. "
                f"Choose from: {list(DUPLICATE_POLICIES)}"
            )
        self._signals = signals
        self._network = network
        self._duplicate_policy = duplicate_policy
        self._next_sequence = initial_sequence
        self._log: dict[int, DocumentRecord] = {}
        self._by_hash: dict[str, int] = {}
        self._lock = threading.Lock()

    def register(
        self,
        issuer: str,
        document_type: str,
        content_hash: str,
        storage_pointer: str,
        metadata: Mapping[str, object] | None = None,
        timestamp: datetime | None = None,
    ) -> DocumentRecord:
        """Append a new record for content_hash.

        Raises:
            InvalidInputError: if a required field is missing or blank
                or timestamp is not a datetime. A naive timestamp is taken as UTC.
            DuplicateRecordError: if the hash is already registered and the
                ledger rejects duplicates.
        """
        _require_text("issuer", issuer)
        _require_text("document_type", document_type)
        _require_text("content_hash", content_hash)
        _require_text("storage_pointer", storage_pointer)
        frozen_metadata = MappingProxyType(dict(metadata or {}))
        when = _as_utc(timestamp) if timestamp is not None else datetime.now(timezone.utc)
        confirmations = self._signals.confirmations()

        with self._lock:
            if content_hash in self._by_hash and self._duplicate_policy == "reject":
                raise DuplicateRecordError(
                    f"Content hash {content_hash} is already registered"
                )
            record = DocumentRecord(
                content_hash=content_hash,
                transaction_id=secrets.token_hex(32),
                sequence_number=self._next_sequence,
                issuer=issuer,
                document_type=document_type,
                storage_pointer=storage_pointer,
                metadata=frozen_metadata,
                timestamp=when,
                confirmations=confirmations,
            )
            self._log[record.sequence_number] = record
            self._by_hash[content_hash] = record.sequence_number
            self._next_sequence += 1

        Log.info(
            "Registered document",
            content_hash=content_hash,
            issuer=issuer,
            sequence=record.sequence_number,
        )
        return record

    def verify(self, content_hash: str) -> VerificationResult:
        with self._lock:
            sequence = self._by_hash.get(content_hash)
            record = self._log[sequence] if sequence is not None else None
        if record is None:
            return VerificationResult(
                exists=False,
                message="Document not found in registry",
            )
        return VerificationResult(exists=True, record=record, message="Document registered")

    def list_records(
        self,
        page: int = 1,
        page_size: int = 20,
        filter_text: str | None = None,
    ) -> RegistryPage:
        """Return one page of current records, newest first.

        The filter is a case-sensitive substring match over issuer, document
        type and content hash.
        """
        if page < 1:
            raise InvalidInputError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise InvalidInputError(f"page_size must be >= 1, got {page_size}")

        records = self._current_records()
        if filter_text:
            records = [
                r
                for r in records
                if filter_text in r.issuer
                or filter_text in r.document_type
                or filter_text in r.content_hash
            ]
        records.sort(key=lambda r: (r.timestamp, r.sequence_number), reverse=True)

        total = len(records)
        start = (page - 1) * page_size
        return RegistryPage(
            records=records[start : start + page_size],
            page=page,
            total_pages=math.ceil(total / page_size),
            total=total,
        )

    def history(self) -> list[DocumentRecord]:
        """Every appended record in sequence order, superseded ones included."""
        with self._lock:
            return [self._log[seq] for seq in sorted(self._log)]

    def stats(self) -> LedgerStats:
        with self._lock:
            current = [self._log[seq] for seq in self._by_hash.values()]
            history = [self._log[seq] for seq in sorted(self._log)]
            next_sequence = self._next_sequence

        average = (
            sum(r.confirmations for r in history) / len(history) if history else 0.0
        )
        return LedgerStats(
            total_documents=len(current),
            current_sequence=next_sequence,
            network=self._network,
            average_confirmations=average,
            last_registration=max((r.timestamp for r in history), default=None),
            head_root=(
                compute_merkle_root([r.to_dict() for r in history]) if history else None
            ),
        )

    def compute_merkle_root(self, transactions: Sequence[Mapping[str, object]]) -> str:
        return compute_merkle_root(transactions)

    def batch(self, start_sequence: int, end_sequence: int) -> MerkleBatch:
        """Merkle batch over records whose sequence lies in [start, end]."""
        if end_sequence < start_sequence:
            raise InvalidInputError(
                f"end_sequence {end_sequence} precedes start_sequence {start_sequence}"
            )
        records = [
            r
            for r in self.history()
            if start_sequence <= r.sequence_number <= end_sequence
        ]
        return build_merkle_batch([r.to_dict() for r in records])

    def _current_records(self) -> list[DocumentRecord]:
        with self._lock:
            return [self._log[seq] for seq in self._by_hash.values()]


def _require_text(name: str, value: object) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} is required")


def _as_utc(timestamp: object) -> datetime:
    if not isinstance(timestamp, datetime):
        raise InvalidInputError(
            f"timestamp must be a datetime, got {type(timestamp).__name__}"
        )
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp
