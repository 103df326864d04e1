import hashlib
import hmac
import os
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, wait

from docprov.analysis.analyzer import DocumentAnalyzer
from docprov.analysis.exceptions import AnalysisError
from docprov.analysis.factory import AnalyzerFactory
from docprov.analysis.formats import PDF, normalize_format
from docprov.classifier.classifier import ForgeryClassifier
from docprov.classifier.factory import ClassifierFactory
from docprov.classifier.models import ClassifierResult
from docprov.config.settings import Settings
from docprov.decision.policy import DecisionPolicy
from docprov.exceptions import InvalidInputError, NotFoundError
from docprov.ledger.ledger import Ledger
from docprov.ledger.models import LedgerStats, RegistryPage, VerificationResult
from docprov.logging.logger import Log
from docprov.ocr.factory import TextRecognizerFactory
from docprov.pdf.base import BasePdfInspector
from docprov.pdf.factory import PdfInspectorFactory
from docprov.service.models import RegistrationReceipt, VerificationReport
from docprov.signals.factory import SignalProviderFactory
from docprov.storage.factory import StorageFactory
from docprov.storage.models import StorageStats
from docprov.storage.store import RedundantStore


def content_hash_of(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class ProvenanceService:
    """Composes storage, ledger, analysis, classification and the decision policy.

    Registration: store -> ledger.
    Verification: ledger lookup + analysis + classification -> decision.
    """

    def __init__(
        self,
        ledger: Ledger,
        store: RedundantStore,
        analyzer: DocumentAnalyzer,
        classifier: ForgeryClassifier,
        pdf_inspector: BasePdfInspector,
        policy: DecisionPolicy,
        *,
        workers: int,
        analysis_timeout_seconds: float,
    ) -> None:
        self._ledger = ledger
        self._store = store
        self._analyzer = analyzer
        self._classifier = classifier
        self._pdf_inspector = pdf_inspector
        self._policy = policy
        self._timeout = analysis_timeout_seconds
        self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="docprov-analysis")

    def register_document(
        self,
        data: bytes,
        issuer: str,
        document_type: str,
        metadata: Mapping[str, object] | None = None,
        content_hash: str | None = None,
    ) -> RegistrationReceipt:
        """Store the bytes and bind their hash to the issuer in the ledger."""
        if not issuer or not document_type:
            raise InvalidInputError("issuer and document_type are required")
        content_hash = self._resolve_hash(data, content_hash)
        address = self._store.put(data)
        record = self._ledger.register(
            issuer=issuer,
            document_type=document_type,
            content_hash=content_hash,
            storage_pointer=address,
            metadata=metadata,
        )
        return RegistrationReceipt(
            transaction_id=record.transaction_id,
            content_hash=content_hash,
            content_address=address,
            sequence_number=record.sequence_number,
        )

    def verify_document(
        self,
        data: bytes,
        content_hash: str | None = None,
        format_hint: str | None = None,
    ) -> VerificationReport:
        """Judge the bytes against the ledger, the analyzers and the classifier."""
        content_hash = self._resolve_hash(data, content_hash)
        fmt = normalize_format(format_hint, data)
        Log.info(f"Verifying {content_hash} ({fmt or 'image'})")

        analysis_future = self._pool.submit(self._analyzer.analyze, data, fmt)
        classify_future = self._pool.submit(self._classify, data, fmt)
        lookup = self._ledger.verify(content_hash)

        _, not_done = wait([analysis_future, classify_future], timeout=self._timeout)
        if not_done:
            for future in not_done:
                future.cancel()
            raise AnalysisError(
                f"Analysis of {content_hash} exceeded {self._timeout:g} seconds"
            )
        analysis = analysis_future.result()
        classification = classify_future.result()

        decision = self._policy.decide(lookup, analysis, classification)
        Log.info(
            "Verification complete",
            content_hash=content_hash,
            authentic=decision.authentic,
            score=f"{decision.composite_score:g}",
        )
        return VerificationReport(
            authentic=decision.authentic,
            composite_score=decision.composite_score,
            content_hash=content_hash,
            anomalies=list(analysis.findings),
            flags=list(classification.flags),
            ledger_record=lookup.record,
            analysis=analysis,
            classification=classification,
            rationale=decision.rationale,
        )

    def verify_registered(
        self,
        content_hash: str,
        format_hint: str | None = None,
    ) -> VerificationReport:
        """Fetch a registered document from storage and verify it.

        Raises:
            NotFoundError: if the hash is unknown or its blob is gone.
        """
        lookup = self._ledger.verify(content_hash)
        if lookup.record is None:
            raise NotFoundError(f"Content hash {content_hash} is not registered")
        data = self._store.get(lookup.record.storage_pointer)
        return self.verify_document(data, content_hash, format_hint)

    def lookup(self, content_hash: str) -> VerificationResult:
        return self._ledger.verify(content_hash)

    def list_registry(
        self,
        page: int = 1,
        page_size: int = 20,
        filter_text: str | None = None,
    ) -> RegistryPage:
        return self._ledger.list_records(page, page_size, filter_text)

    def ledger_stats(self) -> LedgerStats:
        return self._ledger.stats()

    def storage_stats(self) -> StorageStats:
        return self._store.stats()

    def close(self) -> None:
        self._pool.shutdown(wait=True)
        self._store.close()

    def _classify(self, data: bytes, fmt: str) -> ClassifierResult:
        if fmt == PDF:
            data = self._pdf_inspector.render_first_page(data)
        return self._classifier.classify(data)

    @staticmethod
    def _resolve_hash(data: bytes, content_hash: str | None) -> str:
        if not data:
            raise InvalidInputError("Document content is empty")
        actual = content_hash_of(data)
        if content_hash is not None and not hmac.compare_digest(
            actual, content_hash.strip().lower()
        ):
            raise InvalidInputError("Content hash does not match the supplied bytes")
        return actual


def build_service(settings: Settings) -> ProvenanceService:
    """Build a ProvenanceService with all required adapters."""
    signals = SignalProviderFactory.create(settings)
    ledger = Ledger(
        signals,
        network=settings.ledger_network,
        initial_sequence=settings.ledger_initial_sequence,
        duplicate_policy=settings.ledger_duplicate_policy,
    )
    store = StorageFactory.create(settings)
    inspector = PdfInspectorFactory.create(settings)
    recognizer = TextRecognizerFactory.create(settings)
    analyzer = AnalyzerFactory.create(settings, inspector, recognizer, signals)
    classifier = ClassifierFactory.create(settings)
    return ProvenanceService(
        ledger=ledger,
        store=store,
        analyzer=analyzer,
        classifier=classifier,
        pdf_inspector=inspector,
        policy=DecisionPolicy.from_settings(settings),
        workers=settings.analysis_workers or os.cpu_count() or 1,
        analysis_timeout_seconds=settings.analysis_timeout_seconds,
    )
