from docprov.ledger.ledger import Ledger
from docprov.ledger.merkle import build_merkle_batch, compute_merkle_root
from docprov.ledger.models import DocumentRecord, RegistryPage, VerificationResult

__all__ = [
    "DocumentRecord",
    "Ledger",
    "RegistryPage",
    "VerificationResult",
    "build_merkle_batch",
    "compute_merkle_root",
]
