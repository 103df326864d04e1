import hashlib
import json
import secrets
from collections.abc import Mapping, Sequence

from docprov.ledger.models import MerkleBatch


def _sha256_hex(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def canonical_json(transaction: Mapping[str, object]) -> str:
    """Serialize a transaction with sorted keys and compact separators."""
    return json.dumps(
        transaction,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def transaction_hash(transaction: Mapping[str, object]) -> str:
    return _sha256_hex(canonical_json(transaction))


def _combine_level(hashes: list[str]) -> list[str]:
    combined = []
    for i in range(0, len(hashes), 2):
        left = hashes[i]
        # odd level: the last hash pairs with itself
        right = hashes[i + 1] if i + 1 < len(hashes) else left
        combined.append(_sha256_hex(left + right))
    return combined


def build_merkle_batch(transactions: Sequence[Mapping[str, object]]) -> MerkleBatch:
    """Hash each transaction and fold the hashes pairwise into one root.

    An empty batch gets a random root. It is a placeholder only and commits
    to nothing.
    """
    if not transactions:
        return MerkleBatch(transaction_hashes=[], root=secrets.token_hex(32))

    leaves = [transaction_hash(tx) for tx in transactions]
    level = leaves
    while len(level) > 1:
        level = _combine_level(level)
    return MerkleBatch(transaction_hashes=leaves, root=level[0])


def compute_merkle_root(transactions: Sequence[Mapping[str, object]]) -> str:
    return build_merkle_batch(transactions).root
