"""
Transaction and batch header construction.

Headers are the signed part of every transaction and batch. Their bytes
must match the ledger's protobuf encoding exactly for signatures to verify.
"""

import hashlib
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from gitchain.errors import TransactionBuildError
from gitchain.tx import schema

# Transaction family served by the ledger's transaction processor
FAMILY_NAME = "gitchain"
FAMILY_VERSION = "0.1"


def payload_digest(payload_bytes: bytes) -> str:
    """Lowercase hex SHA-512 of the encoded payload."""
    return hashlib.sha512(payload_bytes).hexdigest()


def transaction_addresses(transaction: Mapping[str, Any]) -> Tuple[List[str], List[str]]:
    """
    Read the declared state addresses of a transaction.
    
    Args:
        transaction: Logical transaction, optionally with ``meta.inputs``
            and ``meta.outputs``
            
    Returns:
        (inputs, outputs), each an empty list when not declared
        
    Raises:
        TransactionBuildError: If ``meta`` is not a mapping or an address
            list is not a list of strings
    """
    if not isinstance(transaction, Mapping):
        raise TransactionBuildError("Transaction must be a mapping")
    
    meta = transaction.get("meta") or {}
    if not isinstance(meta, Mapping):
        raise TransactionBuildError(f"Transaction meta must be a mapping, got {type(meta).__name__}")
    
    return _address_list(meta, "inputs"), _address_list(meta, "outputs")


def _address_list(meta: Mapping[str, Any], key: str) -> List[str]:
    addresses = meta.get(key) or []
    if not isinstance(addresses, (list, tuple)):
        raise TransactionBuildError(f"meta.{key} must be a list of addresses")
    for address in addresses:
        if not isinstance(address, str):
            raise TransactionBuildError(f"meta.{key} holds a non-string address: {address!r}")
    return list(addresses)


def build_transaction_header(
    payload_bytes: bytes,
    inputs: Optional[Iterable[str]],
    outputs: Optional[Iterable[str]],
    signer_public_key: str,
    batcher_public_key: Optional[str] = None,
    nonce: str = "",
) -> bytes:
    """
    Build the serialized header for a transaction.
    
    Args:
        payload_bytes: The encoded payload the header commits to
        inputs: State addresses the transaction reads, in order
        outputs: State addresses the transaction writes, in order
        signer_public_key: Hex public key of the transaction signer
        batcher_public_key: Hex public key of the batch signer.
            Defaults to the transaction signer (single-signer batches).
        nonce: Optional nonce to make otherwise identical transactions unique
        
    Returns:
        Header bytes ready to be signed
    """
    header = schema.TransactionHeader(
        family_name=FAMILY_NAME,
        family_version=FAMILY_VERSION,
        inputs=list(inputs or []),
        outputs=list(outputs or []),
        signer_public_key=signer_public_key,
        batcher_public_key=batcher_public_key or signer_public_key,
        dependencies=[],
        payload_sha512=payload_digest(payload_bytes),
        nonce=nonce,
    )
    return schema.serialize(header)


def build_batch_header(signer_public_key: str, transaction_ids: Iterable[str]) -> bytes:
    """
    Build the serialized header for a batch.
    
    ``transaction_ids`` are the header signatures of the batch's
    transactions, in the order the transactions appear in the batch.
    """
    header = schema.BatchHeader(
        signer_public_key=signer_public_key,
        transaction_ids=list(transaction_ids),
    )
    return schema.serialize(header)
