"""
Transaction Builder - constructs signed transactions and batches.

The ``assemble_*`` functions are pure composition of already-built headers,
signatures and payloads. ``TransactionBuilder`` drives the full pipeline for
one signer: encode, build header, sign, assemble.
"""

from typing import Any, Iterable, List, Mapping, Sequence

import structlog

from gitchain.errors import GitchainError, TransactionBuildError
from gitchain.tx import schema
from gitchain.tx.encoding import encode_payload
from gitchain.tx.header import (
    build_batch_header,
    build_transaction_header,
    transaction_addresses,
)
from gitchain.tx.signer import TransactionSigner

logger = structlog.get_logger(__name__)


def assemble_transaction(header: bytes, signature: str, payload: bytes):
    """Compose a wire transaction from its signed header and payload."""
    return schema.Transaction(
        header=header,
        header_signature=signature,
        payload=payload,
    )


def assemble_batch(header: bytes, signature: str, transactions: Iterable, trace: bool = False):
    """Compose a wire batch from its signed header and transactions."""
    return schema.Batch(
        header=header,
        header_signature=signature,
        transactions=list(transactions),
        trace=trace,
    )


def encode_batch_list(batches: Iterable) -> bytes:
    """Serialize batches into the body POSTed to the ledger."""
    return schema.serialize(schema.BatchList(batches=list(batches)))


class TransactionBuilder:
    """
    Builds and signs transactions and batches for a single signer.
    
    Every transaction header and every batch header is signed by the same
    key, and that key is also recorded as the batcher.
    """
    
    def __init__(self, signer: TransactionSigner, trace: bool = False):
        """
        Initialize the transaction builder.
        
        Args:
            signer: Signer for transaction and batch headers
            trace: Ask the validator to trace batches built here
        """
        self.signer = signer
        self.trace = trace
    
    def build_transaction(self, transaction: Mapping[str, Any], nonce: str = ""):
        """
        Encode, sign and assemble one transaction.
        
        Args:
            transaction: Logical transaction (already preprocessed)
            nonce: Optional header nonce
            
        Returns:
            Signed wire transaction
        """
        payload = encode_payload(transaction)
        inputs, outputs = transaction_addresses(transaction)
        
        header = build_transaction_header(
            payload,
            inputs,
            outputs,
            signer_public_key=self.signer.public_key,
            nonce=nonce,
        )
        signature = self.signer.sign(header)
        
        logger.debug(
            "transaction_signed",
            transaction_type=transaction.get("type"),
            header_signature=signature[:16] + "...",
            inputs=len(inputs),
            outputs=len(outputs),
        )
        
        return assemble_transaction(header, signature, payload)
    
    def build_batch(self, transactions: Sequence):
        """
        Sign a batch over already-signed wire transactions.
        
        Raises:
            TransactionBuildError: If ``transactions`` is empty
        """
        if not transactions:
            raise TransactionBuildError("Cannot build an empty batch")
        
        transaction_ids = [txn.header_signature for txn in transactions]
        header = build_batch_header(self.signer.public_key, transaction_ids)
        signature = self.signer.sign(header)
        
        logger.debug(
            "batch_signed",
            batch_id=signature[:16] + "...",
            transaction_count=len(transaction_ids),
        )
        
        return assemble_batch(header, signature, transactions, trace=self.trace)
    
    def build_batch_list(self, transactions: Iterable[Mapping[str, Any]]) -> bytes:
        """
        Build the POST body for one batch holding the given transactions.
        
        Args:
            transactions: Logical transactions, in batch order
            
        Returns:
            Serialized batch list
            
        Raises:
            TransactionBuildError: If a transaction is malformed or
                construction fails unexpectedly
        """
        try:
            signed: List = [self.build_transaction(txn) for txn in transactions]
            batch = self.build_batch(signed)
            body = encode_batch_list([batch])
        except GitchainError:
            raise
        except Exception as e:
            logger.error("batch_build_failed", error=str(e))
            raise TransactionBuildError(f"Failed to build batch: {e}") from e
        
        logger.info(
            "batch_built",
            batch_id=batch.header_signature[:16] + "...",
            transaction_count=len(signed),
        )
        return body
