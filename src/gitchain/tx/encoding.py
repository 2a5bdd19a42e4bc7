"""
Canonical payload encoding.

Transactions are serialized with canonical CBOR so that the same logical
payload always produces the same bytes, and therefore the same SHA-512
digest in the transaction header.
"""

from typing import Any

import cbor2
import structlog

from gitchain.errors import EncodingError

logger = structlog.get_logger(__name__)


def encode_payload(transaction: Any) -> bytes:
    """
    Encode a transaction payload to canonical CBOR.
    
    Map keys are sorted and numbers use their shortest form, so key
    insertion order does not affect the output.
    
    Args:
        transaction: The payload structure (usually a dict)
        
    Returns:
        Encoded payload bytes
        
    Raises:
        EncodingError: If the payload holds values CBOR cannot represent
    """
    try:
        return cbor2.dumps(transaction, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        logger.error("payload_encode_failed", error=str(e))
        raise EncodingError(f"Cannot encode transaction payload: {e}") from e


def decode_payload(data: bytes) -> Any:
    """
    Decode canonical CBOR payload bytes.
    
    Raises:
        EncodingError: If the bytes are not a single well-formed CBOR item
    """
    try:
        return cbor2.loads(data)
    except (cbor2.CBORDecodeError, TypeError, ValueError) as e:
        raise EncodingError(f"Cannot decode transaction payload: {e}") from e
