"""
Transaction Signer - handles header signing.

Wraps a secp256k1 private key and signs header bytes the way the ledger's
validators verify them: ECDSA over SHA-256, RFC 6979 nonces, low-S
signatures encoded as 64-byte compact ``r || s`` hex.
"""

import hashlib
from typing import Optional

import structlog
from ecdsa import BadSignatureError, SECP256k1, SigningKey, VerifyingKey
from ecdsa.errors import MalformedPointError
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from gitchain.errors import PrivateKeyError

logger = structlog.get_logger(__name__)

PRIVATE_KEY_BYTES = 32


class TransactionSigner:
    """
    Signs transaction and batch headers with a single private key.
    
    The same key signs both the transaction header and the batch header,
    so the batcher public key always equals the signer public key.
    """
    
    def __init__(self, signing_key: SigningKey):
        """
        Initialize the signer.
        
        Args:
            signing_key: A secp256k1 signing key
        """
        self._signing_key = signing_key
        self._public_key = signing_key.get_verifying_key().to_string("compressed").hex()
    
    @classmethod
    def from_hex(cls, private_key_hex: str) -> "TransactionSigner":
        """
        Load a signer from a hex-encoded private key scalar.
        
        Args:
            private_key_hex: 64 hex characters
            
        Raises:
            PrivateKeyError: If the key is not hex, has the wrong length,
                or is outside the curve order
        """
        if not isinstance(private_key_hex, str):
            raise PrivateKeyError("Private key must be a hex string")
        
        try:
            key_bytes = bytes.fromhex(private_key_hex)
        except ValueError as e:
            raise PrivateKeyError(f"Private key is not valid hex: {e}") from e
        
        if len(key_bytes) != PRIVATE_KEY_BYTES:
            raise PrivateKeyError(
                f"Private key must be {PRIVATE_KEY_BYTES} bytes, got {len(key_bytes)}"
            )
        
        secret = int.from_bytes(key_bytes, "big")
        if not 0 < secret < SECP256k1.order:
            raise PrivateKeyError("Private key is out of range for secp256k1")
        
        return cls(SigningKey.from_string(key_bytes, curve=SECP256k1))
    
    @classmethod
    def generate(cls) -> "TransactionSigner":
        """Create a signer with a new random key."""
        return cls(SigningKey.generate(curve=SECP256k1))
    
    @property
    def public_key(self) -> str:
        """Compressed public key as hex."""
        return self._public_key
    
    @property
    def private_key_hex(self) -> str:
        return self._signing_key.to_string().hex()
    
    def sign(self, message: bytes) -> str:
        """
        Sign a message.
        
        Args:
            message: Header bytes to sign
            
        Returns:
            Compact signature as 128 hex characters
        """
        signature = self._signing_key.sign_deterministic(
            message,
            hashfunc=hashlib.sha256,
            sigencode=sigencode_string_canonize,
        )
        return signature.hex()


def verify(public_key_hex: str, message: bytes, signature_hex: str) -> bool:
    """
    Check a compact signature against a hex public key.
    
    Malformed keys or signatures verify as ``False``.
    """
    try:
        verifying_key = VerifyingKey.from_string(
            bytes.fromhex(public_key_hex), curve=SECP256k1
        )
        return verifying_key.verify(
            bytes.fromhex(signature_hex),
            message,
            hashfunc=hashlib.sha256,
            sigdecode=sigdecode_string,
        )
    except (BadSignatureError, MalformedPointError, ValueError):
        return False


def generate_private_key() -> str:
    """
    Generate a new random private key.
    
    WARNING: The key is not persisted anywhere.
    
    Returns:
        Hex-encoded private key
    """
    signer = TransactionSigner.generate()
    logger.debug("private_key_generated", public_key=signer.public_key[:16] + "...")
    return signer.private_key_hex


def load_signer(private_key: Optional[str]) -> TransactionSigner:
    """Load a signer, treating a missing key as malformed key material."""
    if not private_key:
        raise PrivateKeyError("No private key supplied")
    return TransactionSigner.from_hex(private_key)
