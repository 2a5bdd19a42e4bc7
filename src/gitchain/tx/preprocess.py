"""
Per-type transaction preprocessing.

Applications register a ``Preprocessor`` for each transaction ``type`` that
needs enrichment (derived state addresses, uploaded blobs, ...) before the
payload is encoded and signed.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, MutableMapping, Optional

import structlog

from gitchain.errors import GitchainError, PreprocessError

logger = structlog.get_logger(__name__)


class Preprocessor(ABC):
    """
    Abstract base class for transaction preprocessors.
    
    Implementations mutate the transaction in place. ``preprocess`` may be a
    plain method or a coroutine.
    """
    
    @abstractmethod
    def preprocess(self, transaction: MutableMapping[str, Any], private_key: str) -> Any:
        """
        Prepare a transaction for encoding.
        
        Args:
            transaction: The logical transaction, mutated in place
            private_key: Hex private key of the signer, for preprocessors
                that need to sign or derive addresses
        """
        pass


class PreprocessorRegistry:
    """Maps transaction types to their preprocessors."""
    
    def __init__(self, preprocessors: Optional[Dict[str, Preprocessor]] = None):
        self._preprocessors: Dict[str, Preprocessor] = dict(preprocessors or {})
    
    def register(self, transaction_type: str, preprocessor: Preprocessor) -> None:
        """Register (or replace) the preprocessor for a transaction type."""
        self._preprocessors[transaction_type] = preprocessor
        logger.debug("preprocessor_registered", transaction_type=transaction_type)
    
    def unregister(self, transaction_type: str) -> bool:
        """
        Remove the preprocessor for a transaction type.
        
        Returns:
            True if one was registered
        """
        return self._preprocessors.pop(transaction_type, None) is not None
    
    def get(self, transaction_type: Optional[str]) -> Optional[Preprocessor]:
        if transaction_type is None:
            return None
        return self._preprocessors.get(transaction_type)
    
    def __contains__(self, transaction_type: str) -> bool:
        return transaction_type in self._preprocessors
    
    def __len__(self) -> int:
        return len(self._preprocessors)
    
    async def run(self, transaction: MutableMapping[str, Any], private_key: str) -> None:
        """
        Run the preprocessor registered for ``transaction["type"]``, if any.
        
        Raises:
            PreprocessError: If the preprocessor fails
        """
        if not isinstance(transaction, Mapping):
            # Rejected when the batch is built
            return
        
        transaction_type = transaction.get("type")
        preprocessor = self.get(transaction_type)
        if preprocessor is None:
            return
        
        try:
            result = preprocessor.preprocess(transaction, private_key)
            if inspect.isawaitable(result):
                await result
        except GitchainError:
            raise
        except Exception as e:
            logger.error(
                "preprocess_failed",
                transaction_type=transaction_type,
                error=str(e),
            )
            raise PreprocessError(
                f"Preprocessor for '{transaction_type}' failed: {e}"
            ) from e
        
        logger.debug("transaction_preprocessed", transaction_type=transaction_type)
