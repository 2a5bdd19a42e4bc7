"""
Transaction Submitter - main orchestration component.

Runs the full pipeline for a transaction: preprocess, encode, sign,
batch, submit, and optionally wait for the batch to commit.
"""

from typing import Any, Iterable, MutableMapping, Optional

import httpx
import structlog

from gitchain.config import GitchainConfig, get_config
from gitchain.node.rest import RestApiClient
from gitchain.tx.builder import TransactionBuilder
from gitchain.tx.preprocess import PreprocessorRegistry
from gitchain.tx.signer import load_signer

logger = structlog.get_logger(__name__)


class TransactionSubmitter:
    """
    Submits transactions to the ledger.
    
    Holds no per-call state: each call loads its own signer and opens its
    own HTTP client, so concurrent calls are independent.
    """
    
    def __init__(
        self,
        config: Optional[GitchainConfig] = None,
        preprocessors: Optional[PreprocessorRegistry] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the submitter.
        
        Args:
            config: Client configuration. Uses global config if not provided.
            preprocessors: Per-type transaction preprocessors
            http_client: Shared HTTP client; a new one is opened per call if not given
        """
        self.config = config or get_config()
        self.preprocessors = preprocessors or PreprocessorRegistry()
        self.http_client = http_client
    
    def _rest_client(self, api_base: Optional[str]) -> RestApiClient:
        return RestApiClient(api_base=api_base, config=self.config, client=self.http_client)
    
    async def build_batch_list(
        self,
        private_key: str,
        transactions: Iterable[MutableMapping[str, Any]],
    ) -> bytes:
        """
        Preprocess, sign and serialize transactions into a single batch.
        
        Nothing is sent over the network.
        
        Args:
            private_key: Hex private key of the signer
            transactions: Logical transactions, in batch order
        
        Returns:
            Serialized batch list
        """
        transactions = list(transactions)
        
        for transaction in transactions:
            await self.preprocessors.run(transaction, private_key)
        
        return TransactionBuilder(load_signer(private_key)).build_batch_list(transactions)
    
    async def send_transactions(
        self,
        private_key: str,
        transactions: Iterable[MutableMapping[str, Any]],
        api_base: Optional[str] = None,
    ) -> dict:
        """
        Submit several transactions as one batch.
        
        Returns:
            The ledger's submission response, including ``link``
        """
        body = await self.build_batch_list(private_key, transactions)
        
        async with self._rest_client(api_base) as rest:
            return await rest.submit_batches(body)
    
    async def send_transaction(
        self,
        private_key: str,
        transaction: MutableMapping[str, Any],
        api_base: Optional[str] = None,
    ) -> dict:
        """
        Submit one transaction in its own batch.
        
        The transaction is expected to carry a ``type`` and an ``id``; it is
        mutated in place by any preprocessor registered for its type.
        
        Args:
            private_key: Hex private key of the signer
            transaction: Logical transaction
            api_base: REST API base URL, overriding the configured one
        
        Returns:
            The ledger's submission response, including ``link``
        """
        return await self.send_transactions(private_key, [transaction], api_base)
    
    async def get_batch_data(
        self,
        status_url: str,
        api_base: Optional[str] = None,
        **poll_options,
    ) -> Any:
        """Wait for the batch behind ``status_url`` to commit and fetch its record."""
        async with self._rest_client(api_base) as rest:
            return await rest.get_batch_data(status_url, **poll_options)
    
    async def submit_and_poll(
        self,
        private_key: str,
        transaction: MutableMapping[str, Any],
        api_base: Optional[str] = None,
        **poll_options,
    ) -> Any:
        """
        Submit one transaction and wait for it to commit.
        
        Args:
            private_key: Hex private key of the signer
            transaction: Logical transaction
            api_base: REST API base URL, overriding the configured one
            **poll_options: ``interval``, ``max_attempts``, ``timeout``,
                ``fail_on_invalid``
        
        Returns:
            The committed batch record
        """
        result = await self.send_transaction(private_key, transaction, api_base)
        return await self.get_batch_data(result["link"], api_base, **poll_options)


async def send_transaction(
    private_key: str,
    transaction: MutableMapping[str, Any],
    api_base: Optional[str] = None,
    preprocessors: Optional[PreprocessorRegistry] = None,
) -> dict:
    """Submit one transaction using the global configuration."""
    submitter = TransactionSubmitter(preprocessors=preprocessors)
    return await submitter.send_transaction(private_key, transaction, api_base)


async def submit_and_poll(
    private_key: str,
    transaction: MutableMapping[str, Any],
    api_base: Optional[str] = None,
    preprocessors: Optional[PreprocessorRegistry] = None,
    **poll_options,
) -> Any:
    """Submit one transaction and wait for its batch record, using the global configuration."""
    submitter = TransactionSubmitter(preprocessors=preprocessors)
    return await submitter.submit_and_poll(private_key, transaction, api_base, **poll_options)
