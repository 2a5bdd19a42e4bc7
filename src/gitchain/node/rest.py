"""
Ledger REST API adapter.

Submits batch lists to the ledger and follows the returned status link
until the batch commits.
"""

from typing import Any, Optional
from urllib.parse import urljoin

import httpx
import structlog

from gitchain.config import GitchainConfig, get_config
from gitchain.core.status import BatchStatus, BatchStatusResult
from gitchain.errors import BatchInvalidError, PollError, SubmissionError
from gitchain.utils.polling import poll_condition

logger = structlog.get_logger(__name__)

OCTET_STREAM = "application/octet-stream"

# The request could not be built or never left this process; retrying cannot help
_BAD_REQUEST_ERRORS = (httpx.UnsupportedProtocol, httpx.LocalProtocolError, httpx.InvalidURL)

# Failures that guarantee the ledger never saw the batch
_NOT_SENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout) + _BAD_REQUEST_ERRORS

# Default for poll options that fall back to the configuration
CONFIGURED: Any = object()


def rest_api_url(path: str, api_base: str) -> str:
    """Resolve a REST path against the API base URL."""
    return urljoin(api_base, path)


class RestApiClient:
    """
    Client for the ledger's REST API.
    
    Use as an async context manager, or call ``connect``/``disconnect``.
    An ``httpx.AsyncClient`` passed in is used as-is and left open.
    """
    
    def __init__(
        self,
        api_base: Optional[str] = None,
        config: Optional[GitchainConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the REST client.
        
        Args:
            api_base: Base URL of the REST API. Overrides the configured one.
            config: Client configuration. Uses global config if not provided.
            client: Existing HTTP client to reuse
        """
        self.config = config or get_config()
        self.api_base = self.config.resolve_api_base(api_base)
        self._client = client
        self._owns_client = client is None
    
    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._client is not None:
            return
        
        self._client = httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
        self._owns_client = True
        logger.debug("rest_client_opened", api_base=self.api_base)
    
    async def disconnect(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("rest_client_closed", api_base=self.api_base)
    
    async def __aenter__(self) -> "RestApiClient":
        await self.connect()
        return self
    
    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
    
    async def _http(self) -> httpx.AsyncClient:
        if not self._client:
            await self.connect()
        return self._client
    
    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    
    async def submit_batches(self, batch_list: bytes) -> dict:
        """
        POST a serialized batch list to the ledger.
        
        Args:
            batch_list: Serialized BatchList
        
        Returns:
            The parsed JSON response, unmodified. Contains ``link``.
        
        Raises:
            SubmissionError: On network failure, non-2xx status, or a
                response that is not JSON with a ``link``
        """
        url = rest_api_url("batches", self.api_base)
        client = await self._http()
        
        try:
            response = await client.post(
                url,
                content=batch_list,
                headers={"Content-Type": OCTET_STREAM},
            )
        except _NOT_SENT_ERRORS as e:
            logger.error("batch_submit_unreachable", url=url, error=str(e))
            raise SubmissionError(f"Could not send batch to {url}: {e}") from e
        except httpx.HTTPError as e:
            # The request may have reached the ledger before the failure
            logger.error("batch_submit_error", url=url, error=str(e))
            raise SubmissionError(
                f"Batch submission request failed: {e}",
                possibly_submitted=True,
            ) from e
        
        if not response.is_success:
            logger.error(
                "batch_submit_rejected",
                url=url,
                status=response.status_code,
                error=response.text,
            )
            raise SubmissionError(
                f"Batch submission failed with HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        
        try:
            result = response.json()
        except ValueError as e:
            raise SubmissionError(
                f"Batch submission returned invalid JSON: {e}",
                status_code=response.status_code,
                possibly_submitted=True,
            ) from e
        
        if not isinstance(result, dict) or not isinstance(result.get("link"), str):
            raise SubmissionError(
                "Batch submission response has no status link",
                status_code=response.status_code,
                possibly_submitted=True,
            )
        
        logger.info("batch_submitted", url=url, link=result["link"])
        return result
    
    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------
    
    async def _get_json(self, url: str) -> Any:
        client = await self._http()
        
        try:
            response = await client.get(url)
        except _BAD_REQUEST_ERRORS as e:
            logger.error("rest_request_invalid", url=url, error=str(e))
            raise PollError(f"Cannot request {url}: {e}", status_url=url) from e
        except httpx.HTTPError as e:
            logger.warning("rest_request_error", url=url, error=str(e))
            raise PollError(f"Request to {url} failed: {e}", status_url=url, retryable=True) from e
        
        if not response.is_success:
            logger.warning("rest_request_failed", url=url, status=response.status_code)
            raise PollError(
                f"Request to {url} failed with HTTP {response.status_code}",
                status_url=url,
                retryable=response.status_code >= 500,
            )
        
        try:
            return response.json()
        except ValueError as e:
            raise PollError(f"Invalid JSON from {url}: {e}", status_url=url) from e
    
    async def get_batch_status(self, status_url: str) -> BatchStatusResult:
        """
        Query a batch status link once.
        
        Args:
            status_url: The ``link`` returned by ``submit_batches``
        
        Returns:
            Status of the first batch in the response
        
        Raises:
            PollError: If the request fails or the response is malformed
        """
        url = rest_api_url(status_url, self.api_base)
        body = await self._get_json(url)
        
        try:
            return BatchStatusResult.from_dict(body["data"][0])
        except (KeyError, IndexError, TypeError) as e:
            logger.error("batch_status_malformed", url=url, body=str(body)[:200])
            raise PollError(f"Malformed batch status response from {url}", status_url=url) from e
    
    async def poll_until_committed(
        self,
        status_url: str,
        interval: Any = CONFIGURED,
        max_attempts: Any = CONFIGURED,
        timeout: Any = CONFIGURED,
        fail_on_invalid: Any = CONFIGURED,
    ) -> str:
        """
        Poll a batch status link until the batch is COMMITTED.
        
        PENDING and UNKNOWN keep polling, as do transient request failures.
        INVALID keeps polling too unless ``fail_on_invalid`` is set.
        Arguments left out fall back to the configuration. An explicit
        ``None`` for ``max_attempts`` or ``timeout`` lifts that bound.
        
        Args:
            status_url: The ``link`` returned by ``submit_batches``
            interval: Seconds between status queries
            max_attempts: Maximum number of status queries, or ``None`` for no limit
            timeout: Seconds to wait for the batch to commit, or ``None`` for no limit
            fail_on_invalid: Raise as soon as the batch is INVALID
        
        Returns:
            The committed batch id
        
        Raises:
            PollTimeoutError: If the batch does not commit within budget
            BatchInvalidError: If INVALID and ``fail_on_invalid`` is set
            PollError: If a status response is malformed
        """
        if interval is CONFIGURED:
            interval = self.config.poll_interval_seconds
        if max_attempts is CONFIGURED:
            max_attempts = self.config.poll_max_attempts
        if timeout is CONFIGURED:
            timeout = self.config.poll_timeout_seconds
        if fail_on_invalid is CONFIGURED:
            fail_on_invalid = self.config.fail_on_invalid
        
        committed: Optional[BatchStatusResult] = None
        
        async def is_committed() -> bool:
            nonlocal committed
            try:
                result = await self.get_batch_status(status_url)
            except PollError as e:
                if e.retryable:
                    return False
                raise
            
            logger.debug(
                "batch_status_polled",
                batch_id=result.batch_id[:16] + "...",
                status=result.raw_status,
            )
            
            if result.status is BatchStatus.INVALID and fail_on_invalid:
                raise BatchInvalidError(
                    f"Batch {result.batch_id} is INVALID",
                    batch_id=result.batch_id,
                    status_url=status_url,
                    invalid_transactions=result.invalid_transactions,
                )
            
            if result.status.is_committed:
                committed = result
                return True
            return False
        
        attempts = await poll_condition(
            is_committed,
            interval=interval,
            max_attempts=max_attempts,
            timeout=timeout,
            backoff=self.config.poll_backoff,
            max_interval=self.config.poll_max_interval_seconds,
        )
        
        logger.info("batch_committed", batch_id=committed.batch_id, attempts=attempts)
        return committed.batch_id
    
    async def get_batch(self, batch_id: str) -> Any:
        """
        Fetch a committed batch record.
        
        Returns:
            The parsed JSON record, unmodified
        """
        return await self._get_json(rest_api_url(f"batches/{batch_id}", self.api_base))
    
    async def get_batch_data(self, status_url: str, **poll_options) -> Any:
        """
        Wait for a batch to commit, then fetch its record.
        
        Args:
            status_url: The ``link`` returned by ``submit_batches``
            **poll_options: Passed to ``poll_until_committed``
        
        Returns:
            The committed batch record
        """
        batch_id = await self.poll_until_committed(status_url, **poll_options)
        return await self.get_batch(batch_id)
