"""
Error taxonomy for transaction submission.

Every error carries ``possibly_submitted`` so callers can tell a failure
that happened before anything reached the ledger from one where the batch
may already be on its way to commit.
"""

from typing import Optional


class GitchainError(Exception):
    """Base class for all library errors."""
    
    possibly_submitted: bool = False
    
    def __init__(self, message: str, possibly_submitted: Optional[bool] = None):
        super().__init__(message)
        if possibly_submitted is not None:
            self.possibly_submitted = possibly_submitted


class EncodingError(GitchainError):
    """Raised when a payload cannot be canonically encoded or decoded."""


class PrivateKeyError(GitchainError, ValueError):
    """Raised on malformed or out-of-range private key material."""


class PreprocessError(GitchainError):
    """Raised when a registered preprocessor fails."""


class TransactionBuildError(GitchainError):
    """Raised when transaction or batch construction fails."""


class SubmissionError(GitchainError):
    """Raised when posting a batch list to the ledger fails."""
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        possibly_submitted: bool = False,
    ):
        super().__init__(message, possibly_submitted=possibly_submitted)
        self.status_code = status_code


class PollError(GitchainError):
    """Raised when a batch status or batch record response is unusable."""
    
    possibly_submitted = True
    
    def __init__(
        self,
        message: str,
        status_url: Optional[str] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.status_url = status_url
        # Transport failures and 5xx responses; the poll loop retries these
        self.retryable = retryable


class BatchInvalidError(PollError):
    """Raised when the ledger reports the batch as INVALID."""
    
    def __init__(
        self,
        message: str,
        batch_id: str,
        status_url: Optional[str] = None,
        invalid_transactions: Optional[list] = None,
    ):
        super().__init__(message, status_url=status_url)
        self.batch_id = batch_id
        self.invalid_transactions = invalid_transactions or []


class PollTimeoutError(PollError, TimeoutError):
    """Raised when the polling budget is exhausted before the condition holds."""
    
    def __init__(self, message: str, attempts: int, elapsed: float):
        super().__init__(message)
        self.attempts = attempts
        self.elapsed = elapsed
