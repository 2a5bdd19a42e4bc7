"""
gitchain client

Builds, signs and submits transaction batches to a Sawtooth-style ledger
and waits for them to commit.
"""

__version__ = "0.1.0"

from gitchain.config import GitchainConfig
from gitchain.core.status import BatchStatus, BatchStatusResult
from gitchain.core.submitter import TransactionSubmitter, send_transaction, submit_and_poll
from gitchain.errors import (
    BatchInvalidError,
    EncodingError,
    GitchainError,
    PollError,
    PollTimeoutError,
    PreprocessError,
    PrivateKeyError,
    SubmissionError,
    TransactionBuildError,
)
from gitchain.tx.preprocess import Preprocessor, PreprocessorRegistry

__all__ = [
    "GitchainConfig",
    "BatchStatus",
    "BatchStatusResult",
    "TransactionSubmitter",
    "send_transaction",
    "submit_and_poll",
    "Preprocessor",
    "PreprocessorRegistry",
    "GitchainError",
    "EncodingError",
    "PrivateKeyError",
    "PreprocessError",
    "TransactionBuildError",
    "SubmissionError",
    "PollError",
    "BatchInvalidError",
    "PollTimeoutError",
]
