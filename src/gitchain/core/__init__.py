"""
Core module.

Batch status model and the submission orchestrator.
"""

from gitchain.core.status import BatchStatus, BatchStatusResult
from gitchain.core.submitter import TransactionSubmitter

__all__ = [
    "BatchStatus",
    "BatchStatusResult",
    "TransactionSubmitter",
]
