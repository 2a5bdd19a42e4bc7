"""
Batch status model.

Represents one entry of the ledger's batch status response.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping


class BatchStatus(str, Enum):
    """Status of a submitted batch as reported by the ledger."""
    PENDING = "PENDING"           # Received, not yet in a block
    COMMITTED = "COMMITTED"       # Included in the chain
    INVALID = "INVALID"           # Rejected by a transaction processor
    UNKNOWN = "UNKNOWN"           # Not known to the validator (yet)
    
    @classmethod
    def parse(cls, value: Any) -> "BatchStatus":
        """Map a raw status string, treating anything unrecognised as UNKNOWN."""
        try:
            return cls(value)
        except (TypeError, ValueError):
            return cls.UNKNOWN
    
    @property
    def is_committed(self) -> bool:
        return self is BatchStatus.COMMITTED


@dataclass
class BatchStatusResult:
    """
    Status of a single batch.
    
    Attributes:
        batch_id: Header signature of the batch
        status: Parsed status
        raw_status: Status string exactly as returned by the ledger
        invalid_transactions: Details the ledger gives for INVALID batches
    """
    
    batch_id: str
    status: BatchStatus
    raw_status: str = ""
    invalid_transactions: List[dict] = field(default_factory=list)
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BatchStatusResult":
        """
        Build from one entry of a status response's ``data`` list.
        
        Raises:
            KeyError: If ``id`` or ``status`` is missing
            TypeError: If ``id`` is not a non-empty string
        """
        batch_id = data["id"]
        if not isinstance(batch_id, str) or not batch_id:
            raise TypeError(f"Batch id must be a non-empty string, got {batch_id!r}")
        raw_status = data["status"]
        return cls(
            batch_id=batch_id,
            status=BatchStatus.parse(raw_status),
            raw_status=str(raw_status),
            invalid_transactions=list(data.get("invalid_transactions") or []),
        )
    
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.batch_id,
            "status": self.status.value,
            "invalid_transactions": self.invalid_transactions,
        }
    
    def __repr__(self) -> str:
        return f"BatchStatusResult(id={self.batch_id[:8]}..., status={self.status.value})"
