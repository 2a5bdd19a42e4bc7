"""
Node Integration Layer.

Access to the ledger's REST API for batch submission and status tracking.
"""

from gitchain.node.rest import RestApiClient

__all__ = [
    "RestApiClient",
]
