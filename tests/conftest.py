"""
Pytest configuration and shared fixtures for the test suite.
"""

from typing import Any, Dict

import httpx
import pytest
import respx

from gitchain.config import GitchainConfig, set_config
from gitchain.tx.signer import TransactionSigner


API_BASE = "http://ledger.test:8008/"
BATCH_ID = "b" * 128
STATUS_LINK = f"{API_BASE}batch_statuses?id={BATCH_ID}"

# Fixed key used for regression vectors (any scalar below the curve order works)
TEST_PRIVATE_KEY = "11" * 32


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> GitchainConfig:
    """Create a test configuration with fast polling."""
    return GitchainConfig(
        rest_endpoint=API_BASE,
        request_timeout_seconds=5.0,
        poll_interval_seconds=0.001,
        poll_max_interval_seconds=0.01,
        poll_max_attempts=20,
        log_level="DEBUG",
    )


@pytest.fixture(autouse=True)
def global_config(test_config):
    """Install the test configuration as the global one."""
    set_config(test_config)
    yield test_config
    set_config(None)


# ============================================================================
# Key and Transaction Fixtures
# ============================================================================

@pytest.fixture
def private_key() -> str:
    return TEST_PRIVATE_KEY


@pytest.fixture
def test_signer() -> TransactionSigner:
    return TransactionSigner.from_hex(TEST_PRIVATE_KEY)


def make_transaction(index: int = 0, **fields: Any) -> Dict[str, Any]:
    """Create a logical transaction with declared addresses."""
    transaction = {
        "type": "push",
        "id": f"txn-{index:04d}",
        "repository": "example/repo",
        "ref": "refs/heads/main",
        "meta": {
            "inputs": [f"a1b2c3{index:04d}"],
            "outputs": [f"a1b2c3{index:04d}", "d4e5f6"],
        },
    }
    transaction.update(fields)
    return transaction


@pytest.fixture
def sample_transaction() -> Dict[str, Any]:
    return make_transaction()


# ============================================================================
# Mock REST API
# ============================================================================

def status_response(status: str, batch_id: str = BATCH_ID) -> httpx.Response:
    """Build a batch status response as returned by the REST API."""
    return httpx.Response(
        200,
        json={
            "data": [{"id": batch_id, "status": status, "invalid_transactions": []}],
            "link": STATUS_LINK,
        },
    )


def batch_record(batch_id: str = BATCH_ID) -> Dict[str, Any]:
    return {
        "data": {
            "header": {"signer_public_key": "02" + "ab" * 32, "transaction_ids": ["c" * 128]},
            "header_signature": batch_id,
            "transactions": [],
        },
        "link": f"{API_BASE}batches/{batch_id}",
    }


@pytest.fixture
def mock_api():
    """Intercept all httpx traffic to the test ledger."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock
