"""
Test suite for configuration resolution.
"""

import pytest
from pydantic import ValidationError

from gitchain.config import (
    DEFAULT_REST_ENDPOINT,
    GitchainConfig,
    get_config,
    set_config,
)
from gitchain.core.status import BatchStatus, BatchStatusResult


class TestGitchainConfig:
    """Tests for layered configuration."""
    
    def test_builtin_default(self, monkeypatch):
        monkeypatch.delenv("GITCHAIN_REST_ENDPOINT", raising=False)
        config = GitchainConfig(_env_file=None)
        
        assert config.rest_endpoint == DEFAULT_REST_ENDPOINT == "http://localhost:8008/"
        assert config.poll_max_attempts is None
        assert config.poll_timeout_seconds is None
        assert config.fail_on_invalid is False
    
    def test_environment_overrides_default(self, monkeypatch):
        monkeypatch.setenv("GITCHAIN_REST_ENDPOINT", "http://validator:8008/")
        monkeypatch.setenv("GITCHAIN_POLL_MAX_ATTEMPTS", "12")
        config = GitchainConfig(_env_file=None)
        
        assert config.rest_endpoint == "http://validator:8008/"
        assert config.poll_max_attempts == 12
    
    def test_explicit_argument_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("GITCHAIN_REST_ENDPOINT", "http://validator:8008/")
        config = GitchainConfig(_env_file=None)
        
        assert config.resolve_api_base("http://explicit:8008/") == "http://explicit:8008/"
        assert config.resolve_api_base(None) == "http://validator:8008/"
    
    @pytest.mark.parametrize("field,value", [
        ("poll_interval_seconds", 0),
        ("poll_max_attempts", 0),
        ("poll_backoff", 0.5),
        ("request_timeout_seconds", -1),
    ])
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            GitchainConfig(_env_file=None, **{field: value})
    
    def test_global_config(self, test_config):
        assert get_config() is test_config
        
        replacement = GitchainConfig(_env_file=None, rest_endpoint="http://elsewhere/")
        set_config(replacement)
        
        assert get_config() is replacement


class TestBatchStatusResult:
    """Tests for the batch status model."""
    
    def test_from_dict(self):
        result = BatchStatusResult.from_dict({"id": "abc", "status": "COMMITTED"})
        
        assert result.batch_id == "abc"
        assert result.status is BatchStatus.COMMITTED
        assert result.status.is_committed
        assert result.invalid_transactions == []
    
    @pytest.mark.parametrize("raw", ["PENDING", "INVALID", "UNKNOWN"])
    def test_not_committed(self, raw):
        assert not BatchStatus.parse(raw).is_committed
    
    @pytest.mark.parametrize("raw", ["committed", "", None, ["COMMITTED"]])
    def test_unrecognised_status(self, raw):
        assert BatchStatus.parse(raw) is BatchStatus.UNKNOWN
    
    def test_to_dict(self):
        result = BatchStatusResult.from_dict({
            "id": "abc",
            "status": "INVALID",
            "invalid_transactions": [{"id": "t1"}],
        })
        
        assert result.to_dict() == {
            "id": "abc",
            "status": "INVALID",
            "invalid_transactions": [{"id": "t1"}],
        }


class TestLoggingSetup:
    """Tests for structured logging configuration."""
    
    @pytest.mark.parametrize("json_format", [False, True])
    def test_setup_logging(self, json_format):
        import structlog
        
        from gitchain.logs import setup_logging
        
        try:
            setup_logging("DEBUG", json_format=json_format)
            structlog.get_logger("gitchain.test").info("logging_configured", json=json_format)
        finally:
            structlog.reset_defaults()
