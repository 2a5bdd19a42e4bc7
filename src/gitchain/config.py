"""
Configuration management for the gitchain client.

Supports configuration via environment variables and .env files.
Resolution order for any setting is: explicit argument, then environment,
then the built-in default.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REST_ENDPOINT = "http://localhost:8008/"


class GitchainConfig(BaseSettings):
    """
    Configuration settings for talking to the ledger REST API.
    
    All settings can be configured via environment variables with the GITCHAIN_ prefix.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="GITCHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # REST API settings
    rest_endpoint: str = Field(
        default=DEFAULT_REST_ENDPOINT,
        description="Base URL of the ledger REST API"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to every HTTP request"
    )
    
    # Polling settings
    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Delay between batch status queries"
    )
    poll_backoff: float = Field(
        default=1.0,
        ge=1.0,
        description="Multiplier applied to the poll interval after each attempt"
    )
    poll_max_interval_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound on the poll interval when backing off"
    )
    poll_max_attempts: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum status queries per batch (unbounded if unset)"
    )
    poll_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Deadline for a batch to commit (unbounded if unset)"
    )
    fail_on_invalid: bool = Field(
        default=False,
        description="Stop polling as soon as the ledger reports INVALID"
    )
    
    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )
    
    def resolve_api_base(self, override: Optional[str] = None) -> str:
        """
        Pick the API base URL for a call.
        
        Args:
            override: Explicit per-call URL, takes precedence when set
            
        Returns:
            The URL to resolve REST paths against
        """
        return override or self.rest_endpoint


# Global config instance
_config: Optional[GitchainConfig] = None


def get_config() -> GitchainConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = GitchainConfig()
    return _config


def set_config(config: Optional[GitchainConfig]) -> None:
    """Set the global configuration instance (``None`` resets it)."""
    global _config
    _config = config
