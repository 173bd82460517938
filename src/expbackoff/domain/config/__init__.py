"""Configuration models with Pydantic validation."""

from expbackoff.domain.config.backoff import BackoffConfig, format_validation_error

__all__ = ["BackoffConfig", "format_validation_error"]
