"""Backoff configuration model."""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from expbackoff.domain.errors import ConfigurationError


class BackoffConfig(BaseModel):
    """Configuration for a driver factory.

    Every field is also accepted under its camelCase alias (``maxAttempts``,
    ``delayInterval``...). Unknown keys are ignored.

    Attributes:
        max_attempts: Total attempts allowed, including the first one
        delay_interval: Duration of one delay slot in milliseconds
        base: Exponential growth base
        max_exponent: Cap on the exponent used for delay growth
        throw_on_exhaustion: Raise OperationExhausted when attempts run out
        seed: Seed for the random engine (None = seed from OS entropy)
        non_blocking_timer: Background timers don't keep the process alive
    """

    max_attempts: int = Field(100, gt=0, alias="maxAttempts")
    delay_interval: int = Field(100, gt=0, alias="delayInterval")
    base: int = Field(2, gt=1)
    max_exponent: int = Field(10, ge=0, alias="maxExponent")
    throw_on_exhaustion: bool = Field(True, alias="throwOnExhaustion")
    seed: Optional[int] = None
    non_blocking_timer: bool = Field(False, alias="nonBlockingTimer")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,  # Accept both snake_case and camelCase
        extra="ignore",  # Unrecognized options are ignored, not rejected
        json_schema_extra={
            "example": {
                "max_attempts": 5,
                "delay_interval": 100,
                "base": 2,
                "max_exponent": 10,
                "throw_on_exhaustion": True,
                "seed": None,
                "non_blocking_timer": False,
            }
        },
    )

    @classmethod
    def from_options(
        cls, options: Union["BackoffConfig", Mapping[str, Any], None] = None
    ) -> "BackoffConfig":
        """Build a config from a model, a plain mapping or None.

        Raises:
            ConfigurationError: If any option has an invalid value
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise ConfigurationError(
                f"Backoff options must be a mapping, got {type(options).__name__}"
            )
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise ConfigurationError(format_validation_error(e)) from e


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic validation errors one field per line."""
    errors = []
    for item in error.errors():
        field = ".".join(str(x) for x in item["loc"])
        errors.append(f"  - {field}: {item['msg']}")
    return "Configuration validation failed:\n" + "\n".join(errors)
