"""Remote prompt service (Langfuse) configuration models."""

from urllib.parse import urlparse

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator


class HttpClientConfig(BaseModel):
    """HTTP transport settings for the remote client."""

    max_connections: int | None = Field(
        default=None,
        gt=0,
        description="Connection pool size, also the default batch concurrency",
    )
    pooled_connection_lifetime_minutes: int | None = Field(
        default=None,
        gt=0,
        description="Keep-alive expiry for pooled connections",
    )
    request_timeout_seconds: int | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout",
    )


class ResilienceConfig(BaseModel):
    """Retry policy for transient remote failures."""

    enabled: bool = Field(default=False, description="Enable retries")
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries after the initial attempt",
    )
    base_delay_ms: int = Field(
        default=200,
        ge=1,
        description="Base delay for exponential backoff",
    )


class LangfuseConfig(BaseModel):
    """Connection settings for the Langfuse prompt API.

    Either all of base_url/public_key/secret_key are set, or none are.
    With none set the service runs on local defaults only.
    """

    base_url: str | None = Field(default=None, description="Langfuse base URL")
    public_key: SecretStr | None = Field(default=None, description="Public key")
    secret_key: SecretStr | None = Field(default=None, description="Secret key")
    http: HttpClientConfig = Field(
        default_factory=HttpClientConfig,
        description="HTTP transport settings",
    )
    resilience: ResilienceConfig = Field(
        default_factory=ResilienceConfig,
        description="Retry settings",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def _strip_url(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("public_key", "secret_key", mode="before")
    @classmethod
    def _strip_secret(cls, value: object) -> object:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if isinstance(value, str):
            return value.strip() or None
        return value

    @model_validator(mode="after")
    def _all_or_nothing(self) -> "LangfuseConfig":
        has_any = any((self.base_url, self.public_key, self.secret_key))
        if not has_any:
            return self
        if not self.is_configured():
            raise ValueError(
                "Langfuse configuration is incomplete: provide all of "
                "base_url/public_key/secret_key, or leave all blank"
            )
        parsed = urlparse(self.base_url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Langfuse base_url must be an absolute URL: {self.base_url!r}")
        return self

    def is_configured(self) -> bool:
        """True when every connection setting is present."""
        return bool(self.base_url and self.public_key and self.secret_key)
