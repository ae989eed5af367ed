"""Client configuration for the authorization request flow."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fapi_client.services.security import is_secure_url

SUPPORTED_SIGNING_ALGS = ("PS256", "RS256", "ES256")


class ClientConfiguration(BaseModel):
    """Immutable client settings fixed for the lifetime of an initiator.

    One configuration describes one registered client at one issuer, so
    several clients or environments are served by several instances.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    redirect_uri: str
    issuer: str
    scopes: tuple[str, ...] = ("openid",)

    # Request object signing
    signing_alg: str = "PS256"
    key_size: int = Field(default=2048, ge=2048)
    request_object_lifetime: int = Field(default=300, ge=1, le=3600)  # seconds

    # FAPI 2.0 requires PKCE
    use_pkce: bool = True

    timeout: float = Field(default=30.0, gt=0)

    @field_validator("redirect_uri", "issuer")
    @classmethod
    def validate_secure_urls(cls, v: str) -> str:
        """Require HTTPS, allowing plain HTTP only for localhost."""
        if not is_secure_url(v):
            raise ValueError(f"URL must use HTTPS or localhost: {v}")
        return v

    @field_validator("scopes")
    @classmethod
    def validate_scopes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("At least one scope is required")
        if any(not scope or " " in scope for scope in v):
            raise ValueError(f"Scopes must be non-empty tokens without spaces: {v}")
        return v

    @field_validator("signing_alg")
    @classmethod
    def validate_signing_alg(cls, v: str) -> str:
        if v not in SUPPORTED_SIGNING_ALGS:
            raise ValueError(
                f"Unsupported signing algorithm {v}, "
                f"expected one of {', '.join(SUPPORTED_SIGNING_ALGS)}"
            )
        return v

    @property
    def scope(self) -> str:
        """Space separated scope string for the request object."""
        return " ".join(self.scopes)

    @classmethod
    def from_env(
        cls, prefix: str = "FAPI_", **defaults: object
    ) -> ClientConfiguration:
        """Build a configuration from environment variables.

        Reads ``{prefix}CLIENT_ID``, ``{prefix}REDIRECT_URI``, ``{prefix}ISSUER``,
        ``{prefix}SCOPES`` (space separated) and ``{prefix}SIGNING_ALG``. Keyword
        arguments supply values for variables that are not set.

        Raises:
            pydantic.ValidationError: If a required value is missing or invalid
        """
        values: dict[str, object] = dict(defaults)
        for field_name in ("client_id", "redirect_uri", "issuer", "signing_alg"):
            env_value = os.getenv(f"{prefix}{field_name.upper()}")
            if env_value:
                values[field_name] = env_value

        scopes = os.getenv(f"{prefix}SCOPES")
        if scopes:
            values["scopes"] = tuple(scopes.split())

        return cls(**values)
