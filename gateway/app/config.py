"""
Configuration module for the Auth Gateway.

This module uses Pydantic Settings to load and validate environment variables
for the identity provider (OIDC), session JWT management, the downstream
resource API, and CORS settings.

Environment variables are loaded from .env file or system environment.
The resulting Settings object is frozen and passed explicitly to every
component; nothing below reads the process environment after startup.
"""

from functools import lru_cache
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All configuration for the identity provider, session JWTs, the
    downstream resource API and the HTTP server is defined here.
    """

    # =========================================================================
    # Identity Provider Configuration (OIDC Authorization Code Flow)
    # =========================================================================

    GOOGLE_CLIENT_ID: str = Field(
        ...,
        description="OAuth client ID registered with the identity provider",
        min_length=1,
    )

    GOOGLE_CLIENT_SECRET: str = Field(
        ...,
        description="OAuth client secret registered with the identity provider",
        min_length=1,
    )

    PROVIDER_AUTH_URL: str = Field(
        default="https://accounts.google.com/o/oauth2/auth",
        description="Provider authorization (consent) endpoint",
    )

    PROVIDER_TOKEN_URL: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="Provider token endpoint used for the code exchange",
    )

    REDIRECT_URL: str = Field(
        ...,
        description="Redirect URI registered with the provider (e.g., https://app.example.com/auth/callback)",
        min_length=1,
    )

    OAUTH_STATE: str = Field(
        default="standard_oauth",
        description="Anti-forgery state value sent with the authorization request",
        min_length=1,
    )

    # =========================================================================
    # Browser Client / CORS Configuration
    # =========================================================================

    CLIENT_URL: str = Field(
        ...,
        description="Trusted browser origin allowed to make credentialed requests",
        min_length=1,
    )

    # =========================================================================
    # Session JWT Configuration
    # =========================================================================

    TOKEN_SECRET: str = Field(
        ...,
        description="Secret key for signing session JWTs (must be cryptographically secure)",
        min_length=32,
    )

    SESSION_JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm (HS256, HS384, or HS512)",
    )

    TOKEN_EXPIRATION_SECONDS: int = Field(
        default=36000,
        description="Session credential lifetime in seconds",
        ge=60,
    )

    # =========================================================================
    # Downstream Resource Configuration
    # =========================================================================

    POSTS_URL: str = Field(
        default="https://jsonplaceholder.typicode.com/posts",
        description="Downstream resource API returning a list of posts",
    )

    HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for outbound requests to the provider and resource API",
        gt=0,
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the gateway server",
    )

    PORT: int = Field(
        default=5000,
        description="Port to bind the gateway server",
        ge=1,
        le=65535,
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """Origins accepted by the CORS middleware."""
        return [self.CLIENT_URL.rstrip("/")]

    def public_view(self) -> Dict[str, Any]:
        """
        Return configuration values that are safe to log.

        Secrets (client secret, token secret) are omitted.
        """
        return {
            "client_id": self.GOOGLE_CLIENT_ID,
            "auth_url": self.PROVIDER_AUTH_URL,
            "token_url": self.PROVIDER_TOKEN_URL,
            "redirect_url": self.REDIRECT_URL,
            "client_url": self.CLIENT_URL,
            "token_expiration": self.TOKEN_EXPIRATION_SECONDS,
            "posts_url": self.POSTS_URL,
        }

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("SESSION_JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """
        Validate JWT algorithm is one of the supported HMAC algorithms.

        Raises:
            ValueError: If algorithm is not supported
        """
        allowed_algorithms = ["HS256", "HS384", "HS512"]

        if v not in allowed_algorithms:
            raise ValueError(
                f"JWT algorithm must be one of {allowed_algorithms}, got: {v}"
            )

        return v

    @field_validator("PROVIDER_AUTH_URL", "PROVIDER_TOKEN_URL", "REDIRECT_URL", "CLIENT_URL", "POSTS_URL")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL: '{v}'. Expected an http(s) URL")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create the process-wide Settings instance.

    Only the process entry point calls this; components receive the
    instance explicitly.

    Raises:
        ValidationError: If required environment variables are missing
                        or invalid.
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def validate_configuration(settings: Settings) -> dict:
    """
    Validate configuration settings and return a status report.

    Called during application startup. Warnings are logged; any error
    aborts startup.

    Example:
        >>> status = validate_configuration(settings)
        >>> if not status["valid"]:
        ...     print(status["errors"])
    """
    errors = []
    warnings = []

    if settings.TOKEN_SECRET == settings.GOOGLE_CLIENT_SECRET:
        errors.append("TOKEN_SECRET must not reuse the provider client secret")

    if not settings.REDIRECT_URL.startswith("https://"):
        warnings.append("REDIRECT_URL is not HTTPS")

    if not settings.CLIENT_URL.startswith("https://"):
        warnings.append("CLIENT_URL is not HTTPS (SameSite=None cookies require a secure context)")

    # TODO: replace the fixed state with a per-request nonce bound to a pre-login cookie
    warnings.append(
        "OAUTH_STATE is a fixed value; the authorization request has no per-request CSRF nonce"
    )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }
