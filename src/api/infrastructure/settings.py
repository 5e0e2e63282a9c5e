"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared_kernel.authorization.capabilities import Realm


class DatabaseSettings(BaseSettings):
    """Backing store connection settings.

    Points at the hosted Postgres database that owns organizations,
    memberships, resources, alerts and achievements.

    Environment variables:
        AETHEX_DB_HOST: Database host (default: localhost)
        AETHEX_DB_PORT: Database port (default: 5432)
        AETHEX_DB_DATABASE: Database name (default: postgres)
        AETHEX_DB_USERNAME: Database user (default: postgres)
        AETHEX_DB_PASSWORD: Database password (required in production)
        AETHEX_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        AETHEX_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="AETHEX_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="postgres", description="Database name")
    username: str = Field(default="postgres", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class SessionSettings(BaseSettings):
    """Cookie session settings.

    Environment variables:
        AETHEX_SESSION_SECRET_KEY: Key used to sign the session cookie
        AETHEX_SESSION_COOKIE_NAME: Cookie name (default: aethex_session)
        AETHEX_SESSION_MAX_AGE_SECONDS: Cookie lifetime (default: 14 days)
        AETHEX_SESSION_HTTPS_ONLY: Only send the cookie over HTTPS (default: false)
        AETHEX_SESSION_SAME_SITE: SameSite policy (default: lax)
    """

    model_config = SettingsConfigDict(
        env_prefix="AETHEX_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: SecretStr = Field(
        default=SecretStr("dev-session-secret-change-me"),
        description="Session cookie signing key",
    )
    cookie_name: str = Field(default="aethex_session", description="Cookie name")
    max_age_seconds: int = Field(
        default=14 * 24 * 60 * 60,
        description="Session cookie lifetime in seconds",
        ge=60,
    )
    https_only: bool = Field(default=False, description="HTTPS-only cookie")
    same_site: str = Field(default="lax", description="SameSite cookie policy")


class AuthSettings(BaseSettings):
    """Bearer token settings for identities issued by the identity provider.

    Environment variables:
        AETHEX_AUTH_JWT_SECRET: Shared secret the identity provider signs tokens with
        AETHEX_AUTH_JWT_AUDIENCE: Expected audience (default: authenticated)
        AETHEX_AUTH_JWT_ALGORITHMS: Accepted algorithms (default: ["HS256"])
        AETHEX_AUTH_ADMIN_ROLE: Role value that marks a platform administrator
    """

    model_config = SettingsConfigDict(
        env_prefix="AETHEX_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Identity provider JWT signing secret",
    )
    jwt_audience: str = Field(
        default="authenticated",
        description="Expected audience claim",
    )
    jwt_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="Accepted JWT signing algorithms",
    )
    admin_role: str = Field(
        default="admin",
        description="Role value identifying a platform administrator",
    )


class AccessSettings(BaseSettings):
    """Tenant and realm selection settings.

    Environment variables:
        AETHEX_ACCESS_ORGANIZATION_HEADER: Tenant selector header (default: X-Org-ID)
        AETHEX_ACCESS_REALM_HEADER: Realm selector header (default: X-User-Realm)
        AETHEX_ACCESS_DEFAULT_REALM: Realm used when the header is absent
    """

    model_config = SettingsConfigDict(
        env_prefix="AETHEX_ACCESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    organization_header: str = Field(
        default="X-Org-ID",
        description="Header carrying an explicit organization id",
    )
    realm_header: str = Field(
        default="X-User-Realm",
        description="Header carrying the acting realm",
    )
    default_realm: Realm = Field(
        default=Realm.FOUNDATION,
        description="Baseline realm when the realm header is absent",
    )


class RealtimeSettings(BaseSettings):
    """Real-time event hub settings.

    Environment variables:
        AETHEX_REALTIME_ENABLED: Run the periodic broadcaster (default: true)
        AETHEX_REALTIME_METRICS_INTERVAL_SECONDS: Metrics snapshot period (default: 30)
        AETHEX_REALTIME_ALERT_POLL_INTERVAL_SECONDS: New-alert poll period (default: 10)
        AETHEX_REALTIME_ALERT_SNAPSHOT_LIMIT: Alerts per snapshot (default: 50)
        AETHEX_REALTIME_ACHIEVEMENT_SNAPSHOT_LIMIT: Unlocks per snapshot (default: 20)
        AETHEX_REALTIME_NOTIFICATION_LIMIT: Items per notification source (default: 5)
        AETHEX_REALTIME_OUTBOUND_QUEUE_SIZE: Pending messages per connection (default: 256)
        AETHEX_REALTIME_TRUST_CLIENT_AUTH: Accept auth claims without a session (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="AETHEX_REALTIME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Run periodic broadcasts")
    metrics_interval_seconds: float = Field(
        default=30.0,
        description="Seconds between metrics snapshots",
        gt=0,
    )
    alert_poll_interval_seconds: float = Field(
        default=10.0,
        description="Seconds between new-alert polls",
        gt=0,
    )
    alert_snapshot_limit: int = Field(default=50, ge=1, le=500)
    achievement_snapshot_limit: int = Field(default=20, ge=1, le=500)
    notification_limit: int = Field(default=5, ge=1, le=100)
    outbound_queue_size: int = Field(default=256, ge=1, le=10_000)
    trust_client_auth: bool = Field(
        default=False,
        description="Bind connections from client auth claims without a session",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="AeThex API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_session_settings() -> SessionSettings:
    """Get cached session settings."""
    return SessionSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached bearer token settings."""
    return AuthSettings()


@lru_cache
def get_access_settings() -> AccessSettings:
    """Get cached tenant and realm selection settings."""
    return AccessSettings()


@lru_cache
def get_realtime_settings() -> RealtimeSettings:
    """Get cached real-time hub settings."""
    return RealtimeSettings()
