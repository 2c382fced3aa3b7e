"""
Configuration management for the Org Chart audit backend
"""
from pydantic_settings import BaseSettings
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List


class AuditConfig(BaseModel):
    """Feature toggles and tunables handed to every audit component at construction"""
    organization_id: str
    enable_audit_log: bool = True
    enable_rollback: bool = True
    locale: str = "en"
    page_size: int = 50
    max_page_size: int = 100
    network_origin_ttl_seconds: float = 300.0
    io_timeout_seconds: float = 5.0

    model_config = ConfigDict(frozen=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Required settings
    DATABASE_URL: str = Field(..., description="Database URL (PostgreSQL or SQLite)")
    JWT_SECRET_KEY: str = Field(..., description="JWT secret key for token verification")

    # Optional settings with defaults
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=120, description="JWT token expiration in minutes")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Version (can be git SHA or semver)
    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    # Tenant scoping for the audit log
    ORGANIZATION_ID: str = Field(default="org_default", description="Tenant key stamped on every audit entry")

    # Audit feature toggles
    ENABLE_AUDIT_LOG: bool = Field(default=True, description="Record audit log entries for mutations")
    ENABLE_ROLLBACK: bool = Field(default=True, description="Allow operators to roll back audit log entries")
    AUDIT_LOCALE: str = Field(default="en", description="Locale for generated change summaries: en, ja")
    AUDIT_PAGE_SIZE: int = Field(default=50, ge=1, description="Default page size for audit log listing")
    AUDIT_MAX_PAGE_SIZE: int = Field(default=100, ge=1, description="Upper bound for the audit log page size")

    # Network origin lookup (used when the request does not carry one)
    NETWORK_ORIGIN_LOOKUP_ENABLED: bool = Field(default=True, description="Resolve network origin via outbound lookup")
    NETWORK_ORIGIN_LOOKUP_URL: str = Field(
        default="https://api.ipify.org?format=json",
        description="Endpoint returning {\"ip\": \"...\"}"
    )
    NETWORK_ORIGIN_CACHE_TTL_SECONDS: float = Field(default=300.0, gt=0, description="Network origin cache TTL")

    IO_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0, description="Timeout applied to outbound lookups and database I/O")
    SESSION_COOKIE_NAME: str = Field(default="audit_session_id", description="Cookie carrying the audit session token")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("AUDIT_LOCALE")
    @classmethod
    def validate_audit_locale(cls, v: str) -> str:
        """Validate AUDIT_LOCALE"""
        allowed = ["en", "ja"]
        if v.lower() not in allowed:
            raise ValueError(f"AUDIT_LOCALE must be one of {allowed}")
        return v.lower()

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            # JWT_SECRET_KEY must be at least 32 characters in production
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            # ALLOWED_ORIGINS must not be wildcard in production
            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def audit_config(self) -> AuditConfig:
        """Build the immutable audit configuration passed to audit components"""
        return AuditConfig(
            organization_id=self.ORGANIZATION_ID,
            enable_audit_log=self.ENABLE_AUDIT_LOG,
            enable_rollback=self.ENABLE_ROLLBACK,
            locale=self.AUDIT_LOCALE,
            page_size=min(self.AUDIT_PAGE_SIZE, self.AUDIT_MAX_PAGE_SIZE),
            max_page_size=self.AUDIT_MAX_PAGE_SIZE,
            network_origin_ttl_seconds=self.NETWORK_ORIGIN_CACHE_TTL_SECONDS,
            io_timeout_seconds=self.IO_TIMEOUT_SECONDS,
        )


# Create settings instance
settings = Settings()

# Validate production settings if in prod
if settings.APP_ENV == "prod":
    settings.validate_production()
