"""
DSM Gateway — Application Configuration
=========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Read by the application factory and the lifespan bootstrap.
When:  Loaded once at module import time; validated before the app starts.

Environment names follow the deployment this gateway runs in:
MONGO_URI, MYSQL_*, ACCESS_KEY_ID / SECRET_ACCESS_KEY / SESSION_TOKEN / REGION
for object storage, and RA as the prefix of the replication bucket names.
"""

from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Attributes are grouped by the
    store they configure.
    """

    # ── Document store (users) ────────────────────────────────────────────
    mongo_uri: str = Field(
        default="mongodb://localhost:27017/dsm",
        description="MongoDB connection URI",
    )
    # Falls back to the database named in the URI, then to "dsm"
    mongo_database: Optional[str] = Field(default=None)
    mongo_collection: str = Field(default="usuarios")

    # ── Relational store (products) ───────────────────────────────────────
    mysql_host: str = Field(default="localhost")
    mysql_user: str = Field(default="root")
    mysql_password: str = Field(default="")
    mysql_database: str = Field(default="dsm")
    mysql_port: int = Field(default=3306, ge=1, le=65535)

    # Full SQLAlchemy URL; when set it replaces the MYSQL_* parts
    database_url: Optional[str] = Field(default=None)

    # Fixed-size pool; callers beyond the limit wait without timeout
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_pool_timeout: Optional[float] = Field(default=None)

    # ── Object storage (buckets) ──────────────────────────────────────────
    # Unset values fall back to boto3's default credential chain
    access_key_id: Optional[str] = Field(default=None)
    secret_access_key: Optional[str] = Field(default=None)
    session_token: Optional[str] = Field(default=None)
    region: Optional[str] = Field(default=None)

    # Custom endpoint for LocalStack / MinIO
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_ENDPOINT_URL", "S3_ENDPOINT"),
    )

    # ── Replication ───────────────────────────────────────────────────────
    replication_prefix: str = Field(
        default="",
        validation_alias=AliasChoices("RA", "REPLICATION_PREFIX"),
        description="Prefix shared by the source and destination bucket names",
    )
    replication_source_suffix: str = Field(default="dsm-vot-prod")
    replication_destination_suffix: str = Field(default="dsm-vot-hml")

    @property
    def replication_source_bucket(self) -> str:
        return f"{self.replication_prefix}-{self.replication_source_suffix}"

    @property
    def replication_destination_bucket(self) -> str:
        return f"{self.replication_prefix}-{self.replication_destination_suffix}"

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def sqlalchemy_url(self) -> URL:
        """
        What:  Async SQLAlchemy URL for the products database.
        How:   DATABASE_URL wins when present; otherwise the MYSQL_* parts are
               assembled with the aiomysql driver. URL.create escapes the
               password, so special characters need no manual quoting.
        """
        if self.database_url:
            return make_url(self.database_url)
        return URL.create(
            drivername="mysql+aiomysql",
            username=self.mysql_user,
            password=self.mysql_password or None,
            host=self.mysql_host,
            port=self.mysql_port,
            database=self.mysql_database,
        )

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that settings the routes depend on are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises a single ValueError.
        """
        errors = []
        if not self.replication_prefix:
            errors.append(
                "RA is not set. Replication would target "
                f"'{self.replication_source_bucket}' -> '{self.replication_destination_bucket}'."
            )
        if not self.mongo_uri.startswith(("mongodb://", "mongodb+srv://")):
            errors.append("MONGO_URI must be a mongodb:// or mongodb+srv:// URI")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, the default configuration for create_app()
settings = Settings()
