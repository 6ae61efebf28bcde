"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or a .env file) with
sensible defaults. Mock modes enable local development without Snowflake
or object storage credentials.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    List-valued settings (api_keys, cors_origins) are comma-separated strings.
    """

    # API Configuration
    api_title: str = "RecruitDesk Coach Export API"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1,dev-key-2",
        description="Comma-separated API keys. Several keys allow rotation without downtime."
    )

    # Snowflake Configuration
    snowflake_account: str = Field(
        default="",
        description="Account locator of the recruiting warehouse"
    )
    snowflake_user: str = Field(
        default="",
        description="Service user the API connects as"
    )
    snowflake_password: str = Field(
        default="",
        description="Password, when not using a private key"
    )
    snowflake_private_key_path: Optional[str] = Field(
        default=None,
        description="PEM private key file for key-pair login"
    )
    snowflake_private_key_base64: Optional[str] = Field(
        default=None,
        description="PEM private key, base64-encoded, for hosts that cannot mount a key file"
    )
    snowflake_database: str = Field(
        default="RECRUITING",
        description="Database holding the recruiting tables"
    )
    snowflake_schema: str = Field(
        default="PUBLIC",
        description="Schema holding the recruiting tables"
    )
    snowflake_warehouse: str = Field(
        default="COMPUTE_WH",
        description="Warehouse that runs directory and campaign queries"
    )
    snowflake_role: Optional[str] = Field(
        default=None,
        description="Role granted read on the directory and write on campaigns"
    )
    snowflake_mock_mode: bool = Field(
        default=False,
        description="Use in-memory directory and stores instead of Snowflake."
    )

    # Export Bucket (R2 or any S3-compatible store)
    r2_account_id: str = Field(
        default="",
        description="Cloudflare account that owns the export bucket"
    )
    r2_access_key_id: str = Field(
        default="",
        description="Access key id for the export bucket"
    )
    r2_secret_access_key: str = Field(
        default="",
        description="Secret key for the export bucket"
    )
    r2_bucket_name: str = Field(
        default="coach-exports",
        description="Bucket holding exported coach lists"
    )
    r2_endpoint_url: Optional[str] = Field(
        default=None,
        description="S3-compatible endpoint. Derived from the account id when unset."
    )
    r2_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real R2."
    )

    # Coach Export Behavior
    default_page_size: int = Field(
        default=50,
        description="Page size for the coach table when the client sends none."
    )
    export_page_size: int = Field(
        default=10000,
        description="Maximum coaches fetched for one export. Larger results are truncated."
    )
    export_url_ttl_seconds: int = Field(
        default=60 * 60 * 24 * 7,
        description="Lifetime of the signed download URL stored on the lead list."
    )
    export_rollback_on_record_failure: bool = Field(
        default=True,
        description=(
            "Delete the uploaded file when the lead list record cannot be written. "
            "When false the file is kept and the export still succeeds."
        )
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level name"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated dashboard origins allowed by CORS, or * locally"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Configured API keys, blanks dropped."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def r2_endpoint(self) -> str:
        """R2 endpoint URL, https://{account_id}.r2.cloudflarestorage.com unless overridden."""
        if self.r2_endpoint_url:
            return self.r2_endpoint_url
        return f"https://{self.r2_account_id}.r2.cloudflarestorage.com"

    def validate_required_fields(self) -> list[str]:
        """
        List required settings that are missing, given the mock modes.

        Separate from Pydantic validation because requirements depend on
        whether we're in mock mode.
        """
        missing = []

        if not self.snowflake_mock_mode:
            if not self.snowflake_account:
                missing.append("SNOWFLAKE_ACCOUNT")
            if not self.snowflake_user:
                missing.append("SNOWFLAKE_USER")
            if not (
                self.snowflake_password
                or self.snowflake_private_key_path
                or self.snowflake_private_key_base64
            ):
                missing.append("SNOWFLAKE_PASSWORD or SNOWFLAKE_PRIVATE_KEY_PATH")

        if not self.r2_mock_mode:
            if not self.r2_account_id and not self.r2_endpoint_url:
                missing.append("R2_ACCOUNT_ID")
            if not self.r2_access_key_id:
                missing.append("R2_ACCESS_KEY_ID")
            if not self.r2_secret_access_key:
                missing.append("R2_SECRET_ACCESS_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
