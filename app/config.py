"""Application configuration using Pydantic settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Base-14 fonts PyMuPDF ships without embedding a font file
BUILTIN_FONTS = {
    "helv", "heit", "hebo", "hebi",
    "tiro", "tiit", "tibo", "tibi",
    "cour", "coit", "cobo", "cobi",
    "symb", "zadb",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="PDF Field Stamping Service")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    # Storage
    upload_dir: str = Field(default="./uploads")
    signed_dir: str = Field(default="./signed")
    max_upload_size: int = Field(default=15 * 1024 * 1024, description="Bytes")

    # S3 mirror for signed output
    s3_enabled: bool = Field(default=False)
    s3_bucket_name: Optional[str] = Field(default=None)
    s3_region: str = Field(default="us-east-1")
    s3_access_key: Optional[str] = Field(default=None)
    s3_secret_key: Optional[str] = Field(default=None)
    s3_endpoint_url: Optional[str] = Field(default=None)
    s3_presigned_url_expiration: int = Field(default=3600)

    # Rendering defaults
    default_font: str = Field(default="helv")
    text_font_size: float = Field(default=10.0, gt=0)
    text_left_inset: float = Field(default=2.0)
    text_placeholder: str = Field(default="Text")
    date_format: str = Field(default="%Y-%m-%d")
    radio_border_width: float = Field(default=1.0, ge=0)

    # Audit
    audit_enabled: bool = Field(default=True)
    audit_log_path: Optional[str] = Field(
        default=None, description="JSON-lines audit file; in-memory when unset"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @field_validator("default_font")
    @classmethod
    def validate_default_font(cls, v: str) -> str:
        """Validate that the default font is a built-in face."""
        if v.lower() not in BUILTIN_FONTS:
            raise ValueError(f"Default font must be one of {sorted(BUILTIN_FONTS)}")
        return v.lower()

    def get_upload_dir(self) -> Path:
        """Get upload directory as Path object."""
        return Path(self.upload_dir)

    def get_signed_dir(self) -> Path:
        """Get signed output directory as Path object."""
        return Path(self.signed_dir)

    def ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        self.get_upload_dir().mkdir(parents=True, exist_ok=True)
        self.get_signed_dir().mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
