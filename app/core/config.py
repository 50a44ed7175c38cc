from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # App Settings
    app_name: str = "Product Catalog API"
    api_version: str = "1.0.0"
    app_host: str = "0.0.0.0"
    app_port: int = Field(default=8000, gt=0, le=65535, description="HTTP listen port")
    debug: bool = False
    api_prefix: str = Field(default="/api", description="Prefix for the product routes")

    # Logging
    log_level: str = "INFO"

    # Validation
    product_name_max_length: int = Field(default=100, gt=0, description="Maximum product name length")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Normalise and check the log level name"""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


settings = Settings()
