"""Application configuration from environment variables.

This module provides the AppSettings class which loads immutable process
configuration at startup: bind address and port, AWS region, the Parameter
Store names that describe the registry, and the timeouts applied to the
startup reads.

The registry itself (micro-frontend list, template location, downstream
identifiers) is NOT configured here. It lives in the Parameter Store and is
read once by the RegistryLoader.
"""

from typing import Dict, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from composer.constants import (
    DEFAULT_DOWNSTREAM_PARAMETERS,
    DEFAULT_MFE_LIST_PARAMETER,
    DEFAULT_PORT,
    DEFAULT_REGION,
    DEFAULT_TEMPLATE_BUCKET_PARAMETER,
    DEFAULT_TEMPLATE_KEY_PARAMETER,
)


class AppSettings(BaseSettings):
    """Static configuration loaded from environment variables.

    Settings can be overridden via environment variables with the COMPOSER_
    prefix. For example, log_level can be set via COMPOSER_LOG_LEVEL. The
    port and region also honour the plain PORT and REGION variables set by
    the container task definition.

    Attributes:
        api_host: Server bind address
        api_port: Server port
        region: AWS region for Parameter Store and S3
        aws_endpoint_url: Endpoint override (LocalStack/MinIO), None for AWS
        template_bucket_parameter: Parameter holding the template bucket name
        template_key_parameter: Parameter holding the template object key
        mfe_list_parameter: Parameter holding the JSON micro-frontend list
        downstream_parameters: Alias -> parameter name of downstream identifiers
        startup_connect_timeout: Connect timeout for startup reads (seconds)
        startup_read_timeout: Read timeout for startup reads (seconds)
        startup_max_attempts: Total attempts per startup read (1 = no retry)
        stream_chunk_size: Size of body chunks written to the response
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPOSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(
        default=DEFAULT_PORT,
        validation_alias=AliasChoices("PORT", "COMPOSER_API_PORT"),
    )

    region: str = Field(
        default=DEFAULT_REGION,
        validation_alias=AliasChoices("REGION", "COMPOSER_REGION"),
    )
    aws_endpoint_url: Optional[str] = Field(default=None)

    template_bucket_parameter: str = Field(default=DEFAULT_TEMPLATE_BUCKET_PARAMETER)
    template_key_parameter: str = Field(default=DEFAULT_TEMPLATE_KEY_PARAMETER)
    mfe_list_parameter: str = Field(default=DEFAULT_MFE_LIST_PARAMETER)
    downstream_parameters: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DOWNSTREAM_PARAMETERS)
    )

    startup_connect_timeout: float = Field(default=5.0, gt=0)
    startup_read_timeout: float = Field(default=10.0, gt=0)
    startup_max_attempts: int = Field(
        default=1,
        ge=1,
        description="Total attempts per startup read; 1 disables retries",
    )

    stream_chunk_size: int = Field(default=16384, gt=0)

    log_level: str = Field(default="INFO")

    def boto_config_kwargs(self) -> dict:
        """Build botocore Config keyword arguments for startup reads."""
        return {
            "region_name": self.region,
            "connect_timeout": self.startup_connect_timeout,
            "read_timeout": self.startup_read_timeout,
            "retries": {
                "total_max_attempts": self.startup_max_attempts,
                "mode": "standard",
            },
        }


_app_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get singleton instance of static settings.

    Settings are loaded once and cached for application lifetime.

    Returns:
        AppSettings instance
    """
    global _app_settings

    if _app_settings is None:
        _app_settings = AppSettings()

    return _app_settings
