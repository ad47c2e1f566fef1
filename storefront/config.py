"""Configuration management for the storefront backend.

Handles all application configuration including environment variables, the
YAML provider file, and default settings. Provides structured configuration
classes for the logistics provider, the exchange-rate source and the HTTP
server. Configuration is resolved once at import time and is treated as
immutable for the lifetime of the process.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class LogisticsConfig(BaseSettings):
    """GHN logistics provider credentials and endpoints.

    Attributes:
        token: Static API token sent in the ``Token`` header.
        shop_id: Shop/account identifier used for service lookup and fees.
        base_url: Public API root of the provider.
        provinces_path: Province master-data endpoint.
        districts_path: District master-data endpoint.
        wards_path: Ward master-data endpoint.
        services_path: Available shipping services endpoint.
        fee_path: Shipping fee calculation endpoint.
    """
    token: str = Field(default="", validation_alias="GHN_TOKEN")
    shop_id: int = Field(default=0, validation_alias="GHN_SHOP_ID")
    base_url: str = Field(
        default="https://online-gateway.ghn.vn/shiip/public-api",
        validation_alias="GHN_BASE_URL",
    )
    provinces_path: str = "master-data/province"
    districts_path: str = "master-data/district"
    wards_path: str = "master-data/ward"
    services_path: str = "v2/shipping-order/available-services"
    fee_path: str = "v2/shipping-order/fee"

    @property
    def is_configured(self) -> bool:
        """Whether credentials required by the provider are present."""
        return bool(self.token) and self.shop_id > 0


class RateSourceConfig(BaseSettings):
    """Exchange-rate source settings.

    Attributes:
        url: Endpoint prefix; the base currency code is appended to it.
        base_currency: Reference currency the table is anchored at.
        target_currency: Currency whose entry is read from the table.
    """
    url: str = Field(default="https://open.er-api.com/v6/latest", validation_alias="EXCHANGE_RATE_URL")
    base_currency: str = Field(default="USD", validation_alias="EXCHANGE_RATE_BASE")
    target_currency: str = Field(default="VND", validation_alias="EXCHANGE_RATE_TARGET")

    @property
    def endpoint(self) -> str:
        """Full URL of the conversion table for the base currency."""
        return f"{self.url.rstrip('/')}/{self.base_currency}"


class ServerConfig(BaseSettings):
    """HTTP server and outbound transport configuration.

    Attributes:
        port: Port the API listens on.
        listen_host: Interface the API binds to.
        log_level: Root logging level name.
        timeout: Total timeout in seconds applied to every outbound request.
        cors_origins: Comma separated list of allowed browser origins.
    """
    port: int = Field(default=9999, validation_alias="PORT")
    listen_host: str = Field(default="127.0.0.1", validation_alias="LISTEN_HOST")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    timeout: float = Field(default=10.0, validation_alias="HTTP_TIMEOUT")
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias="CORS_ORIGINS",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins as a list, empty entries dropped."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Config:
    """Application configuration manager.

    Centralizes loading of environment variables, the optional
    ``providers.yml`` file and default values. Environment variables always
    win for credentials; the YAML file only supplies endpoint layout.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to storefront/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.server = ServerConfig()

        providers_data = self._load_providers()

        ghn_data = providers_data.get("ghn", {})
        paths = ghn_data.get("paths", {})
        overrides: dict[str, Any] = {
            f"{name}_path": value
            for name, value in paths.items()
            if name in {"provinces", "districts", "wards", "services", "fee"}
        }
        self.logistics = LogisticsConfig(**overrides)
        if "base_url" in ghn_data and "GHN_BASE_URL" not in os.environ:
            self.logistics.base_url = ghn_data["base_url"]

        rate_data = providers_data.get("exchange_rate", {})
        self.rate_source = RateSourceConfig()
        for key, env_name in (
            ("url", "EXCHANGE_RATE_URL"),
            ("base_currency", "EXCHANGE_RATE_BASE"),
            ("target_currency", "EXCHANGE_RATE_TARGET"),
        ):
            if key in rate_data and env_name not in os.environ:
                setattr(self.rate_source, key, rate_data[key])

    def _load_providers(self) -> dict[str, Any]:
        """Load provider endpoint layout from YAML configuration.

        Returns:
            Parsed YAML mapping, empty when the file is missing.
        """
        providers_path = self.config_dir / "providers.yml"
        if not providers_path.exists():
            return {}

        with open(providers_path) as f:
            data = yaml.safe_load(f)

        return data or {}


# Global configuration instance
config = Config()
