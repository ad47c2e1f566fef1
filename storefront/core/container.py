"""Dependency-injection container.

Wires the storefront services together from the process-wide configuration.
Tests override individual providers instead of patching module globals.
"""

from dependency_injector import containers, providers

from storefront.api.quotation_orchestrator import QuotationOrchestrator
from storefront.config import config as app_config
from storefront.services.exchange_rate import ExchangeRateService
from storefront.services.logistics import LogisticsClient
from storefront.services.shipping import ShippingService


class Container(containers.DeclarativeContainer):
    """DI container for the application."""

    config = providers.Object(app_config)

    # Upstream clients
    logistics_client = providers.Singleton(
        LogisticsClient,
        settings=config.provided.logistics,
        timeout=config.provided.server.timeout,
    )
    exchange_rate_service = providers.Singleton(
        ExchangeRateService,
        settings=config.provided.rate_source,
        timeout=config.provided.server.timeout,
    )

    # Pipeline
    shipping_service = providers.Singleton(ShippingService, client=logistics_client)
    quotation_orchestrator = providers.Singleton(
        QuotationOrchestrator,
        shipping_service=shipping_service,
        exchange_rate_service=exchange_rate_service,
    )
