# src/services/health_checker.py

"""Connectivity checks for every upstream the service depends on."""

import asyncio
import logging

from src.config.settings import Settings
from src.models.health_result import HealthResult
from src.services.price_service import load_price_source
from src.sources.base_source import BaseSource
from src.sources.increases_client import IncreasesClient
from src.sources.surtidor_source import SurtidorSource

logger = logging.getLogger("naftas.health")


def upstream_clients() -> list[BaseSource]:
    """One client per upstream: each price source, then the others."""
    clients: list[BaseSource] = [
        load_price_source(source["id"])
        for source in Settings.AVAILABLE_SOURCES
    ]
    clients.append(SurtidorSource())
    clients.append(IncreasesClient())
    return clients


class HealthChecker:
    """Runs every client's health check concurrently."""

    def __init__(self, clients: list[BaseSource] | None = None) -> None:
        self.clients = clients if clients is not None else upstream_clients()

    async def check_all(self) -> list[HealthResult]:
        """Check all clients, then release their sessions."""
        try:
            results: list[HealthResult] = list(
                await asyncio.gather(
                    *(asyncio.to_thread(c.check_health) for c in self.clients)
                )
            )
        finally:
            for client in self.clients:
                client.close()

        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
