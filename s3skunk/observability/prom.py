"""
Loopback diagnostics endpoint for watching the benchmark process while it runs.
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, start_http_server
from prometheus_client import GC_COLLECTOR, PLATFORM_COLLECTOR, PROCESS_COLLECTOR

from s3skunk.configuration import DIAGNOSTICS_ADDRESS

logger = logging.getLogger(__name__)


class DiagnosticsExporter:
    """Prometheus exporter bound to the loopback interface.

    Exposes process, platform and garbage collector metrics only. Download
    results never flow through it.
    """

    def __init__(self, port: int, address: str = DIAGNOSTICS_ADDRESS,
                 registry: Optional[CollectorRegistry] = None):
        self.port = port
        self.address = address
        self.server_started = False

        # Private registry so repeated construction (tests, sweeps) never collides
        self.registry = registry or CollectorRegistry()
        if registry is None:
            for collector in (PROCESS_COLLECTOR, PLATFORM_COLLECTOR, GC_COLLECTOR):
                self.registry.register(collector)

    def start_server(self):
        """Start the HTTP server; failures are logged and ignored."""
        if self.server_started:
            return
        try:
            start_http_server(self.port, addr=self.address, registry=self.registry)
            self.server_started = True
            logger.info(f"Diagnostics endpoint listening on http://{self.address}:{self.port}/metrics")
        except OSError as e:
            logger.error(f"Failed to start diagnostics endpoint: {e}")
