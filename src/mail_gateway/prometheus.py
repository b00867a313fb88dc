# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Prometheus metrics for the mail gateway.

All metrics use the ``mail_gateway_`` prefix and are labeled by mail mode.

Metrics exposed:
    - ``mail_gateway_sent_total``: Counter of messages accepted by a transport.
    - ``mail_gateway_errors_total``: Counter of failed sends, by error code.
    - ``mail_gateway_rejected_total``: Counter of requests refused with 400.

Example:
    Scraping via the REST API::

        GET /metrics
"""

from prometheus_client import CollectorRegistry, Counter, generate_latest


class GatewayMetrics:
    """Prometheus metrics collector for the gateway.

    Attributes:
        registry: The Prometheus CollectorRegistry holding all metrics.
        sent: Counter tracking successful sends.
        errors: Counter tracking configuration and transport failures.
        rejected: Counter tracking invalid requests.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """Initialize metrics with an optional custom registry.

        Args:
            registry: Optional registry. A private one is created by default,
                so several apps in one process (tests) do not collide.
        """
        self.registry = registry or CollectorRegistry()
        self.sent = Counter(
            "mail_gateway_sent_total",
            "Total messages accepted by a transport",
            ["mode"],
            registry=self.registry,
        )
        self.errors = Counter(
            "mail_gateway_errors_total",
            "Total failed send attempts",
            ["mode", "code"],
            registry=self.registry,
        )
        self.rejected = Counter(
            "mail_gateway_rejected_total",
            "Total send requests rejected as invalid",
            registry=self.registry,
        )

    def inc_sent(self, mode: str) -> None:
        self.sent.labels(mode=mode or "unknown").inc()

    def inc_error(self, mode: str, code: str) -> None:
        self.errors.labels(mode=mode or "unknown", code=code).inc()

    def inc_rejected(self) -> None:
        self.rejected.inc()

    def generate_latest(self) -> bytes:
        """Export all metrics in Prometheus text exposition format."""
        return generate_latest(self.registry)
