"""Prometheus metrics for letter generation and the document lifecycle."""

from prometheus_client import Counter, Histogram

# Generation metrics
letter_generation_latency_ms = Histogram(
    "letter_generation_latency_ms",
    "Text generation latency in milliseconds",
    ["provider", "outcome"],
    buckets=[500, 1000, 2000, 5000, 10000, 20000, 40000, 80000],
)

letter_generation_errors_total = Counter(
    "letter_generation_errors_total",
    "Total text generation failures",
    ["provider"],
)

# Document lifecycle metrics
documents_created_total = Counter(
    "documents_created_total",
    "Total documents stored",
)

documents_expired_total = Counter(
    "documents_expired_total",
    "Total documents removed by TTL expiry",
)

payment_confirmations_total = Counter(
    "payment_confirmations_total",
    "Total payment confirmation events processed",
    ["outcome"],
)


class PrometheusGenerationMetrics:
    """Prometheus-based generation metrics implementation."""

    def record_latency(self, provider: str, outcome: str, latency_ms: float) -> None:
        """Record generation latency."""
        letter_generation_latency_ms.labels(provider=provider, outcome=outcome).observe(latency_ms)

    def inc_error(self, provider: str) -> None:
        """Increment error counter."""
        letter_generation_errors_total.labels(provider=provider).inc()
