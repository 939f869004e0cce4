"""
Prometheus metrics for the feedback submission pipeline.

Defines and exposes metrics for:
- Eligibility decisions (by reason)
- Accepted submissions (by Mula rating)
- Recorded attempts (by status) and attempt-record failures
- Eligibility check latency

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from mulaboard.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)


class MetricsCollector:
    """
    Prometheus metrics collector for MulaBoard.

    Usage:
        metrics = get_metrics()
        metrics.record_eligibility("allowed", latency=0.012)
        metrics.record_submission("golden_mula")
    """

    def __init__(self):
        self.eligibility_decisions = Counter(
            "mulaboard_eligibility_decisions_total",
            "Eligibility gate decisions",
            ["reason"],  # allowed, already_submitted, ip_rate_limited, ...
        )

        self.eligibility_latency = Histogram(
            "mulaboard_eligibility_latency_seconds",
            "Eligibility gate latency",
            buckets=LATENCY_BUCKETS,
        )

        self.submissions = Counter(
            "mulaboard_submissions_total",
            "Accepted feedback submissions",
            ["mula_rating"],
        )

        self.rejections = Counter(
            "mulaboard_submission_rejections_total",
            "Rejected feedback submissions",
            ["reason"],  # honeypot, too_fast, gate reasons, not_found, ...
        )

        self.attempts_recorded = Counter(
            "mulaboard_attempts_recorded_total",
            "Submission attempts written to the audit trail",
            ["status"],
        )

        self.attempt_record_failures = Counter(
            "mulaboard_attempt_record_failures_total",
            "Failures while writing submission attempts",
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """Start Prometheus metrics HTTP server."""
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    def record_eligibility(self, reason: str, latency: float | None = None) -> None:
        """
        Record an eligibility decision.

        Args:
            reason: Rejection reason, or "allowed"
            latency: Optional check latency in seconds
        """
        self.eligibility_decisions.labels(reason=reason).inc()
        if latency is not None:
            self.eligibility_latency.observe(latency)

    def record_submission(self, mula_rating: str) -> None:
        self.submissions.labels(mula_rating=mula_rating).inc()

    def record_rejection(self, reason: str) -> None:
        self.rejections.labels(reason=reason).inc()

    def record_attempt(self, status: str) -> None:
        self.attempts_recorded.labels(status=status).inc()

    def record_attempt_failure(self) -> None:
        self.attempt_record_failures.inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
