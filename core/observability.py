# ============================================================================
# OBSERVABILITY
# ============================================================================
# STATUS: Core - Metrics collection
# PURPOSE: Counters for uploads, pings and authorization refreshes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Observability

In-process metrics collector with optional OpenTelemetry export.

Declared metrics:
- linker_entity_upload_counter{status}    entity upload outcomes
- linker_ping_counter{pathname}           calls to /ping
- linker_authorizations_refresh_counter{result}

Usage:
    from core.observability import get_metrics

    get_metrics().counter("linker_entity_upload_counter", tags={"status": "success"})
"""

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricDeclaration:
    """Name, help text and allowed label names of a metric."""
    name: str
    help: str
    label_names: Tuple[str, ...] = ()


METRIC_DECLARATIONS: Dict[str, MetricDeclaration] = {
    decl.name: decl
    for decl in (
        MetricDeclaration(
            "linker_entity_upload_counter",
            "Count entity upload requests",
            ("status",),
        ),
        MetricDeclaration(
            "linker_ping_counter",
            "Count calls to ping",
            ("pathname",),
        ),
        MetricDeclaration(
            "linker_authorizations_refresh_counter",
            "Count authorizations refreshes",
            ("result",),
        ),
    )
}


# ============================================================================
# METRICS
# ============================================================================

@dataclass
class MetricPoint:
    """A single metric data point."""
    name: str
    value: float
    timestamp: float = field(default_factory=time.time)
    tags: Dict[str, str] = field(default_factory=dict)


class MetricsCollector:
    """
    Collects counter metrics.

    Counters are keyed by name plus sorted tags. Undeclared metric
    names or label names raise ValueError so typos surface in tests.
    """

    MAX_POINTS = 10_000

    def __init__(self, declarations: Optional[Dict[str, MetricDeclaration]] = None):
        self._declarations = declarations if declarations is not None else METRIC_DECLARATIONS
        self._counters: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], float] = {}
        self._points: List[MetricPoint] = []
        self._lock = threading.Lock()
        self._otel_counters: Dict[str, object] = {}
        self._otel_meter = None
        self._initialize_otel()

    def _initialize_otel(self) -> None:
        """Try to initialize OpenTelemetry meter."""
        if os.getenv("ENABLE_METRICS", "true").lower() != "true":
            return
        try:
            from opentelemetry import metrics
            self._otel_meter = metrics.get_meter("linker-server")
        except ImportError:
            logger.debug("OpenTelemetry metrics not available")

    def _validate(self, name: str, tags: Dict[str, str]) -> None:
        declaration = self._declarations.get(name)
        if declaration is None:
            raise ValueError(f"Undeclared metric: {name}")
        unknown = set(tags) - set(declaration.label_names)
        if unknown:
            raise ValueError(f"Unknown labels for {name}: {sorted(unknown)}")

    def counter(
        self,
        name: str,
        value: float = 1.0,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Increment a counter metric.

        Args:
            name: Declared metric name
            value: Value to add (default 1)
            tags: Label values
        """
        tags = dict(tags or {})
        self._validate(name, tags)
        key = (name, tuple(sorted(tags.items())))

        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + value
            self._points.append(MetricPoint(name=name, value=value, tags=tags))
            if len(self._points) > self.MAX_POINTS:
                del self._points[: len(self._points) - self.MAX_POINTS]

        if self._otel_meter is not None:
            otel_counter = self._otel_counters.get(name)
            if otel_counter is None:
                otel_counter = self._otel_meter.create_counter(
                    name, description=self._declarations[name].help
                )
                self._otel_counters[name] = otel_counter
            otel_counter.add(value, attributes=tags)

        logger.debug(f"Metric counter: {name}{tags}={value}")

    def get_counter(self, name: str, tags: Optional[Dict[str, str]] = None) -> float:
        """Current value of a counter (0 if never incremented)."""
        key = (name, tuple(sorted((tags or {}).items())))
        with self._lock:
            return self._counters.get(key, 0)

    def snapshot(self) -> Dict[str, List[Dict[str, object]]]:
        """Counters grouped by metric name, for the /metrics endpoint."""
        result: Dict[str, List[Dict[str, object]]] = {}
        with self._lock:
            for (name, tags), value in sorted(self._counters.items()):
                result.setdefault(name, []).append({"labels": dict(tags), "value": value})
        return result

    def get_metrics(self) -> List[MetricPoint]:
        """Get recent metric points."""
        with self._lock:
            return self._points.copy()

    def clear(self) -> None:
        """Clear collected metrics."""
        with self._lock:
            self._counters.clear()
            self._points.clear()


# ============================================================================
# GLOBAL INSTANCE
# ============================================================================

_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get the global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MetricDeclaration",
    "METRIC_DECLARATIONS",
    "MetricPoint",
    "MetricsCollector",
    "get_metrics",
]
