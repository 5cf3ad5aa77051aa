from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

from prometheus_client import Counter as PromCounter
from prometheus_client import Histogram

from conformance.core.errors import ValidationError

# In-process counters (snapshotted by /health and tests)
_NAMED = Counter()

_PROM_VALIDATIONS = PromCounter(
    "conformance_validations_total",
    "Total documents validated",
)

_PROM_ERRORS = PromCounter(
    "conformance_validation_errors_total",
    "Validation errors emitted, by severity",
    ["severity"],
)

_PROM_DURATION = Histogram(
    "conformance_validation_duration_seconds",
    "Wall time of one validation pass",
)


def reset_metrics() -> None:
    """
    Test helper: clears in-process counters to avoid cross-test leakage.
    Prometheus collectors are process-global and are left alone.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def observe_validation(errors: Iterable[ValidationError], duration_s: float) -> None:
    _PROM_VALIDATIONS.inc()
    _PROM_DURATION.observe(max(0.0, duration_s))
    inc_named("validations_total")
    for e in errors:
        sev = e.severity.value
        _PROM_ERRORS.labels(severity=sev).inc()
        inc_named(f"errors_{sev}")


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
