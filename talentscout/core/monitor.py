"""Performance monitor: timings for pipeline stages and remote API calls.

One monitor is constructed per pipeline run and passed to every component
that needs it.
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from talentscout.core.schemas import ApiStat, OperationStat, PerformanceSummary

logger = logging.getLogger(__name__)

# Recommendation thresholds.
SLOW_OPERATION_SHARE = 20.0
CHATTY_API_CALLS = 10
SLOW_API_AVERAGE_MS = 2000.0
TOTAL_API_CALLS_WARNING = 50


class _ApiAggregate:
    def __init__(self) -> None:
        self.count = 0
        self.total_ms = 0.0
        self.min_ms = float("inf")
        self.max_ms = 0.0

    def add(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)


class PerformanceMonitor:
    """Collects ``(name, duration_ms)`` events.

    Usage::

        monitor = PerformanceMonitor()
        with monitor.operation("Search"):
            ...
        monitor.track_api_call("search", 120.0)
        monitor.log_report()
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._started = clock()
        self._operations: dict[str, float] = {}
        self._api_calls: dict[str, _ApiAggregate] = {}

    @contextmanager
    def operation(self, name: str) -> Iterator[None]:
        """Time the enclosed block and record it under ``name``."""
        start = self._clock()
        logger.debug("Starting: %s", name)
        try:
            yield
        finally:
            self.track_operation(name, (self._clock() - start) * 1000)

    def track_operation(self, name: str, duration_ms: float) -> None:
        # Repeated names accumulate.
        self._operations[name] = self._operations.get(name, 0.0) + duration_ms
        logger.debug("Completed: %s (%.0fms)", name, duration_ms)

    def track_api_call(self, name: str, duration_ms: float) -> None:
        self._api_calls.setdefault(name, _ApiAggregate()).add(duration_ms)

    def api_call_count(self, name: str | None = None) -> int:
        if name is not None:
            agg = self._api_calls.get(name)
            return agg.count if agg else 0
        return sum(a.count for a in self._api_calls.values())

    def summary(self) -> PerformanceSummary:
        total_ms = max((self._clock() - self._started) * 1000, 1e-9)

        operations = sorted(
            (
                OperationStat(
                    name=name,
                    duration_ms=round(ms, 2),
                    percentage=round(ms / total_ms * 100, 2),
                )
                for name, ms in self._operations.items()
            ),
            key=lambda op: op.duration_ms,
            reverse=True,
        )
        api_calls = sorted(
            (
                ApiStat(
                    name=name,
                    count=agg.count,
                    total_ms=round(agg.total_ms, 2),
                    average_ms=round(agg.total_ms / agg.count, 2),
                    min_ms=round(agg.min_ms, 2),
                    max_ms=round(agg.max_ms, 2),
                )
                for name, agg in self._api_calls.items()
            ),
            key=lambda api: api.total_ms,
            reverse=True,
        )
        return PerformanceSummary(
            total_ms=round(total_ms, 2),
            operations=operations,
            api_calls=api_calls,
            recommendations=self._recommendations(operations, api_calls),
        )

    def _recommendations(
        self,
        operations: list[OperationStat],
        api_calls: list[ApiStat],
    ) -> list[str]:
        recs: list[str] = []
        for op in operations:
            if op.percentage > SLOW_OPERATION_SHARE:
                recs.append(f"{op.name} takes {op.percentage}% of total time - consider optimization")
        for api in api_calls:
            if api.count > CHATTY_API_CALLS:
                recs.append(
                    f"{api.name}: {api.count} calls taking {api.total_ms:.0f}ms - "
                    "consider batching or caching"
                )
            if api.average_ms > SLOW_API_AVERAGE_MS:
                recs.append(
                    f"{api.name}: slow average response ({api.average_ms:.0f}ms) - "
                    "check network or API limits"
                )
        total_calls = sum(api.count for api in api_calls)
        if total_calls > TOTAL_API_CALLS_WARNING:
            recs.append(f"High API call count ({total_calls}) - reduce redundant calls")
        return recs

    def log_report(self) -> None:
        """Write the summary to the log at INFO level."""
        summary = self.summary()
        logger.info("Total execution time: %.0fms", summary.total_ms)
        for op in summary.operations:
            logger.info("  %s: %.0fms (%.1f%%)", op.name, op.duration_ms, op.percentage)
        for api in summary.api_calls:
            logger.info(
                "  %s: %d calls, %.0fms total, %.0fms avg",
                api.name, api.count, api.total_ms, api.average_ms,
            )
        for rec in summary.recommendations:
            logger.info("  Recommendation: %s", rec)
