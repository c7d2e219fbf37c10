"""Tests for the performance monitor."""

import logging

import pytest

from talentscout.core.monitor import PerformanceMonitor


class StepClock:
    """Returns the queued values in order, then repeats the last one."""

    def __init__(self, *values: float) -> None:
        self.values = list(values)

    def __call__(self) -> float:
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


class TestPerformanceMonitor:
    def test_operation_context_manager(self) -> None:
        # started, op start, op end, summary
        monitor = PerformanceMonitor(clock=StepClock(0.0, 0.0, 0.5, 1.0))
        with monitor.operation("Search"):
            pass
        summary = monitor.summary()
        assert summary.total_ms == pytest.approx(1000.0)
        op = summary.operations[0]
        assert op.name == "Search"
        assert op.duration_ms == pytest.approx(500.0)
        assert op.percentage == pytest.approx(50.0)

    def test_operation_recorded_on_exception(self) -> None:
        monitor = PerformanceMonitor()
        with pytest.raises(RuntimeError):
            with monitor.operation("Boom"):
                raise RuntimeError("x")
        assert [op.name for op in monitor.summary().operations] == ["Boom"]

    def test_repeated_operations_accumulate(self) -> None:
        monitor = PerformanceMonitor()
        monitor.track_operation("Batch", 100)
        monitor.track_operation("Batch", 50)
        ops = monitor.summary().operations
        assert len(ops) == 1
        assert ops[0].duration_ms == 150

    def test_api_aggregates(self) -> None:
        monitor = PerformanceMonitor()
        for ms in (100, 300, 200):
            monitor.track_api_call("profile", ms)
        monitor.track_api_call("search", 50)

        api = {a.name: a for a in monitor.summary().api_calls}
        assert api["profile"].count == 3
        assert api["profile"].total_ms == 600
        assert api["profile"].average_ms == 200
        assert api["profile"].min_ms == 100
        assert api["profile"].max_ms == 300
        assert monitor.api_call_count() == 4
        assert monitor.api_call_count("missing") == 0

    def test_sorted_by_duration(self) -> None:
        monitor = PerformanceMonitor()
        monitor.track_operation("fast", 10)
        monitor.track_operation("slow", 900)
        assert [op.name for op in monitor.summary().operations] == ["slow", "fast"]


class TestRecommendations:
    def test_chatty_api(self) -> None:
        monitor = PerformanceMonitor()
        for _ in range(11):
            monitor.track_api_call("repos", 10)
        recs = monitor.summary().recommendations
        assert any("repos: 11 calls" in r for r in recs)

    def test_slow_api(self) -> None:
        monitor = PerformanceMonitor()
        monitor.track_api_call("events", 2500)
        assert any("slow average" in r for r in monitor.summary().recommendations)

    def test_high_total(self) -> None:
        monitor = PerformanceMonitor()
        for i in range(51):
            monitor.track_api_call(f"api{i % 9}", 1)
        assert any("High API call count (51)" in r for r in monitor.summary().recommendations)

    def test_quiet_run_has_none(self) -> None:
        monitor = PerformanceMonitor()
        monitor.track_api_call("search", 10)
        assert monitor.summary().recommendations == []


class TestLogReport:
    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        monitor = PerformanceMonitor()
        monitor.track_api_call("profile", 10)
        with caplog.at_level(logging.INFO, logger="talentscout.core.monitor"):
            monitor.log_report()
        assert "Total execution time" in caplog.text
        assert "profile: 1 calls" in caplog.text
