"""
Tests for configuration validators, extraction IDs and the metrics collector.
"""

import numpy as np
import pytest

from app.config import Config, config
from app.services.observability import (
    MetricsCollector, PerformanceMetrics, get_metrics_collector,
    performance_monitor, performance_tracked
)
from app.utils.ids import generate_extraction_id


def test_default_config_values():
    """Test defaults match the browser tool's slider and loop"""
    assert config.MIN_COLORS == 2
    assert config.MAX_COLORS == 10
    assert config.MAX_ITERATIONS == 20
    assert config.SAMPLE_STEP == 4


@pytest.mark.parametrize("k,expected", [(1, False), (2, True), (10, True), (11, False)])
def test_validate_color_count(k, expected):
    assert Config.validate_color_count(k) is expected


def test_validate_iterations_and_step():
    assert Config.validate_iterations(20)
    assert not Config.validate_iterations(0)
    assert Config.validate_sample_step(1)
    assert not Config.validate_sample_step(0)


def test_extraction_id_format():
    extraction_id = generate_extraction_id()
    assert extraction_id.startswith("palette-")
    prefix, timestamp, suffix = extraction_id.split("-")
    assert len(timestamp) == 14 and timestamp.isdigit()
    assert len(suffix) == 8
    assert generate_extraction_id() != extraction_id


class TestMetricsCollector:
    """Test metrics aggregation"""

    def _metric(self, name, duration, error=None):
        return PerformanceMetrics(
            operation_name=name, duration_ms=duration, memory_usage_mb=10.0,
            point_count=100, cluster_count=5, timestamp=0.0, error=error
        )

    def test_operation_stats(self):
        collector = MetricsCollector()
        collector.record_performance(self._metric("color_clustering", 10.0))
        collector.record_performance(self._metric("color_clustering", 30.0, error="boom"))

        stats = collector.get_operation_stats("color_clustering")
        assert stats["total_calls"] == 2
        assert stats["error_count"] == 1
        assert stats["error_rate"] == 0.5
        assert stats["duration_stats"]["mean_ms"] == pytest.approx(20.0)

    def test_unknown_operation(self):
        assert MetricsCollector().get_operation_stats("missing") == {}

    def test_recent_metrics_and_reset(self):
        collector = MetricsCollector(max_history=2)
        for duration in (1.0, 2.0, 3.0):
            collector.record_performance(self._metric("op", duration))

        recent = collector.get_recent_metrics()
        assert [m["duration_ms"] for m in recent] == [2.0, 3.0]

        collector.reset()
        assert collector.get_all_stats()["total_operations"] == 0


def test_performance_monitor_records_errors():
    with pytest.raises(RuntimeError):
        with performance_monitor("failing_op", point_count=3):
            raise RuntimeError("boom")

    recent = get_metrics_collector().get_recent_metrics(limit=1)
    assert recent[0]["operation_name"] == "failing_op"
    assert recent[0]["error"] == "boom"



def test_performance_monitor_yields_duration():
    with performance_monitor("timed_op") as timing:
        pass

    recent = get_metrics_collector().get_recent_metrics(limit=1)[0]
    assert timing["duration_ms"] == recent["duration_ms"]
    assert timing["duration_ms"] >= 0.0


class TestPerformanceTracked:
    """Test the tracking decorator"""

    def test_counts_points_and_k(self):
        @performance_tracked("tracked_op")
        def count(points, k=0):
            return len(points)

        assert count([[0, 0, 0]] * 7, k=2) == 7

        recent = get_metrics_collector().get_recent_metrics(limit=1)[0]
        assert recent["operation_name"] == "tracked_op"
        assert recent["point_count"] == 7
        assert recent["cluster_count"] == 2

    def test_image_shape_counts_pixels(self):
        @performance_tracked("image_op")
        def noop(image):
            return image

        noop(np.zeros((4, 5, 3), dtype=np.uint8))

        recent = get_metrics_collector().get_recent_metrics(limit=1)[0]
        assert recent["point_count"] == 20

    def test_records_errors(self):
        @performance_tracked("broken_op")
        def broken(points):
            raise ValueError("bad points")

        with pytest.raises(ValueError):
            broken([[1, 2, 3]])

        stats = get_metrics_collector().get_operation_stats("broken_op")
        assert stats["error_count"] == 1
