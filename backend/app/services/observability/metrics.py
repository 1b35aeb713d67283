"""
Observability metrics collection for the palette extraction pipeline.

Provides per-operation timing and memory tracking for clustering and
palette construction, recorded into a thread-safe in-process collector.
"""

import time
import psutil
from typing import Dict, Any, Optional, List
from functools import wraps
from dataclasses import dataclass, asdict
from contextlib import contextmanager
import threading
from collections import defaultdict, deque
import numpy as np
from loguru import logger

from app.config import config


@dataclass
class PerformanceMetrics:
    """Performance metrics for a palette extraction operation."""
    operation_name: str
    duration_ms: float
    memory_usage_mb: float
    point_count: int
    cluster_count: int
    timestamp: float
    error: Optional[str] = None


class MetricsCollector:
    """Thread-safe metrics collector for palette extraction operations."""

    def __init__(self, max_history: int = 1000):
        self.max_history = max_history
        self._lock = threading.Lock()
        self._metrics_history: deque = deque(maxlen=max_history)
        self._operation_counts = defaultdict(int)
        self._error_counts = defaultdict(int)
        self._performance_stats = defaultdict(list)

    def record_performance(self, metrics: PerformanceMetrics) -> None:
        """Record performance metrics for an operation."""
        with self._lock:
            self._metrics_history.append(metrics)
            self._operation_counts[metrics.operation_name] += 1

            if metrics.error:
                self._error_counts[metrics.operation_name] += 1

            self._performance_stats[metrics.operation_name].append({
                'duration_ms': metrics.duration_ms,
                'memory_mb': metrics.memory_usage_mb,
            })

            # Keep only recent stats to prevent memory growth
            if len(self._performance_stats[metrics.operation_name]) > 100:
                self._performance_stats[metrics.operation_name].pop(0)

    def _operation_stats(self, operation_name: str) -> Dict[str, Any]:
        stats = self._performance_stats.get(operation_name)
        if not stats:
            return {}

        durations = [s['duration_ms'] for s in stats]
        memory_usage = [s['memory_mb'] for s in stats]

        return {
            'operation_name': operation_name,
            'total_calls': self._operation_counts[operation_name],
            'error_count': self._error_counts[operation_name],
            'error_rate': self._error_counts[operation_name] / max(1, self._operation_counts[operation_name]),
            'duration_stats': {
                'mean_ms': float(np.mean(durations)),
                'median_ms': float(np.median(durations)),
                'p95_ms': float(np.percentile(durations, 95)),
                'min_ms': float(np.min(durations)),
                'max_ms': float(np.max(durations))
            },
            'memory_stats': {
                'mean_mb': float(np.mean(memory_usage)),
                'peak_mb': float(np.max(memory_usage))
            }
        }

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """Get aggregated statistics for a specific operation."""
        with self._lock:
            return self._operation_stats(operation_name)

    def get_all_stats(self) -> Dict[str, Any]:
        """Get aggregated statistics for all operations."""
        with self._lock:
            all_stats = {
                name: self._operation_stats(name)
                for name in self._operation_counts.keys()
            }
            total_operations = sum(self._operation_counts.values())
            total_errors = sum(self._error_counts.values())

            return {
                'operations': all_stats,
                'total_operations': total_operations,
                'total_errors': total_errors,
                'overall_error_rate': total_errors / max(1, total_operations)
            }

    def get_recent_metrics(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Get the most recent performance metrics."""
        with self._lock:
            recent = list(self._metrics_history)[-limit:]
            return [asdict(metric) for metric in recent]

    def reset(self) -> None:
        """Drop all recorded metrics."""
        with self._lock:
            self._metrics_history.clear()
            self._operation_counts.clear()
            self._error_counts.clear()
            self._performance_stats.clear()


# Global metrics collector instance
_metrics_collector = MetricsCollector(max_history=config.METRICS_HISTORY)


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    return _metrics_collector


def reset_metrics() -> None:
    """Reset the global metrics collector."""
    _metrics_collector.reset()


def _memory_mb() -> float:
    return psutil.Process().memory_info().rss / 1024 / 1024


@contextmanager
def performance_monitor(operation_name: str, point_count: int = 0, cluster_count: int = 0):
    """
    Context manager for monitoring performance of operations.

    Yields a dict whose ``duration_ms`` is filled in when the block exits.
    """
    start_time = time.perf_counter()
    start_memory = _memory_mb()
    timing = {"duration_ms": 0.0}

    error_msg = None

    try:
        yield timing
    except Exception as e:
        error_msg = str(e)
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        timing["duration_ms"] = duration_ms
        end_memory = _memory_mb()

        metrics = PerformanceMetrics(
            operation_name=operation_name,
            duration_ms=duration_ms,
            memory_usage_mb=max(end_memory, start_memory),
            point_count=point_count,
            cluster_count=cluster_count,
            timestamp=time.time(),
            error=error_msg
        )

        if config.METRICS_ENABLED:
            _metrics_collector.record_performance(metrics)

        if error_msg:
            logger.error(f"Operation {operation_name} failed after {metrics.duration_ms:.1f}ms: {error_msg}")
        else:
            logger.info(f"Operation {operation_name} completed in {metrics.duration_ms:.1f}ms "
                        f"(points: {point_count}, clusters: {cluster_count}, "
                        f"memory: {metrics.memory_usage_mb:.1f}MB)")



def _count_points(arg) -> int:
    shape = getattr(arg, 'shape', None)
    if shape is not None:
        if len(shape) == 3:
            # Decoded image (H, W, C)
            return shape[0] * shape[1]
        if len(shape) == 1:
            # Flat RGBA byte buffer
            return shape[0] // 4
        return shape[0] if shape else 0
    return len(arg)


def performance_tracked(operation_name: str):
    """Decorator for automatically tracking function performance."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            point_count = 0
            cluster_count = kwargs.get('k', 0) or 0

            # First array-like argument is taken as the pixel/point input
            for arg in args:
                if hasattr(arg, '__len__') and not isinstance(arg, (str, bytes)):
                    point_count = _count_points(arg)
                    break

            with performance_monitor(operation_name, point_count, cluster_count):
                return func(*args, **kwargs)
        return wrapper
    return decorator
