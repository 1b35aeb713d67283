"""
Observability module for the palette extraction pipeline.

Provides timing, memory tracking and metrics collection around
clustering and palette construction.
"""

from .metrics import (
    PerformanceMetrics,
    MetricsCollector,
    get_metrics_collector,
    reset_metrics,
    performance_monitor,
    performance_tracked,
)

__all__ = [
    'PerformanceMetrics',
    'MetricsCollector',
    'get_metrics_collector',
    'reset_metrics',
    'performance_monitor',
    'performance_tracked',
]
