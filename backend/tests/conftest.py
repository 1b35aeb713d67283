"""
Test configuration and fixtures for palette extraction tests.
"""
import numpy as np
import pytest


@pytest.fixture
def black_and_white():
    """Two extreme points: pure black and pure white."""
    return [[0, 0, 0], [255, 255, 255]]


@pytest.fixture
def three_color_points():
    """Tight groups around red, green and blue with 30 points each."""
    rng = np.random.default_rng(1234)
    groups = []
    for base in ([220, 20, 30], [25, 200, 40], [30, 40, 210]):
        jitter = rng.integers(-6, 7, size=(30, 3))
        groups.append(np.clip(np.array(base) + jitter, 0, 255))
    return np.vstack(groups).astype(np.uint8)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from app.services.observability import reset_metrics
    reset_metrics()
