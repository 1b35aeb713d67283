"""
Palette Extraction Configuration
Manages environment variables and defaults for the dominant color services.
"""
import os
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return int(value)


class Config:
    """Configuration class for palette extraction services."""

    # Palette size (slider range in the browser tool)
    DEFAULT_COLORS: int = int(os.environ.get("PALETTE_DEFAULT_COLORS", "5"))
    MIN_COLORS: int = int(os.environ.get("PALETTE_MIN_COLORS", "2"))
    MAX_COLORS: int = int(os.environ.get("PALETTE_MAX_COLORS", "10"))

    # Clustering defaults
    MAX_ITERATIONS: int = int(os.environ.get("PALETTE_MAX_ITERATIONS", "20"))
    RNG_SEED: Optional[int] = _optional_int("PALETTE_RNG_SEED")

    # Sampling: keep every Nth pixel of the decoded image
    SAMPLE_STEP: int = int(os.environ.get("PALETTE_SAMPLE_STEP", "4"))

    # Logging and observability
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")
    METRICS_ENABLED: bool = bool(int(os.environ.get("PALETTE_METRICS_ENABLED", "1")))
    METRICS_HISTORY: int = int(os.environ.get("PALETTE_METRICS_HISTORY", "1000"))

    # Perceived brightness weights per mille (ITU-R BT.601 luma)
    BRIGHTNESS_WEIGHTS = (299, 587, 114)

    @classmethod
    def validate_color_count(cls, k: int) -> bool:
        """Validate requested palette size against the configured bounds."""
        return cls.MIN_COLORS <= k <= cls.MAX_COLORS

    @classmethod
    def validate_iterations(cls, iterations: int) -> bool:
        """Validate k-means iteration count."""
        return 1 <= iterations <= 1000

    @classmethod
    def validate_sample_step(cls, step: int) -> bool:
        """Validate pixel sampling step."""
        return step >= 1


# Global config instance
config = Config()
