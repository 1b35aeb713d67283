"""
Dominant Colors Module

Provides k-means clustering of sampled pixels, brightness-ordered palette
construction and hex formatting for dominant color extraction.
"""

from .clustering import (
    ClusterResult,
    ColorClusterer,
    InvalidInputError,
    cluster_colors,
)
from .palette import (
    brightness_key,
    build_palette,
    hex_to_rgb,
    perceived_brightness,
    rgb_to_hex,
    sort_by_brightness,
)
from .sampling import sample_pixels
from .extraction import (
    extract_dominant_colors,
    extract_dominant_colors_async,
    extract_palette_hex,
)

__version__ = "1.0.0"

__all__ = [
    'ClusterResult',
    'ColorClusterer',
    'InvalidInputError',
    'cluster_colors',
    'brightness_key',
    'build_palette',
    'hex_to_rgb',
    'perceived_brightness',
    'rgb_to_hex',
    'sort_by_brightness',
    'sample_pixels',
    'extract_dominant_colors',
    'extract_dominant_colors_async',
    'extract_palette_hex',
]
