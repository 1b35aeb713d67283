"""
Dominant color extraction service.

This module is the caller-facing entry point of the palette pipeline: it
validates the requested palette size, clusters the sampled points, and
returns the centers as a brightness-ordered palette with hex codes.
"""

import asyncio
from typing import List, Optional

import numpy as np

from app.config import config
from app.schemas import PaletteMetadata, PaletteResult
from app.utils.ids import generate_extraction_id
from app.utils.logging import get_logger
from .clustering import ColorClusterer, InvalidInputError, PointsLike, as_points
from .palette import build_palette
from ..observability import performance_monitor


def resolve_color_count(k: Optional[int]) -> int:
    """
    Apply the default palette size and check it against the configured bounds.

    Raises:
        InvalidInputError: If k is not an integer within [MIN_COLORS, MAX_COLORS]
    """
    if k is None:
        k = config.DEFAULT_COLORS
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidInputError(f"Color count must be an integer, got {type(k).__name__}")
    if not config.validate_color_count(k):
        raise InvalidInputError(
            f"Color count must be between {config.MIN_COLORS} and {config.MAX_COLORS}, got {k}"
        )
    return int(k)


def extract_dominant_colors(
    points: PointsLike,
    k: Optional[int] = None,
    rng_seed: Optional[int] = None,
    iterations: Optional[int] = None,
) -> PaletteResult:
    """
    Extract a dominant color palette from sampled RGB points.

    Args:
        points: Sampled pixels as RGB triples in [0, 255]
        k: Number of colors (defaults to config.DEFAULT_COLORS)
        rng_seed: Seed for initial center selection (defaults to config.RNG_SEED)
        iterations: K-means iterations (defaults to config.MAX_ITERATIONS)

    Returns:
        PaletteResult with colors ordered from brightest to darkest

    Raises:
        InvalidInputError: For an out-of-range palette size or malformed points
    """
    log = get_logger()
    extraction_id = generate_extraction_id()
    seed = config.RNG_SEED if rng_seed is None else rng_seed

    try:
        k = resolve_color_count(k)
        pts = as_points(points)
        clusterer = ColorClusterer(iterations=iterations, rng_seed=seed)

        log.info("Starting palette extraction", extra={
            "extraction_id": extraction_id,
            "point_count": len(pts),
            "k": k,
        })

        with performance_monitor("color_clustering", point_count=len(pts), cluster_count=k) as timing:
            result = clusterer.cluster_with_counts(pts, k)
        clustering_ms = timing["duration_ms"]

        with performance_monitor("palette_construction", cluster_count=k):
            colors = build_palette(result.centers, result.counts)

    except InvalidInputError as e:
        log.warning(f"Palette extraction rejected: {e}", extra={"extraction_id": extraction_id})
        raise
    except Exception as e:
        log.error(f"Palette extraction failed: {e}", extra={"extraction_id": extraction_id})
        raise

    palette = PaletteResult(
        colors=colors,
        metadata=PaletteMetadata(
            extraction_id=extraction_id,
            color_count=k,
            point_count=len(pts),
            iterations=result.iterations,
            rng_seed=seed,
            duration_ms=clustering_ms,
        ),
    )

    log.info("Palette extraction complete", extra={
        "extraction_id": extraction_id,
        "hex_codes": palette.hex_codes,
        "ms_clustering": round(clustering_ms, 2),
    })
    return palette


async def extract_dominant_colors_async(
    points: PointsLike,
    k: Optional[int] = None,
    rng_seed: Optional[int] = None,
    iterations: Optional[int] = None,
) -> PaletteResult:
    """Run extract_dominant_colors in a worker thread so the event loop stays responsive."""
    return await asyncio.to_thread(extract_dominant_colors, points, k, rng_seed, iterations)


def extract_palette_hex(points: PointsLike, k: Optional[int] = None,
                        rng_seed: Optional[int] = None) -> List[str]:
    """Ordered #RRGGBB codes for the dominant colors, brightest first."""
    return extract_dominant_colors(points, k=k, rng_seed=rng_seed).hex_codes
