"""
Palette Extraction Schemas
Pydantic models for dominant color palette results.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class PaletteColor(BaseModel):
    """Single dominant color in a palette."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-F]{6}$",
        description="Uppercase hex color code in format #RRGGBB"
    )
    rgb: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Color as [R, G, B] with each channel in 0-255"
    )
    brightness: float = Field(
        ...,
        ge=0.0,
        le=255.0,
        description="Perceived brightness 0.299R + 0.587G + 0.114B"
    )
    ratio: float = Field(
        0.0,
        ge=0.0,
        le=1.0,
        description="Share of sampled points assigned to this color (0.0-1.0)"
    )


class PaletteMetadata(BaseModel):
    """Parameters and sizes of a clustering run."""
    extraction_id: str = Field(..., description="Unique ID correlating log lines for this run")
    color_count: int = Field(..., ge=1, description="Requested number of colors (k)")
    point_count: int = Field(..., ge=0, description="Number of sampled points clustered")
    iterations: int = Field(..., ge=1, description="K-means iterations run")
    rng_seed: Optional[int] = Field(None, description="Seed used for initial center selection")
    duration_ms: float = Field(0.0, ge=0.0, description="Wall time spent clustering")


class PaletteResult(BaseModel):
    """Dominant colors ordered from brightest to darkest."""
    colors: List[PaletteColor] = Field(
        ...,
        description="Palette colors sorted by descending perceived brightness"
    )
    metadata: PaletteMetadata = Field(..., description="Clustering run details")

    @property
    def hex_codes(self) -> List[str]:
        """Ordered hex strings, as shown under the swatches."""
        return [color.hex for color in self.colors]
