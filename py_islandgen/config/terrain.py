"""
Generation parameters for the terrain agents.

This module defines the flat settings structure a settings UI edits and the
pipeline reads: one group of fields per agent, with the defaults the island
generator ships with.
"""

from typing import List, Tuple

from pydantic import BaseModel, Field, model_validator


class TerrainSettings(BaseModel):
    """Parameters for every agent of the terrain pipeline."""

    # Coast agent
    border_size: int = Field(default=20, ge=0, description="Margin near the map edge where land cannot be placed")
    land_fraction: float = Field(
        default=1 / 3, gt=0, le=1,
        description="Coast tokens as a fraction of the grid's sample count"
    )

    # Beach agent
    beach_max_height: float = Field(default=10.0, gt=0, description="Coast higher than this is not turned into beach")
    beach_sea_level: float = Field(default=0.5, ge=0, description="Base height of beach sand")
    number_of_beaches: int = Field(default=6, ge=0, description="Number of separate beaches")
    inland_distance: int = Field(default=5, ge=1, description="Distance of the first inland beach point")
    beach_tokens: int = Field(default=200, ge=0, description="Maximum coastal points per beach")

    # Mountain agent
    min_amount_of_mountains: int = Field(default=9, ge=0, description="Minimum number of mountain ranges")
    max_amount_of_mountains: int = Field(default=12, ge=0, description="Maximum number of mountain ranges")
    mountain_max_height: float = Field(default=50.0, gt=0, description="Height of mountain ridge tops")
    mountain_min_length: int = Field(default=300, ge=0, description="Minimum length of a mountain range")
    mountain_max_length: int = Field(default=500, ge=0, description="Maximum length of a mountain range")
    mountain_width: int = Field(default=50, gt=0, description="Width of each mountain, this also affects the slope")

    # Hill agent
    min_amount_of_hills: int = Field(default=10, ge=0, description="Minimum number of hill chains")
    max_amount_of_hills: int = Field(default=15, ge=0, description="Maximum number of hill chains")
    hill_max_height: float = Field(default=30.0, gt=0, description="Height of hill ridge tops")
    hill_min_length: int = Field(default=50, ge=0, description="Minimum length of a hill chain")
    hill_max_length: int = Field(default=100, ge=0, description="Maximum length of a hill chain")
    hill_width: int = Field(default=50, gt=0, description="Width of each hill")

    # Noise agents
    relief_noise_chance: float = Field(default=1, ge=0, le=100, description="Chance (%) of a relief bump per land cell")
    relief_noise_min_height: float = Field(default=20.0, description="Minimum relief bump height")
    relief_noise_max_height: float = Field(default=30.0, description="Maximum relief bump height")
    noise_chance: float = Field(default=10, ge=0, le=100, description="Chance (%) of detail noise per land cell")
    noise_min_height: float = Field(default=0.1, description="Minimum detail noise height")
    noise_max_height: float = Field(default=0.1, description="Maximum detail noise height")

    # Smoothing agents
    relief_smoothing_passes: int = Field(default=3, ge=0, description="Smoothing passes after the relief noise")
    slope_smoothing_passes: int = Field(default=8, ge=0, description="Smoothing passes after mountains and hills")
    beach_smoothing_passes: int = Field(default=2, ge=0, description="Smoothing passes after the beaches")

    # Volcano agent
    number_of_volcanoes: int = Field(default=3, ge=0, description="Number of volcanoes")
    caldera_width: int = Field(default=5, ge=0, description="Radius of the caldera")
    caldera_width_range: float = Field(default=2.0, ge=0, description="Variation of the caldera radius")
    volcano_height: int = Field(default=70, gt=0, description="Height of the volcano peak")
    volcano_height_range: float = Field(default=10.0, ge=0, description="Variation of the volcano height")
    volcano_width: int = Field(default=50, gt=0, description="Radius of the volcano cone")

    # Lava agent
    number_of_lava_rivers: int = Field(default=2, ge=0, description="Number of lava rivers, at most one per volcano")

    one_island: bool = Field(default=True, description="Generate a single island")

    @model_validator(mode="after")
    def check_ranges(self) -> "TerrainSettings":
        """Reject inverted min/max pairs."""
        errors = [
            f"{low_name} ({low}) > {high_name} ({high})"
            for low_name, low, high_name, high in self._range_pairs()
            if low > high
        ]
        if errors:
            raise ValueError("Invalid ranges: " + "; ".join(errors))
        return self

    def _range_pairs(self) -> List[Tuple[str, float, str, float]]:
        pairs = [
            ("min_amount_of_mountains", "max_amount_of_mountains"),
            ("mountain_min_length", "mountain_max_length"),
            ("min_amount_of_hills", "max_amount_of_hills"),
            ("hill_min_length", "hill_max_length"),
            ("relief_noise_min_height", "relief_noise_max_height"),
            ("noise_min_height", "noise_max_height"),
        ]
        return [(lo, getattr(self, lo), hi, getattr(self, hi)) for lo, hi in pairs]


# Default settings instance
default_terrain_settings = TerrainSettings()


def get_terrain_settings() -> TerrainSettings:
    """Get the default terrain settings."""
    return default_terrain_settings
