from pathlib import Path
from typing import Optional
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ISLANDGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (json or console)")

    # Terrain Generation Configuration
    default_width: int = Field(default=1025, ge=3, description="Default number of samples along x")
    default_depth: int = Field(default=1025, ge=3, description="Default number of samples along z")
    max_grid_size: int = Field(default=4097, ge=3, description="Max allowed samples along either axis")
    default_seed: Optional[str] = Field(default=None, description="Seed used when none is given")

    def check_grid_size(self, width: int, depth: int) -> None:
        """Reject grids larger than the configured maximum."""
        if width > self.max_grid_size or depth > self.max_grid_size:
            raise ValueError(
                f"Grid {width}x{depth} exceeds max_grid_size={self.max_grid_size}"
            )
        if width < 3 or depth < 3:
            raise ValueError(f"Grid {width}x{depth} is too small (minimum 3x3)")


# Instantiate singleton settings object
settings = Settings()
