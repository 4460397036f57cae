from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

# Load .env for local runs without overriding values already in the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables (prefix ``PY_BULGE_``)."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Debug mode: DEBUG level and plain console logs")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Canvas Configuration
    default_canvas_width: int = Field(default=900, description="Default canvas width in logical pixels")
    default_canvas_height: int = Field(default=675, description="Default canvas height in logical pixels")
    max_canvas_width: int = Field(default=4096, description="Max allowed canvas width")
    max_canvas_height: int = Field(default=4096, description="Max allowed canvas height")
    max_pixel_ratio: float = Field(default=4.0, description="Max allowed device pixel ratio")
    supersample: int = Field(default=4, ge=1, le=8, description="Oversampling factor for antialiasing")
    max_backing_pixels: int = Field(
        default=64_000_000, description="Max pixels of the oversampled backing image (width*height*ratio^2*supersample^2)"
    )

    # Gallery Configuration
    max_gallery_size: int = Field(default=24, description="Max patterns per gallery request")
    gallery_tile_width: int = Field(default=400, description="Default gallery tile width")
    gallery_tile_height: int = Field(default=300, description="Default gallery tile height")

    # Output
    output_dir: str = Field(default="./patterns", description="Directory for CLI output images")

    class Config:
        env_prefix = "PY_BULGE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
