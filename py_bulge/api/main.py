"""FastAPI main application."""

import base64
from typing import List, Optional

import structlog
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field, model_validator

from .. import __version__
from ..config import settings
from ..config.presets import get_preset, list_presets
from ..core.gallery import export_filename, random_gallery
from ..core.grid_renderer import PatternConfig, render
from ..core.randomizer import default_config, make_rng, random_config
from ..core.surface import RasterSurface, backing_pixels
from ..utils.log_config import configure_logging

# Configure logging
configure_logging()

logger = structlog.get_logger()

app = FastAPI(
    title="Bulge Pattern Generator API",
    description="Grid patterns distorted by seeded bulge fields",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def check_backing_size(width: int, height: int, pixel_ratio: float = 1.0) -> None:
    """Reject canvas sizes whose oversampled backing image exceeds the configured limit."""
    pixels = backing_pixels(width, height, pixel_ratio)
    if pixels > settings.max_backing_pixels:
        raise ValueError(
            f"Canvas {width}x{height} at pixel ratio {pixel_ratio} needs {pixels} backing pixels, "
            f"limit is {settings.max_backing_pixels}"
        )


# Request/Response models
class PatternConfigModel(BaseModel):
    """Pattern parameters as accepted and returned by the API."""

    grid_size: float = Field(40.0, ge=1, le=1000, description="Spacing between grid lines in pixels")
    bulge_strength: float = Field(60.0, ge=0, le=1000, description="Global displacement multiplier")
    bulge_count: int = Field(3, ge=0, le=64, description="Number of bulges")
    seed: float = Field(0.0, description="Seed for bulge placement")
    line_opacity: float = Field(0.15, ge=0, le=1, description="Stroke alpha")
    rotation: float = Field(0.0, description="Canvas rotation in degrees")

    @classmethod
    def from_config(cls, config: PatternConfig) -> "PatternConfigModel":
        return cls(**config.to_dict())

    def to_config(self) -> PatternConfig:
        return PatternConfig(**self.model_dump())


class RenderRequest(BaseModel):
    """Request to render a single pattern."""

    config: PatternConfigModel = Field(default_factory=PatternConfigModel)
    width: int = Field(default=settings.default_canvas_width, ge=1, le=settings.max_canvas_width)
    height: int = Field(default=settings.default_canvas_height, ge=1, le=settings.max_canvas_height)
    pixel_ratio: float = Field(default=1.0, gt=0, le=settings.max_pixel_ratio)

    @model_validator(mode="after")
    def limit_backing_size(self) -> "RenderRequest":
        check_backing_size(self.width, self.height, self.pixel_ratio)
        return self


class GalleryRequest(BaseModel):
    """Request to render a gallery of random patterns."""

    count: int = Field(default=6, ge=1, le=settings.max_gallery_size)
    width: int = Field(default=settings.gallery_tile_width, ge=1, le=settings.max_canvas_width)
    height: int = Field(default=settings.gallery_tile_height, ge=1, le=settings.max_canvas_height)
    seed: Optional[int] = Field(default=None, ge=0, description="Seed for reproducible galleries")

    @model_validator(mode="after")
    def limit_backing_size(self) -> "GalleryRequest":
        check_backing_size(self.width, self.height)
        return self


class GalleryItem(BaseModel):
    """One rendered gallery entry."""

    config: PatternConfigModel
    image_base64: str = Field(description="PNG image, base64 encoded")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Bulge Pattern Generator API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/patterns/default", response_model=PatternConfigModel)
async def get_default_pattern(seed: Optional[float] = None):
    """Initial configuration; the seed is random unless given."""
    return PatternConfigModel.from_config(default_config(seed))


@app.get("/patterns/random", response_model=PatternConfigModel)
async def get_random_pattern(seed: Optional[int] = Query(None, ge=0)):
    """Random configuration, reproducible when ``seed`` is given."""
    return PatternConfigModel.from_config(random_config(make_rng(seed)))


@app.get("/patterns/presets", response_model=List[str])
async def get_presets():
    """List preset names."""
    return list_presets()


@app.get("/patterns/presets/{name}", response_model=PatternConfigModel)
async def get_pattern_preset(name: str):
    """Get a preset configuration by name."""
    try:
        return PatternConfigModel.from_config(get_preset(name))
    except KeyError:
        raise HTTPException(status_code=404, detail="Preset not found")


@app.post("/patterns/render")
def render_pattern(request: RenderRequest):
    """Render one pattern and return it as a PNG download."""
    logger.info("Pattern render requested", request=request.model_dump())

    surface = RasterSurface(request.width, request.height, pixel_ratio=request.pixel_ratio)
    try:
        render(surface, request.config.to_config())
        png = surface.to_png_bytes()
    except ValueError as e:
        logger.error("Pattern render failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Render failed: {str(e)}")
    finally:
        surface.close()

    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f"attachment; filename={export_filename()}"},
    )


@app.post("/patterns/gallery", response_model=List[GalleryItem])
def render_pattern_gallery(request: GalleryRequest):
    """Render a gallery of random patterns as base64 PNGs."""
    logger.info("Gallery requested", request=request.model_dump())

    items = []
    for config, surface in random_gallery(request.count, request.width, request.height, seed=request.seed):
        items.append(
            GalleryItem(
                config=PatternConfigModel.from_config(config),
                image_base64=base64.b64encode(surface.to_png_bytes()).decode("ascii"),
            )
        )
        surface.close()

    return items


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
