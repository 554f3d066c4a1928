"""
Îlots Layout Service
Main entry point for the Python îlot placement and corridor generation service.
"""

import logging
import os
import sys
from pathlib import Path

# Add server directory to path for imports
server_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(server_dir))

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError
from typing import Optional, List, Dict, Any
import uvicorn

from internal.ilots import config
from internal.ilots import catalog as zone_catalog
from internal.ilots import generation
from internal.ilots.rooms import RoomAdapter

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Îlots Layout Service",
    description="Service for placing îlots inside rooms and connecting them with corridors",
    version="0.1.0",
)

# CORS middleware (allow the floor plan viewer to call this service)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to the viewer origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Load configuration
cfg = config.load_config()
catalog = zone_catalog.load_catalog(
    Path(cfg.zone_types_path) if cfg.zone_types_path else None
)


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    service: str
    version: str


class GenerateIlotsRequest(BaseModel):
    """Request to generate îlots for a floor"""

    rooms: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Room descriptions (polygon, bbox or center/size, type)",
    )
    config: Optional[Dict[str, Any]] = Field(
        default=None, description="Partial generation config merged onto the defaults"
    )
    use_default_room: bool = Field(
        default=False, description="Use the 20m x 15m fallback room when no rooms are given"
    )


class GenerateIlotsResponse(BaseModel):
    """Response from îlot generation"""

    success: bool
    status: str
    message: Optional[str] = None
    zones: List[Dict[str, Any]] = []
    corridors: List[Dict[str, Any]] = []
    statistics: Dict[str, Any] = {}


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        service="ilots-layout-service",
        version="0.1.0",
    )


@app.get("/api/v1/zone-types")
async def get_zone_types():
    """List the zone type catalog and default room-type sequences"""
    return catalog.to_dict()


@app.post("/api/v1/ilots/generate", response_model=GenerateIlotsResponse)
def generate_ilots(request: GenerateIlotsRequest):
    """
    Generate îlots and corridors for the supplied rooms.

    An empty result (success=false with a status) is returned when no room is
    suitable; malformed configuration is rejected with 422.
    """
    overrides = config.canonical_keys(request.config or {})
    overrides.setdefault("seed", cfg.default_seed)
    overrides.setdefault("exact_polygon_check", cfg.exact_polygon_check)

    try:
        generation_config = config.merge_config(overrides)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid config: {e}")

    rooms = request.rooms
    if not rooms and request.use_default_room:
        rooms = [RoomAdapter().default_room()]

    try:
        pipeline = generation.GenerationPipeline(catalog)
        result = pipeline.generate(rooms, generation_config)
    except Exception as e:
        logger.exception("Îlot generation failed")
        raise HTTPException(
            status_code=500, detail=f"Failed to generate îlots: {str(e)}"
        )

    return GenerateIlotsResponse(**result.to_dict())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv("ILOTS_SERVICE_PORT", "8082"))
    host = os.getenv("ILOTS_SERVICE_HOST", "0.0.0.0")

    uvicorn.run(
        "main:app", host=host, port=port, reload=cfg.environment == "development"
    )
