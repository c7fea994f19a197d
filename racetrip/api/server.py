"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    uvicorn racetrip.api.server:app --reload --port 8000

Endpoints:
    GET  /v1/health
    POST /v1/itinerary
    GET  /v1/itinerary/{itinerary_id}
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from racetrip import __version__, config
from racetrip.api.routes import health, itinerary

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Race Weekend Itinerary API",
    version=__version__,
    description=(
        "Builds personalised race-weekend itineraries around the fixed "
        "session schedule and stores them under shareable ids."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow the site frontend (origins from CORS_ALLOW_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router,    prefix="/v1",           tags=["Health"])
app.include_router(itinerary.router, prefix="/v1/itinerary", tags=["Itinerary"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("racetrip.api.server:app", host="0.0.0.0", port=8000, reload=True)
