"""FastAPI application: CORS, routes, feed lifecycle and health check."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spacewx.models import HealthResponse
from spacewx.routes.logs import router as logs_router
from spacewx.routes.profile import router as profile_router
from spacewx.routes.risk import router as risk_router
from spacewx.service import RiskService, get_service

# Load .env before anything else
load_dotenv()

logging.basicConfig(
    level=os.getenv("SPACEWX_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    feed = app.dependency_overrides.get(get_service, get_service)().feed
    feed.start()
    try:
        yield
    finally:
        # Stop the refresh timer so no fetch cycle outlives the app
        await feed.stop()


app = FastAPI(
    title="Space Weather Operations Risk",
    description="Kp-index risk assessment for unit equipment",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(profile_router)
app.include_router(risk_router)
app.include_router(logs_router)


@app.get("/api/health", response_model=HealthResponse)
async def health_check(service: RiskService = Depends(get_service)):
    return HealthResponse(status="ok", feed_running=service.feed.running)
