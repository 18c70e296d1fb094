# -*- coding: utf-8 -*-
"""
SparkyViz API

Read-only nutrition dashboard backed by the SparkyFitness API: profile,
90-day adherence heatmap and per-day meal breakdowns.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .credentials.api import router as access_router
from .credentials.directory import parse_credentials
from .history.api import router as history_router
from .meals.api import router as meals_router
from .profile.api import router as profile_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    directory = app.state.directory
    if not len(directory):
        logger.warning("No users configured; set SPARKYVIZ_USERS or SPARKYFITNESS_API_KEY")
    else:
        logger.info("Serving dashboards for: %s", ", ".join(sorted(directory)))
    yield


app = FastAPI(
    title="SparkyViz",
    description="Nutrition adherence dashboard for SparkyFitness",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Built once; handlers only ever read it.
app.state.directory = parse_credentials(settings.credentials_source)
# Tests swap in an httpx.MockTransport here.
app.state.upstream_transport = None


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


app.include_router(profile_router)
app.include_router(history_router)
app.include_router(meals_router)
app.include_router(access_router)


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("sparkyviz.api:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
