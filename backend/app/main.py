from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.core.config import settings
from app.services.directory_service import directory_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    logging.getLogger("app").setLevel(settings.LOG_LEVEL.upper())
    try:
        await directory_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize DirectoryService — continuing without HR directory")
    yield
    await directory_service.close()


app = FastAPI(
    title="Competency Hub API",
    description="Team hierarchy, job catalog and job-competency profiles",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Competency Hub API"}
