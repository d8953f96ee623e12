"""
Alpha Desk Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alphadesk.core.config import settings
from alphadesk.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set - AI analysis endpoints will return 400")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Alpha Desk Portfolio Dashboard API

    ## Architecture
    - **Data Ingestion**: Fetches price history and live quotes from Yahoo Finance
    - **Indicator Engine**: MA20/60/120, KD, MACD (pure Python/NumPy)
    - **Analysis Layer**: Gemini-powered narrative analysis with ADD / HOLD / REDUCE signal

    ## Core Principles
    - Indicators that cannot be computed yet are null, never zero
    - The LLM interprets numbers, it never calculates them
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Alpha Desk Backend API",
        "docs": "/docs",
        "health": "/health",
    }
