"""
Deadline Tracker API
Main application entry point.

Extracts contract deadlines (renewals, notice windows, payments, term and
trial ends) from pasted text or uploaded PDF, DOCX and TXT files, and exports
them as reminder sheets.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deadline_tracker.api.routes import router
from deadline_tracker.utils.config import get_api_config
from deadline_tracker.utils.logger import setup_logging

# Load environment variables
load_dotenv(override=True)

# Setup logging
logger = setup_logging()

# Load API configuration
api_config = get_api_config()
api_settings = api_config.get('api', {})
api_prefix = api_settings.get('prefix', '/api/v1')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log service start and shutdown."""
    logger.info("Starting Deadline Tracker API...")
    logger.info(f"API Version: {api_settings.get('version', '1.0.0')}")
    port = api_config.get('server', {}).get('port', 8000)
    logger.info(f"API available at: http://localhost:{port}")
    logger.info(f"Docs available at: http://localhost:{port}/docs")
    yield
    logger.info("Shutting down Deadline Tracker API...")


# Create FastAPI application
app = FastAPI(
    title=api_settings.get('title', 'Deadline Tracker API'),
    description=api_settings.get('description', ''),
    version=api_settings.get('version', '1.0.0'),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
cors_config = api_config.get('cors', {})
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_config.get('allow_origins', ["*"]),
    allow_credentials=True,
    allow_methods=cors_config.get('allow_methods', ["*"]),
    allow_headers=cors_config.get('allow_headers', ["*"]),
)

# Include API routes
app.include_router(router, prefix=api_prefix)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": app.title,
        "version": app.version,
        "description": app.description,
        "docs": "/docs",
        "health": f"{api_prefix}/health"
    }
