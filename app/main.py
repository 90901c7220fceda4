"""FastAPI application entry point."""
import logging
import sys
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.auth import get_token_codec
from app.config import get_settings
from app.database import engine, Base
from app.exceptions import register_exception_handlers
from app.routes import auth, todos

settings = get_settings()
# Fail at startup, not on the first request, if the signing key is unusable
get_token_codec()

# Configure logging to stdout
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="A todo API with role-based access control",
    debug=settings.DEBUG,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(todos.router, prefix="/api")


@app.get("/")
async def root():
    """List the available endpoints."""
    return {
        "message": f"{settings.APP_NAME} Server",
        "endpoints": [
            "POST /api/auth/register",
            "POST /api/auth/login",
            "GET /api/auth/me",
            "GET /api/todos",
            "POST /api/todos",
            "PUT /api/todos/{id}",
            "PATCH /api/todos/{id}/toggle",
            "DELETE /api/todos/{id}",
        ],
    }


@app.get("/health")
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


logger.info("%s %s ready", settings.APP_NAME, settings.APP_VERSION)
