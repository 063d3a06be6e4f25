"""
FastAPI Application

Main entry point for the FocusFit web API.
"""

from typing import Dict, Optional

import structlog
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from focusfit.api.routes import coach, plans, users
from focusfit.coach import BodyDoubleCoach
from focusfit.config import Settings, get_settings
from focusfit.generator import HttpTextGenerator, TextGenerator
from focusfit.logging_config import configure_logging
from focusfit.planner import FocusPlanGenerator
from focusfit.repository import PlanRepository

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    text_generator: Optional[TextGenerator] = None,
    repository: Optional[PlanRepository] = None,
) -> FastAPI:
    """
    Build the API with its services.

    Args:
        settings: Configuration (read from the environment if omitted)
        text_generator: Generation client (an HttpTextGenerator if omitted)
        repository: Persistence adapter (built from settings.database_url if omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    text_generator = text_generator or HttpTextGenerator.from_settings(settings)
    repository = repository or PlanRepository.from_url(settings.database_url)

    app = FastAPI(
        title="FocusFit API",
        description="ADHD-friendly weekly workout and meal-prep plans with an AI body double",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.repository = repository
    app.state.plan_generator = FocusPlanGenerator(text_generator, repository)
    app.state.coach = BodyDoubleCoach(text_generator, repository)

    # CORS configuration - allow the mobile dev clients to access the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(plans.router, prefix="/api", tags=["Plans"])
    app.include_router(users.router, prefix="/api", tags=["Users"])
    app.include_router(coach.router, prefix="/api", tags=["Body Double"])

    @app.get("/")
    async def root() -> Dict[str, str]:
        """Root endpoint - API information."""
        return {
            "name": "FocusFit API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "focusfit-api"}

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc: HTTPException):
        """Handle HTTP exceptions with consistent error format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, "message": str(exc.detail)},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception("unhandled_api_error", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal Server Error",
                "message": str(exc),
            },
        )

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "focusfit.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
