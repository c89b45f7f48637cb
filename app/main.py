from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.viewer_route import viewer_router
from app.db.session import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events. Currently initializes database
    tables on startup.
    """
    # Startup: create tables
    await init_db()
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Sets up the main application with CORS middleware, health checks,
    and routing for viewer login and payout account endpoints.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Stayhub API",
        description="Viewer login, sessions and payout accounts for the Stayhub marketplace",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(viewer_router, prefix="/api/v1/viewer", tags=["viewer"])

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """
        Health check endpoint for load balancers and monitoring.

        Returns:
            dict: Health status response.
        """
        return {"status": "healthy"}

    # Root endpoint
    @app.get("/")
    async def root():
        """
        Root endpoint providing basic API information.

        Returns:
            dict: Welcome message.
        """
        return {"message": "Stayhub API"}

    return app
