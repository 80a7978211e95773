"""
Main API application module for Flowboard.

This module creates and configures the FastAPI application, its ERP client
and rendered graph memo, and the graph routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.exception_handlers import setup_exception_handlers
from src.api.routers import graph
from src.client import ErpClient
from src.services.graph import GridLayout, WorkflowGraphMemo
from src.settings import settings
from src.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Builds the grid layout from settings, opens the ERP client and closes it
    on shutdown.
    """
    layout = GridLayout.from_settings(settings)
    app.state.graph_memo = WorkflowGraphMemo(layout, maxsize=settings.graph_cache_size)
    app.state.erp_client = ErpClient.from_settings(settings)
    logger.info(f"Application startup complete (backend: {settings.backend_url})")

    try:
        yield
    finally:
        await app.state.erp_client.close()
        logger.info("Application shutdown")


def create_app(root_path: str = "/") -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        root_path: The root path for the application

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Flowboard",
        description="Workflow step graph layout and status visualization for ERP workflows",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
        root_path=root_path,
    )

    # Configure CORS
    origins = ["http://localhost", "http://localhost:3000", "*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(graph.router, prefix="/api")

    return app


# Create default application instance
app = create_app(root_path=settings.root_url)
