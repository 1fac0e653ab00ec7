"""
FastAPI Application Factory

Assembles the dashboard API:
- Routes (dashboard read model, live/paused control, system introspection)
- CORS for the browser frontend
- Exception handlers
- WebSocket stream of dashboard frames

The factory pattern lets tests build the same app that main_asyncio.py
serves, with their own service container.
"""

from typing import List, Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from revdash.api.middleware.error_handler import register_exception_handlers
from revdash.api.routes import dashboard, system
from revdash.api.websocket import websocket_dashboard_endpoint
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


def create_app(
    title: str = "Revenue Dashboard",
    description: str = "Read-model API for the simulated revenue dashboard",
    version: str = "1.0.0",
    docs_enabled: bool = True,
    cors_origins: Optional[List[str]] = None
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        title: API title (shown in docs)
        description: API description
        version: API version
        docs_enabled: Enable /docs and /redoc
        cors_origins: CORS allowed origins (default: local dev servers)
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )

    log.info(f"Creating FastAPI app: {title} v{version}")

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    if cors_origins is None:
        cors_origins = [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    register_exception_handlers(app)

    # =========================================================================
    # Routes
    # =========================================================================

    app.include_router(dashboard.router, prefix="/api/v1")
    app.include_router(system.router, prefix="/api/v1")

    log.debug("Routes registered: dashboard (/api/v1/dashboard), system (/api/v1/system)")

    @app.get("/api/health", tags=["System"], summary="Health check")
    async def health_check():
        return {
            "status": "healthy",
            "service": "revdash-api",
            "version": version
        }

    @app.get("/", include_in_schema=False)
    async def root():
        return JSONResponse(
            {
                "message": title,
                "docs": "/docs",
                "health": "/api/health",
                "stream": "/ws/dashboard"
            }
        )

    # =========================================================================
    # WebSocket Endpoints
    # =========================================================================

    @app.websocket("/ws/dashboard")
    async def websocket_dashboard(websocket: WebSocket):
        """Stream of dashboard frames at render rate"""
        try:
            await websocket_dashboard_endpoint(websocket)
        except Exception as e:
            log.error(f"WebSocket handler error: {type(e).__name__}: {e}", exc_info=True)
            try:
                await websocket.close(code=1011, reason="Internal server error")
            except RuntimeError:
                pass

    log.info(f"FastAPI app created successfully: {title}")
    return app
