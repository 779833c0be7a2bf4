"""
Tafweej Crowd Monitor
Main FastAPI Application Entry Point

Initializes FastAPI, Socket.IO, the row store and the crowd services.
Every service is created in the lifespan and kept on app.state.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import socketio
from dotenv import load_dotenv

from tafweej import __version__
from tafweej.config import ConfigManager, get_config

# Load environment variables
load_dotenv()

# Marker for "take the database URL from configuration"
FROM_CONFIG = "from-config"


def create_sio() -> socketio.AsyncServer:
    """Socket.IO server for dashboard connections"""
    return socketio.AsyncServer(
        async_mode='asgi',
        cors_allowed_origins='*',
        logger=False,
        engineio_logger=False,
        ping_interval=25,
        ping_timeout=60
    )


def create_app(config: Optional[ConfigManager] = None,
               database_url: Optional[str] = FROM_CONFIG,
               enable_refresh: bool = True,
               sio: socketio.AsyncServer = None) -> FastAPI:
    """
    Build the application

    Args:
        config: Configuration (default: process-wide instance)
        database_url: Row store URL; None runs without a store
        enable_refresh: Start the scheduled density push for connected clients
        sio: Socket.IO server (default: a new one)

    Returns:
        FastAPI app; its Socket.IO server is app.state.sio
    """
    sio = sio or create_sio()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events - startup and shutdown"""
        from tafweej.alerts import AlertStore
        from tafweej.dashboard import DensityRefreshService
        from tafweej.database import create_store_client
        from tafweej.density import CrowdDensityModel, DensityStore
        from tafweej.routing import RouteCalculator
        from tafweej.websocket import CrowdEmitter, CrowdSocketHandlers

        # Startup
        print("=" * 60)
        print("[STARTUP] Tafweej Crowd Monitor")
        print("=" * 60)

        cfg = config if config is not None else get_config()
        print("[OK] Configuration loaded")

        url = cfg.get_database_url() if database_url == FROM_CONFIG else database_url
        client = create_store_client(url)

        crowd_cfg = cfg.get_crowd_config()
        model = CrowdDensityModel(crowd_cfg)
        density_store = DensityStore(
            client,
            model,
            staleness_minutes=float(crowd_cfg.get('stalenessMinutes', 5)),
        )
        print("[OK] Crowd density model initialized")

        route_calculator = RouteCalculator(density_store.get_density_levels, cfg.get_routing_config())
        print("[OK] Route calculator initialized")

        alert_store = AlertStore(client)
        print("[OK] Safety alert store initialized")

        emitter = CrowdEmitter(sio)
        refresh_service = None
        if enable_refresh:
            interval = float(cfg.get_dashboard_config().get('refreshIntervalSeconds', 30))
            refresh_service = DensityRefreshService(density_store, emitter, interval)
        socket_handlers = CrowdSocketHandlers(sio, emitter, refresh_service)
        print("[OK] Socket.IO emitter and handlers initialized")

        app.state.store_client = client
        app.state.density_store = density_store
        app.state.route_calculator = route_calculator
        app.state.alert_store = alert_store
        app.state.emitter = emitter
        app.state.refresh_service = refresh_service
        app.state.socket_handlers = socket_handlers
        app.state.started_at = time.time()

        print("=" * 60)
        print("[SERVER] Ready at http://localhost:8000")
        print("[DOCS] API docs at http://localhost:8000/docs")
        print("=" * 60)

        yield

        # Shutdown
        print("[SHUTDOWN] Shutting down...")

        if refresh_service:
            await refresh_service.stop()
            print("[SHUTDOWN] Density refresh service stopped")

        if client:
            client.dispose()
            print("[SHUTDOWN] Row store connections closed")

        print("[SHUTDOWN] Complete")

    app = FastAPI(
        title="Tafweej Crowd Monitor API",
        description="Crowd density, routing and safety alerts for pilgrimage sites",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.sio = sio

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============================================
    # Include API Routers
    # ============================================

    from tafweej.api import (
        density_router,
        route_router,
        alert_router,
        dashboard_router,
        locations_router,
    )

    app.include_router(density_router)
    app.include_router(route_router)
    app.include_router(alert_router)
    app.include_router(dashboard_router)
    app.include_router(locations_router)

    # ============================================
    # Root Endpoints
    # ============================================

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint - API information"""
        return {
            "name": "Tafweej Crowd Monitor",
            "version": __version__,
            "status": "operational",
            "documentation": "/docs",
            "websocket": "ws://localhost:8000",
            "endpoints": {
                "density": "/api/crowd-density",
                "routes": "/api/routes",
                "alerts": "/api/safety-alerts",
                "dashboard": "/api/dashboard/*",
                "locations": "/api/locations"
            }
        }

    @app.get("/health", tags=["health"])
    async def health_check(request: Request):
        """Health check endpoint"""
        state = request.app.state
        handlers = getattr(state, 'socket_handlers', None)
        started_at = getattr(state, 'started_at', None)

        return {
            "status": "healthy",
            "timestamp": time.time(),
            "uptime": time.time() - started_at if started_at else 0,
            "store": {
                "configured": getattr(state, 'store_client', None) is not None
            },
            "websocket": {
                "connected_clients": handlers.get_client_count() if handlers else 0,
                "status": "ready"
            }
        }

    return app


app = create_app()
sio = app.state.sio

# ============================================
# Create Socket.IO ASGI app
# ============================================

sio_app = socketio.ASGIApp(sio, app)


# ============================================
# Socket.IO Event Reference (handled by CrowdSocketHandlers)
# ============================================
#
# Server → Client Events:
#   - connection:success  : Connection established
#   - density:update      : Current readings and insights (every 30 s)
#   - alert:created       : Safety alert posted
#   - alert:deleted       : Safety alert removed
#
# Client → Server Events:
#   - density:refresh     : Push current readings to the requester now


# ============================================
# Entry Point
# ============================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tafweej.main:sio_app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
