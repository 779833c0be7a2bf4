"""
API Module

HTTP endpoints of the crowd monitor.
"""

from tafweej.api.density_routes import router as density_router
from tafweej.api.route_routes import router as route_router
from tafweej.api.alert_routes import router as alert_router
from tafweej.api.dashboard_routes import router as dashboard_router
from tafweej.api.dashboard_routes import locations_router

__all__ = [
    'density_router',
    'route_router',
    'alert_router',
    'dashboard_router',
    'locations_router',
]
