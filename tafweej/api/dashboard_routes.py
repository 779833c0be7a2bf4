"""
Dashboard API Endpoints

Derived views over the current density readings, shaped for the map page:

GET /api/dashboard/insights
GET /api/dashboard/markers
GET /api/dashboard/heatmap
GET /api/dashboard/route-layer?start=<name>&destination=<name>
GET /api/dashboard/status
GET /api/locations
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from tafweej.api.dependencies import error_response, get_density_store, get_route_calculator
from tafweej.dashboard import CrowdInsights, build_heatmap, build_markers, build_route_layer
from tafweej.density.locations import LOCATION_PROFILES
from tafweej.errors import CrowdMonitorError

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
locations_router = APIRouter(prefix="/api/locations", tags=["dashboard"])


@router.get("/insights")
def get_insights(store=Depends(get_density_store)):
    """Summary cards: totals, hot spots, occupancy and level distribution"""
    return CrowdInsights.calculate(store.get_current()).to_dict()


@router.get("/markers")
def get_markers(store=Depends(get_density_store)):
    """Colour-coded marker per location"""
    return build_markers(store.get_current())


@router.get("/heatmap")
def get_heatmap(store=Depends(get_density_store)):
    """Heatmap FeatureCollection weighted by density level"""
    return build_heatmap(store.get_current())


@router.get("/route-layer")
def get_route_layer(start: Optional[str] = None,
                    destination: Optional[str] = None,
                    calculator=Depends(get_route_calculator)):
    """Route line feature plus the route itself"""
    if not start or not destination:
        return error_response('Missing start or destination parameter', 400)

    try:
        route = calculator.route(start, destination)
    except CrowdMonitorError as e:
        return error_response(str(e))

    return {
        'route': route.model_dump(mode='json'),
        'layer': build_route_layer(route),
    }


@router.get("/status")
async def get_status(request: Request):
    """Statistics of the running services"""
    state = request.app.state
    status = {}

    for key, name in (
        ('densityStore', 'density_store'),
        ('routeCalculator', 'route_calculator'),
        ('emitter', 'emitter'),
    ):
        component = getattr(state, name, None)
        if component is not None:
            status[key] = component.get_stats()

    refresh_service = getattr(state, 'refresh_service', None)
    if refresh_service is not None:
        status['refreshService'] = refresh_service.get_statistics()

    handlers = getattr(state, 'socket_handlers', None)
    if handlers is not None:
        status['connectedClients'] = handlers.get_client_count()

    return status


@locations_router.get("")
async def get_locations():
    """Known sites with area, capacity, sections and base coordinates"""
    return [profile.to_dict() for profile in LOCATION_PROFILES]
