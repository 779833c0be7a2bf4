"""
Route API Endpoints

GET /api/routes?start=<name>&destination=<name>
"""

from typing import Optional

from fastapi import APIRouter, Depends

from tafweej.api.dependencies import error_response, get_route_calculator
from tafweej.errors import CrowdMonitorError

router = APIRouter(prefix="/api/routes", tags=["routes"])


@router.get("")
def get_route(start: Optional[str] = None,
              destination: Optional[str] = None,
              calculator=Depends(get_route_calculator)):
    """
    Crowd-aware walking route between two sites

    Works without a configured store; densities then come straight from
    the crowd model. Unknown pairs answer 500 with the error message.
    """
    if not start or not destination:
        return error_response('Missing start or destination parameter', 400)

    try:
        return calculator.route(start, destination)
    except CrowdMonitorError as e:
        print(f"[ROUTE] {start} -> {destination} failed: {e}")
        return error_response(str(e))
    except Exception as e:
        print(f"[ERROR] Error calculating route: {e}")
        return error_response(str(e) or 'Error calculating route')
