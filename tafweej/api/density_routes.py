"""
Crowd Density API Endpoints

GET  /api/crowd-density          current readings (recomputed when stale)
POST /api/crowd-density          recalculate all, or upsert one manual reading
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Request

from tafweej.api.dependencies import error_response, get_density_store, read_json_body
from tafweej.errors import ConfigurationError, ValidationError

router = APIRouter(prefix="/api/crowd-density", tags=["density"])


@router.get("")
def get_crowd_density(force: Optional[str] = None, store=Depends(get_density_store)):
    """
    Current crowd density readings

    Stored rows are returned while they are less than five minutes old;
    otherwise (or with force=true) every location is recomputed first.
    Any other force value is an ordinary read.
    Falls back to direct computation when the store fails.
    """
    if not store.is_configured:
        return error_response(str(ConfigurationError()))

    try:
        return store.get_current(force=force == 'true')
    except Exception as e:
        print(f"[ERROR] Error fetching crowd density: {e}")
        return error_response('Error fetching crowd density data')


@router.post("")
async def update_crowd_density(request: Request, store=Depends(get_density_store)):
    """
    Recalculate or manually enter crowd density

    Body {"recalculate": true} recomputes every location. Any other body is
    a manual reading upserted by location_name.
    """
    if not store.is_configured:
        return error_response(str(ConfigurationError()))

    body = await read_json_body(request)

    try:
        if body.get('recalculate') is True:
            count = await asyncio.to_thread(store.force_recompute)
            return {
                'success': True,
                'message': 'Crowd density data recalculated',
                'count': count,
            }

        return [await asyncio.to_thread(store.upsert_reading, body)]

    except ValidationError as e:
        return error_response(str(e), 400)
    except Exception as e:
        print(f"[ERROR] Error updating crowd density: {e}")
        return error_response('Error updating crowd density data')
