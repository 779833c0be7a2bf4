"""
Safety Alert API Endpoints

GET    /api/safety-alerts          active alerts, most severe first
POST   /api/safety-alerts          create an alert
DELETE /api/safety-alerts?id=<id>  remove an alert
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Request

from tafweej.api.dependencies import error_response, get_alert_store, get_emitter, read_json_body
from tafweej.errors import ConfigurationError, NotFoundError, ValidationError

router = APIRouter(prefix="/api/safety-alerts", tags=["alerts"])


@router.get("")
def get_safety_alerts(alerts=Depends(get_alert_store)):
    """Alerts that have not expired yet"""
    try:
        return alerts.list_active()
    except ConfigurationError as e:
        return error_response(str(e))
    except Exception as e:
        print(f"[ERROR] Error fetching safety alerts: {e}")
        return error_response('Error fetching safety alert data')


@router.post("")
async def create_safety_alert(request: Request,
                              alerts=Depends(get_alert_store),
                              emitter=Depends(get_emitter)):
    """Create a safety alert and notify connected dashboards"""
    if alerts.client is None:
        return error_response(str(ConfigurationError()))

    body = await read_json_body(request)

    try:
        created = await asyncio.to_thread(alerts.create, body)
    except ValidationError as e:
        return error_response(str(e), 400)
    except Exception as e:
        print(f"[ERROR] Error creating safety alert: {e}")
        return error_response('Error creating safety alert')

    if emitter:
        await emitter.emit_alert_created(created)

    return [created]


@router.delete("")
async def delete_safety_alert(id: Optional[str] = None,
                              alerts=Depends(get_alert_store),
                              emitter=Depends(get_emitter)):
    """
    Delete a safety alert

    An unknown id answers 500, like every other domain lookup miss.
    """
    if alerts.client is None:
        return error_response(str(ConfigurationError()))

    if not id:
        return error_response('Missing alert ID', 400)

    try:
        alert_id = int(id)
    except ValueError:
        return error_response(str(NotFoundError(f"Safety alert {id} not found")))

    try:
        await asyncio.to_thread(alerts.delete, alert_id)
    except NotFoundError as e:
        return error_response(str(e))
    except Exception as e:
        print(f"[ERROR] Error deleting safety alert: {e}")
        return error_response('Error deleting safety alert')

    if emitter:
        await emitter.emit_alert_deleted(alert_id)

    return {'success': True}
