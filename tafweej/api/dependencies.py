"""
Shared API dependencies

Services are created once in the application lifespan and kept on
app.state; endpoints reach them through these getters.
"""

from json import JSONDecodeError

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


def _state_component(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise HTTPException(status_code=500, detail=f"{name} not initialized")
    return component


def get_density_store(request: Request):
    return _state_component(request, 'density_store')


def get_route_calculator(request: Request):
    return _state_component(request, 'route_calculator')


def get_alert_store(request: Request):
    return _state_component(request, 'alert_store')


def get_emitter(request: Request):
    """Socket.IO emitter, or None when real-time updates are off"""
    return getattr(request.app.state, 'emitter', None)


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    """Error body in the {"error": message} shape the dashboard expects"""
    return JSONResponse({'error': message}, status_code=status_code)


async def read_json_body(request: Request) -> dict:
    """Request body as a dict; empty or non-object bodies read as {}"""
    try:
        body = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}
