"""Shared FastAPI dependencies and error translation."""

from fastapi import Depends, HTTPException

from portboard.config import SettingsManager
from portboard.errors import CommandError, ConfigurationError, PortboardError, RemoteConnectionError
from portboard.pipeline import PortService

_service: PortService | None = None


def get_port_service() -> PortService:
    """Process-wide PortService. Holds no connection state."""
    global _service
    if _service is None:
        _service = PortService()
    return _service


def get_settings_manager(service: PortService = Depends(get_port_service)) -> SettingsManager:
    return service.settings_manager


def to_http_error(error: Exception) -> HTTPException:
    """Map a portboard error onto an HTTP status."""
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, CommandError):
        return HTTPException(
            status_code=502,
            detail={"error": str(error), "command": error.command, "exitCode": error.exit_code},
        )
    if isinstance(error, RemoteConnectionError):
        return HTTPException(status_code=502, detail=str(error))
    if isinstance(error, ValueError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, PortboardError):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=500, detail=f"Internal error: {error}")
