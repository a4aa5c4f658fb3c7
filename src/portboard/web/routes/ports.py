"""Port listing and firewall API routes.

Endpoints:
- GET  /api/ports        - Unified port view
- POST /api/ufw/allow    - Add an allow rule
- POST /api/ufw/delete   - Delete a rule by positional id
- POST /api/ufw/block    - Delete every rule opening a port
- POST /api/custom-name  - Set or clear a port label
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from portboard.errors import PortboardError
from portboard.pipeline import PortService
from portboard.web.dependencies import get_port_service, to_http_error

router = APIRouter()


class AllowRequest(BaseModel):
    """Allow rule request."""
    port: int = Field(..., ge=1, le=65535, description="Port number")
    protocol: str = Field("any", description="tcp, udp or any")


class DeleteRuleRequest(BaseModel):
    """Delete rule request. The id must come from the latest /ports response."""
    ruleId: int = Field(..., ge=1, description="Positional ufw rule number")


class BlockRequest(BaseModel):
    """Block port request."""
    port: int = Field(..., ge=1, le=65535, description="Port number")
    protocol: str = Field("any", description="tcp, udp or any")


class CustomNameRequest(BaseModel):
    """Custom label request; an empty name clears the label."""
    port: int = Field(..., ge=1, le=65535)
    protocol: str = Field("any", description="tcp, udp or any")
    name: Optional[str] = Field(None, description="Display label")


@router.get("/ports")
async def list_ports(service: PortService = Depends(get_port_service)) -> dict:
    """Reconcile sockets, ufw rules and containers into one view."""
    try:
        view = await run_in_threadpool(service.list_ports)
    except (PortboardError, ValueError) as e:
        raise to_http_error(e) from e
    return view.to_dict()


@router.post("/ufw/allow")
async def allow_port(request: AllowRequest, service: PortService = Depends(get_port_service)) -> dict:
    try:
        await run_in_threadpool(service.allow_port, request.port, request.protocol)
    except (PortboardError, ValueError) as e:
        raise to_http_error(e) from e
    return {"success": True}


@router.post("/ufw/delete")
async def delete_rule(request: DeleteRuleRequest, service: PortService = Depends(get_port_service)) -> dict:
    try:
        await run_in_threadpool(service.remove_rule, request.ruleId)
    except (PortboardError, ValueError) as e:
        raise to_http_error(e) from e
    return {"success": True}


@router.post("/ufw/block")
async def block_port(request: BlockRequest, service: PortService = Depends(get_port_service)) -> dict:
    try:
        deleted = await run_in_threadpool(service.block_port, request.port, request.protocol)
    except (PortboardError, ValueError) as e:
        raise to_http_error(e) from e
    return {"success": True, "deletedRuleIds": [int(r) for r in deleted]}


@router.post("/custom-name")
async def set_custom_name(request: CustomNameRequest, service: PortService = Depends(get_port_service)) -> dict:
    try:
        service.set_custom_name(request.port, request.protocol, request.name)
    except ValueError as e:
        raise to_http_error(e) from e
    return {"success": True}
