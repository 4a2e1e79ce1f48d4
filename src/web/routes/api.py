from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request

from commands.models import (
    AddItemCommand,
    CheckoutItemCommand,
    GenerateQRCommand,
    GetInventoryCommand,
    GetVisibleCodesCommand,
    RemoveItemCommand,
    ReturnItemCommand,
)
from inventory.ledger import parse_state
from runtime.context import RuntimeContext

from ..api_models import (
    AddItemRequest,
    GenerateQRRequest,
    HealthResponse,
    InventoryItemResponse,
    InventoryResponse,
    QRCodeResponse,
    RemoveItemResponse,
    TransitionResponse,
    VisibleCodesResponse,
)

router_v1 = APIRouter(prefix="/api/v1")


def _ctx(request: Request) -> RuntimeContext:
    return request.app.state.ctx


@router_v1.get("/healthz", response_model=HealthResponse)
def health(request: Request):
    ctx = _ctx(request)
    return HealthResponse(
        status="ok",
        monitoring_enabled=ctx.tracker.monitoring_enabled,
        monitoring_running=ctx.tracker.is_running,
        uptime_seconds=ctx.uptime_seconds(),
        item_count=len(ctx.ledger),
        visible_code_count=len(ctx.tracker.get_visible_codes()),
    )


@router_v1.post("/command")
def command(request: Request, payload: Dict[str, Any] = Body(...)):
    """
    Generic command endpoint.

    Body: {"command": "<name>", ...fields}. See commands.models for the
    accepted commands and their fields.
    """
    return _ctx(request).dispatcher.dispatch(payload)


@router_v1.get("/inventory", response_model=InventoryResponse)
def get_inventory(request: Request, state: Optional[str] = None):
    cmd = GetInventoryCommand(command="get_inventory", state=parse_state(state))
    return _ctx(request).dispatcher.execute(cmd)


@router_v1.post("/inventory", response_model=InventoryItemResponse, status_code=201)
def add_item(request: Request, req: AddItemRequest):
    cmd = AddItemCommand(command="add_item", item_id=req.item_id, item_name=req.item_name)
    return _ctx(request).dispatcher.execute(cmd)


@router_v1.post("/inventory/{item_id}/checkout", response_model=TransitionResponse)
def checkout_item(request: Request, item_id: str):
    cmd = CheckoutItemCommand(command="checkout_item", item_id=item_id)
    return _ctx(request).dispatcher.execute(cmd)


@router_v1.post("/inventory/{item_id}/return", response_model=TransitionResponse)
def return_item(request: Request, item_id: str):
    cmd = ReturnItemCommand(command="return_item", item_id=item_id)
    return _ctx(request).dispatcher.execute(cmd)


@router_v1.delete("/inventory/{item_id}", response_model=RemoveItemResponse)
def remove_item(request: Request, item_id: str):
    cmd = RemoveItemCommand(command="remove_item", item_id=item_id)
    return _ctx(request).dispatcher.execute(cmd)


@router_v1.get("/codes", response_model=VisibleCodesResponse)
def visible_codes(request: Request):
    cmd = GetVisibleCodesCommand(command="get_visible_codes")
    return _ctx(request).dispatcher.execute(cmd)


@router_v1.post("/qr", response_model=QRCodeResponse)
def generate_qr(request: Request, req: GenerateQRRequest):
    cmd = GenerateQRCommand(command="generate_qr", item_id=req.item_id, item_name=req.item_name)
    return _ctx(request).dispatcher.execute(cmd)
