from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(..., description="ok")
    monitoring_enabled: bool
    monitoring_running: bool
    uptime_seconds: int
    item_count: int
    visible_code_count: int


class AddItemRequest(BaseModel):
    item_id: str = Field(..., min_length=1)
    item_name: str = Field(..., min_length=1)


class GenerateQRRequest(BaseModel):
    item_id: str = Field(..., min_length=1)
    item_name: str = Field(..., min_length=1)


class InventoryItemResponse(BaseModel):
    item_id: str
    item_name: str
    state: str
    checked_in_at: Optional[str] = None
    checked_out_at: Optional[str] = None


class TransitionResponse(InventoryItemResponse):
    previous_state: str


class InventoryResponse(BaseModel):
    items: List[InventoryItemResponse]
    total_count: int
    on_shelf_count: int
    checked_out_count: int


class RemoveItemResponse(BaseModel):
    item_id: str
    removed: bool


class DetectedCodeResponse(BaseModel):
    content: str
    item_id: str
    item_name: str
    first_seen: str
    last_seen: str
    pending_removal: bool
    disappeared_at: Optional[str] = None


class VisibleCodesResponse(BaseModel):
    codes: List[DetectedCodeResponse]
    count: int


class QRCodeResponse(BaseModel):
    item_id: str
    item_name: str
    qr_code: str = Field(..., description="Base64-encoded PNG")
    qr_data: str = Field(..., description="JSON payload encoded in the QR code")
    format: str
    size: int
