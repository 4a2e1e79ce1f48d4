"""
Typed command requests.

Raw command dicts (as received over HTTP) are decoded here into one of the
request models below, keyed by the ``command`` field. Core operations only
ever see validated, typed requests.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from inventory.ledger import parse_state
from models.inventory import ItemState


class CommandValidationError(ValueError):
    """A command payload is missing fields or has fields of the wrong type."""


RequiredStr = Annotated[str, Field(min_length=1, strict=True)]


class _Command(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PingCommand(_Command):
    command: Literal["ping"]


class EchoCommand(_Command):
    command: Literal["echo"]
    message: Any = None


class GenerateQRCommand(_Command):
    command: Literal["generate_qr"]
    item_id: RequiredStr
    item_name: RequiredStr


class AddItemCommand(_Command):
    command: Literal["add_item"]
    item_id: RequiredStr
    item_name: RequiredStr


class GetInventoryCommand(_Command):
    command: Literal["get_inventory"]
    state: Optional[ItemState] = None

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, value: Any) -> Optional[ItemState]:
        # Same rules as the REST filter: None or "" means no filter
        return parse_state(value)


class CheckoutItemCommand(_Command):
    command: Literal["checkout_item"]
    item_id: RequiredStr


class ReturnItemCommand(_Command):
    command: Literal["return_item"]
    item_id: RequiredStr


class RemoveItemCommand(_Command):
    command: Literal["remove_item"]
    item_id: RequiredStr


class GetVisibleCodesCommand(_Command):
    command: Literal["get_visible_codes"]


class ScanNowCommand(_Command):
    command: Literal["scan_now"]


Command = Annotated[
    Union[
        PingCommand,
        EchoCommand,
        GenerateQRCommand,
        AddItemCommand,
        GetInventoryCommand,
        CheckoutItemCommand,
        ReturnItemCommand,
        RemoveItemCommand,
        GetVisibleCodesCommand,
        ScanNowCommand,
    ],
    Field(discriminator="command"),
]

COMMAND_NAMES = (
    "ping",
    "echo",
    "generate_qr",
    "add_item",
    "get_inventory",
    "checkout_item",
    "return_item",
    "remove_item",
    "get_visible_codes",
    "scan_now",
)

_command_adapter: TypeAdapter = TypeAdapter(Command)


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in COMMAND_NAMES)
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def parse_command(raw: Dict[str, Any]) -> Command:
    """
    Decode a raw command dict.

    Raises:
        CommandValidationError: missing/non-string ``command``, unknown
            command, or invalid fields for the command.
    """
    if not isinstance(raw, dict):
        raise CommandValidationError("command payload must be an object")

    name = raw.get("command")
    if not isinstance(name, str):
        raise CommandValidationError("command field is required and must be a string")
    if name not in COMMAND_NAMES:
        raise CommandValidationError(f"unknown command: {name}")

    try:
        return _command_adapter.validate_python(raw)
    except ValidationError as e:
        raise CommandValidationError(f"invalid {name} command: {_format_errors(e)}") from e
