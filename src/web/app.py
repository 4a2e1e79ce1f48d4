"""
FastAPI application factory for Shelf Keeper.

Routes:
- /api/v1/healthz -> liveness + monitoring status
- /api/v1/command -> raw command dispatch
- /api/v1/inventory, /api/v1/codes, /api/v1/qr -> REST views over the same operations
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from commands.models import CommandValidationError
from inventory.errors import InvalidStateError, ItemAlreadyExistsError, ItemNotFoundError
from runtime.context import RuntimeContext

from .routes import api


def create_app(ctx: RuntimeContext) -> FastAPI:
    """Create the FastAPI app bound to a runtime context."""
    app = FastAPI(
        title="Shelf Keeper",
        version="0.1.0",
        description="QR-based shelf inventory keeper",
    )
    app.state.ctx = ctx

    @app.exception_handler(ItemNotFoundError)
    async def not_found_handler(request: Request, exc: ItemNotFoundError):
        return JSONResponse({"detail": str(exc)}, status_code=404)

    @app.exception_handler(ItemAlreadyExistsError)
    async def conflict_handler(request: Request, exc: ItemAlreadyExistsError):
        return JSONResponse({"detail": str(exc)}, status_code=409)

    @app.exception_handler(CommandValidationError)
    async def command_error_handler(request: Request, exc: CommandValidationError):
        return JSONResponse({"detail": str(exc)}, status_code=400)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse({"detail": jsonable_encoder(exc.errors())}, status_code=400)

    @app.exception_handler(InvalidStateError)
    async def state_error_handler(request: Request, exc: InvalidStateError):
        return JSONResponse({"detail": str(exc)}, status_code=400)

    app.include_router(api.router_v1)
    return app
