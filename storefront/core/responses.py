"""Response envelopes shared by every controller."""

import base64
from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

_ENCODERS = {
    ObjectId: str,
    bytes: lambda data: base64.b64encode(data).decode("ascii"),
}


def encode(content: Any) -> Any:
    """Make repository output JSON-safe (ObjectIds as strings, binary as base64)."""
    return jsonable_encoder(content, custom_encoder=_ENCODERS)


def respond(status_code: int, content: Any) -> JSONResponse:
    """Send ``content`` as-is, for the endpoints that answer without an envelope."""
    return JSONResponse(status_code=status_code, content=encode(content))


def success(status_code: int = 200, message: str | None = None, **payload: Any) -> JSONResponse:
    body: dict = {"success": True}
    if message is not None:
        body["message"] = message
    body.update(payload)
    return respond(status_code, body)


def failure(status_code: int, message: str, error: Any = None, **payload: Any) -> JSONResponse:
    body: dict = {"success": False, "message": message}
    if error is not None:
        body["error"] = str(error)
    body.update(payload)
    return respond(status_code, body)
