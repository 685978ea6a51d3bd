from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Envelope every endpoint answers with, success or failure."""

    status: int
    success: bool
    message: str
    data: Any = None


def respond(status: int, message: str, data: Any = None) -> JSONResponse:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    elif isinstance(data, list):
        data = [
            item.model_dump(mode="json", by_alias=True) if isinstance(item, BaseModel) else item
            for item in data
        ]
    body = ApiResponse(status=status, success=status < 400, message=message, data=data)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))
