"""Codec for the uniform ``{"success": ...}`` envelope every Page4U response uses.

    # Success
    {"success": true, "data": [...], "total": 12}

    # Failure
    {"success": false, "error": {"code": "NOT_FOUND", "message": "Page not found"}}
"""
from typing import Any, Dict, List, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from page4u_mcp.errors import ApiError, ProtocolError


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: Any = None
    total: Optional[NonNegativeInt] = None

    @pydantic.model_validator(mode="after")
    def _total_covers_page(self) -> "Success":
        if self.total is not None and isinstance(self.data, list) and self.total < len(self.data):
            raise ValueError(
                f"total ({self.total}) is smaller than the number of returned items ({len(self.data)})"
            )
        return self


class Failure(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1)
    message: str


Envelope = Union[Success, Failure]


def decode_envelope(payload: Any) -> Envelope:
    """Decode a parsed JSON body into exactly one envelope arm."""
    if not isinstance(payload, dict):
        raise ProtocolError(f"Expected a JSON object envelope, got {type(payload).__name__}")

    flag = payload.get("success")
    if not isinstance(flag, bool):
        raise ProtocolError("Envelope is missing a boolean 'success' flag")

    try:
        if flag:
            if "data" not in payload:
                raise ProtocolError("Success envelope is missing its 'data' field")
            return Success.model_validate(
                {"data": payload.get("data"), "total": payload.get("total")}
            )
        error = payload.get("error")
        if not isinstance(error, dict):
            raise ProtocolError("Failure envelope is missing its 'error' object")
        return Failure.model_validate(
            {"code": error.get("code"), "message": error.get("message")}
        )
    except pydantic.ValidationError as e:
        raise ProtocolError(f"Malformed envelope: {e.errors()[0]['msg']}") from e


def encode_envelope(envelope: Envelope) -> Dict[str, Any]:
    """Inverse of :func:`decode_envelope`."""
    if isinstance(envelope, Failure):
        return {"success": False, "error": {"code": envelope.code, "message": envelope.message}}
    body = {"success": True, "data": envelope.data}
    if envelope.total is not None:
        body["total"] = envelope.total
    return body


def as_record(data: Any, what: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProtocolError(f"Expected {what} to be an object, got {type(data).__name__}")
    return data


def as_records(data: Any, what: str) -> List[Dict[str, Any]]:
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ProtocolError(f"Expected {what} to be a list of objects")
    return data


def unwrap(envelope: Envelope, status_code: Optional[int] = None) -> Success:
    """Return the success arm or raise :class:`ApiError` for a failure."""
    if isinstance(envelope, Failure):
        raise ApiError(envelope.code, envelope.message, status_code=status_code)
    return envelope
