"""Protocol models — JSON-RPC 2.0 envelopes, MCP tool payloads and outcomes.

Implements the message format used by the Model Context Protocol for the
server side of tool discovery (``tools/list``) and execution (``tools/call``).
"""

from __future__ import annotations

import json
from enum import IntEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(IntEnum):
    """Fixed JSON-RPC error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


SERVER_ERROR_MIN = -32099
SERVER_ERROR_MAX = -32000


def is_server_error(code: int) -> bool:
    """Return ``True`` when *code* lies in the reserved server-error band."""
    return SERVER_ERROR_MIN <= code <= SERVER_ERROR_MAX


def is_valid_id(value: Any) -> bool:
    """Return ``True`` for ids a request may carry: string, integer or null."""
    return value is None or isinstance(value, str) or (isinstance(value, int) and not isinstance(value, bool))


# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification.

    ``id`` is tracked by key presence: an envelope carrying ``"id": null`` or
    ``"id": 0`` is a request, one without the key is a notification.
    """

    model_config = ConfigDict(extra="ignore")

    jsonrpc: str = JSONRPC_VERSION
    method: str
    id: Any = None
    params: Any = None

    @property
    def has_id(self) -> bool:
        return "id" in self.model_fields_set

    @property
    def is_notification(self) -> bool:
        return not self.has_id


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response carrying exactly one of ``result`` or ``error``."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    result: Any = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: Any, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: Any,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> dict[str, Any]:
        """Return the wire dict; ``result: null`` survives when there is no error."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.to_wire()
        else:
            payload["result"] = self.result
        return payload

    def dump_line(self) -> str:
        """Serialise to one compact JSON document without a trailing newline."""
        return json.dumps(self.to_wire(), separators=(",", ":"), allow_nan=False)


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        alias="inputSchema",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["image"] = "image"
    data: str
    mime_type: str = Field(default="image/png", alias="mimeType")


class ToolCallResult(BaseModel):
    """Result payload of ``tools/call``.

    ``isError`` marks an application-level failure: the envelope is still a
    successful JSON-RPC response.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent | ImageContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str) -> ToolCallResult:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def from_payload(cls, payload: Any) -> ToolCallResult:
        """Wrap *payload* as a single JSON text block."""
        return cls.from_text(json.dumps(payload, ensure_ascii=False))

    @classmethod
    def from_error(cls, message: str) -> ToolCallResult:
        return cls(content=[TextContent(text=message)], is_error=True)

    @property
    def text(self) -> str:
        """Joined text of all text blocks."""
        return "\n".join(c.text for c in self.content if isinstance(c, TextContent))

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Invocation outcomes
# ---------------------------------------------------------------------------


class Ok(BaseModel):
    """The handler returned a value."""

    kind: Literal["ok"] = "ok"
    value: Any = None


class ApplicationFailure(BaseModel):
    """The handler returned a result flagged ``isError`` instead of raising."""

    kind: Literal["application_error"] = "application_error"
    message: str
    result: ToolCallResult


class ProtocolFailure(BaseModel):
    """The call failed and must be reported as a JSON-RPC error object."""

    kind: Literal["protocol_error"] = "protocol_error"
    code: int
    message: str
    data: Any = None


Outcome = Ok | ApplicationFailure | ProtocolFailure
