"""Shared error types for the protocol layer."""

from __future__ import annotations

from typing import Any

from viewctl.protocol.models import ErrorCode, JsonRpcError


class JsonRpcProtocolError(Exception):
    """Base error for all protocol-layer failures that map to an error object."""

    code: int = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, *, code: int | None = None, data: Any = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        self.data = data
        super().__init__(message)

    def to_error_object(self) -> JsonRpcError:
        return JsonRpcError(code=int(self.code), message=self.message, data=self.data)


class ParseError(JsonRpcProtocolError):
    """The framing unit could not be decoded as JSON."""

    code = ErrorCode.PARSE_ERROR

    def __init__(self, detail: str = "") -> None:
        super().__init__("Parse error", data=detail or None)


class InvalidRequestError(JsonRpcProtocolError):
    """The envelope is malformed or uses an unsupported protocol tag."""

    code = ErrorCode.INVALID_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid Request: {detail}")


class MethodNotFoundError(JsonRpcProtocolError):
    """Requested method does not exist in the registry."""

    code = ErrorCode.METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class HandlerError(JsonRpcProtocolError):
    """A handler failed in a way it wants reported with a specific code.

    Handlers raise this to pick a code from the reserved server-error band;
    any other exception is reported as an internal error.
    """


class InvalidParamsError(HandlerError):
    """``params`` did not match the method's declared parameter model."""

    def __init__(self, method: str, errors: list[dict[str, Any]]) -> None:
        self.method = method
        self.errors = errors
        super().__init__(f"Invalid params for {method}", data=errors)
