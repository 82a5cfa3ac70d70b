"""Protocol layer — JSON-RPC envelopes, method registry and dispatcher."""

from viewctl.protocol.dispatcher import Dispatcher
from viewctl.protocol.errors import (
    HandlerError,
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcProtocolError,
    MethodNotFoundError,
    ParseError,
)
from viewctl.protocol.models import (
    JSONRPC_VERSION,
    ApplicationFailure,
    ErrorCode,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    Ok,
    Outcome,
    ProtocolFailure,
    ToolCallResult,
    ToolDef,
)
from viewctl.protocol.registry import MethodRegistry, tool_method_name

__all__ = [
    "JSONRPC_VERSION",
    "ApplicationFailure",
    "Dispatcher",
    "ErrorCode",
    "HandlerError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcProtocolError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "MethodRegistry",
    "Ok",
    "Outcome",
    "ParseError",
    "ProtocolFailure",
    "ToolCallResult",
    "ToolDef",
    "tool_method_name",
]
