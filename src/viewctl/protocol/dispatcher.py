"""Dispatcher — validates JSON-RPC envelopes and routes them to handlers.

Each incoming envelope walks the same lifecycle::

    Received
      -> protocol tag check      (invalid request, never dispatched)
      -> method presence check   (invalid request)
      -> method resolution       (method not found; silent for notifications)
      -> request / notification split on the presence of the ``id`` key
      -> invoke                  (result, error object, or nothing at all)

Handler exceptions never escape :meth:`Dispatcher.handle`; they are turned
into the wire shape appropriate for the envelope kind.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from viewctl.protocol.errors import (
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcProtocolError,
    ParseError,
)
from viewctl.protocol.models import (
    JSONRPC_VERSION,
    ApplicationFailure,
    ErrorCode,
    JsonRpcRequest,
    JsonRpcResponse,
    Ok,
    Outcome,
    ProtocolFailure,
    ToolCallResult,
    is_valid_id,
)
from viewctl.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_KIND,
    ATTR_RPC_METHOD,
    ATTR_RPC_OUTCOME,
    get_tracer,
)

if TYPE_CHECKING:
    from opentelemetry.trace import Span

    from viewctl.protocol.registry import MethodEntry, MethodRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


def _reject_constant(name: str) -> Any:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


class Dispatcher:
    """Runs the request lifecycle against a :class:`MethodRegistry`.

    Usage::

        dispatcher = Dispatcher(registry)
        response = await dispatcher.handle_raw('{"jsonrpc":"2.0","id":1,"method":"ping"}')
        if response is not None:
            print(response.dump_line())
    """

    def __init__(self, registry: MethodRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> MethodRegistry:
        return self._registry

    async def handle_raw(self, raw: str | bytes) -> JsonRpcResponse | None:
        """Decode one framing unit and handle it.

        Bytes are decoded as UTF-8.  Undecodable input, including the
        non-JSON constants ``NaN`` and ``Infinity``, yields a parse-error
        response with ``id: null``.
        """
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            message = json.loads(text, parse_constant=_reject_constant)
        except ValueError as exc:
            logger.warning("Failed to parse message: %s", exc)
            err = ParseError(str(exc))
            return JsonRpcResponse.failure(None, err.code, err.message, err.data)
        return await self.handle(message)

    async def handle(self, message: Any) -> JsonRpcResponse | None:
        """Handle one decoded envelope.

        Returns the response to send, or ``None`` for notifications.
        """
        with _tracer.start_as_current_span("viewctl.dispatch") as span:
            if not isinstance(message, dict):
                return self._reject(span, None, InvalidRequestError("envelope must be a JSON object"))

            if "id" in message and not is_valid_id(message["id"]):
                return self._reject(span, None, InvalidRequestError("id must be a string, an integer or null"))

            if message.get("jsonrpc") != JSONRPC_VERSION:
                return self._reject(
                    span,
                    message.get("id"),
                    InvalidRequestError(f"jsonrpc version must be {JSONRPC_VERSION}"),
                )

            method = message.get("method")
            if not isinstance(method, str) or not method:
                return self._reject(span, message.get("id"), InvalidRequestError("method is required"))

            request = JsonRpcRequest.model_validate(message)
            kind = "notification" if request.is_notification else "request"
            span.set_attribute(ATTR_RPC_METHOD, method)
            span.set_attribute(ATTR_RPC_KIND, kind)

            if not self._registry.has(method):
                span.set_attribute(ATTR_RPC_OUTCOME, "method_not_found")
                if request.is_notification:
                    logger.debug("Ignoring notification for unknown method %s", method)
                    return None
                span.set_attribute(ATTR_RPC_ERROR_CODE, int(ErrorCode.METHOD_NOT_FOUND))
                return JsonRpcResponse.failure(
                    request.id,
                    ErrorCode.METHOD_NOT_FOUND,
                    f"Method not found: {method}",
                )

            if request.is_notification:
                logger.debug("Processing notification: %s", method)
                outcome = await self.invoke(method, request.params)
                span.set_attribute(ATTR_RPC_OUTCOME, outcome.kind)
                if not isinstance(outcome, Ok):
                    logger.warning("Error processing notification %s: %s", method, outcome.message)
                return None

            logger.debug("Processing request: %s (id: %r)", method, request.id)
            outcome = await self.invoke(method, request.params)
            span.set_attribute(ATTR_RPC_OUTCOME, outcome.kind)
            return self._respond(span, request.id, outcome)

    async def invoke(self, method: str, params: Any = None) -> Outcome:
        """Validate *params*, call the handler and classify what came back.

        This is the boundary where handler failures stop being exceptions.
        """
        try:
            entry = self._registry.get(method)
            arguments = self._validate_params(entry, params)
            value = await self._registry.invoke(method, arguments)
        except JsonRpcProtocolError as exc:
            logger.warning("Error processing %s: %s", method, exc.message)
            return ProtocolFailure(code=int(exc.code), message=exc.message, data=exc.data)
        except Exception as exc:
            logger.warning("Error processing %s: %s", method, exc, exc_info=logger.isEnabledFor(logging.DEBUG))
            return ProtocolFailure(
                code=ErrorCode.INTERNAL_ERROR,
                message=str(exc) or "Internal error",
            )

        if isinstance(value, ToolCallResult) and value.is_error:
            return ApplicationFailure(message=value.text, result=value)

        try:
            jsonable = to_jsonable_python(value, by_alias=True)
            json.dumps(jsonable, allow_nan=False)
        except (PydanticSerializationError, ValueError) as exc:
            logger.warning("Result of %s is not serialisable: %s", method, exc)
            return ProtocolFailure(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Result of {method} is not JSON serialisable",
            )
        return Ok(value=jsonable)

    @staticmethod
    def _validate_params(entry: MethodEntry, params: Any) -> Any:
        if entry.params_model is None:
            return params
        try:
            return entry.params_model.model_validate({} if params is None else params)
        except ValidationError as exc:
            errors: list[dict[str, Any]] = json.loads(exc.json(include_url=False))
            raise InvalidParamsError(entry.name, errors) from exc

    @staticmethod
    def _reject(span: Span, request_id: Any, error: JsonRpcProtocolError) -> JsonRpcResponse:
        logger.warning("Rejected envelope (id: %r): %s", request_id, error.message)
        span.set_attribute(ATTR_RPC_OUTCOME, "invalid_request")
        span.set_attribute(ATTR_RPC_ERROR_CODE, int(error.code))
        return JsonRpcResponse.failure(request_id, error.code, error.message, error.data)

    @staticmethod
    def _respond(span: Span, request_id: Any, outcome: Outcome) -> JsonRpcResponse:
        if isinstance(outcome, Ok):
            return JsonRpcResponse.success(request_id, outcome.value)
        if isinstance(outcome, ApplicationFailure):
            return JsonRpcResponse.success(request_id, outcome.result.to_wire())
        span.set_attribute(ATTR_RPC_ERROR_CODE, outcome.code)
        return JsonRpcResponse.failure(request_id, outcome.code, outcome.message, outcome.data)
