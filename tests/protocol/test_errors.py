"""Tests for the protocol error hierarchy."""

from viewctl.protocol.errors import (
    HandlerError,
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcProtocolError,
    MethodNotFoundError,
    ParseError,
)
from viewctl.protocol.models import ErrorCode


class TestErrorHierarchy:
    def test_all_are_protocol_errors(self) -> None:
        for cls in (ParseError, InvalidRequestError, MethodNotFoundError, HandlerError):
            assert issubclass(cls, JsonRpcProtocolError)

    def test_invalid_params_is_handler_error(self) -> None:
        assert issubclass(InvalidParamsError, HandlerError)


class TestCodes:
    def test_parse_error(self) -> None:
        err = ParseError("Expecting value")
        assert err.code == ErrorCode.PARSE_ERROR
        assert err.to_error_object().data == "Expecting value"

    def test_invalid_request(self) -> None:
        err = InvalidRequestError("method is required")
        assert err.code == -32600
        assert "method is required" in str(err)

    def test_method_not_found(self) -> None:
        err = MethodNotFoundError("nope")
        assert err.code == -32601
        assert err.method == "nope"
        assert str(err) == "Method not found: nope"

    def test_handler_error_defaults_to_internal(self) -> None:
        assert HandlerError("boom").code == -32603

    def test_handler_error_custom_code(self) -> None:
        err = HandlerError("device busy", code=-32010, data={"retry": True})
        obj = err.to_error_object()
        assert obj.code == -32010
        assert obj.message == "device busy"
        assert obj.data == {"retry": True}

    def test_custom_code_does_not_leak_to_class(self) -> None:
        HandlerError("x", code=-32010)
        assert HandlerError("y").code == -32603

    def test_invalid_params_carries_errors(self) -> None:
        errors = [{"loc": ["x"], "msg": "Field required", "type": "missing"}]
        err = InvalidParamsError("mouse/move", errors)
        assert err.code == -32603
        assert err.data == errors
        assert "mouse/move" in err.message
