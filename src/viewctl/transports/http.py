"""HTTP transport — one JSON-RPC envelope per POST body.

Runs the standard library ``ThreadingHTTPServer`` in a worker thread; each
request thread hands its body to the dispatcher on the serving event loop.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING, Any

from viewctl.protocol.models import ErrorCode, JsonRpcResponse, is_server_error

if TYPE_CHECKING:
    from viewctl.protocol.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def status_for(response: JsonRpcResponse | None) -> int:
    """Map a dispatcher result to an HTTP status code."""
    if response is None:
        return HTTPStatus.NO_CONTENT
    if response.error is None:
        return HTTPStatus.OK
    if is_server_error(response.error.code):
        return HTTPStatus.INTERNAL_SERVER_ERROR
    return HTTPStatus.BAD_REQUEST


class _DispatchingHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        dispatcher: Dispatcher,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self.dispatcher = dispatcher
        self.loop = loop
        super().__init__(address, _RequestHandler)

    def dispatch(self, body: bytes) -> JsonRpcResponse | None:
        future = asyncio.run_coroutine_threadsafe(self.dispatcher.handle_raw(body), self.loop)
        try:
            return future.result()
        except Exception:
            logger.exception("Unexpected error dispatching HTTP request")
            return JsonRpcResponse.failure(None, ErrorCode.INTERNAL_ERROR, "Internal error")


class _RequestHandler(BaseHTTPRequestHandler):
    server: _DispatchingHTTPServer
    protocol_version = "HTTP/1.1"

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        if self.path.split("?", 1)[0] == "/health":
            self._send_json(
                HTTPStatus.OK,
                {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()},
            )
            return
        self._send_json(HTTPStatus.NOT_FOUND, {"error": "Not Found"})

    def do_POST(self) -> None:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = 0
        body = self.rfile.read(length) if length > 0 else b""

        response = self.server.dispatch(body)
        status = status_for(response)
        if response is None:
            self.send_response(status)
            self.send_header("Content-Length", "0")
            self.end_headers()
            return
        self._send_bytes(status, response.dump_line().encode("utf-8"))

    def _send_json(self, status: int, payload: dict[str, Any]) -> None:
        self._send_bytes(status, json.dumps(payload).encode("utf-8"))

    def _send_bytes(self, status: int, data: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)


class HttpTransport:
    """Serves the dispatcher over HTTP until :meth:`shutdown` is called.

    Usage::

        transport = HttpTransport(dispatcher, port=3000)
        task = asyncio.create_task(transport.serve())
        await transport.wait_ready()
        ...
        await transport.shutdown()
        await task
    """

    def __init__(self, dispatcher: Dispatcher, *, host: str = "127.0.0.1", port: int = 3000) -> None:
        self._dispatcher = dispatcher
        self._host = host
        self._port = port
        self._server: _DispatchingHTTPServer | None = None
        self._ready = asyncio.Event()

    @property
    def address(self) -> tuple[str, int]:
        """Bound ``(host, port)``; the port is resolved once serving starts."""
        if self._server is None:
            return self._host, self._port
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    async def wait_ready(self) -> None:
        await self._ready.wait()

    async def serve(self) -> None:
        self._dispatcher.registry.freeze()
        loop = asyncio.get_running_loop()
        self._server = _DispatchingHTTPServer((self._host, self._port), self._dispatcher, loop)
        host, port = self.address
        logger.info("MCP HTTP transport listening on http://%s:%d", host, port)
        self._ready.set()
        try:
            await asyncio.to_thread(self._server.serve_forever)
        except asyncio.CancelledError:
            self._server.shutdown()
            raise
        finally:
            self._server.server_close()
            logger.info("HTTP transport closed")

    async def shutdown(self) -> None:
        """Stop ``serve_forever``; :meth:`serve` returns afterwards."""
        if self._server is not None:
            await asyncio.to_thread(self._server.shutdown)
