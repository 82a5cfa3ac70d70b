"""Stdio transport — one JSON-RPC envelope per line on stdin/stdout.

stdout carries protocol lines only; every diagnostic goes through
``logging`` (stderr).
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterable, AsyncIterator
from typing import TYPE_CHECKING, BinaryIO, TextIO

from viewctl.protocol.models import ErrorCode, JsonRpcResponse

if TYPE_CHECKING:
    from viewctl.protocol.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


async def stdin_lines(stream: BinaryIO | None = None) -> AsyncIterator[bytes]:
    """Yield raw lines from *stream* (default ``sys.stdin.buffer``) until EOF.

    Lines stay undecoded so invalid UTF-8 reaches the dispatcher as a parse
    error instead of ending the read loop.  Reads happen in the default
    executor so the event loop keeps running handlers while waiting for input.
    """
    source = stream or sys.stdin.buffer
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, source.readline)
        if not line:
            return
        yield line


class StdioTransport:
    """Feeds stdin lines to a :class:`Dispatcher` and writes responses to stdout.

    Every non-blank line becomes its own task, so a slow handler does not
    hold up reading; responses are written in completion order.  With
    ``ordered=True`` each line is invoked and answered before the next one
    is read.

    Usage::

        transport = StdioTransport(dispatcher)
        await transport.serve()   # returns when stdin closes
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        *,
        lines: AsyncIterable[str | bytes] | None = None,
        output: TextIO | None = None,
        ordered: bool = False,
    ) -> None:
        self._dispatcher = dispatcher
        self._lines = lines
        self._output = output
        self._ordered = ordered
        self._pending: set[asyncio.Task[None]] = set()

    async def serve(self) -> None:
        """Process lines until the input reaches EOF, then drain in-flight work."""
        self._dispatcher.registry.freeze()
        logger.info("Starting MCP stdio transport")

        lines = self._lines if self._lines is not None else stdin_lines()
        async for line in lines:
            if not line.strip():
                logger.debug("Empty line, ignoring")
                continue
            if self._ordered:
                await self._process_line(line)
            else:
                task = asyncio.create_task(self._process_line(line))
                self._pending.add(task)
                task.add_done_callback(self._pending.discard)

        if self._pending:
            await asyncio.gather(*self._pending)
        logger.info("Stdio transport closed")

    async def _process_line(self, line: str | bytes) -> None:
        logger.debug("Received line: %r", line)
        try:
            response = await self._dispatcher.handle_raw(line)
        except Exception:
            logger.exception("Unexpected error processing line")
            response = JsonRpcResponse.failure(None, ErrorCode.INTERNAL_ERROR, "Internal error")

        if response is None:
            logger.debug("Notification, no response sent")
            return
        self._write(response)

    def _write(self, response: JsonRpcResponse) -> None:
        # Single synchronous write per line: no other task can run in between.
        out = self._output or sys.stdout
        line = response.dump_line()
        logger.debug("Sending response: %s", line)
        out.write(line + "\n")
        out.flush()
