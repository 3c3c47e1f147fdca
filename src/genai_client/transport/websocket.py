"""
WebSocket transport for live sessions.

send() is non-blocking: frames go onto an outbound queue drained by a single
writer task, so they reach the socket in call order. A reader task hands every
inbound text frame to on_message. Socket failures are reported through
on_error / on_close, never raised from send().
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError

from genai_client.errors import InvalidStateError

logger = logging.getLogger(__name__)

DEFAULT_OPEN_TIMEOUT_S = 15.0


@dataclass(frozen=True)
class CloseEvent:
    code: Optional[int] = None
    reason: str = ""

    def __str__(self) -> str:
        return f"connection closed (code={self.code}, reason={self.reason!r})"


OpenHandler = Callable[[], None]
MessageHandler = Callable[[str], None]
ErrorHandler = Callable[[BaseException], None]
CloseHandler = Callable[[CloseEvent], None]


class LiveTransport(Protocol):
    async def connect(self) -> None: ...

    def send(self, message: str) -> None: ...

    def close(self) -> None: ...


class WebSocketTransport:
    def __init__(
        self,
        url: str,
        headers: Optional[dict[str, str]] = None,
        *,
        on_open: Optional[OpenHandler] = None,
        on_message: Optional[MessageHandler] = None,
        on_error: Optional[ErrorHandler] = None,
        on_close: Optional[CloseHandler] = None,
        open_timeout: float = DEFAULT_OPEN_TIMEOUT_S,
    ):
        self._url = url
        self._headers = headers or {}
        self._on_open = on_open
        self._on_message = on_message
        self._on_error = on_error
        self._on_close = on_close
        self._open_timeout = open_timeout
        self._ws: Optional[ClientConnection] = None
        self._outbox: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._reader: Optional[asyncio.Task[None]] = None
        self._writer: Optional[asyncio.Task[None]] = None
        self._closing = False
        self._closed = False

    @property
    def connected(self) -> bool:
        return self._ws is not None and not self._closed

    async def connect(self) -> None:
        """Open the socket and start the reader and writer tasks."""
        if self._ws is not None:
            return
        self._ws = await connect(
            self._url,
            additional_headers=self._headers,
            open_timeout=self._open_timeout,
            max_size=None,
        )
        loop = asyncio.get_running_loop()
        self._writer = loop.create_task(self._write_loop())
        self._reader = loop.create_task(self._read_loop())
        if self._on_open:
            self._on_open()

    def send(self, message: str) -> None:
        if self._ws is None or self._closing or self._closed:
            raise InvalidStateError("WebSocket not connected")
        self._outbox.put_nowait(message)

    def close(self) -> None:
        """Flush queued frames, then close. Idempotent."""
        if self._closing or self._closed:
            return
        self._closing = True
        self._outbox.put_nowait(None)

    async def _write_loop(self) -> None:
        assert self._ws is not None
        while True:
            message = await self._outbox.get()
            if message is None:
                break
            try:
                await self._ws.send(message)
            except ConnectionClosed:
                # The reader reports the closure.
                return
            except Exception as e:
                logger.error("WebSocket send failed: %s", e)
                self._emit_error(e)
        await self._ws.close()

    async def _read_loop(self) -> None:
        assert self._ws is not None
        try:
            async for raw in self._ws:
                text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
                if self._on_message:
                    try:
                        self._on_message(text)
                    except Exception:
                        logger.exception("on_message handler failed")
        except ConnectionClosedError as e:
            self._emit_error(e)
        except Exception as e:
            logger.error("WebSocket receive failed: %s", e)
            self._emit_error(e)
        finally:
            self._finish()

    def _emit_error(self, error: BaseException) -> None:
        if self._on_error:
            self._on_error(error)

    def _finish(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._writer and not self._writer.done():
            self._writer.cancel()
        ws = self._ws
        event = CloseEvent(
            code=ws.close_code if ws is not None else None,
            reason=(ws.close_reason or "") if ws is not None else "",
        )
        if self._on_close:
            self._on_close(event)


class WebSocketFactory:
    """Creates live transports. Swapped for a fake in tests."""

    def create(
        self,
        url: str,
        headers: dict[str, str],
        *,
        on_open: Optional[OpenHandler] = None,
        on_message: Optional[MessageHandler] = None,
        on_error: Optional[ErrorHandler] = None,
        on_close: Optional[CloseHandler] = None,
        **kwargs: Any,
    ) -> LiveTransport:
        return WebSocketTransport(
            url,
            headers,
            on_open=on_open,
            on_message=on_message,
            on_error=on_error,
            on_close=on_close,
            **kwargs,
        )
