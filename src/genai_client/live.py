"""
Live API: bidirectional streaming sessions over a WebSocket.

Live.connect() opens the socket, sends the setup message and waits for the
server's setupComplete before returning an AsyncSession. From then on the
session's send_* methods write frames without waiting for acknowledgement,
and every inbound server message is routed to the caller's on_message
callback in the order it was received.
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from genai_client import _transformers as t
from genai_client.errors import ConnectionError, InvalidArgumentError, InvalidStateError
from genai_client.transport.http import HttpClient
from genai_client.transport.websocket import CloseEvent, LiveTransport, WebSocketFactory
from genai_client.types import (
    ActivityEnd,
    ActivityStart,
    Blob,
    FunctionResponse,
    GenerationConfig,
    LiveClientContent,
    LiveClientMessage,
    LiveClientRealtimeInput,
    LiveClientSetup,
    LiveClientToolResponse,
    LiveConnectConfig,
    LiveServerMessage,
    Modality,
    ServerMessageKind,
)
from genai_client.types.live import GENERATION_FIELDS

logger = logging.getLogger(__name__)

MarkerUnion = Union[bool, ActivityStart, ActivityEnd, dict[str, Any]]


@dataclass
class LiveCallbacks:
    on_message: Callable[[LiveServerMessage], None]
    on_open: Optional[Callable[[], None]] = None
    on_error: Optional[Callable[[BaseException], None]] = None
    on_close: Optional[Callable[[CloseEvent], None]] = None


class AsyncSession:
    """One live connection. Obtain through Live.connect().

    Sends are synchronous: input is validated and serialized, then handed to
    the transport. Transport failures arrive through the on_error / on_close
    callbacks. After close(), or once the server closed the socket, every send
    raises InvalidStateError.
    """

    def __init__(self, transport: LiveTransport):
        self._transport = transport
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _send(self, message: LiveClientMessage) -> None:
        self._transport.send(json.dumps(message.to_wire()))

    def _ensure_open(self) -> None:
        if self._closed:
            raise InvalidStateError("Live session is closed.")

    def send_client_content(self, turns: Optional[t.ContentListUnion] = None, turn_complete: bool = True) -> None:
        """Append turns to the conversation, strictly in send order.

        With turn_complete=True (the default) the model starts generating from
        the accumulated context; with False the server waits for more input.
        Calling with no turns just signals the end of the turn.
        """
        self._ensure_open()
        content = LiveClientContent(
            turns=t.t_contents(turns) if turns is not None else None,
            turn_complete=turn_complete,
        )
        self._send(LiveClientMessage(client_content=content))

    def send_realtime_input(
        self,
        *,
        media: Optional[Union[Blob, dict[str, Any]]] = None,
        audio: Optional[Union[Blob, dict[str, Any]]] = None,
        audio_stream_end: Optional[bool] = None,
        video: Optional[Union[Blob, dict[str, Any]]] = None,
        text: Optional[str] = None,
        activity_start: Optional[MarkerUnion] = None,
        activity_end: Optional[MarkerUnion] = None,
    ) -> None:
        """Send one realtime input. No ordering guarantee against other sends.

        Only one field goes on the wire. Fields are applied in the order
        media, audio, audio_stream_end, video, text, activity_start,
        activity_end, and the last one applied wins.
        """
        self._ensure_open()
        realtime: Optional[LiveClientRealtimeInput] = None
        if media is not None:
            realtime = LiveClientRealtimeInput(media_chunks=[t.t_blob(media)])
        if audio is not None:
            realtime = LiveClientRealtimeInput(audio=t.t_blob(audio))
        if audio_stream_end is not None:
            realtime = LiveClientRealtimeInput(audio_stream_end=audio_stream_end)
        if video is not None:
            realtime = LiveClientRealtimeInput(video=t.t_blob(video))
        if text is not None:
            realtime = LiveClientRealtimeInput(text=text)
        if activity_start is not None and activity_start is not False:
            realtime = LiveClientRealtimeInput(activity_start=ActivityStart())
        if activity_end is not None and activity_end is not False:
            realtime = LiveClientRealtimeInput(activity_end=ActivityEnd())
        if realtime is None:
            raise InvalidArgumentError("send_realtime_input requires one of media, audio, audio_stream_end, "
                                       "video, text, activity_start or activity_end")
        self._send(LiveClientMessage(realtime_input=realtime))

    def send_tool_response(
        self,
        function_responses: Union[FunctionResponse, dict[str, Any], Sequence[Union[FunctionResponse, dict[str, Any]]]],
    ) -> None:
        """Reply to a server toolCall. Each response's id must match its FunctionCall id."""
        self._ensure_open()
        response = LiveClientToolResponse(function_responses=t.t_function_responses(function_responses))
        self._send(LiveClientMessage(tool_response=response))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._transport.close()

    def _mark_closed(self) -> None:
        self._closed = True

    async def __aenter__(self) -> "AsyncSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()


class _MessageRouter:
    """Transport callbacks for one connection.

    Resolves the pending connect on setupComplete, forwards every other
    message to the caller, and fails the pending connect if the socket errors
    or closes first.
    """

    def __init__(self, callbacks: LiveCallbacks, ready: "asyncio.Future[AsyncSession]"):
        self._callbacks = callbacks
        self._ready = ready
        self.transport: Optional[LiveTransport] = None
        self.session: Optional[AsyncSession] = None

    def on_open(self) -> None:
        if self._callbacks.on_open:
            self._callbacks.on_open()

    def on_message(self, raw: str) -> None:
        message = parse_server_message(raw)
        if message is None:
            return
        kind = message.kind
        if kind is ServerMessageKind.SETUP_COMPLETE:
            if self._ready.done():
                logger.debug("Ignoring repeated setupComplete")
                return
            if self.transport is None:
                raise InvalidStateError("setupComplete arrived before the transport was bound")
            self.session = AsyncSession(self.transport)
            self._ready.set_result(self.session)
            return
        if kind is ServerMessageKind.GO_AWAY:
            logger.warning("Server will close the live connection in %s", message.go_away.time_left)
        self._callbacks.on_message(message)

    def on_error(self, error: BaseException) -> None:
        if self._callbacks.on_error:
            self._callbacks.on_error(error)
        if not self._ready.done():
            self._ready.set_exception(error)

    def on_close(self, event: CloseEvent) -> None:
        if self.session is not None:
            self.session._mark_closed()
        if self._callbacks.on_close:
            self._callbacks.on_close(event)
        if not self._ready.done():
            self._ready.set_exception(ConnectionError(f"Live connection closed before setup completed: {event}"))


def parse_server_message(raw: Union[str, bytes]) -> Optional[LiveServerMessage]:
    """Parse one inbound frame. Returns None for frames with no recognized field."""
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Dropping non-JSON live frame")
        return None
    if not isinstance(payload, dict):
        logger.debug("Dropping live frame that is not a JSON object")
        return None
    try:
        message = LiveServerMessage.model_validate(payload)
    except ValidationError as e:
        logger.debug("Dropping malformed live frame: %s", e)
        return None
    if message.kind is None:
        logger.debug("Dropping live frame with no recognized field: %s", sorted(payload))
        return None
    return message


class Live:
    def __init__(self, api_client: HttpClient, websocket_factory: Optional[WebSocketFactory] = None):
        self._api_client = api_client
        self._websocket_factory = websocket_factory or WebSocketFactory()

    def build_setup(self, model: str, config: LiveConnectConfig) -> LiveClientMessage:
        """Translate connect parameters into the setup envelope."""
        client_config = self._api_client.config
        updates = {name: getattr(config, name) for name in GENERATION_FIELDS if getattr(config, name) is not None}
        if "speech_config" in updates:
            updates["speech_config"] = t.t_speech_config(updates["speech_config"])
        generation = (config.generation_config or GenerationConfig()).model_copy(update=updates)
        if client_config.vertexai and generation.response_modalities is None:
            generation = generation.model_copy(update={"response_modalities": [Modality.AUDIO]})
        has_generation = bool(generation.model_dump(exclude_none=True))

        setup = LiveClientSetup(
            model=t.t_model(client_config, model),
            generation_config=generation if has_generation else None,
            system_instruction=t.t_content(config.system_instruction) if config.system_instruction else None,
            tools=t.t_tools(config.tools),
            realtime_input_config=config.realtime_input_config,
            session_resumption=config.session_resumption,
            context_window_compression=config.context_window_compression,
            input_audio_transcription=config.input_audio_transcription,
            output_audio_transcription=config.output_audio_transcription,
        )
        return LiveClientMessage(setup=setup)

    async def connect(
        self,
        model: str,
        callbacks: LiveCallbacks,
        config: Optional[Union[LiveConnectConfig, dict[str, Any]]] = None,
        connect_timeout: Optional[float] = None,
    ) -> AsyncSession:
        """Open a live session and wait for the server to acknowledge setup.

        Raises the transport's error if the socket fails before setup
        completes, ConnectionError if it closes first or the wait times out.
        The transport is closed whenever connect does not return a session.
        """
        if config is None:
            config = LiveConnectConfig()
        elif isinstance(config, dict):
            config = LiveConnectConfig.model_validate(config)
        setup = self.build_setup(model, config)

        client_config = self._api_client.config
        url = client_config.live_url(self._api_client.base_url)
        headers = {**client_config.auth_headers(), **client_config.http_options.headers}

        ready: asyncio.Future[AsyncSession] = asyncio.get_running_loop().create_future()
        router = _MessageRouter(callbacks, ready)
        transport = self._websocket_factory.create(
            url,
            headers,
            on_open=router.on_open,
            on_message=router.on_message,
            on_error=router.on_error,
            on_close=router.on_close,
        )
        router.transport = transport

        await transport.connect()

        # From here on the socket is open: any failure must close it.
        timeout = connect_timeout if connect_timeout is not None else client_config.timeout
        try:
            transport.send(json.dumps(setup.to_wire()))
            return await asyncio.wait_for(ready, timeout=timeout)
        except asyncio.TimeoutError:
            transport.close()
            raise ConnectionError(f"Timed out waiting for setupComplete after {timeout}s")
        except BaseException:
            transport.close()
            raise
