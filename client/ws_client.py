from __future__ import annotations
import asyncio
from contextlib import suppress
from typing import Optional

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException
from rich.console import Console
from rich.markup import escape

from shared.config import ClientConfig
from shared.errors import BridgeConnectError, BridgeError
from shared.log import get_logger
from shared.message import ChannelEvent, Frame, MalformedFrameError, Message, outbound_text
from .console_input import LineReader
from .render import message_text
from .state import BridgeOutcome, Identity

logger = get_logger(__name__)


class LiveSessionBridge:
    """
    Live channel between the console and one conversation.

    Two pumps run while the channel is open: recv_loop renders inbound
    frames, _forward_lines sends typed lines. The bridge finishes when the
    inbound side ends. A bridge is bound to one identity and one conversation
    and cannot be reopened.
    """

    def __init__(
        self,
        config: ClientConfig,
        identity: Identity,
        conversation_id: str,
        reader: LineReader,
        console: Console,
        *,
        open_timeout: Optional[float] = 10.0,
    ) -> None:
        self.config = config
        self.identity = identity
        self.conversation_id = conversation_id
        self.reader = reader
        self.console = console
        self.open_timeout = open_timeout
        self.websocket: Optional[websockets.ClientConnection] = None

    @property
    def _log_context(self) -> dict:
        return {"user_id": self.identity.id, "conversation_id": self.conversation_id}

    async def connect(self) -> None:
        """Open the channel, presenting the session cookie and the conversation id"""
        if self.websocket is not None:
            raise RuntimeError("bridge channel was already opened")

        url = self.config.ws_url(self.conversation_id)
        try:
            self.websocket = await websockets.connect(
                url,
                additional_headers={"Cookie": self.identity.session_token},
                open_timeout=self.open_timeout,
                ping_interval=15,
                ping_timeout=45,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            logger.error("Channel handshake failed: %s", e, extra=self._log_context)
            raise BridgeConnectError(f'Impossible to connect to chat service : "{e}"') from e
        logger.info("Channel open", extra=self._log_context)

    async def run(self) -> BridgeOutcome:
        """
        Connect, then relay until the channel closes.

        Returns BridgeOutcome.DISCONNECTED on a graceful close.

        Raises:
            BridgeConnectError: the channel could not be opened
            BridgeError: the service reported an error or the channel dropped
        """
        await self.connect()
        self.console.print(f"[green]Connected to conversation \\[{escape(self.conversation_id)}][/green]", highlight=False)

        forward_task = asyncio.create_task(self._forward_lines())
        try:
            await self.recv_loop()
        finally:
            forward_task.cancel()
            with suppress(asyncio.CancelledError):
                await forward_task
            await self.close()

        self.console.print("Disconnected")
        logger.info("Channel closed", extra=self._log_context)
        return BridgeOutcome.DISCONNECTED

    async def _forward_lines(self) -> None:
        assert self.websocket is not None
        while True:
            try:
                line = await self.reader.readline()
            except EOFError:
                # Local input is gone; leave the conversation
                await self.websocket.close(code=1000)
                return
            if not line.strip():
                continue
            try:
                await self.websocket.send(outbound_text(self.identity.id, line).to_json())
            except ConnectionClosed:
                return

    async def recv_loop(self) -> None:
        assert self.websocket is not None
        try:
            async for raw in self.websocket:
                try:
                    frame = Frame.from_json(raw)
                except MalformedFrameError as e:
                    logger.error("Failed to parse inbound frame: %s", e, extra=self._log_context)
                    continue
                self._dispatch(frame)
        except ConnectionClosedError as e:
            raise BridgeError(f"Connection to chat service lost: {e}") from e

    def _dispatch(self, frame: Frame) -> None:
        if frame.event == ChannelEvent.NEW_MESSAGE.value:
            try:
                msg = Message.from_dict(frame.data)
            except MalformedFrameError as e:
                logger.error("Dropping malformed message: %s", e, extra=self._log_context)
                return
            self.console.print(message_text(msg, self.identity.id))
        elif frame.event == ChannelEvent.ERROR.value:
            logger.error("Service error event: %s", frame.data, extra={**self._log_context, "event": frame.event})
            raise BridgeError(f'Chat service error : "{frame.data}"')
        else:
            logger.debug("Ignoring event %s", frame.event, extra={**self._log_context, "event": frame.event})

    async def close(self) -> None:
        if self.websocket:
            await self.websocket.close(code=1000)

