"""
Client session core.

Connects to the chat server, sends the nickname, and runs a background
receive task. Incoming lines, read errors and the final close are published
as events on a queue and, optionally, to callbacks supplied by the caller.
"""

import asyncio
import logging
from typing import Callable, NamedTuple, Optional

from palaver.protocol import QUIT_COMMAND, normalize_nickname
from palaver.session import STREAM_ERRORS, ChatSession

logger = logging.getLogger(__name__)

MESSAGE = "message"
ERROR = "error"
CLOSED = "closed"


class ClientEvent(NamedTuple):
    """One notification from the receive task."""
    kind: str
    payload: object = None


class ChatClient():
    """
    Async client for communicating with the chat server

    Features:
    - Nickname handshake on connect
    - Background receiver publishing line/error/closed events
    - Best-effort /quit on close
    """
    def __init__(self, host: str, port: int, nickname: Optional[str] = None) -> None:
        """
        Initialize client
        Args:
            host: ip of the server to connect to
            port: port of the server to connect to
            nickname: name to join with; blank lets the server pick a guest name
        """
        self.host = host
        self.port = port
        self.nickname = nickname
        self.session: Optional[ChatSession] = None
        self.receiver_task: Optional[asyncio.Task] = None
        self.events: asyncio.Queue = asyncio.Queue()

    @property
    def connected(self) -> bool:
        return self.session is not None and not self.session.writer.is_closing()

    async def connect(
        self,
        on_message: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_closed: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Open the connection, send the nickname and start receiving.

        Returns as soon as the nickname is written; it does not wait for
        the receive task.

        Raises:
            OSError: the server could not be reached
        """
        try:
            reader, writer = await asyncio.open_connection(self.host, self.port)
        except OSError as e:
            logger.error(f"ERROR: Could not connect to {self.host}:{self.port}: {e}")
            raise
        self.session = ChatSession(reader, writer)
        logger.info(f"Connected to {self.host}:{self.port}")

        nickname = normalize_nickname(self.nickname)
        if nickname is not None:
            try:
                await self.session.send_line(nickname)
            except STREAM_ERRORS:
                await self.session.close()
                raise

        self.receiver_task = asyncio.create_task(
            self.receive_messages(on_message, on_error, on_closed)
        )

    async def receive_messages(self, on_message=None, on_error=None, on_closed=None) -> None:
        """Handle the receiving of messages from the server"""
        try:
            while True:
                line = await self.session.read_line()
                if line is None:
                    logger.info("Server disconnected")
                    break
                self._publish(ClientEvent(MESSAGE, line), on_message, line)
        except STREAM_ERRORS as e:
            logger.error(f"Connection ERROR: {e}")
            self._publish(ClientEvent(ERROR, e), on_error, e)
        finally:
            # the peer is gone either way; later sends become no-ops
            self.session.writer.close()
            self._publish(ClientEvent(CLOSED), on_closed)

    def _publish(self, event: ClientEvent, callback, *args) -> None:
        self.events.put_nowait(event)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception(f"{event.kind} callback failed")

    async def send(self, text: str) -> bool:
        """Send one line; a no-op returning False when not connected."""
        if not self.connected:
            return False
        try:
            await self.session.send_line(text)
            return True
        except STREAM_ERRORS as e:
            logger.error(f"Send failed: {e}")
            return False

    async def close(self) -> None:
        """Say /quit if possible, then close the connection."""
        if self.session is None:
            return
        if self.connected:
            try:
                await self.session.send_line(QUIT_COMMAND)
            except STREAM_ERRORS as e:
                logger.debug(f"Could not send {QUIT_COMMAND}: {e}")
        await self.session.close()

    async def wait_closed(self) -> None:
        """Wait for the receive task to finish."""
        if self.receiver_task is not None:
            await self.receiver_task
