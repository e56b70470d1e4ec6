"""
Main chat server implementation.

Handles client connections, the nickname handshake, broadcasting, and
server lifecycle.
"""

import asyncio
import itertools
import logging

from palaver import protocol
from palaver.cli import build_parser, configure_logging
from palaver.server.registry import ClientRegistry
from palaver.session import STREAM_ERRORS, ChatSession

logger = logging.getLogger(__name__)


class ChatServer:
    """
    Async chat server broadcasting every line to every client.

    Features:
    - One handler task per connection, no upper bound
    - Guest nicknames for anonymous clients
    - Per-connection failures never reach other sessions
    """

    def __init__(self, port, host=None):
        """
        Initialize server.

        Args:
            port: Port to listen on (0 picks a free one)
            host: Interface to bind; all interfaces if None
        """
        self.host = host
        self.port = port
        self.registry = ClientRegistry()
        self.connections = set()  # every open session, handshake or not
        self._guest_numbers = itertools.count(1)
        self._server = None
        self._stopped = asyncio.Event()

    def next_guest_name(self):
        return f"{protocol.GUEST_PREFIX}{next(self._guest_numbers)}"

    async def start(self):
        """
        Bind the listening socket and start accepting.

        Raises:
            OSError: the port could not be bound
        """
        self._server = await asyncio.start_server(
            self.client_handler,
            self.host,
            self.port
        )
        self.port = self._server.sockets[0].getsockname()[1]
        logger.info(f"Chat server listening on port {self.port}")

    async def run_server(self):
        """Bind and serve until stopped or cancelled."""
        if self._server is None:
            await self.start()
        try:
            await self._stopped.wait()
        finally:
            await self.stop()

    async def stop(self):
        """Stop accepting and drop every open connection without notice."""
        if self._server is None or self._stopped.is_set():
            return
        self._stopped.set()
        self._server.close()
        for session in list(self.connections):
            await session.close()
        await self._server.wait_closed()
        logger.info("Chat server stopped")

    async def client_handler(self, reader, writer):
        """Handle a single client connection."""
        session = ChatSession(reader, writer)
        if not self._server.is_serving():
            # accepted just before stop()
            await session.close()
            return
        self.connections.add(session)
        logger.info(f"Connected: {session.format_addr()}")
        try:
            await self.handshake(session)
            await self.registry.add(session)
            await self.registry.broadcast(protocol.joined(session.nickname))
            await self.chat_loop(session)
        except STREAM_ERRORS as e:
            logger.error(f"Client error@{session.format_addr()}: {e}")
        finally:
            await self.registry.remove(session)
            # no leave banner while the whole server is shutting down
            if session.nickname is not None and not self._stopped.is_set():
                await self.registry.broadcast(protocol.left(session.nickname))
            await session.close()
            self.connections.discard(session)
            logger.info(f"Disconnected: {session.format_addr()}")

    async def handshake(self, session):
        """Prompt for a nickname and assign one, generating a guest name if needed."""
        await session.send_line(protocol.WELCOME)
        proposed = await session.read_line()
        nickname = protocol.normalize_nickname(proposed)
        if nickname is None:
            nickname = self.next_guest_name()
        await session.send_line(protocol.greeting(nickname))
        # assigned only once greeted, so join and leave banners stay paired
        session.nickname = nickname
        logger.debug(f"{session.format_addr()} is now {nickname}")

    async def chat_loop(self, session):
        """Relay the session's lines until it quits or the stream ends."""
        while True:
            line = await session.read_line()
            if line is None:
                logger.info(f"{session.format_addr()} disconnected (EOF)")
                return
            if protocol.is_quit(line):
                await session.send_line(protocol.GOODBYE)
                return
            if not line.strip():
                continue
            await self.registry.broadcast(protocol.chat_line(session.nickname, line))


def main():
    """Entry point for server"""
    parser = build_parser("Chat Server", client=False)
    args = parser.parse_args()
    configure_logging(args.debug)

    server = ChatServer(args.port)
    try:
        asyncio.run(server.run_server())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except OSError as e:
        logger.error(f"Could not start server on port {args.port}: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
