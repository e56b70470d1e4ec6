"""
Connection session.

Wraps one asyncio stream pair as a line reader/writer. Used by the server
for each accepted connection and by the client for its single connection.
"""

import asyncio
import logging

from palaver.protocol import decode_line, encode_line

logger = logging.getLogger(__name__)

# errors treated as "the peer is gone"
STREAM_ERRORS = (ConnectionResetError, BrokenPipeError, ConnectionAbortedError, OSError)


class ChatSession:
    """
    Represents a single live text connection.

    Manages:
    - Line-oriented reads and writes on the stream
    - Nickname assigned by the handshake
    - Liveness of the underlying connection
    """

    def __init__(self, reader, writer, addr=None):
        """
        Initialize session.

        Args:
            reader: asyncio StreamReader for this connection
            writer: asyncio StreamWriter for this connection
            addr: Peer address tuple (host, port); looked up from the writer if omitted
        """
        self.reader = reader
        self.writer = writer
        self.addr = addr if addr is not None else writer.get_extra_info("peername")
        self.nickname = None
        self.alive = True

    def format_addr(self):
        """Format address as IP:Port string."""
        if not self.addr:
            return "unknown"
        return f"{self.addr[0]}:{self.addr[1]}"

    async def read_line(self):
        """
        Read the next line from the peer.

        Returns the decoded line without its terminator, or None once the
        stream has ended. Lines are not capped by the reader's buffer limit;
        an oversized line is collected in pieces.
        """
        chunks = []
        while True:
            try:
                chunks.append(await self.reader.readuntil(b'\n'))
                break
            except asyncio.IncompleteReadError as e:
                # EOF; keep whatever arrived without a newline
                chunks.append(e.partial)
                break
            except asyncio.LimitOverrunError as e:
                chunks.append(await self.reader.readexactly(e.consumed))
        data = b''.join(chunks)
        if not data:
            self.alive = False
            return None
        return decode_line(data)

    def write_line(self, text):
        """Queue one line on the transport without waiting for it to flush."""
        self.writer.write(encode_line(text))

    async def drain(self):
        await self.writer.drain()

    async def send_line(self, text):
        """Write one line and wait until the transport accepts it."""
        self.write_line(text)
        await self.drain()

    async def close(self):
        """Close the stream, ignoring errors raised while closing."""
        self.alive = False
        if self.writer.is_closing():
            return
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except STREAM_ERRORS as e:
            logger.debug(f"Ignoring close error@{self.format_addr()}: {e}")
