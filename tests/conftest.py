"""
Shared fixtures: a live server on a loopback port and a raw line client.
"""
import asyncio
import socket
import sys
from pathlib import Path

import pytest_asyncio

sys.path.insert(0, str(Path(__file__).parent.parent))

from palaver.server.server import ChatServer

HOST = '127.0.0.1'
TIMEOUT = 3.0


class LineClient:
    """Bare protocol client used to drive and observe the server."""

    def __init__(self, port):
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self):
        self.reader, self.writer = await asyncio.open_connection(HOST, self.port)
        return self

    async def send(self, text):
        self.writer.write(text.encode() + b'\n')
        await self.writer.drain()

    async def read_line(self, timeout=TIMEOUT):
        """Next line without its newline, or None at EOF."""
        data = await asyncio.wait_for(self.reader.readline(), timeout)
        if not data:
            return None
        return data.decode().rstrip('\n')

    async def read_until(self, expected, timeout=TIMEOUT):
        """Read lines until `expected` arrives; return everything read before it."""
        seen = []
        while True:
            line = await self.read_line(timeout)
            if line is None:
                raise AssertionError(f"EOF while waiting for {expected!r}, got {seen}")
            if line == expected:
                return seen
            seen.append(line)

    async def join(self, nickname):
        """Complete the handshake and wait until this client is registered."""
        assert await self.read_line() == "Welcome to the chat! Please enter your nickname:"
        await self.send(nickname)
        greeting = await self.read_line()
        name = greeting[len("Hello "):-len("! Type /quit to exit.")]
        # the join banner is broadcast after registration, so seeing our own
        # means we will receive everything that follows
        await self.read_until(f"** {name} joined the chat **")
        return name

    async def close(self):
        if self.writer is not None and not self.writer.is_closing():
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass


@pytest_asyncio.fixture
async def chat_server():
    server = ChatServer(0, host=HOST)
    await server.start()
    yield server
    await server.stop()


@pytest_asyncio.fixture
async def line_client(chat_server):
    """Factory for connected LineClients, closed at teardown."""
    clients = []

    async def factory():
        client = await LineClient(chat_server.port).connect()
        clients.append(client)
        return client

    yield factory
    for client in clients:
        await client.close()


async def wait_until(predicate, timeout=TIMEOUT):
    """Poll `predicate` until it is true or the timeout expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


def free_port():
    """A loopback port with nothing listening on it."""
    with socket.socket() as sock:
        sock.bind((HOST, 0))
        return sock.getsockname()[1]
