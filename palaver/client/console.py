"""
Console front end for the chat client.

Prints every incoming line and sends every line typed on stdin.
"""

import asyncio
import logging
import sys

from palaver.cli import build_parser, configure_logging
from palaver.client.client import CLOSED, ERROR, MESSAGE, ChatClient
from palaver.protocol import is_quit

logger = logging.getLogger(__name__)


class ConsoleClient:
    """Terminal line printer driving a ChatClient."""

    def __init__(self, host, port, nickname, stdin=None, stdout=None):
        self.core = ChatClient(host, port, nickname)
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def show(self, text):
        print(text, file=self.stdout, flush=True)

    async def print_events(self):
        """Print receive events until the connection closes."""
        while True:
            event = await self.core.events.get()
            if event.kind == MESSAGE:
                self.show(event.payload)
            elif event.kind == ERROR:
                self.show(f"Connection error: {event.payload}")
            elif event.kind == CLOSED:
                self.show("Connection closed.")
                return

    async def send_user_input(self):
        """Read user input and send it to the server until /quit or EOF."""
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, self.stdin.readline)
            if not line:
                return
            line = line.rstrip("\r\n")
            sent = await self.core.send(line)
            if not sent or is_quit(line):
                return

    async def run(self):
        """Main client loop"""
        self.show("Connecting to server...")
        try:
            await self.core.connect()
        except OSError as e:
            self.show(f"Connection error: {e}")
            return False

        printer_task = asyncio.create_task(self.print_events())
        sender_task = asyncio.create_task(self.send_user_input())
        try:
            await sender_task
        finally:
            await self.core.close()
            # let the printer report the close before returning
            await printer_task
        return True


def main():
    """Entry point for the console client"""
    parser = build_parser("Chat Client", client=True)
    args = parser.parse_args()
    configure_logging(args.debug)

    client = ConsoleClient(args.host, args.port, args.nickname)
    try:
        connected = asyncio.run(client.run())
    except KeyboardInterrupt:
        logger.info("Client stopped by user")
        return
    if not connected:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
