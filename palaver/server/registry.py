"""
Client registry.

Tracks the sessions that have completed the nickname handshake and fans
broadcast lines out to them.
"""

import asyncio
import logging

from palaver.session import STREAM_ERRORS

logger = logging.getLogger(__name__)


class ClientRegistry:
    """
    Lock-guarded set of live sessions.

    Sessions are keyed by identity, never by nickname. A broadcast is
    delivered to exactly the sessions present when it takes its snapshot;
    a session added after that point does not receive it.
    """

    def __init__(self):
        self._sessions = set()
        self._lock = asyncio.Lock()

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, session):
        return session in self._sessions

    def sessions(self):
        """Return a copy of the current members."""
        return list(self._sessions)

    async def add(self, session):
        async with self._lock:
            self._sessions.add(session)
        logger.debug(f"Registered {session.format_addr()} ({len(self._sessions)} active)")

    async def remove(self, session):
        """Remove a session; removing an absent session is a no-op."""
        async with self._lock:
            self._sessions.discard(session)
        logger.debug(f"Unregistered {session.format_addr()} ({len(self._sessions)} active)")

    async def broadcast(self, text):
        """
        Send `text` as one line to every registered session.

        Delivery is best-effort per session: a failing peer is logged and
        skipped, and its own handler takes care of tearing it down.
        """
        async with self._lock:
            snapshot = list(self._sessions)
            # writes are issued while holding the lock so every session sees
            # broadcasts in the same order they were taken
            written = [session for session in snapshot if self._write(session, text)]

        logger.info(text)

        results = await asyncio.gather(
            *(session.drain() for session in written),
            return_exceptions=True
        )
        for session, result in zip(written, results):
            if isinstance(result, Exception):
                logger.error(f"Error@{session.format_addr()} during broadcast: {result}")

    def _write(self, session, text):
        try:
            session.write_line(text)
            return True
        except STREAM_ERRORS as e:
            logger.error(f"Error@{session.format_addr()} during broadcast: {e}")
            return False
