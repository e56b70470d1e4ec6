"""
Chat server package.

Main exports:
- ChatServer: Main server class
- ClientRegistry: Set of joined sessions and broadcast fan-out
"""

from palaver.server.registry import ClientRegistry
from palaver.server.server import ChatServer

__all__ = ['ChatServer', 'ClientRegistry']
