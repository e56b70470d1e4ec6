"""
Palaver: a line-oriented TCP chat service.

Main exports:
- ChatServer: broadcast server
- ChatClient: client session core
"""

from palaver.client.client import ChatClient, ClientEvent
from palaver.server.server import ChatServer

__version__ = "1.0.0"
__all__ = ['ChatServer', 'ChatClient', 'ClientEvent']
