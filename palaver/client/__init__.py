"""
Chat client package.

Main exports:
- ChatClient: client session core
- ClientEvent: line/error/closed notification from the receive task
"""

from palaver.client.client import ChatClient, ClientEvent

__all__ = ['ChatClient', 'ClientEvent']
