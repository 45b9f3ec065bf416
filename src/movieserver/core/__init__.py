"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing under the HTTP layer:

    SocketServer   listening socket, accept loop, signal handling
         │
         │ hands each accepted Connection to
         ▼
    ThreadPool     bounded queue + worker threads
         │
         │ a worker drives
         ▼
    Connection     buffered reads of whole requests, keep-alive, close

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, RequestTooLarge
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "RequestTooLarge",
    "ThreadPool",
]
