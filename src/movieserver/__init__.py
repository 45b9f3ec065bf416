"""
=============================================================================
MOVIESERVER
=============================================================================

An in-memory movie service over HTTP/1.1.

    POST /movie/      {"name": "Inception", "year": 2010, "was_good": true}
                      → 200 {"id": "<id derived from the name>"}
    GET  /movie/:id   → 200 {"name": ..., "year": ..., "was_good": ...}
                      → 404 {"error": "Movie <id> not found"}

Layout:

    core/        sockets, connections, thread pool
    http/        request parsing, responses, routing, HTTP errors
    middleware/  access logging
    movies/      records, ids, store, handlers
    server.py    HTTPServer
    app.py       create_app()

Run it with `python -m movieserver` or the `movieserver` command.

=============================================================================
"""

__version__ = "1.0.0"

from .app import create_app
from .config import ServerConfig
from .server import HTTPServer

__all__ = ["create_app", "HTTPServer", "ServerConfig", "__version__"]
