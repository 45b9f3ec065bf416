"""
Application factory.

    app = create_app(ServerConfig(port=8080))
    app.run()

Builds one MovieStore for the lifetime of the server, registers the movie
routes and installs access logging.
"""

from typing import Optional

from .config import ServerConfig
from .http.router import Router
from .middleware import LoggingMiddleware
from .movies import MovieHandlers, MovieStore
from .server import HTTPServer


def create_app(config: Optional[ServerConfig] = None, store: Optional[MovieStore] = None) -> HTTPServer:
    """
    Create the movie server.

    Args:
        config: Server configuration, ServerConfig() when omitted.
        store: Store to serve from. Tests pass one in to inspect it;
            otherwise a fresh empty store is created.

    Returns:
        An HTTPServer ready to run().
    """
    config = config or ServerConfig()

    router = Router()
    MovieHandlers(store if store is not None else MovieStore()).register(router)

    server = HTTPServer(config, router=router)
    server.use(LoggingMiddleware(log_format=config.log_format))
    return server
