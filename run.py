"""Entry point for serving the API.

Host, port and every other option come from environment variables
(see ``lost_found_api.app.core.config``), for example::

    DATABASE_URL=/var/lib/lost_found.db SECRET_KEY=... PORT=5000 python run.py
"""
import logging

from uvicorn import Config, Server

from lost_found_api.app.core.config import settings
from lost_found_api.app.main import app


def main() -> None:
    """Serve the application with Uvicorn on ``settings.host:settings.port``."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    server.run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
