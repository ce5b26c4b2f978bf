"""Entry point for serving the Venue Booking API.

Intended to be executed from the project root, for example under
Docker or a process manager where only a single Python file is
specified.  Host and port are read from ``HOST`` and ``PORT``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from venue_booking_api.app.main import app


async def main() -> None:
    """Start the API using Uvicorn.

    Defaults are ``0.0.0.0`` and ``8000``.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        logging.getLogger(__name__).info("Server task cancelled")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
