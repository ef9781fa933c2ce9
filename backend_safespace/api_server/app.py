"""
FastAPI/ASGI application entrypoint.

Build and configure the ASGI app from environment settings (.env included).
Run with: uvicorn backend_safespace.api_server.app:app --host 0.0.0.0 --port 5000
"""

import os

from backend_safespace.api_server.server import create_app
from backend_safespace.config import get_settings
from backend_safespace.config.env import load_safespace_env
from backend_safespace.safespace_logging import configure_logging

load_safespace_env()
# LOG_LEVEL / LOG_FORMAT may only be defined in .env
configure_logging(os.getenv("LOG_LEVEL"), os.getenv("LOG_FORMAT"))

app = create_app(get_settings())

__all__ = ["app"]
