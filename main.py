"""
Main entrypoint: FastAPI scan API served by uvicorn.

Env: API_HOST (default 0.0.0.0), API_PORT (default PORT or 5000), DATABASE_URL / DB_PATH,
JWT_SECRET, API_PREFIX, CORS_ORIGIN, LOG_LEVEL, LOG_FORMAT.

Equivalent: uvicorn backend_safespace.api_server.app:app --host 0.0.0.0 --port 5000
"""

import os

# Configure structured JSON logging before other imports that may log
from backend_safespace.safespace_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the API in the main thread until SIGINT/SIGTERM."""
    api_host = os.getenv("API_HOST", "0.0.0.0").strip()
    api_port = int((os.getenv("API_PORT") or os.getenv("PORT") or "5000").strip() or "5000")

    from backend_safespace.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=api_host, port=api_port)
    uvicorn.run(app, host=api_host, port=api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
