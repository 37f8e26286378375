#!/usr/bin/env python
"""
Launch the Teamdesk API under uvicorn.

Command-line flags override the matching settings from the environment:

    python run_api.py --port 9000 --log-level debug
    python run_api.py --reload
"""

import argparse
import logging

import uvicorn

from api.app import configure_logging
from shared.config import get_settings

logger = logging.getLogger("teamdesk.run_api")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the Teamdesk API")
    parser.add_argument("--host", help="Interface to bind (default: HOST)")
    parser.add_argument("--port", type=int, help="Port to bind (default: PORT)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level for the app and uvicorn (default: LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    settings = get_settings()

    level = (args.log_level or settings.log_level).lower()
    configure_logging(level.upper())

    if not settings.jwt_secret:
        logger.warning("JWT_SECRET is empty; bearer tokens cannot be issued")

    uvicorn.run(
        "api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=level,
    )


if __name__ == "__main__":
    main()
