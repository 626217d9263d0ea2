#!/usr/bin/env python3
"""
Browser Relay command line

    python -m browser_relay serve    # HTTP API for the extension
    python -m browser_relay mcp      # MCP server on stdio
"""

import argparse
import sys

from browser_relay.config import get_settings
from browser_relay.main import configure_logging


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Browser Relay console log server")
    parser.add_argument(
        "command",
        choices=["serve", "mcp"],
        help="serve: run the HTTP API, mcp: run the MCP stdio server",
    )
    parser.add_argument("--host", help="Bind address for the HTTP API")
    parser.add_argument("--port", type=int, help="Port for the HTTP API")
    parser.add_argument("--database-url", help="SQLAlchemy database URL")
    args = parser.parse_args(argv)

    settings = get_settings()
    overrides = {
        key: value
        for key, value in {
            "host": args.host,
            "port": args.port,
            "database_url": args.database_url,
        }.items()
        if value is not None
    }
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn
        from browser_relay.main import create_app

        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    else:
        from browser_relay.mcp_server import run_server

        run_server(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
