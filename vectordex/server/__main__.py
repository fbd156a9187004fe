"""
Command-line entry point for the vectordex server.

Usage:
    python -m vectordex.server [OPTIONS]

Options:
    --host TEXT         Host to bind to (default: 0.0.0.0)
    --port INTEGER      Port to bind to (default: 8000)
    --config TEXT       YAML settings file
    --snapshot TEXT     Snapshot file to restore from and save to
    --log-level TEXT    Log level (DEBUG, INFO, WARNING, ERROR)
    --api-key TEXT      API key for write endpoints
"""

import argparse
import uvicorn

from .config import ServerConfig
from .app import create_app


def main():
    parser = argparse.ArgumentParser(
        description="vectordex Server - Vector Database REST API"
    )

    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML settings file"
    )
    parser.add_argument(
        "--snapshot",
        type=str,
        default=None,
        help="Snapshot file to restore on startup and save on shutdown"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level"
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="API key for authentication (optional)"
    )

    args = parser.parse_args()

    config = ServerConfig(
        host=args.host,
        port=args.port,
        config_path=args.config,
        snapshot_path=args.snapshot,
        log_level=args.log_level,
        api_key=args.api_key,
    )

    print(f"""
vectordex server
  Host:      {config.host}
  Port:      {config.port}
  Snapshot:  {config.snapshot_path or '(memory only)'}
  Log Level: {config.log_level}
  API Docs:  http://{config.host}:{config.port}/docs
    """)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
