"""
Main entry point for the Native Swap frame server.
"""

import argparse
import logging
from typing import List, Optional

import uvicorn

from nativeswap.config import settings

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Set up logging configuration."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Native Swap frame server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m nativeswap                      # Serve on 0.0.0.0:8000
  python -m nativeswap --port 8080          # Serve on port 8080
  python -m nativeswap --log-level DEBUG    # Verbose logging
        """
    )

    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind (default: {settings.host})"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to bind (default: {settings.port})"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main application entry point."""
    args = parse_arguments(argv)

    if args.log_level:
        settings.log_level = args.log_level

    setup_logging()

    # Import here so that logging is configured before services are built
    from nativeswap.api_server import create_api_server

    app = create_api_server(settings=settings)
    logger.info(f"Starting Native Swap frame server on {args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
