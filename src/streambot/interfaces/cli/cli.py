from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from streambot.infrastructure.config import load_config
from streambot.infrastructure.logging.setup import configure_logging
from streambot.interfaces.app import create_app

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="streambot-proxy")

    # Server options
    parser.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides proxy.host).",
    )
    parser.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides proxy.port).",
    )

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    return parser.parse_args(list(argv) if argv is not None else None)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.host:
        overrides["proxy_host"] = args.host
    if args.port:
        overrides["proxy_port"] = args.port
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    return overrides


def start(argv: Iterable[str] | None = None) -> int:
    """Process entrypoint: load config once, then serve the proxy.

    Returns 0 without serving when the proxy is disabled.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=_cli_overrides(args),
    )

    log_config = configure_logging(config)

    if not config.proxy_enabled:
        log.warning(
            "proxy_disabled",
            hint="set proxy.enabled or STREAMBOT_PROXY_ENABLED=true",
        )
        return 0

    log.info(
        "proxy_starting",
        host=config.proxy_host,
        port=config.proxy_port,
        public_base_url=config.proxy_public_base_url,
    )
    uvicorn.run(
        create_app(config),
        host=config.proxy_host,
        port=config.proxy_port,
        log_config=log_config,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
