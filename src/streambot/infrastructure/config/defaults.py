"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streambot",
    "environment": "dev",
    "proxy": {
        "enabled": False,
        "host": "0.0.0.0",
        "port": 3001,
        "public_base_url": None,  # Derived from port in schema.py
    },
    "http": {
        "timeout_seconds": 10.0,
        "unwrap_timeout_seconds": 8.0,
        "user_agent": "StreamBot/1.0",
    },
    "anilist": {
        "endpoint": "https://graphql.anilist.co",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "dir": "./.cache/streambot",
        "ttl_seconds": 3600,
    },
}
