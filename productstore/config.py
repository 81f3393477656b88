# productstore/config.py

"""
Configuration for the product store HTTP service.

Defaults can be overridden via environment variables:

- PRODUCTS_API_HOST          interface to bind (default "0.0.0.0")
- PRODUCTS_API_PORT          TCP port (default 3000)
- PRODUCTS_API_TITLE         OpenAPI title (default "Product Store API")
- PRODUCTS_API_CORS_ORIGINS  comma-separated origins, "*" for all (default "*")
- PRODUCTS_API_SEED          "0", "false", "no" or "off" starts with an empty store
- PRODUCTS_API_LOG_LEVEL     logging level name (default "INFO")
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

_FALSY = {"0", "false", "no", "off"}


def _parse_origins(raw: str) -> List[str]:
    raw = (raw or "").strip()
    if not raw or raw == "*":
        return ["*"]
    return [p.strip() for p in raw.split(",") if p.strip()] or ["*"]


@dataclass
class ServiceConfig:
    host: str = "0.0.0.0"
    port: int = 3000
    title: str = "Product Store API"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    seed: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        host = os.getenv("PRODUCTS_API_HOST", cls.host).strip() or cls.host

        port_raw = os.getenv("PRODUCTS_API_PORT", "").strip()
        port = cls.port
        if port_raw:
            try:
                port = int(port_raw)
            except ValueError:
                port = cls.port
            if port <= 0 or port > 65535:
                port = cls.port

        title = os.getenv("PRODUCTS_API_TITLE", cls.title).strip() or cls.title
        cors_origins = _parse_origins(os.getenv("PRODUCTS_API_CORS_ORIGINS", "*"))
        seed = os.getenv("PRODUCTS_API_SEED", "true").strip().lower() not in _FALSY
        log_level = os.getenv("PRODUCTS_API_LOG_LEVEL", cls.log_level).strip().upper() or cls.log_level

        return cls(
            host=host,
            port=port,
            title=title,
            cors_origins=cors_origins,
            seed=seed,
            log_level=log_level,
        )


_CONFIG: Optional[ServiceConfig] = None


def get_config() -> ServiceConfig:
    """Return the process config, reading the environment on first use."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = ServiceConfig.from_env()
    return _CONFIG


def set_config(config: Optional[ServiceConfig]) -> None:
    """Replace (or clear, with None) the cached config. Mainly for tests."""
    global _CONFIG
    _CONFIG = config


__all__ = ["ServiceConfig", "get_config", "set_config"]
