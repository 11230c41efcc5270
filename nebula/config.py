"""Marketplace configuration.

Loaded from a YAML document and passed explicitly to the pieces that need it
(the mutation gateway, the app factory, the CLI) rather than read from
module globals on each request.

Example ``config.yaml``::

    server:
      port: 8080
      logging: true
      assets_dir: database_assets
    db:
      path: database.sqlite
      seed_file: seed.yaml
    marketplace:
      enabled: true
      psk: "change-me"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from nebula.errors import ConfigError

DEFAULT_CONFIG_FILE = "config.yaml"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    logging: bool = False
    assets_dir: str = "database_assets"


@dataclass(frozen=True)
class DatabaseConfig:
    path: str = "database.sqlite"
    seed_file: Optional[str] = None


@dataclass(frozen=True)
class MarketplaceConfig:
    """Feature flag and pre-shared key gating the write endpoints."""

    enabled: bool = False
    psk: str = ""

    @property
    def writable(self) -> bool:
        return self.enabled and bool(self.psk)


@dataclass(frozen=True)
class NebulaConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    db: DatabaseConfig = field(default_factory=DatabaseConfig)
    marketplace: MarketplaceConfig = field(default_factory=MarketplaceConfig)


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUTHY | _FALSY:
        return value.strip().lower() in _TRUTHY
    raise ConfigError(f"'{key}' must be a boolean, got {value!r}")


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}") from None


def _as_str(value: Any, key: str) -> str:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"'{key}' must be a string, got {value!r}")


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"'{name}' section must be a mapping")
    return section


def config_from_dict(data: Mapping[str, Any]) -> NebulaConfig:
    """Build a :class:`NebulaConfig` from a parsed YAML mapping."""
    if not isinstance(data, Mapping):
        raise ConfigError("configuration document must be a mapping")

    server = _section(data, "server")
    db = _section(data, "db")
    market = _section(data, "marketplace")
    defaults = NebulaConfig()

    seed_file = db.get("seed_file")
    return NebulaConfig(
        server=ServerConfig(
            host=_as_str(server.get("host", defaults.server.host), "server.host"),
            port=_as_int(server.get("port", defaults.server.port), "server.port"),
            logging=_as_bool(server.get("logging", defaults.server.logging), "server.logging"),
            assets_dir=_as_str(
                server.get("assets_dir", defaults.server.assets_dir), "server.assets_dir"
            ),
        ),
        db=DatabaseConfig(
            path=_as_str(db.get("path", defaults.db.path), "db.path"),
            seed_file=_as_str(seed_file, "db.seed_file") if seed_file else None,
        ),
        marketplace=MarketplaceConfig(
            enabled=_as_bool(
                market.get("enabled", defaults.marketplace.enabled), "marketplace.enabled"
            ),
            psk=_as_str(market.get("psk") or "", "marketplace.psk"),
        ),
    )


def apply_env_overrides(
    config: NebulaConfig, environ: Optional[Mapping[str, str]] = None
) -> NebulaConfig:
    """Overlay ``PORT`` and ``NEBULA_*`` environment variables onto *config*."""
    env = os.environ if environ is None else environ

    server = config.server
    if env.get("PORT"):
        server = replace(server, port=_as_int(env["PORT"], "PORT"))
    if env.get("NEBULA_ASSETS_DIR"):
        server = replace(server, assets_dir=env["NEBULA_ASSETS_DIR"])

    db = config.db
    if env.get("NEBULA_DB_PATH"):
        db = replace(db, path=env["NEBULA_DB_PATH"])

    market = config.marketplace
    if "NEBULA_MARKETPLACE_ENABLED" in env:
        market = replace(
            market,
            enabled=_as_bool(env["NEBULA_MARKETPLACE_ENABLED"], "NEBULA_MARKETPLACE_ENABLED"),
        )
    if "NEBULA_MARKETPLACE_PSK" in env:
        market = replace(market, psk=env["NEBULA_MARKETPLACE_PSK"])

    return NebulaConfig(server=server, db=db, marketplace=market)


def load_config(
    path: str | Path | None = None, environ: Optional[Mapping[str, str]] = None
) -> NebulaConfig:
    """Load configuration from YAML, then apply environment overrides.

    The file is *path*, else ``$NEBULA_CONFIG``, else ``config.yaml`` in the
    working directory. A missing file yields the defaults.
    """
    env = os.environ if environ is None else environ
    config_path = Path(path or env.get("NEBULA_CONFIG") or DEFAULT_CONFIG_FILE)

    if config_path.exists():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
        config = config_from_dict(data)
    else:
        config = NebulaConfig()

    return apply_env_overrides(config, env)
