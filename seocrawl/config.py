"""Application configuration loaded from a TOML file."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class CrawlerConfig:
    """Settings for the crawler."""

    agent: str = ""


@dataclass
class HTTPServerConfig:
    """Settings for the HTTP server."""

    host: str = ""
    port: int = 0
    url: str = ""


@dataclass
class DBConfig:
    """Settings for the database store."""

    server: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    name: str = ""


@dataclass
class Config:
    """Configuration of the whole application."""

    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    http_server: HTTPServerConfig = field(default_factory=HTTPServerConfig)
    db: DBConfig = field(default_factory=DBConfig)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a table of the config with lower-cased keys; keys are case-insensitive."""
    lowered = {str(k).lower(): v for k, v in data.items()}
    table = lowered.get(name, {})
    if not isinstance(table, dict):
        raise ValueError(f"configuration section {name!r} must be a table")
    return {str(k).lower(): v for k, v in table.items()}


def _find_config_file(config_file: str | Path) -> Path:
    base = Path(config_file)
    for candidate in (base.with_name(base.name + ".toml"), base):
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"config file {str(base)!r} not found in {str(base.parent)!r}")


def load_config(config_file: str | Path) -> Config:
    """Load the configuration named by config_file.

    The file is looked up as ``<config_file>.toml`` first and then as the
    bare path; in both cases its contents are parsed as TOML.
    """
    path = _find_config_file(config_file)
    with path.open("rb") as fh:
        data = tomllib.load(fh)

    crawler = _section(data, "crawler")
    server = _section(data, "server")
    database = _section(data, "database")

    return Config(
        crawler=CrawlerConfig(agent=str(crawler.get("agent", ""))),
        http_server=HTTPServerConfig(
            host=str(server.get("host", "")),
            port=int(server.get("port", 0)),
            url=str(server.get("url", "")),
        ),
        db=DBConfig(
            server=str(database.get("server", "")),
            port=int(database.get("port", 0)),
            user=str(database.get("user", "")),
            password=str(database.get("password", "")),
            name=str(database.get("database", "")),
        ),
    )