from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import InvalidMappingError
from .mapping import freeze_mapping
from .model import MappingSpec

logger = logging.getLogger(__name__)


@dataclass
class Paths:
    root: Path
    local_dir: Path
    conf_file: Path


def _default_mappings() -> dict[str, Any]:
    # what a comment form asks for
    return {"fn": "author", "email": "email", "url": "url"}


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 8421
    parser_url: str = "http://tools.microformatic.com/query/json/hkit/{url}"
    timeout: float = 10.0
    user_agent: str = "hcard-mapper/0.1"
    mappings: dict[str, Any] = field(default_factory=_default_mappings)

    def mapping_spec(self) -> MappingSpec:
        return freeze_mapping(self.mappings)


DEFAULT_CONF = """# hcard-mapper local config (TOML)
host = "127.0.0.1"
port = 8421
# upstream microformat parser; {url} is replaced with the encoded page URL
parser_url = "http://tools.microformatic.com/query/json/hkit/{url}"
timeout = 10.0

# hCard property = destination field; a sub-table groups variants
[mappings]
fn = "author"
email = "email"
url = "url"
"""


def _apply(settings: Settings, data: dict[str, Any]) -> None:
    settings.host = str(data.get("host", settings.host))
    settings.port = int(data.get("port", settings.port))
    settings.parser_url = str(data.get("parser_url", settings.parser_url))
    settings.timeout = float(data.get("timeout", settings.timeout))
    settings.user_agent = str(data.get("user_agent", settings.user_agent))
    if "mappings" in data:
        freeze_mapping(data["mappings"])   # validate before accepting
        settings.mappings = data["mappings"]


def load_settings(conf: Path) -> Settings:
    """Read `conf`; a missing or malformed file yields the defaults."""
    settings = Settings()
    if not conf.exists():
        return settings
    try:
        data = tomllib.loads(conf.read_text(encoding="utf-8"))
        _apply(settings, data)
    except (tomllib.TOMLDecodeError, ValueError, TypeError, InvalidMappingError) as exc:
        logger.warning("Ignoring malformed config %s: %s", conf, exc)
        return Settings()
    return settings


def ensure_workspace(base: Path | None = None) -> tuple[Paths, Settings]:
    root = Path(base or os.getcwd())
    local = root / "local"
    conf = local / "hcard.conf"

    local.mkdir(parents=True, exist_ok=True)
    if not conf.exists():
        conf.write_text(DEFAULT_CONF, encoding="utf-8")

    return Paths(root=root, local_dir=local, conf_file=conf), load_settings(conf)
