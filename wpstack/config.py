"""
Stack configuration.

The `.env` file is tokenized with python-dotenv, read into a plain mapping and
turned into a `StackConfig` that each command receives explicitly. Nothing is written
back into `os.environ`.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from dotenv.parser import parse_stream

from wpstack.logging import get_logger

logger = get_logger(__name__)

ENV_FILE = ".env"

QUOTES = "\"'"


def load_env(path: Union[str, Path]) -> Optional[Dict[str, str]]:
    """
    Parse a ``KEY=value`` file.

    Comment lines, blank lines and lines without ``=`` are skipped. Each
    remaining entry is split on its first ``=``; the key is trimmed, the value
    is trimmed and stripped of surrounding quotes. Values are otherwise taken
    verbatim: no ``export`` handling, no inline comments, no escapes.

    Returns:
        Mapping of key to value, or None when the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        logger.debug("env file %s not found", path)
        return None

    values: Dict[str, str] = {}
    with path.open() as f:
        # dotenv only splits the file into entries; values come from the raw text
        for binding in parse_stream(f):
            text = binding.original.string.strip()
            if not text or text.startswith("#") or "=" not in text:
                continue
            key, value = text.split("=", 1)
            values[key.strip()] = value.strip().strip(QUOTES)
    return values


@dataclass(frozen=True)
class StackConfig:
    """Settings shared by the setup commands, with the stack's defaults."""

    db_host: str = "mariadb"
    db_name: str = "wordpress"
    db_user: str = "wordpress"
    db_password: str = "wordpress"
    redis_host: str = "redis"
    redis_port: int = 6379
    site_title: str = "My WordPress Site"
    admin_user: str = "admin"
    admin_password: str = "admin123"
    admin_email: str = "admin@example.com"
    home_url: str = "http://localhost:8080"
    web_port: int = 8080

    ENV_KEYS = {
        "db_host": "DB_HOST",
        "db_name": "DB_NAME",
        "db_user": "DB_USER",
        "db_password": "DB_PASSWORD",
        "redis_host": "REDIS_HOST",
        "redis_port": "REDIS_PORT",
        "site_title": "WP_TITLE",
        "admin_user": "WP_ADMIN_USER",
        "admin_password": "WP_ADMIN_PASSWORD",
        "admin_email": "WP_ADMIN_EMAIL",
        "home_url": "WP_HOME",
        "web_port": "WEB_PORT",
    }

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]]) -> "StackConfig":
        """
        Build a config from an env mapping.

        Missing or empty keys keep their default. Ports that are not integers
        are ignored with a warning.
        """
        env = env or {}
        kwargs = {}

        for f in fields(cls):
            value = env.get(cls.ENV_KEYS[f.name], "")
            if value is None or not str(value).strip():
                continue
            value = str(value).strip()

            if f.type in (int, "int"):
                try:
                    kwargs[f.name] = int(value)
                except ValueError:
                    logger.warning(
                        "ignoring %s=%r: not a number", cls.ENV_KEYS[f.name], value
                    )
                continue

            kwargs[f.name] = value

        return cls(**kwargs)

    @classmethod
    def load(
        cls,
        root: Union[str, Path] = ".",
        env_file: str = ENV_FILE,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "StackConfig":
        """
        Load config from ``root/env_file`` overlaid with ``environ``.

        Values in ``environ`` (typically variables injected into a
        container) take precedence over the file.
        """
        merged: Dict[str, str] = dict(load_env(Path(root) / env_file) or {})
        if environ:
            for key in cls.ENV_KEYS.values():
                if environ.get(key):
                    merged[key] = environ[key]
        return cls.from_env(merged)

    @property
    def admin_url(self) -> str:
        return f"{self.home_url.rstrip('/')}/wp/wp-admin"
