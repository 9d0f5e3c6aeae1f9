"""
Version and health report for the stack.

Every section is independent: a failing database check still lets the cache
and composer sections run. Nothing is retried and nothing is fixed; the
report only observes.
"""

import importlib.util
import json
import platform as platform_module
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import pymysql

from wpstack.config import ENV_FILE, StackConfig, load_env
from wpstack.logging import get_stack_logger

try:  # optional cache client
    import redis
except ImportError:  # pragma: no cover - depends on the environment
    redis = None  # type: ignore

logger = get_stack_logger(__name__)

NOT_FOUND = "Not found"

OPTIONAL_MODULES = ["ssl", "sqlite3", "zlib", "lzma", "pymysql", "redis", "dotenv", "rich"]

WORDPRESS_PACKAGE = "johnpbloch/wordpress"
BEDROCK_PACKAGE = "roots/bedrock"

WP_VERSION_FILE = "web/wp/wp-includes/version.php"
WP_VERSION_RE = re.compile(r"""^\$wp_version\s*=\s*['"]([^'"]+)['"]\s*;""", re.MULTILINE)


def read_json(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """Parse a JSON manifest, or None when it is missing or unreadable."""
    path = Path(path)
    if not path.is_file():
        return None
    try:
        with path.open() as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug(f"could not parse {path}: {e}")
        return None
    return data if isinstance(data, dict) else None


def find_package_version(lock: Optional[Dict[str, Any]], name: str) -> Optional[str]:
    """Version of the package called exactly name in a composer.lock snapshot."""
    if not lock or not isinstance(lock.get("packages"), list):
        return None
    for package in lock["packages"]:
        if isinstance(package, dict) and package.get("name") == name:
            return package.get("version")
    return None


def installed_wordpress_version(root: Union[str, Path]) -> Optional[str]:
    """Read $wp_version from the WordPress core checkout, if present."""
    path = Path(root) / WP_VERSION_FILE
    if not path.is_file():
        return None
    match = WP_VERSION_RE.search(path.read_text(errors="replace"))
    return match.group(1) if match else "Unknown"


def available_modules(names: List[str] = OPTIONAL_MODULES) -> List[str]:
    """Subset of names that can be imported in this interpreter."""
    return [name for name in names if importlib.util.find_spec(name) is not None]


@dataclass
class Section:
    """One block of the report."""
    title: str
    lines: List[str] = field(default_factory=list)
    ok: bool = True

    def add(self, line: str) -> "Section":
        self.lines.append(line)
        return self


@dataclass
class VersionReport:
    sections: List[Section] = field(default_factory=list)

    def section(self, title: str) -> Optional[Section]:
        return next((s for s in self.sections if s.title == title), None)

    def render(self) -> None:
        logger.rule("WordPress Bedrock Stack Version Check")
        for section in self.sections:
            style = logger.success if section.ok else logger.failure
            style(section.title)
            for line in section.lines:
                logger.line(f"   • {line}")
            logger.line()
        logger.rule()
        logger.success("Version check complete!")


def _default_db_connect(config: StackConfig):
    return pymysql.connect(
        host=config.db_host,
        user=config.db_user,
        password=config.db_password,
        database=config.db_name,
        connect_timeout=5,
    )


def _default_redis_client(config: StackConfig):
    return redis.Redis(
        host=config.redis_host,
        port=config.redis_port,
        socket_connect_timeout=5,
        decode_responses=True,
    )


class VersionChecker:
    """
    Collect the diagnostic report for a project root.

    Example:
        report = VersionChecker(".").run()
        report.render()
    """

    def __init__(
        self,
        root: Union[str, Path] = ".",
        db_connect: Optional[Callable[[StackConfig], Any]] = None,
        redis_client: Optional[Callable[[StackConfig], Any]] = None,
        redis_available: Optional[bool] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            root: Project root holding .env, composer.json and composer.lock
            db_connect: Factory returning a DB-API connection for a config
            redis_client: Factory returning a client with an ``info()`` method
            redis_available: Override detection of the redis client module
            environ: Variables that override .env, as for `wpstack install`
        """
        self.root = Path(root)
        self.db_connect = db_connect or _default_db_connect
        self.redis_client = redis_client or _default_redis_client
        if redis_available is None:
            redis_available = redis is not None
        self.redis_available = redis_available
        self.environ = environ

    def _config(self) -> StackConfig:
        return StackConfig.load(self.root, environ=self.environ)

    def run(self) -> VersionReport:
        lock = read_json(self.root / "composer.lock")
        checks = [
            self.check_runtime,
            lambda: self.check_wordpress(lock),
            lambda: self.check_bedrock(lock),
            self.check_database,
            self.check_cache,
            self.check_composer,
        ]
        report = VersionReport()
        for check in checks:
            section = check()
            if section is not None:
                report.sections.append(section)
        return report

    def check_runtime(self) -> Section:
        section = Section(f"Python Version: {platform_module.python_version()}")
        section.add(f"Implementation: {platform_module.python_implementation()}")
        section.add(f"Modules: {', '.join(available_modules())}")
        return section

    def check_wordpress(self, lock: Optional[Dict[str, Any]]) -> Section:
        version = find_package_version(lock, WORDPRESS_PACKAGE)
        section = Section(f"WordPress: {version or NOT_FOUND}", ok=version is not None)
        installed = installed_wordpress_version(self.root)
        if installed is not None:
            section.add(f"Installed Version: {installed}")
        return section

    def check_bedrock(self, lock: Optional[Dict[str, Any]]) -> Section:
        version = find_package_version(lock, BEDROCK_PACKAGE)
        return Section(f"Bedrock: {version or NOT_FOUND}", ok=version is not None)

    def check_database(self) -> Section:
        section = Section("MariaDB Connection Test")

        if load_env(self.root / ENV_FILE) is None:
            section.ok = False
            return section.add("Could not load .env file")

        config = self._config()
        try:
            connection = self.db_connect(config)
            try:
                with connection.cursor() as cursor:
                    cursor.execute("SELECT VERSION()")
                    (version,) = cursor.fetchone()
                    cursor.execute("SELECT @@character_set_server, @@collation_server")
                    charset, collation = cursor.fetchone()
            finally:
                connection.close()
        except pymysql.Error as e:
            section.ok = False
            return section.add(f"Connection failed: {e}")

        section.add("Connected successfully")
        section.add(f"Version: {version}")
        section.add(f"Charset: {charset} / {collation}")
        return section

    def check_cache(self) -> Section:
        section = Section("Redis Connection Test")

        if not self.redis_available:
            section.ok = False
            return section.add("Redis client not available")

        config = self._config()
        try:
            info = self.redis_client(config).info()
        except (redis.RedisError, OSError) as e:
            section.ok = False
            return section.add(f"Connection failed: {e}")

        section.add("Connected successfully")
        section.add(f"Version: {info.get('redis_version', 'Unknown')}")
        section.add(f"Memory: {info.get('used_memory_human', 'Unknown')}")
        return section

    def check_composer(self) -> Optional[Section]:
        manifest = read_json(self.root / "composer.json")
        if manifest is None:
            return None
        require = manifest.get("require") or {}
        section = Section("Composer Dependencies")
        section.add(f"PHP Requirement: {require.get('php', 'Not specified')}")
        section.add(f"Total Packages: {len(require)}")
        return section
