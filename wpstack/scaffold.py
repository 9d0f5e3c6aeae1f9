"""
Project scaffolder.

Creates the Bedrock directory layout, the web entry point, the rewrite
rules and the `.gitkeep` markers. Every entry is a create-only File
resource, so a second run plans no changes and existing files keep their
content.
"""

from pathlib import Path
from typing import List, Optional, Union

from wpstack.config import ENV_FILE, load_env
from wpstack.core.executor import Executor, ApplyResult, PlanResult
from wpstack.core.resource import Platform
from wpstack.logging import get_stack_logger
from wpstack.resources.file import File
from wpstack.transport import Transport

logger = get_stack_logger(__name__)

DIRECTORIES = [
    "web/app/uploads",
    "web/app/themes",
    "web/app/plugins",
    "web/app/mu-plugins",
    "logs",
    "docker/mariadb/init",
]

DIR_MODE = 0o755

MARKER_DIRS = [
    "web/app/uploads",
    "logs",
    "docker/mariadb/init",
]

MARKER_NAME = ".gitkeep"

INDEX_PHP = """<?php

/**
 * WordPress view bootstrapper
 */
define('WP_USE_THEMES', true);
require __DIR__ . '/wp/wp-blog-header.php';
"""

HTACCESS = """# BEGIN WordPress
RewriteEngine On
RewriteRule .* - [E=HTTP_AUTHORIZATION:%{HTTP:Authorization}]
RewriteBase /
RewriteRule ^index\\.php$ - [L]
RewriteCond %{REQUEST_FILENAME} !-f
RewriteCond %{REQUEST_FILENAME} !-d
RewriteRule . /index.php [L]
# END WordPress
"""

BOILERPLATE = {
    "web/index.php": INDEX_PHP,
    "web/.htaccess": HTACCESS,
}

DEFAULT_HOME = "http://localhost:8080"
DEFAULT_PORT = "8080"

SERVICES = [
    ("phpMyAdmin", "http://localhost:8081"),
    ("MailHog", "http://localhost:8025"),
    ("MariaDB", "localhost:3306"),
    ("Redis", "localhost:6379"),
]

SHORTCUTS = [
    ("composer docker-down", "Stop containers"),
    ("composer logs", "View logs"),
    ("composer shell", "Shell into web container"),
    ("composer wp", "Run WP-CLI commands"),
    ("composer check-versions", "Check component versions"),
]


def scaffold_resources(root: Union[str, Path]) -> List[File]:
    """The File resources that make up the project skeleton, in order."""
    root = str(root)
    resources = [
        File(path, ensure="directory", mode=DIR_MODE, replace=False, root=root)
        for path in DIRECTORIES
    ]
    resources += [
        File(path, content=content, replace=False, root=root)
        for path, content in BOILERPLATE.items()
    ]
    resources += [
        File(f"{path}/{MARKER_NAME}", content="", replace=False, root=root)
        for path in MARKER_DIRS
    ]
    return resources


class Scaffolder:
    """
    Ensure the project skeleton exists under root.

    Example:
        result = Scaffolder("/srv/site").run()
        print(result.changed_resources)
    """

    def __init__(
        self,
        root: Union[str, Path],
        platform: Optional[Platform] = None,
        transport: Optional[Transport] = None,
    ):
        self.root = Path(root)
        self.executor = Executor(platform=platform, transport=transport)
        for resource in scaffold_resources(self.root):
            self.executor.add(resource)

    def plan(self) -> PlanResult:
        """Show what run() would create, without touching the tree."""
        plan_result = self.executor.plan()

        for resource in self.executor.resources:
            plan = plan_result.plans.get(resource.id)
            if plan is None:
                continue
            action = plan.action.value if plan.has_changes() else "skip"
            logger.action(action, resource.name, str(plan))

        for error in plan_result.errors:
            logger.warning("Could not inspect: %s", error)

        if plan_result.has_errors:
            logger.notice(f"{len(plan_result.errors)} entries could not be inspected")
        logger.notice(f"{plan_result.change_count} of {len(self.executor.resources)} entries would change")
        return plan_result

    def run(self) -> ApplyResult:
        result = self.executor.run()

        for resource_id in result.changed_resources:
            resource = self.executor.get(resource_id)
            logger.action("create", resource.name, resource.resource_type())

        for error in result.errors:
            logger.warning("Could not create: %s", error)

        logger.debug("scaffold applied in %.3fs", result.duration)
        return result


def next_steps(root: Union[str, Path]) -> List[str]:
    """
    Lines of the post-setup banner.

    Home URL and port come from WP_HOME and WEB_PORT in the env file.
    """
    env = load_env(Path(root) / ENV_FILE) or {}
    home = env.get("WP_HOME") or DEFAULT_HOME
    port = env.get("WEB_PORT") or DEFAULT_PORT

    lines = [
        "Next steps:",
        "",
        "1. Start the environment:",
        "   composer docker-up",
        "",
        "2. Visit your WordPress site:",
        f"   {home}",
        f"   (web container published on port {port})",
        "",
        "3. Access development tools:",
    ]
    lines += [f"   • {name}: {address}" for name, address in SERVICES]
    lines += ["", "Useful commands:"]
    lines += [f"   {command:<26}# {description}" for command, description in SHORTCUTS]
    return lines


def print_next_steps(root: Union[str, Path]) -> None:
    logger.rule("WordPress + Bedrock + MariaDB setup complete")
    for line in next_steps(root):
        logger.line(line)
    logger.rule()
