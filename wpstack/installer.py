"""
WordPress bootstrap installer.

Runs once when the containers come up:

1. Wait for the database (`wp db check`) under a RetryPolicy
2. Stop early if WordPress is already installed
3. `wp core install` with the configured site and admin account
4. Best-effort housekeeping: core update, permalinks, rewrite flush
5. Best-effort plugin installs
6. Print the credentials that were used
"""

import time
from typing import Callable, List, Optional, Sequence

from wpstack.config import StackConfig
from wpstack.logging import get_stack_logger
from wpstack.retry import RetryPolicy
from wpstack.wpcli import WPCLI, CommandResult

logger = get_stack_logger(__name__)

DEFAULT_PLUGINS = ["contact-form-7", "yoast-seo"]
PERMALINK_STRUCTURE = "/%postname%/"

EXIT_OK = 0
EXIT_FAILURE = 1


class BootstrapInstaller:
    """
    Bring a fresh environment to an installed WordPress.

    Example:
        installer = BootstrapInstaller(StackConfig.load("."), WPCLI())
        raise SystemExit(installer.run())
    """

    def __init__(
        self,
        config: StackConfig,
        wp: WPCLI,
        policy: Optional[RetryPolicy] = None,
        plugins: Optional[Sequence[str]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.wp = wp
        self.policy = policy or RetryPolicy(attempts=30, interval=2.0)
        self.plugins: List[str] = list(DEFAULT_PLUGINS if plugins is None else plugins)
        self._sleep = sleep

    def wait_for_database(self) -> bool:
        logger.step("Waiting for database...")
        return self.policy.poll(self.wp.db_ready, sleep=self._sleep)

    def install_core(self) -> CommandResult:
        logger.step("Installing WordPress core...")
        return self.wp.core_install(
            url=self.config.home_url,
            title=self.config.site_title,
            admin_user=self.config.admin_user,
            admin_password=self.config.admin_password,
            admin_email=self.config.admin_email,
            skip_email=True,
        )

    def configure(self) -> None:
        """Follow-up commands whose failure never aborts the install."""
        logger.step("Setting up WordPress...")
        self._best_effort(self.wp.core_update())
        self._best_effort(self.wp.rewrite_structure(PERMALINK_STRUCTURE))
        self._best_effort(self.wp.rewrite_flush())

    def install_plugins(self) -> None:
        if not self.plugins:
            return
        logger.step("Installing plugins...")
        for slug in self.plugins:
            self._best_effort(self.wp.plugin_install(slug, activate=True))

    def _best_effort(self, result: CommandResult) -> None:
        if not result.succeeded:
            logger.debug(f"ignored failure of '{result.command}' (exit {result.exit_code})")

    def run(self) -> int:
        """
        Run the full sequence.

        Returns:
            Process exit code: 0 when installed (now or before), 1 when the
            database never became reachable or the install command failed
        """
        logger.step("Installing WordPress...")

        if not self.wait_for_database():
            logger.failure("Database connection failed")
            return EXIT_FAILURE

        if self.wp.is_installed():
            logger.success("WordPress is already installed")
            return EXIT_OK

        result = self.install_core()
        if not result.succeeded:
            logger.failure(f"WordPress installation failed: {result.output.strip()}")
            return EXIT_FAILURE

        self.configure()
        self.install_plugins()
        self.summary()
        return EXIT_OK

    def summary(self) -> None:
        cfg = self.config
        logger.line()
        logger.success("WordPress installed successfully!")
        logger.line(f"Site: {cfg.home_url}")
        logger.line(f"Admin: {cfg.admin_user} / {cfg.admin_password}")
        logger.line(f"Email: {cfg.admin_email}")
        logger.line()
        logger.line(f"Access admin: {cfg.admin_url}")
