"""
WP-CLI adapter.

Wraps the handful of `wp` commands the installer needs. Every call goes
through a Transport, so tests can swap in a fake and the same code runs
either on the host or inside a compose service.

Success is judged on the exit code. WP-CLI also prints a literal
"Success:" line, which is only consulted when no exit code is available.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from wpstack.logging import get_logger
from wpstack.transport import Transport, LocalTransport

logger = get_logger(__name__)

SUCCESS_MARKER = "Success"


class WPCLIError(Exception):
    """Raised when a required WP-CLI command fails."""

    def __init__(self, result: "CommandResult"):
        self.result = result
        super().__init__(
            f"'{result.command}' failed with exit code {result.exit_code}: {result.output.strip()}"
        )


@dataclass
class CommandResult:
    """Output and exit status of one WP-CLI invocation."""
    args: List[str] = field(default_factory=list)
    output: str = ""
    exit_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        """True when the command exited 0."""
        return self.exit_code == 0

    @property
    def succeeded(self) -> bool:
        """Exit code when known, the "Success" marker otherwise."""
        if self.exit_code is not None:
            return self.exit_code == 0
        return SUCCESS_MARKER in self.output

    @property
    def command(self) -> str:
        return " ".join(self.args)

    def check(self) -> "CommandResult":
        """Raise WPCLIError unless the command succeeded."""
        if not self.succeeded:
            raise WPCLIError(self)
        return self


class WPCLI:
    """
    Thin interface over the `wp` binary.

    Example:
        wp = WPCLI(LocalTransport(), binary="wp")
        if not wp.is_installed():
            wp.core_install(url=..., title=..., admin_user=...,
                            admin_password=..., admin_email=...).check()
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        binary: str = "wp",
        extra_args: Optional[List[str]] = None,
    ):
        """
        Args:
            transport: Where to run commands (default: LocalTransport)
            binary: WP-CLI executable
            extra_args: Global flags appended to every call (e.g. --allow-root)
        """
        self.transport = transport or LocalTransport()
        self.binary = binary
        self.extra_args = list(extra_args or [])

    def run(self, *args: str) -> CommandResult:
        """Run ``wp <args>`` and capture its output."""
        argv = [self.binary, *args, *self.extra_args]
        output, code = self.transport.run_command(argv)
        result = CommandResult(args=argv, output=output, exit_code=code)
        logger.debug("%s -> %s", result.command, code)
        return result

    def db_check(self) -> CommandResult:
        return self.run("db", "check")

    def db_ready(self) -> bool:
        """Readiness probe for the database behind WordPress."""
        return self.db_check().succeeded

    def is_installed(self) -> bool:
        # `wp core is-installed` prints nothing and reports through its exit code
        return self.run("core", "is-installed").ok

    def core_install(
        self,
        url: str,
        title: str,
        admin_user: str,
        admin_password: str,
        admin_email: str,
        skip_email: bool = True,
    ) -> CommandResult:
        args = [
            "core",
            "install",
            f"--url={url}",
            f"--title={title}",
            f"--admin_user={admin_user}",
            f"--admin_password={admin_password}",
            f"--admin_email={admin_email}",
        ]
        if skip_email:
            args.append("--skip-email")
        return self.run(*args)

    def core_update(self) -> CommandResult:
        return self.run("core", "update")

    def rewrite_structure(self, structure: str) -> CommandResult:
        return self.run("rewrite", "structure", structure)

    def rewrite_flush(self) -> CommandResult:
        return self.run("rewrite", "flush")

    def plugin_install(self, slug: str, activate: bool = True) -> CommandResult:
        args = ["plugin", "install", slug]
        if activate:
            args.append("--activate")
        return self.run(*args)
