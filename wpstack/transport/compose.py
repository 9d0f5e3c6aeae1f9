"""
Compose transport - run commands inside a docker compose service.

The project tree is bind-mounted into the containers, so file access stays
local; only commands are sent into the service.
"""

from typing import List, Optional, Tuple

from wpstack.transport.local import LocalTransport


class ComposeTransport(LocalTransport):
    """
    Run commands with ``docker compose exec -T <service>``.

    Example:
        transport = ComposeTransport("web")
        output, code = transport.run_command(["wp", "core", "is-installed"])
    """

    def __init__(
        self,
        service: str,
        compose_file: Optional[str] = None,
        workdir: Optional[str] = None,
        docker_bin: str = "docker",
    ):
        """
        Args:
            service: Compose service that has WP-CLI installed
            compose_file: Explicit compose file (default: compose's own lookup)
            workdir: Working directory inside the container
            docker_bin: Docker executable
        """
        self.service = service
        self.compose_file = compose_file
        self.workdir = workdir
        self.docker_bin = docker_bin

    def wrap(self, args: list) -> List[str]:
        """Build the full docker compose invocation for args."""
        cmd = [self.docker_bin, "compose"]
        if self.compose_file:
            cmd += ["-f", self.compose_file]
        cmd += ["exec", "-T"]
        if self.workdir:
            cmd += ["-w", self.workdir]
        cmd.append(self.service)
        return cmd + list(args)

    def run_command(self, args: list) -> Tuple[str, int]:
        return super().run_command(self.wrap(args))
