"""
Local transport - run commands on local machine.
"""

import os
import stat
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from wpstack.transport.base import Transport


class LocalTransport(Transport):
    """
    Local transport for running commands on the local machine.

    Uses subprocess for command execution and pathlib for file access.
    """

    def run_command(self, args: list) -> Tuple[str, int]:
        """
        Run command from list of arguments.

        A missing executable is reported as exit code 127 and one that
        cannot be executed as 126, the way a shell reports them, instead of
        raising.

        Returns:
            Tuple of (output, exit_code)
        """
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            return f"{args[0]}: command not found ({e})", 127
        except OSError as e:
            return f"{args[0]}: cannot execute ({e})", 126
        return result.stdout + result.stderr, result.returncode

    def write_file(self, path: str, content: bytes) -> None:
        Path(path).write_bytes(content)

    def read_file(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def file_exists(self, path: str) -> bool:
        return Path(path).exists()

    def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def make_dirs(self, path: str, mode: int = 0o755) -> None:
        Path(path).mkdir(mode=mode, parents=True, exist_ok=True)
        # mkdir's mode is filtered through the umask
        os.chmod(path, mode)

    def chmod(self, path: str, mode: int) -> None:
        os.chmod(path, mode)

    def file_mode(self, path: str) -> Optional[int]:
        try:
            return stat.S_IMODE(os.stat(path).st_mode)
        except FileNotFoundError:
            return None

    def close(self) -> None:
        """No-op for local transport."""
        pass
