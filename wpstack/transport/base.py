"""
Base transport interface.

All transport implementations (Local, Compose) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple


class Transport(ABC):
    """
    Abstract base class for command running and file operations.

    Implementations:
    - LocalTransport: Run commands on this machine
    - ComposeTransport: Run commands inside a docker compose service
    """

    @abstractmethod
    def run_command(self, args: list) -> Tuple[str, int]:
        """
        Run a command from list of arguments (no shell).

        Args:
            args: Command and arguments as list

        Returns:
            Tuple of (output, exit_code)

        Example:
            output, code = transport.run_command(["wp", "db", "check"])
        """
        pass

    @abstractmethod
    def write_file(self, path: str, content: bytes) -> None:
        """
        Write content to a file.

        Raises:
            OSError: If write fails
        """
        pass

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """
        Read file content.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if a file or directory exists."""
        pass

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        """Check if path is a directory."""
        pass

    @abstractmethod
    def make_dirs(self, path: str, mode: int = 0o755) -> None:
        """Create a directory and any missing parents."""
        pass

    @abstractmethod
    def chmod(self, path: str, mode: int) -> None:
        """
        Set permission bits on a path.

        Raises:
            OSError: If the mode cannot be changed
        """
        pass

    @abstractmethod
    def file_mode(self, path: str) -> Optional[int]:
        """Return the permission bits of path, or None if it doesn't exist."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release any held resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class NullTransport(Transport):
    """
    Null Object pattern implementation for Transport.

    Raises helpful errors when used, indicating that the resource was not
    added to an executor.
    """

    def _raise_error(self, method_name: str) -> None:
        raise RuntimeError(
            f"Cannot call {method_name}: Transport not initialized. "
            "Resources must be added to an executor before use. "
            'Example: Executor().add(File("logs", ensure="directory"))'
        )

    def run_command(self, args: list) -> Tuple[str, int]:
        self._raise_error("run_command()")
        return ("", 1)  # Never reached, but satisfies type checker

    def write_file(self, path: str, content: bytes) -> None:
        self._raise_error("write_file()")

    def read_file(self, path: str) -> bytes:
        self._raise_error("read_file()")
        return b""

    def file_exists(self, path: str) -> bool:
        self._raise_error("file_exists()")
        return False

    def is_dir(self, path: str) -> bool:
        self._raise_error("is_dir()")
        return False

    def make_dirs(self, path: str, mode: int = 0o755) -> None:
        self._raise_error("make_dirs()")

    def chmod(self, path: str, mode: int) -> None:
        self._raise_error("chmod()")

    def file_mode(self, path: str) -> Optional[int]:
        self._raise_error("file_mode()")
        return None

    def close(self) -> None:
        """No-op for null transport."""
        pass
