"""
Transport layer for command execution and file access.

Provides abstraction for:
- Local command execution
- Command execution inside a docker compose service
- Filesystem operations on the project tree
"""

from wpstack.transport.base import Transport, NullTransport
from wpstack.transport.local import LocalTransport
from wpstack.transport.compose import ComposeTransport

__all__ = ["Transport", "NullTransport", "LocalTransport", "ComposeTransport"]
