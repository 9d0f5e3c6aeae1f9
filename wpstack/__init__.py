__version__ = "0.1.0"

from wpstack.core import Resource, Plan, Action, Platform
from wpstack.config import StackConfig, load_env
from wpstack.resources.file import File
from wpstack.retry import RetryPolicy
from wpstack.wpcli import WPCLI
from wpstack.logging import get_logger, get_stack_logger, setup_logging

"""
Building blocks of the WordPress-on-Bedrock setup commands:
    StackConfig holds the settings read from the project's .env file.
    Resource / Plan / Action give the scaffold its check → plan → apply cycle.
    File is a create-only or managed file or directory.
    RetryPolicy waits for services such as the database.
    WPCLI runs WP-CLI commands locally or inside a compose service.
"""

__all__ = [
    "Resource",
    "Plan",
    "Action",
    "Platform",
    "StackConfig",
    "load_env",
    "File",
    "RetryPolicy",
    "WPCLI",
    "get_logger",
    "get_stack_logger",
    "setup_logging",
]
