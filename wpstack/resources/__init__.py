"""
Resources managed by wpstack.
"""

from wpstack.resources.file import File

__all__ = ["File"]
