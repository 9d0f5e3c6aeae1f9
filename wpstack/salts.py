"""
WordPress security salts.

Fills the eight auth keys/salts in `.env` with random 64-character strings.
Keys that already hold a value are left untouched, so running it again is a
no-op.
"""

import re
import secrets
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from wpstack.logging import get_stack_logger

logger = get_stack_logger(__name__)

SALT_KEYS = [
    "AUTH_KEY",
    "SECURE_AUTH_KEY",
    "LOGGED_IN_KEY",
    "NONCE_KEY",
    "AUTH_SALT",
    "SECURE_AUTH_SALT",
    "LOGGED_IN_SALT",
    "NONCE_SALT",
]

SALT_ALPHABET = (
    string.ascii_lowercase
    + string.ascii_uppercase
    + string.digits
    + "!@#$%^&*()_+-=[]{}|;:,.<>?"
)

SALT_LENGTH = 64


def generate_salt(length: int = SALT_LENGTH, alphabet: str = SALT_ALPHABET) -> str:
    """Return a random string drawn uniformly from alphabet."""
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _unset_pattern(key: str) -> "re.Pattern":
    # KEY=   KEY=''   KEY=""   and whitespace-only values, quoted or not
    return re.compile(
        rf"^{re.escape(key)}=[ \t]*(?:'[ \t]*'|\"[ \t]*\")?[ \t]*$",
        re.MULTILINE,
    )


def _line_pattern(key: str) -> "re.Pattern":
    return re.compile(rf"^{re.escape(key)}=.*$", re.MULTILINE)


def is_unset(content: str, key: str) -> bool:
    """True when key has a placeholder line with an empty value."""
    return _unset_pattern(key).search(content) is not None


def fill_salts(content: str, keys: List[str] = SALT_KEYS) -> Tuple[str, List[str]]:
    """
    Replace every unset key in content with a fresh salt.

    Returns:
        Tuple of (new content, keys that were filled)
    """
    updated = []
    for key in keys:
        if not is_unset(content, key):
            continue
        salt = generate_salt()
        content = _line_pattern(key).sub(lambda _m: f"{key}='{salt}'", content)
        updated.append(key)
    return content, updated


@dataclass
class SaltResult:
    """Outcome of a salt generation run."""
    updated: List[str] = field(default_factory=list)
    missing_file: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.updated)


class SaltGenerator:
    """
    Generate WordPress salts into an env file.

    Example:
        result = SaltGenerator(".env").run()
        print(result.updated)
    """

    def __init__(self, env_path: Union[str, Path], keys: List[str] = SALT_KEYS):
        self.env_path = Path(env_path)
        self.keys = list(keys)

    def run(self) -> SaltResult:
        logger.step("Generating WordPress security salts...")

        if not self.env_path.is_file():
            logger.failure(
                f"{self.env_path.name} file not found. Please run 'composer install' first."
            )
            return SaltResult(missing_file=True)

        content = self.env_path.read_text()
        content, updated = fill_salts(content, self.keys)

        for key in updated:
            logger.success(f"Generated {key}")

        if updated:
            self.env_path.write_text(content)
            logger.success(f"WordPress salts updated in {self.env_path.name} file")
        else:
            logger.notice("WordPress salts already configured")

        return SaltResult(updated=updated)
