"""
Permission setter.

Applies the stack's fixed file modes after dependency installation and makes
the helper shell scripts executable. Windows does not use POSIX modes, so
both operations are skipped there. Failures are collected and reported as
warnings; they never fail the command.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from wpstack.core.resource import Platform
from wpstack.logging import get_stack_logger
from wpstack.transport import Transport, LocalTransport

logger = get_stack_logger(__name__)

SKIPPED_FAMILY = "Windows"

SCRIPTS_DIR = "scripts"

PERMISSION_TABLE: Dict[str, int] = {
    "web/app/uploads": 0o755,
    "logs": 0o755,
    SCRIPTS_DIR: 0o755,
}

EXECUTABLE_MODE = 0o755


@dataclass
class PermissionReport:
    """What a permission pass changed and what it could not."""
    changed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


def _skip_reason(platform: Platform) -> Optional[str]:
    if platform.is_windows:
        return f"{SKIPPED_FAMILY} detected - scripts don't need chmod"
    return None


def _chmod(transport: Transport, path: Path, mode: int, report: PermissionReport, label: str) -> bool:
    try:
        transport.chmod(str(path), mode)
    except OSError as e:
        logger.debug(f"chmod {oct(mode)} {path} failed: {e}")
        report.failed.append(label)
        return False
    report.changed.append(label)
    return True


def set_permissions(
    root: Union[str, Path],
    platform: Optional[Platform] = None,
    transport: Optional[Transport] = None,
    table: Optional[Dict[str, int]] = None,
) -> PermissionReport:
    """
    Apply PERMISSION_TABLE to the directories that exist under root, then
    mark every ``scripts/*.php`` executable.
    """
    root = Path(root)
    platform = platform or Platform.detect()
    transport = transport or LocalTransport()
    table = PERMISSION_TABLE if table is None else table

    reason = _skip_reason(platform)
    if reason:
        return PermissionReport(skipped_reason=reason)

    report = PermissionReport()
    for rel_path, mode in table.items():
        path = root / rel_path
        if not transport.is_dir(str(path)):
            continue
        if _chmod(transport, path, mode, report, rel_path):
            logger.action("update", rel_path, f"mode {oct(mode)}")
        else:
            logger.warning(f"Could not set permissions for {rel_path}")

    for script in sorted((root / SCRIPTS_DIR).glob("*.php")):
        rel_path = f"{SCRIPTS_DIR}/{script.name}"
        if not _chmod(transport, script, EXECUTABLE_MODE, report, rel_path):
            logger.warning(f"Could not make {rel_path} executable")

    return report


def make_executable(
    root: Union[str, Path],
    platform: Optional[Platform] = None,
    transport: Optional[Transport] = None,
    pattern: str = "*.sh",
) -> PermissionReport:
    """
    chmod 0755 every script matching pattern in the scripts directory.

    Returns:
        PermissionReport listing script names that were or could not be changed
    """
    root = Path(root)
    platform = platform or Platform.detect()
    transport = transport or LocalTransport()

    reason = _skip_reason(platform)
    if reason:
        logger.notice(reason)
        return PermissionReport(skipped_reason=reason)

    scripts = sorted((root / SCRIPTS_DIR).glob(pattern))
    if not scripts:
        reason = "No shell scripts found in scripts directory"
        logger.notice(reason)
        return PermissionReport(skipped_reason=reason)

    report = PermissionReport()
    for script in scripts:
        if _chmod(transport, script, EXECUTABLE_MODE, report, script.name):
            logger.success(f"Made {script.name} executable")
        else:
            logger.warning(f"Could not make {script.name} executable")

    if report.changed:
        logger.success(f"Made {len(report.changed)} shell scripts executable")
    else:
        logger.failure("Could not make any scripts executable")

    if report.failed:
        logger.warning(f"Failed to set permissions for: {', '.join(report.failed)}")
        logger.notice(f"You may need to run: chmod +x {SCRIPTS_DIR}/{pattern}")

    return report
