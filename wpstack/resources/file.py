"""
File resource - manage scaffold files and directories.

Handles:
- File content (inline)
- Directories (ensure="directory"), parents included
- Permission bits
- Create-only entries (replace=False) that never touch an existing path
"""

import os
from typing import Dict, Any, Optional

from wpstack.core.resource import Resource, Plan, Action, Platform


class File(Resource):
    """
    File resource for managing files and directories.

    Examples:
        # Directory, created with parents
        File("web/app/uploads", ensure="directory", mode=0o755, root=project)

        # Boilerplate that is written once and then left alone
        File("web/index.php", content=INDEX_PHP, replace=False, root=project)

        # Empty marker file
        File("logs/.gitkeep", content="", replace=False, root=project)
    """

    def __init__(
        self,
        path: str,
        content: Optional[str] = None,
        ensure: str = "file",  # "file" or "directory"
        mode: Optional[int] = None,
        replace: bool = True,
        root: Optional[str] = None,
        **options
    ):
        """
        Initialize file resource.

        Args:
            path: File path, relative to root when root is given
            content: Inline content
            ensure: "file" or "directory"
            mode: Permission bits (e.g., 0o644)
            replace: Bring an existing path to the desired content and mode.
                When False the path is only ever created.
            root: Directory that relative paths are resolved against
            **options: Additional options
        """
        if ensure not in ("file", "directory"):
            raise ValueError(f"ensure must be 'file' or 'directory', not {ensure!r}")

        super().__init__(path, **options)

        self.path = os.path.join(root, path) if root else path
        self.content = content
        self.ensure = ensure
        self.mode = mode
        self.replace = replace

    def resource_type(self) -> str:
        return "dir" if self.ensure == "directory" else "file"

    def check(self, platform: Platform) -> Dict[str, Any]:
        """Check current file state."""
        state = {
            "exists": False,
            "type": None,
            "content": None,
            "mode": None,
        }

        if not self._transport.file_exists(self.path):
            return state

        state["exists"] = True
        state["type"] = "directory" if self._transport.is_dir(self.path) else "file"
        state["mode"] = self._transport.file_mode(self.path)

        if state["type"] == "file" and self.content is not None and self.replace:
            try:
                state["content"] = self._transport.read_file(self.path).decode("utf-8")
            except UnicodeDecodeError:
                # Binary file
                state["content"] = None

        return state

    def desired_state(self) -> Dict[str, Any]:
        """Return desired file state."""
        state: Dict[str, Any] = {
            "exists": True,
            "type": self.ensure,
        }

        if self.ensure == "file":
            state["content"] = self.content
        if self.mode is not None:
            state["mode"] = self.mode

        return state

    def _detect_changes(self):
        changes = super()._detect_changes()
        if self.replace:
            return changes
        # Create-only: an existing path of the right type is left alone
        return [change for change in changes if change.field == "type"]

    def apply(self, plan: Plan, platform: Platform) -> None:
        """Apply file changes."""
        if plan.action == Action.CREATE:
            self._create()
        elif plan.action == Action.UPDATE:
            self._update(plan)

    def _create(self) -> None:
        """Create file or directory."""
        if self.ensure == "directory":
            self._transport.make_dirs(self.path, self.mode if self.mode is not None else 0o755)
            return

        parent = os.path.dirname(self.path)
        if parent and not self._transport.is_dir(parent):
            self._transport.make_dirs(parent)

        self._transport.write_file(self.path, (self.content or "").encode("utf-8"))

        if self.mode is not None:
            self._transport.chmod(self.path, self.mode)

    def _update(self, plan: Plan) -> None:
        """Update existing file."""
        for change in plan.changes:
            if change.field == "type":
                raise FileExistsError(
                    f"{self.path} exists as a {change.from_value}, expected a {change.to_value}"
                )
            if change.field == "content":
                self._transport.write_file(self.path, change.to_value.encode("utf-8"))
            elif change.field == "mode":
                self._transport.chmod(self.path, change.to_value)
