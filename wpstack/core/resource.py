"""
Core resource abstraction for wpstack.

Scaffold entries (directories, boilerplate files, markers) inherit from
Resource and implement the Check/Plan/Apply pattern, which is what makes
`wpstack setup` safe to run repeatedly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List
import platform as platform_module

from wpstack.transport.base import Transport, NullTransport


class Action(Enum):
    """Resource actions during apply."""
    NONE = "none"
    CREATE = "create"
    UPDATE = "update"


@dataclass
class Change:
    """One field of a resource moving from its current to its desired value."""
    field: str
    from_value: Any
    to_value: Any

    @staticmethod
    def _show(field_name: str, value: Any) -> str:
        if value is None:
            return "-"
        if field_name == "mode":
            return oct(value)
        if field_name == "content":
            return f"{len(value.encode('utf-8'))} bytes"
        return str(value)

    def __str__(self):
        return f"{self.field}: {self._show(self.field, self.from_value)} → {self._show(self.field, self.to_value)}"


@dataclass
class Plan:
    """What a resource has to change to reach its desired state."""
    action: Action
    changes: List[Change] = field(default_factory=list)
    reason: str = ""

    def has_changes(self) -> bool:
        return self.action != Action.NONE and len(self.changes) > 0

    def __str__(self):
        if not self.has_changes():
            return "unchanged"
        return f"{self.action.value} ({', '.join(str(c) for c in self.changes)})"


@dataclass
class Platform:
    """Platform information (OS family, release, arch)."""
    system: str  # Linux, Darwin, Windows
    release: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.system == "Windows"

    @classmethod
    def detect(cls) -> "Platform":
        """Detect the local platform."""
        return cls(
            system=platform_module.system(),
            release=platform_module.release(),
            arch=platform_module.machine(),
        )


class Resource(ABC):
    """
    Base class for all resources.

    Resources follow the Check → Plan → Apply pattern:
    1. Check: Inspect current state
    2. Plan: Determine what needs to change
    3. Apply: Make the changes
    """

    def __init__(self, name: str, **options):
        """
        Initialize resource.

        Args:
            name: Resource identifier (e.g., "web/app/uploads")
            **options: Resource-specific options
        """
        self.name = name
        self.options = options
        self._desired_state: Dict[str, Any] = {}
        self._actual_state: Dict[str, Any] = {}
        self._transport: Transport = NullTransport()  # replaced by Executor.add

    @property
    def id(self) -> str:
        """
        Unique resource identifier.

        Format: resource_type:name
        Example: dir:web/app/uploads, file:web/index.php
        """
        return f"{self.resource_type()}:{self.name}"

    @abstractmethod
    def resource_type(self) -> str:
        """Return resource type string (file, dir)."""
        pass

    @abstractmethod
    def check(self, platform: Platform) -> Dict[str, Any]:
        """
        Check current state of the resource.

        Returns:
            Dictionary of current state properties

        Example:
            {"exists": True, "type": "file", "mode": 0o644}
        """
        pass

    @abstractmethod
    def desired_state(self) -> Dict[str, Any]:
        """
        Return desired state properties.

        Example:
            {"exists": True, "type": "directory", "mode": 0o755}
        """
        pass

    def plan(self, platform: Platform) -> Plan:
        """
        Generate execution plan by comparing desired vs actual state.

        Args:
            platform: Platform information

        Returns:
            Plan object describing changes
        """
        self._actual_state = self.check(platform)
        self._desired_state = self.desired_state()

        if not self._actual_state.get("exists", False):
            changes = [
                Change(key, None, value)
                for key, value in self._desired_state.items()
                if key != "exists"
            ]
            return Plan(action=Action.CREATE, changes=changes, reason="Resource does not exist")

        changes = self._detect_changes()
        if changes:
            return Plan(
                action=Action.UPDATE,
                changes=changes,
                reason="Properties differ from desired state",
            )
        return Plan(action=Action.NONE, reason="No changes needed")

    def _detect_changes(self) -> List[Change]:
        """Detect changes between actual and desired state."""
        changes = []

        for key, desired_value in self._desired_state.items():
            if key == "exists" or desired_value is None:
                continue

            actual_value = self._actual_state.get(key)
            if actual_value != desired_value:
                changes.append(Change(key, actual_value, desired_value))

        return changes

    @abstractmethod
    def apply(self, plan: Plan, platform: Platform) -> None:
        """
        Apply the execution plan.

        Raises:
            OSError if the filesystem refuses the change
        """
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name!r})"

    def __str__(self):
        return self.id
