"""
Executor - manages resource planning and application.

The executor:
1. Collects resources
2. Generates execution plan
3. Applies changes
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional
import time

from wpstack.core.resource import Resource, Plan, Platform
from wpstack.transport import Transport, LocalTransport


@dataclass
class PlanResult:
    """
    Result of planning phase.

    Contains plans for all resources and summary statistics.
    """
    plans: Dict[str, Plan] = field(default_factory=dict)
    errors: List[Exception] = field(default_factory=list)

    @property
    def change_count(self) -> int:
        """Count of resources with changes."""
        return sum(1 for plan in self.plans.values() if plan.has_changes())

    @property
    def has_changes(self) -> bool:
        return self.change_count > 0

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


@dataclass
class ApplyResult:
    """
    Result of apply phase.

    Contains success/failure info and changed resource IDs.
    """
    changed_resources: List[str] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """Check if apply succeeded without errors."""
        return len(self.errors) == 0


class Executor:
    """
    Resource executor implementing plan/apply workflow.

    Example:
        executor = Executor()
        executor.add(File("web/app/uploads", ensure="directory", mode=0o755))
        executor.add(File("web/index.php", content=INDEX_PHP, replace=False))

        plan_result = executor.plan()
        apply_result = executor.apply(plan_result)
        print(f"Changed {len(apply_result.changed_resources)} resources")
    """

    def __init__(
        self,
        platform: Optional[Platform] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize executor.

        Args:
            platform: Platform info (auto-detected if None)
            transport: Transport for filesystem access (default: LocalTransport)
        """
        self.transport = transport or LocalTransport()
        self.platform = platform or Platform.detect()
        self.resources: List[Resource] = []
        self._registry: Dict[str, Resource] = {}

    def add(self, resource: Resource) -> Resource:
        """
        Add resource to executor.

        Redefining a resource replaces the earlier definition in place, so
        the execution order of the first definition is kept.

        Returns:
            The resource (for chaining/references)
        """
        resource._transport = self.transport

        existing = self._registry.get(resource.id)
        if existing is not None:
            index = self.resources.index(existing)
            self.resources[index] = resource
        else:
            self.resources.append(resource)

        self._registry[resource.id] = resource
        return resource

    def get(self, resource_id: str) -> Optional[Resource]:
        """Get resource by ID."""
        return self._registry.get(resource_id)

    def plan(self) -> PlanResult:
        """
        Generate execution plan for all resources.

        Returns:
            PlanResult with plans and any errors
        """
        result = PlanResult()

        for resource in self.resources:
            try:
                result.plans[resource.id] = resource.plan(self.platform)
            except OSError as e:
                result.errors.append(e)

        return result

    def apply(self, plan_result: PlanResult) -> ApplyResult:
        """
        Apply execution plan.

        Args:
            plan_result: Result from plan()

        Returns:
            ApplyResult with changed resources and errors
        """
        result = ApplyResult()
        start_time = time.time()

        for resource in self.resources:
            plan = plan_result.plans.get(resource.id)
            if not plan or not plan.has_changes():
                continue

            try:
                resource.apply(plan, self.platform)
                result.changed_resources.append(resource.id)

                # Refresh actual state after apply
                resource._actual_state = resource.check(self.platform)
            except OSError as e:
                result.errors.append(e)
                # Continue with other resources even if one fails

        result.duration = time.time() - start_time
        return result

    def run(self) -> ApplyResult:
        """Plan and apply in one step."""
        plan_result = self.plan()
        apply_result = self.apply(plan_result)
        apply_result.errors[:0] = plan_result.errors
        return apply_result
