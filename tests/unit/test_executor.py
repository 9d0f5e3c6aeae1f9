"""
Unit tests for the wpstack executor.

Tests the executor's resource management and plan/apply workflow.
"""

import os

import pytest

from wpstack.core import Platform, Action, Resource
from wpstack.core.resource import Change, Plan
from wpstack.core.executor import Executor
from wpstack.resources.file import File


class MockResource(Resource):
    """Mock resource for testing."""

    def __init__(self, name: str, value: str = "", fail: bool = False):
        super().__init__(name)
        self.value = value
        self.fail = fail
        self.applied = False

    def resource_type(self) -> str:
        return "mock"

    def check(self, platform: Platform):
        if self.applied:
            return {"exists": True, "value": self.value}
        return {"exists": False}

    def desired_state(self):
        return {"exists": True, "value": self.value}

    def apply(self, plan, platform):
        if self.fail:
            raise PermissionError(f"cannot apply {self.name}")
        self.applied = True


class TestExecutorResourceManagement:
    """Unit tests for executor resource management."""

    def test_add_single_resource(self):
        """Test adding a single resource to executor."""
        executor = Executor()
        resource = MockResource("test1", "value1")
        executor.add(resource)

        assert len(executor.resources) == 1
        assert executor.get(resource.id) == resource

    def test_add_sets_transport(self):
        """Resources receive the executor's transport when added."""
        executor = Executor()
        resource = executor.add(MockResource("with-transport"))

        assert resource._transport is executor.transport

    def test_resource_replacement_last_wins(self):
        """Redefining a resource replaces the previous definition."""
        executor = Executor()

        res1 = MockResource("config", "http config")
        executor.add(res1)
        res2 = MockResource("config", "https config")
        executor.add(res2)

        assert len(executor.resources) == 1
        assert executor.get("mock:config") is res2
        assert executor.get("mock:config").value == "https config"

    def test_resource_replacement_maintains_order(self):
        """Replacing a resource keeps its position in execution order."""
        executor = Executor()

        executor.add(MockResource("res1", "first"))
        executor.add(MockResource("res2", "second"))
        executor.add(MockResource("res3", "third"))
        executor.add(MockResource("res2", "second updated"))

        assert [r.id for r in executor.resources] == ["mock:res1", "mock:res2", "mock:res3"]
        assert executor.resources[1].value == "second updated"

    def test_resource_outside_executor_has_no_transport(self, tmp_path):
        """A resource that was never added refuses to touch the filesystem."""
        resource = File(str(tmp_path / "orphan.txt"), content="x")

        with pytest.raises(RuntimeError, match="Transport not initialized"):
            resource.check(Platform.detect())


class TestExecutorPlanApply:
    """Unit tests for executor plan/apply workflow."""

    def test_plan_with_changes(self):
        """A missing resource plans a CREATE."""
        executor = Executor()
        res = executor.add(MockResource("new", "value"))

        plan_result = executor.plan()

        assert plan_result.has_changes
        assert plan_result.change_count == 1
        assert plan_result.plans[res.id].action == Action.CREATE

    def test_apply_then_replan_is_clean(self):
        """After apply, a second plan has nothing to do."""
        executor = Executor()
        executor.add(MockResource("once", "value"))

        apply_result = executor.apply(executor.plan())
        assert apply_result.success
        assert apply_result.changed_resources == ["mock:once"]

        assert not executor.plan().has_changes

    def test_apply_continues_after_failure(self):
        """A failing resource is recorded and the rest still apply."""
        executor = Executor()
        executor.add(MockResource("broken", "x", fail=True))
        executor.add(MockResource("fine", "y"))

        result = executor.run()

        assert not result.success
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], PermissionError)
        assert result.changed_resources == ["mock:fine"]

    def test_plan_no_changes_for_existing_file(self, tmp_path):
        """A file already matching its definition plans nothing."""
        test_file = tmp_path / "existing.txt"
        test_file.write_text("existing content")
        os.chmod(test_file, 0o644)

        executor = Executor()
        executor.add(File(str(test_file), content="existing content", mode=0o644))

        plan_result = executor.plan()
        assert not plan_result.has_changes
        assert plan_result.change_count == 0

    def test_run_records_duration(self):
        executor = Executor()
        executor.add(MockResource("timed", "value"))

        result = executor.run()

        assert result.success
        assert result.duration >= 0


class TestPlanDisplay:
    """String forms used by `wpstack setup --dry-run`."""

    def test_unchanged_plan(self):
        assert str(Plan(action=Action.NONE)) == "unchanged"

    def test_create_plan_summarizes_changes(self):
        plan = Plan(
            action=Action.CREATE,
            changes=[
                Change("type", None, "file"),
                Change("content", None, "<?php\n"),
                Change("mode", None, 0o755),
            ],
        )

        assert str(plan) == "create (type: - → file, content: - → 6 bytes, mode: - → 0o755)"

    def test_mode_change(self):
        assert str(Change("mode", 0o700, 0o755)) == "mode: 0o700 → 0o755"
