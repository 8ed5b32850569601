"""Shared fixtures for unit tests."""

import pytest

from grove import World
from grove.reports.base import Reporter


class NullReporter(Reporter):
    """Silent reporter for testing."""

    async def on_no_examples_found(self) -> None:
        pass

    async def on_group_started(self, group) -> None:
        pass

    async def on_example_started(self, example) -> None:
        pass

    async def on_example_finished(self, example) -> None:
        pass

    async def on_group_finished(self, group) -> None:
        pass

    async def on_hook_error(self, group, scope, error) -> None:
        pass

    async def on_run_stopped_early(self, failure_count: int) -> None:
        pass

    async def on_run_complete(self, run_result) -> None:
        pass


class RecordingReporter:
    """Reporter that remembers every event it receives, as plain sync methods."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_no_examples_found(self) -> None:
        self.events.append(("no_examples",))

    def on_group_started(self, group) -> None:
        self.events.append(("group_started", group.description))

    def on_example_started(self, example) -> None:
        self.events.append(("example_started", example.description))

    def on_example_finished(self, example) -> None:
        self.events.append(
            ("example_finished", example.description, example.execution_result.status.value)
        )

    def on_group_finished(self, group) -> None:
        self.events.append(("group_finished", group.description))

    def on_hook_error(self, group, scope, error) -> None:
        self.events.append(("hook_error", group.description, scope.value, str(error)))

    def on_run_stopped_early(self, failure_count: int) -> None:
        self.events.append(("stopped_early", failure_count))

    def on_run_complete(self, run_result) -> None:
        self.events.append(("run_complete", run_result.total))

    def named(self, name: str) -> list[tuple]:
        return [event for event in self.events if event[0] == name]


@pytest.fixture
def null_reporter() -> NullReporter:
    """Provide a silent reporter for tests."""
    return NullReporter()


@pytest.fixture
def recording_reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def world() -> World:
    """A fresh world with no filters."""
    return World()
