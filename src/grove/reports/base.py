"""Base reporter protocol for grove run output."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from grove.example import Example
    from grove.group import ExampleGroup
    from grove.runner import RunResult
    from grove.types import HookScope


class Reporter(Protocol):
    """Protocol defining the interface for reporters.

    Methods are async so I/O-bound reporters can await. Sync methods are
    accepted as well, and any method may be left out: the engine skips
    callbacks a reporter does not define.
    """

    async def on_no_examples_found(self) -> None:
        """Called when the run has nothing to execute."""
        ...

    async def on_group_started(self, group: ExampleGroup) -> None:
        """Called before a group's before-all hooks run."""
        ...

    async def on_example_started(self, example: Example) -> None:
        """Called before each example's before-each hooks run."""
        ...

    async def on_example_finished(self, example: Example) -> None:
        """Called once the example's result is recorded."""
        ...

    async def on_group_finished(self, group: ExampleGroup) -> None:
        """Called after a group's after-all hooks ran."""
        ...

    async def on_hook_error(self, group: ExampleGroup, scope: HookScope, error: Exception) -> None:
        """Called when a before-all or after-all hook raises."""
        ...

    async def on_run_stopped_early(self, failure_count: int) -> None:
        """Called when a run stops early due to the maxfail limit."""
        ...

    async def on_run_complete(self, run_result: RunResult) -> None:
        """Called after all groups ran."""
        ...


class NullReporter(Reporter):
    """Reporter that ignores every event."""

    async def on_no_examples_found(self) -> None:
        pass

    async def on_group_started(self, group: ExampleGroup) -> None:
        pass

    async def on_example_started(self, example: Example) -> None:
        pass

    async def on_example_finished(self, example: Example) -> None:
        pass

    async def on_group_finished(self, group: ExampleGroup) -> None:
        pass

    async def on_hook_error(self, group: ExampleGroup, scope: HookScope, error: Exception) -> None:
        pass

    async def on_run_stopped_early(self, failure_count: int) -> None:
        pass

    async def on_run_complete(self, run_result: RunResult) -> None:
        pass


async def notify(reporter: Any, event: str, *args: Any) -> None:
    """Deliver an event to a reporter if it handles it."""
    handler = getattr(reporter, event, None)
    if handler is None:
        return
    result = handler(*args)
    if inspect.isawaitable(result):
        await result


__all__ = ["NullReporter", "Reporter", "notify"]
