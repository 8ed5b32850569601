"""Execution engine: walks the group tree and runs hooks and examples in order."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from grove.context import ExampleContext, InstanceState, example_scope
from grove.errors import PendingExampleError
from grove.hooks import HookFailure, invoke
from grove.reports.base import NullReporter, notify
from grove.types import ExamplePhase, ExampleStatus, GroupPhase, HookScope

if TYPE_CHECKING:
    from grove.example import Example
    from grove.group import ExampleGroup
    from grove.reports.base import Reporter


logger = logging.getLogger(__name__)


class GroupRunner:
    """Runs one group subtree sequentially.

    Per group: before-all hooks, owned examples, child groups, after-all
    hooks. Per example: before-each hooks from the root down, the body, then
    after-each hooks from the group back up to the root. Failures are
    recorded on the narrowest scope and never stop siblings.
    """

    def __init__(self, reporter: Reporter | None = None, *, maxfail: int | None = None) -> None:
        self.reporter = reporter if reporter is not None else NullReporter()
        self.maxfail = maxfail
        self.failure_count = 0
        self.stopped = False

    async def run_group(
        self,
        group: ExampleGroup,
        parent_state: InstanceState | None = None,
    ) -> bool:
        """Run a group and its runnable descendants. Returns True if all examples passed."""
        if self.stopped or not group.has_runnable_examples():
            return True

        group.hook_errors = []
        group.phase = GroupPhase.RUNNING_BEFORE_ALL
        logger.debug("Starting group %r", group.full_description)
        await notify(self.reporter, "on_group_started", group)

        state = parent_state.clone() if parent_state is not None else InstanceState()
        before_all_error = await self._run_before_all(group, state)
        group.before_all_state = state.clone()

        group.phase = GroupPhase.RUNNING_EXAMPLES
        passed = True
        if before_all_error is not None:
            await self._fail_subtree(group, before_all_error)
            passed = False
        else:
            for example in group.filtered_examples():
                if self.stopped:
                    break
                if not await self.run_example(example):
                    passed = False
            for child in group.children:
                if self.stopped:
                    break
                if not await self.run_group(child, group.before_all_state):
                    passed = False

        group.phase = GroupPhase.RUNNING_AFTER_ALL
        if not await self._run_after_all(group):
            passed = False

        group.phase = GroupPhase.DONE
        await notify(self.reporter, "on_group_finished", group)
        return passed

    async def _run_before_all(self, group: ExampleGroup, state: InstanceState) -> Exception | None:
        ctx = ExampleContext(group, state)
        with example_scope(None):
            for hook in group.hooks.for_scope(HookScope.BEFORE_ALL):
                try:
                    await invoke(hook.action, ctx)
                except Exception as exc:
                    await self._record_hook_failure(group, HookScope.BEFORE_ALL, exc)
                    return exc
        return None

    async def _run_after_all(self, group: ExampleGroup) -> bool:
        # After-all hooks see the snapshot taken after before-all, never example changes.
        ctx = ExampleContext(group, group.before_all_state.clone())
        ok = True
        with example_scope(None):
            for hook in group.hooks.for_scope(HookScope.AFTER_ALL):
                try:
                    await invoke(hook.action, ctx)
                except Exception as exc:
                    await self._record_hook_failure(group, HookScope.AFTER_ALL, exc)
                    ok = False
        return ok

    async def _record_hook_failure(
        self,
        group: ExampleGroup,
        scope: HookScope,
        exc: Exception,
    ) -> None:
        logger.warning(
            "%s hook failed in %r: %s", scope.value, group.full_description, exc
        )
        group.hook_errors.append(HookFailure(scope=scope, exception=exc))
        await notify(self.reporter, "on_hook_error", group, scope, exc)

    async def _fail_subtree(self, group: ExampleGroup, exc: Exception) -> None:
        """Mark every runnable example under ``group`` as failed with ``exc``."""
        for descendant in group.descendants():
            for example in descendant.filtered_examples():
                example.reset()
                example.execution_result.started_at = datetime.now(UTC)
                await notify(self.reporter, "on_example_started", example)
                self._record(example, ExampleStatus.FAILED, exception=exc)
                await notify(self.reporter, "on_example_finished", example)

    async def run_example(self, example: Example) -> bool:
        """Run one example with its hooks. Returns False only if it failed."""
        group = example.example_group
        example.reset()
        result = example.execution_result
        result.started_at = datetime.now(UTC)
        start = time.perf_counter()

        state = group.before_all_state.clone()
        example.state = state
        ctx = ExampleContext(group, state, example)

        await notify(self.reporter, "on_example_started", example)
        with example_scope(example):
            if example.is_pending:
                self._record(example, ExampleStatus.PENDING, pending_message=example.pending_reason)
            else:
                await self._run_phases(example, ctx)
        result.duration_ms = (time.perf_counter() - start) * 1000
        await notify(self.reporter, "on_example_finished", example)
        return not result.failed

    async def _run_phases(self, example: Example, ctx: ExampleContext) -> None:
        group = example.example_group
        chain = group.ancestors()
        error: Exception | None = None
        failed_phase: ExamplePhase | None = None
        pending_message: str | None = None

        phase = ExamplePhase.BEFORE_EACH
        try:
            for ancestor in reversed(chain):
                for hook in ancestor.hooks.for_scope(HookScope.BEFORE_EACH):
                    await invoke(hook.action, ctx)
            phase = ExamplePhase.BODY
            assert example.body is not None
            await invoke(example.body, ctx)
        except PendingExampleError as exc:
            pending_message = exc.message
        except Exception as exc:
            error, failed_phase = exc, phase

        for ancestor in chain:
            for hook in ancestor.hooks.for_scope(HookScope.AFTER_EACH):
                try:
                    await invoke(hook.action, ctx)
                except Exception as exc:
                    if error is None:
                        error, failed_phase = exc, ExamplePhase.AFTER_EACH

        if error is not None:
            logger.debug(
                "Example %r failed in %s: %s", example.full_description, failed_phase.value, error
            )
            self._record(example, ExampleStatus.FAILED, exception=error, phase=failed_phase)
        elif pending_message is not None:
            self._record(example, ExampleStatus.PENDING, pending_message=pending_message)
        else:
            self._record(example, ExampleStatus.PASSED)

    def _record(
        self,
        example: Example,
        status: ExampleStatus,
        *,
        exception: Exception | None = None,
        pending_message: str | None = None,
        phase: ExamplePhase | None = None,
    ) -> None:
        result = example.execution_result
        result.status = status
        result.exception = exception
        result.pending_message = pending_message
        result.phase = phase
        if status is ExampleStatus.FAILED:
            self.failure_count += 1
            if self.maxfail is not None and self.failure_count >= self.maxfail:
                self.stopped = True


@dataclass
class RunResult:
    """Aggregated outcome of a top-level run."""

    examples: list[Example] = field(default_factory=list)
    hook_error_count: int = 0
    duration_ms: float = 0
    stopped_early: bool = False

    def _count(self, status: ExampleStatus) -> int:
        return sum(1 for example in self.examples if example.execution_result.status is status)

    @property
    def total(self) -> int:
        return len(self.examples)

    @property
    def passed(self) -> int:
        return self._count(ExampleStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(ExampleStatus.FAILED)

    @property
    def pending(self) -> int:
        return self._count(ExampleStatus.PENDING)

    @property
    def not_run(self) -> int:
        return self._count(ExampleStatus.NOT_RUN)

    @property
    def failures(self) -> list[Example]:
        return [example for example in self.examples if example.execution_result.failed]

    @property
    def success(self) -> bool:
        return self.failed == 0 and self.hook_error_count == 0 and not self.stopped_early


class Runner:
    """Runs a set of root groups and reports the aggregated result."""

    def __init__(self, reporter: Reporter | None = None, *, maxfail: int | None = None) -> None:
        self.reporter = reporter if reporter is not None else NullReporter()
        self.maxfail = maxfail if maxfail and maxfail > 0 else None

    async def run(self, groups: Sequence[ExampleGroup]) -> RunResult:
        group_runner = GroupRunner(self.reporter, maxfail=self.maxfail)
        start = time.perf_counter()

        examples = [
            example
            for root in groups
            for group in root.descendants()
            for example in group.filtered_examples()
        ]
        for example in examples:
            example.reset()
        for root in groups:
            for group in root.descendants():
                group.hook_errors = []
        logger.debug("Running %d example(s) in %d group(s)", len(examples), len(groups))

        if not examples:
            await notify(self.reporter, "on_no_examples_found")

        for root in groups:
            if group_runner.stopped:
                break
            await group_runner.run_group(root)

        if group_runner.stopped:
            await notify(self.reporter, "on_run_stopped_early", group_runner.failure_count)

        run_result = RunResult(
            examples=examples,
            hook_error_count=sum(
                len(group.hook_errors) for root in groups for group in root.descendants()
            ),
            duration_ms=(time.perf_counter() - start) * 1000,
            stopped_early=group_runner.stopped,
        )
        await notify(self.reporter, "on_run_complete", run_result)
        return run_result


__all__ = ["GroupRunner", "RunResult", "Runner"]
