"""Rich console reporter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from grove.reports.base import Reporter
from grove.types import ExampleStatus

if TYPE_CHECKING:
    from grove.example import Example
    from grove.group import ExampleGroup
    from grove.runner import RunResult
    from grove.types import HookScope


_STATUS_STYLE = {
    ExampleStatus.PASSED: ("green", "."),
    ExampleStatus.FAILED: ("red", "F"),
    ExampleStatus.PENDING: ("yellow", "*"),
    ExampleStatus.NOT_RUN: ("dim", "-"),
}


class ConsoleReporter(Reporter):
    """Prints progress and a summary to the terminal.

    With ``verbosity <= 0`` every example prints one progress character.
    With a positive verbosity the group tree is printed as it runs.
    """

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        self.console = console or Console()
        self.verbosity = verbosity
        self._depth = 0

    def _indent(self) -> str:
        return "  " * self._depth

    async def on_no_examples_found(self) -> None:
        self.console.print("[yellow]No examples found.[/yellow]")

    async def on_group_started(self, group: ExampleGroup) -> None:
        if self.verbosity > 0 and group.description:
            self.console.print(f"{self._indent()}{escape(group.description)}")
        self._depth += 1

    async def on_group_finished(self, group: ExampleGroup) -> None:
        self._depth = max(0, self._depth - 1)

    async def on_example_started(self, example: Example) -> None:
        pass

    async def on_example_finished(self, example: Example) -> None:
        result = example.execution_result
        style, char = _STATUS_STYLE[result.status]
        if self.verbosity <= 0:
            self.console.print(f"[{style}]{char}[/{style}]", end="")
            return

        line = f"{self._indent()}[{style}]{escape(example.description or '(no description)')}"
        if result.status is ExampleStatus.FAILED:
            line += " (FAILED)"
        elif result.status is ExampleStatus.PENDING:
            line += f" (PENDING: {escape(result.pending_message or '')})"
        self.console.print(f"{line}[/{style}]")

    async def on_hook_error(self, group: ExampleGroup, scope: HookScope, error: Exception) -> None:
        self.console.print(
            f"[red]{scope.value} hook failed in "
            f"{escape(group.full_description or '(anonymous group)')}: {escape(repr(error))}[/red]"
        )

    async def on_run_stopped_early(self, failure_count: int) -> None:
        self.console.print(f"\n[red]Stopped after {failure_count} failure(s).[/red]")

    async def on_run_complete(self, run_result: RunResult) -> None:
        if self.verbosity <= 0 and run_result.total:
            self.console.print()

        pending = [
            example
            for example in run_result.examples
            if example.execution_result.status is ExampleStatus.PENDING
        ]
        if pending and self.verbosity >= 0:
            self.console.print("\n[yellow]Pending:[/yellow]")
            for example in pending:
                self.console.print(
                    f"  {escape(example.full_description)}\n"
                    f"    [dim]# {escape(example.execution_result.pending_message or '')}[/dim]"
                )

        if run_result.failures:
            self.console.print("\n[red]Failures:[/red]")
            for index, example in enumerate(run_result.failures, start=1):
                result = example.execution_result
                self.console.print(f"\n  {index}) {escape(example.full_description)}")
                phase = f" in {result.phase.value}" if result.phase else ""
                self.console.print(f"     [red]{escape(repr(result.exception))}{phase}[/red]")
                if example.file_path:
                    self.console.print(f"     [dim]# {example.file_path}:{example.line_number}[/dim]")

        seconds = run_result.duration_ms / 1000
        summary = f"{run_result.total} examples, {run_result.failed} failures"
        if run_result.pending:
            summary += f", {run_result.pending} pending"
        if run_result.hook_error_count:
            summary += f", {run_result.hook_error_count} hook errors"
        style = "green" if run_result.success else "red"
        self.console.print(f"\nFinished in {seconds:.3f}s")
        self.console.print(f"[{style}]{summary}[/{style}]")


__all__ = ["ConsoleReporter"]
