"""Example entity and its execution result."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from grove.errors import DeclarationError
from grove.metadata import DeclarationSite, merge_metadata
from grove.types import ExamplePhase, ExampleStatus

if TYPE_CHECKING:
    from grove.context import InstanceState
    from grove.group import ExampleGroup


@dataclass
class ExecutionResult:
    """Outcome of running an example once.

    Attributes
    ----------
    status
        ``NOT_RUN`` until the engine records a result.
    exception
        First exception raised by a before-each hook, the body or an
        after-each hook, or by a failing before-all hook of an enclosing group.
    pending_message
        Reason given when the example is pending.
    started_at
        Wall-clock start time.
    duration_ms
        Time spent in hooks and body.
    phase
        Phase in which a failing example raised.
    """

    status: ExampleStatus = ExampleStatus.NOT_RUN
    exception: BaseException | None = None
    pending_message: str | None = None
    started_at: datetime | None = None
    duration_ms: float = 0
    phase: ExamplePhase | None = None

    @property
    def passed(self) -> bool:
        return self.status is ExampleStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status is ExampleStatus.FAILED


class Example:
    """A single runnable unit owned by an example group.

    Calling an example with a function sets that function as its body, which
    makes the example usable as a decorator::

        @group.it("adds numbers")
        def _(ctx):
            assert 1 + 1 == 2
    """

    def __init__(
        self,
        example_group: ExampleGroup,
        description: str | None,
        body: Callable[..., Any] | None,
        tags: Mapping[str, Any],
        site: DeclarationSite,
        *,
        subject_attribute: str | None = None,
    ) -> None:
        if body is not None and not callable(body):
            msg = f"Example body must be callable, got {body!r}"
            raise DeclarationError(msg)
        self.example_group = example_group
        self.description = description or ""
        self.body = body
        self.subject_attribute = subject_attribute
        self._own_metadata = dict(tags)
        self._metadata = merge_metadata(example_group.metadata, tags)
        self.site = site
        self.execution_result = ExecutionResult()
        self.state: InstanceState | None = None

    def __call__(self, body: Callable[..., Any]) -> Example:
        if not callable(body):
            msg = f"Example body must be callable, got {body!r}"
            raise DeclarationError(msg)
        self.body = body
        return self

    @property
    def metadata(self) -> Mapping[str, Any]:
        """Owning group's merged metadata overlaid with this example's tags."""
        return MappingProxyType(self._metadata)

    @property
    def own_metadata(self) -> Mapping[str, Any]:
        return MappingProxyType(self._own_metadata)

    @property
    def options(self) -> Mapping[str, Any]:
        """Tags declared on the example itself."""
        return self.own_metadata

    @property
    def file_path(self) -> str | None:
        return self.site.file_path

    @property
    def line_number(self) -> int | None:
        return self.site.line_number

    @property
    def full_description(self) -> str:
        parts = [self.example_group.full_description, self.description]
        return " ".join(part for part in parts if part)

    @property
    def is_pending(self) -> bool:
        """True when the example has no body or carries a truthy ``pending`` tag."""
        return self.body is None or bool(self._metadata.get("pending"))

    @property
    def pending_reason(self) -> str:
        reason = self._metadata.get("pending")
        if isinstance(reason, str) and reason:
            return reason
        if self.body is None:
            return "Not yet implemented"
        return "No reason given"

    def reset(self) -> None:
        """Forget the result of a previous run."""
        self.execution_result = ExecutionResult()
        self.state = None

    def __repr__(self) -> str:
        return f"Example({self.full_description!r})"


__all__ = ["Example", "ExecutionResult"]
