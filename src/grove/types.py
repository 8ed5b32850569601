"""Shared types for the grove execution engine."""

from enum import Enum


class Scope(Enum):
    """How often a hook runs."""

    EACH = "each"  # Around every example
    ALL = "all"  # Once per group


class HookScope(Enum):
    """Position of a hook relative to the code it wraps."""

    BEFORE_ALL = "before_all"
    BEFORE_EACH = "before_each"
    AFTER_EACH = "after_each"
    AFTER_ALL = "after_all"

    @property
    def is_before(self) -> bool:
        return self in (HookScope.BEFORE_ALL, HookScope.BEFORE_EACH)

    @classmethod
    def resolve(cls, position: str, scope: "Scope | str") -> "HookScope":
        """Map ``("before", "each")`` style arguments to a hook scope."""
        scope = scope if isinstance(scope, Scope) else Scope(scope)
        return cls(f"{position}_{scope.value}")


class ExampleStatus(Enum):
    """Recorded outcome of an example."""

    NOT_RUN = "not_run"
    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"


class GroupPhase(Enum):
    """Traversal state of a group during a run."""

    NOT_STARTED = "not_started"
    RUNNING_BEFORE_ALL = "running_before_all"
    RUNNING_EXAMPLES = "running_examples"
    RUNNING_AFTER_ALL = "running_after_all"
    DONE = "done"


class ExamplePhase(Enum):
    """Execution state of a single example."""

    BEFORE_EACH = "before_each"
    BODY = "body"
    AFTER_EACH = "after_each"
