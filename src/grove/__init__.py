"""grove - nested example groups with hooks, tags and isolated state."""

from .context import ExampleContext, InstanceState, current_example, world_scope
from .example import Example, ExecutionResult
from .group import ExampleGroup
from .reports import ConsoleReporter, NullReporter, Reporter
from .runner import Runner, RunResult
from .types import ExampleStatus, HookScope, Scope
from .version import __version__
from .world import World, describe


__all__ = [
    # Declaration
    "World",
    "ExampleGroup",
    "Example",
    "describe",
    "world_scope",
    # Execution
    "Runner",
    "RunResult",
    "ExecutionResult",
    "ExampleContext",
    "InstanceState",
    "current_example",
    # Types
    "ExampleStatus",
    "HookScope",
    "Scope",
    # Reporting
    "Reporter",
    "NullReporter",
    "ConsoleReporter",
    "__version__",
]
