"""Hook registration and invocation."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from grove.errors import DeclarationError
from grove.types import HookScope

if TYPE_CHECKING:
    from grove.context import ExampleContext


@dataclass(frozen=True)
class Hook:
    """A setup or teardown action attached to a group."""

    scope: HookScope
    action: Callable[..., Any]
    index: int


@dataclass(frozen=True)
class HookFailure:
    """An exception raised by a before-all or after-all hook."""

    scope: HookScope
    exception: Exception


class HookRegistry:
    """Ordered hook lists for a single group, one per scope."""

    def __init__(self) -> None:
        self._hooks: dict[HookScope, list[Hook]] = {scope: [] for scope in HookScope}

    def add(self, scope: HookScope, action: Callable[..., Any]) -> Hook:
        if not isinstance(scope, HookScope):
            msg = f"Unknown hook scope: {scope!r}"
            raise DeclarationError(msg)
        if not callable(action):
            msg = f"Hook action must be callable, got {action!r}"
            raise DeclarationError(msg)
        hooks = self._hooks[scope]
        hook = Hook(scope=scope, action=action, index=len(hooks))
        hooks.append(hook)
        return hook

    def for_scope(self, scope: HookScope) -> list[Hook]:
        """Hooks in execution order: declaration order for before, reversed for after."""
        hooks = self._hooks[scope]
        if scope.is_before:
            return list(hooks)
        return list(reversed(hooks))

    def __len__(self) -> int:
        return sum(len(hooks) for hooks in self._hooks.values())


def accepts_context(fn: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures get the context.
        return True
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            return True
    return False


async def invoke(fn: Callable[..., Any], ctx: ExampleContext) -> Any:
    """Call a hook action or example body, awaiting coroutine results.

    Callables declaring a positional parameter receive the context,
    zero-argument callables are called bare.
    """
    result = fn(ctx) if accepts_context(fn) else fn()
    if inspect.isawaitable(result):
        result = await result
    return result


__all__ = ["Hook", "HookFailure", "HookRegistry", "accepts_context", "invoke"]
