"""Instance state and execution context passed to hooks and example bodies."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from grove.errors import GroveError, NoActiveWorldError, PendingExampleError
from grove.hooks import accepts_context

if TYPE_CHECKING:
    from grove.example import Example
    from grove.group import ExampleGroup
    from grove.world import World


CURRENT_EXAMPLE: ContextVar[Example | None] = ContextVar("current_example", default=None)
CURRENT_WORLD: ContextVar[World | None] = ContextVar("current_world", default=None)


class InstanceState:
    """Named values set by hooks and example bodies.

    Cloning copies the bindings, not the bound objects, so rebinding a name in
    a clone never affects the original while shared resources stay shared.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def delete(self, name: str) -> None:
        del self._values[name]

    def clone(self) -> InstanceState:
        return InstanceState(self._values)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"InstanceState({self._values!r})"


_RESERVED = frozenset(
    {"example", "group", "state", "described_class", "subject", "pending", "get"}
)


class ExampleContext:
    """What a hook or example body receives as its single argument.

    Attribute reads fall through to the instance state, then to ``let``
    helpers declared on the group or its ancestors. Attribute writes go to the
    instance state. ``example`` is None inside before-all and after-all hooks.
    """

    def __init__(
        self,
        group: ExampleGroup,
        state: InstanceState,
        example: Example | None = None,
    ) -> None:
        object.__setattr__(self, "_group", group)
        object.__setattr__(self, "_state", state)
        object.__setattr__(self, "_example", example)
        object.__setattr__(self, "_memo", {})

    @property
    def example(self) -> Example | None:
        return self._example

    @property
    def group(self) -> ExampleGroup:
        return self._group

    @property
    def state(self) -> InstanceState:
        return self._state

    @property
    def described_class(self) -> type | None:
        return self._group.described_class

    @property
    def subject(self) -> Any:
        if "subject" not in self._memo:
            # An AttributeError escaping a property would fall through to __getattr__.
            try:
                self._memo["subject"] = self._resolve_subject()
            except AttributeError as exc:
                raise GroveError(str(exc)) from exc
        return self._memo["subject"]

    def _group_subject(self) -> Any:
        factory = self._group.find_let("subject")
        if factory is not None:
            return self._call_factory(factory)
        described = self.described_class
        if described is None:
            msg = f"{self._group.full_description!r} has no subject"
            raise AttributeError(msg)
        return described()

    def _resolve_subject(self) -> Any:
        attribute = self._example.subject_attribute if self._example else None
        if attribute is not None:
            return getattr(self._group_subject(), attribute)
        return self._group_subject()

    def _call_factory(self, factory: Any) -> Any:
        return factory(self) if accepts_context(factory) else factory()

    def pending(self, message: str | None = None) -> None:
        """Stop the current example and mark it pending."""
        raise PendingExampleError(message)

    def get(self, name: str, default: Any = None) -> Any:
        return self._state.get(name, default)

    def __getattr__(self, name: str) -> Any:
        if name in _RESERVED or name.startswith("_"):
            raise AttributeError(name)
        state = self._state
        if name in state:
            return state.get(name)
        memo = self._memo
        if name in memo:
            return memo[name]
        factory = self._group.find_let(name)
        if factory is not None:
            memo[name] = self._call_factory(factory)
            return memo[name]
        msg = f"{name!r} is not set in this context"
        raise AttributeError(msg)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _RESERVED or name.startswith("_"):
            msg = f"Cannot assign to reserved context attribute {name!r}"
            raise AttributeError(msg)
        self._state.set(name, value)

    def __delattr__(self, name: str) -> None:
        if name not in self._state:
            raise AttributeError(name)
        self._state.delete(name)

    def __contains__(self, name: object) -> bool:
        return name in self._state


def is_reserved(name: str) -> bool:
    return name in _RESERVED or name.startswith("_")


def current_example() -> Example | None:
    """Return the example currently running, or None outside of an example."""
    return CURRENT_EXAMPLE.get()


@contextmanager
def example_scope(example: Example | None) -> Iterator[None]:
    token = CURRENT_EXAMPLE.set(example)
    try:
        yield
    finally:
        CURRENT_EXAMPLE.reset(token)


def current_world() -> World:
    """Return the world that module-level ``describe`` calls register into."""
    world = CURRENT_WORLD.get()
    if world is None:
        raise NoActiveWorldError()
    return world


@contextmanager
def world_scope(world: World) -> Iterator[World]:
    token = CURRENT_WORLD.set(world)
    try:
        yield world
    finally:
        CURRENT_WORLD.reset(token)


__all__ = [
    "CURRENT_EXAMPLE",
    "CURRENT_WORLD",
    "ExampleContext",
    "InstanceState",
    "current_example",
    "current_world",
    "example_scope",
    "is_reserved",
    "world_scope",
]
