"""Example group entity and declaration API."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from grove.context import InstanceState, is_reserved
from grove.errors import DeclarationError
from grove.example import Example
from grove.filters import FilterSet
from grove.hooks import Hook, HookFailure, HookRegistry
from grove.metadata import (
    DeclarationSite,
    find_declaration_site,
    merge_metadata,
    normalize_tags,
    parse_describe_args,
)
from grove.runner import GroupRunner
from grove.types import GroupPhase, HookScope, Scope

if TYPE_CHECKING:
    from grove.reports.base import Reporter
    from grove.world import World


class ExampleGroup:
    """A node in the tree of groups.

    A group owns its child groups, its examples, its hooks and ``let``
    helpers. Its metadata is the parent's merged metadata overlaid with the
    tags declared on the group itself.

    Groups are normally created through :meth:`World.describe` (roots) or
    :meth:`ExampleGroup.describe` (children). A group is also a context
    manager, which keeps nested declarations readable::

        with world.describe(Stack, "when empty") as group:
            @group.it("has no items")
            def _(ctx):
                assert len(ctx.subject) == 0
    """

    def __init__(
        self,
        description: str = "",
        *,
        describes: type | None = None,
        tags: Mapping[str, Any] | None = None,
        parent: ExampleGroup | None = None,
        world: World | None = None,
        site: DeclarationSite | None = None,
    ) -> None:
        self.description = description
        self.parent = parent
        self._world = world
        self._describes = describes
        self._own_metadata = dict(tags or {})
        self._metadata = merge_metadata(
            parent.metadata if parent else None,
            self._own_metadata,
        )
        self.site = site or DeclarationSite()
        self.children: list[ExampleGroup] = []
        self.examples: list[Example] = []
        self.hooks = HookRegistry()
        self._lets: dict[str, Callable[..., Any]] = {}

        # Populated by the runner
        self.phase = GroupPhase.NOT_STARTED
        self.before_all_state = InstanceState()
        self.hook_errors: list[HookFailure] = []

    def __enter__(self) -> ExampleGroup:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def __repr__(self) -> str:
        return f"ExampleGroup({self.full_description!r})"

    # Metadata

    @property
    def metadata(self) -> Mapping[str, Any]:
        """Merged metadata of this group and all its ancestors."""
        return MappingProxyType(self._metadata)

    @property
    def own_metadata(self) -> Mapping[str, Any]:
        """Tags declared on this group only."""
        return MappingProxyType(self._own_metadata)

    @property
    def world(self) -> World | None:
        """The world of the root group."""
        return self.ancestors()[-1]._world

    @world.setter
    def world(self, world: World | None) -> None:
        self._world = world

    @property
    def describes(self) -> type | None:
        """The described class, inherited from the closest ancestor that names one."""
        for group in self.ancestors():
            if group._describes is not None:
                return group._describes
        return None

    described_class = describes

    @property
    def file_path(self) -> str | None:
        return self.site.file_path

    @property
    def line_number(self) -> int | None:
        return self.site.line_number

    @property
    def top_level_description(self) -> str:
        return self.ancestors()[-1].description

    @property
    def full_description(self) -> str:
        parts = [group.description for group in reversed(self.ancestors())]
        return " ".join(part for part in parts if part)

    # Declaration

    def describe(
        self,
        *args: Any,
        block: Callable[[ExampleGroup], Any] | None = None,
        **tags: Any,
    ) -> ExampleGroup:
        """Declare a child group.

        Positional arguments follow the ``(described_class?, description?,
        tags?)`` convention, keyword arguments are extra tags. ``block`` is
        called with the new group right away.
        """
        describes, description, arg_tags = parse_describe_args(args)
        child = ExampleGroup(
            description,
            describes=describes,
            tags=normalize_tags(arg_tags, **tags),
            parent=self,
            site=find_declaration_site(),
        )
        self.children.append(child)
        if block is not None:
            block(child)
        return child

    context = describe

    def example(
        self,
        description: str | Callable[..., Any] | None = None,
        body: Callable[..., Any] | None = None,
        /,
        tags: Mapping[str, Any] | None = None,
        **extra_tags: Any,
    ) -> Example:
        """Declare an example. Without a body the example stays pending
        unless the returned example is used as a decorator."""
        if callable(description) and body is None:
            description, body = None, description
        example = Example(
            self,
            description,
            body,
            normalize_tags(tags, **extra_tags),
            find_declaration_site(),
        )
        self.examples.append(example)
        return example

    it = example
    specify = example

    def its(
        self,
        attribute: str,
        body: Callable[..., Any] | None = None,
        /,
        **tags: Any,
    ) -> Example:
        """Declare an example whose subject is an attribute of the group's subject."""
        example = Example(
            self,
            attribute,
            body,
            normalize_tags(None, **tags),
            find_declaration_site(),
            subject_attribute=attribute,
        )
        self.examples.append(example)
        return example

    def add_hook(self, scope: HookScope, action: Callable[..., Any]) -> Hook:
        return self.hooks.add(scope, action)

    def before(self, scope: Any = Scope.EACH, action: Callable[..., Any] | None = None) -> Any:
        """Register a before hook: ``before(fn)``, ``before("all", fn)`` or as a decorator."""
        return self._declare_hook("before", scope, action)

    def after(self, scope: Any = Scope.EACH, action: Callable[..., Any] | None = None) -> Any:
        """Register an after hook: ``after(fn)``, ``after("all", fn)`` or as a decorator."""
        return self._declare_hook("after", scope, action)

    def _declare_hook(
        self,
        position: str,
        scope: Any,
        action: Callable[..., Any] | None,
    ) -> Any:
        if callable(scope):
            scope, action = Scope.EACH, scope
        try:
            hook_scope = HookScope.resolve(position, scope)
        except ValueError as exc:
            msg = f"Unknown hook scope: {scope!r}"
            raise DeclarationError(msg) from exc

        if action is None:

            def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
                self.hooks.add(hook_scope, fn)
                return fn

            return decorator

        self.hooks.add(hook_scope, action)
        return action

    def let(self, name: str, factory: Callable[..., Any] | None = None) -> Any:
        """Declare a helper evaluated lazily and memoized once per example."""
        if is_reserved(name):
            msg = f"{name!r} is reserved and cannot be declared with let()"
            raise DeclarationError(msg)
        return self._declare_let(name, factory)

    def subject(self, factory: Callable[..., Any] | None = None) -> Any:
        """Declare the explicit subject of this group."""
        return self._declare_let("subject", factory)

    def _declare_let(self, name: str, factory: Callable[..., Any] | None) -> Any:
        if factory is None:

            def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
                self._declare_let(name, fn)
                return fn

            return decorator

        if not callable(factory):
            msg = f"let({name!r}) needs a callable, got {factory!r}"
            raise DeclarationError(msg)
        self._lets[name] = factory
        return factory

    def find_let(self, name: str) -> Callable[..., Any] | None:
        for group in self.ancestors():
            if name in group._lets:
                return group._lets[name]
        return None

    # Tree

    def ancestors(self) -> list[ExampleGroup]:
        """This group followed by its parents up to the root."""
        chain: list[ExampleGroup] = []
        group: ExampleGroup | None = self
        while group is not None:
            chain.append(group)
            group = group.parent
        return chain

    def descendants(self) -> list[ExampleGroup]:
        """This group and every nested group, depth first in declaration order."""
        groups = [self]
        for child in self.children:
            groups.extend(child.descendants())
        return groups

    # Filtering

    def filter_set(self) -> FilterSet:
        if self.world is None:
            return FilterSet()
        return self.world.filter_set()

    def filtered_examples(self) -> list[Example]:
        """Owned examples that pass the current filters, in declaration order."""
        return self.filter_set().select(self.examples)

    def has_runnable_examples(self) -> bool:
        return any(group.filtered_examples() for group in self.descendants())

    # Execution

    def run(self, reporter: Reporter | None = None) -> bool:
        """Run this group and its descendants, returning True if every example passed.

        Starts its own event loop with :func:`asyncio.run`. Code already
        running inside an event loop must await :meth:`run_async` instead.
        """
        return asyncio.run(self.run_async(reporter))

    async def run_async(self, reporter: Reporter | None = None) -> bool:
        return await GroupRunner(reporter).run_group(self)


__all__ = ["ExampleGroup"]
