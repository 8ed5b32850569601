"""Process-wide registry of root example groups."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from grove.context import current_world
from grove.errors import DeclarationError
from grove.filters import FilterSet
from grove.group import ExampleGroup
from grove.metadata import find_declaration_site, normalize_tags, parse_describe_args
from grove.runner import Runner, RunResult

if TYPE_CHECKING:
    from grove.reports.base import Reporter


logger = logging.getLogger(__name__)


class World:
    """Holds the root groups of a run and the filters applied to them.

    Only root groups register here; nested groups are reachable through
    their parents. Filters are read each time examples are selected, so they
    can be changed up to the moment a run starts.
    """

    def __init__(
        self,
        *,
        inclusion_filter: Mapping[str, Any] | None = None,
        exclusion_filter: Mapping[str, Any] | None = None,
    ) -> None:
        self.example_groups: list[ExampleGroup] = []
        self.inclusion_filter: dict[str, Any] = dict(inclusion_filter or {})
        self.exclusion_filter: dict[str, Any] = dict(exclusion_filter or {})

    def describe(
        self,
        *args: Any,
        block: Callable[[ExampleGroup], Any] | None = None,
        **tags: Any,
    ) -> ExampleGroup:
        """Declare a root group and register it."""
        describes, description, arg_tags = parse_describe_args(args)
        group = ExampleGroup(
            description,
            describes=describes,
            tags=normalize_tags(arg_tags, **tags),
            world=self,
            site=find_declaration_site(),
        )
        self.register(group)
        if block is not None:
            block(group)
        return group

    def register(self, group: ExampleGroup) -> ExampleGroup:
        if group.parent is not None:
            msg = f"Only root groups can be registered, {group!r} has a parent"
            raise DeclarationError(msg)
        if group.world is None:
            group.world = self
        elif group.world is not self:
            msg = f"{group!r} already belongs to another world"
            raise DeclarationError(msg)
        if group not in self.example_groups:
            self.example_groups.append(group)
            logger.debug("Registered group %r", group.description)
        return group

    def filter_set(self) -> FilterSet:
        return FilterSet(
            inclusion=dict(self.inclusion_filter),
            exclusion=dict(self.exclusion_filter),
        )

    def run(self, reporter: Reporter | None = None, *, maxfail: int | None = None) -> RunResult:
        """Run every registered group. Inside a running event loop use :meth:`run_async`."""
        return asyncio.run(self.run_async(reporter, maxfail=maxfail))

    async def run_async(
        self,
        reporter: Reporter | None = None,
        *,
        maxfail: int | None = None,
    ) -> RunResult:
        return await Runner(reporter, maxfail=maxfail).run(list(self.example_groups))


def describe(
    *args: Any,
    block: Callable[[ExampleGroup], Any] | None = None,
    **tags: Any,
) -> ExampleGroup:
    """Declare a root group in the world made current by ``world_scope``."""
    return current_world().describe(*args, block=block, **tags)


__all__ = ["World", "describe"]
