"""Tag-based inclusion and exclusion filtering."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from grove.example import Example
    from grove.group import ExampleGroup


logger = logging.getLogger(__name__)


def apply_condition(expected: Any, actual: Any) -> bool:
    """Check one tag value against a filter value.

    Callable filter values (other than classes) act as predicates, anything
    else is compared for equality. A predicate that raises counts as no match.
    """
    if callable(expected) and not isinstance(expected, type):
        try:
            return bool(expected(actual))
        except Exception as exc:
            logger.warning("Filter predicate %r raised on %r: %s", expected, actual, exc)
            return False
    return bool(actual == expected)


def matches(filter_map: Mapping[str, Any], metadata: Mapping[str, Any]) -> bool:
    """Return True when metadata satisfies at least one predicate of the filter."""
    for key, expected in filter_map.items():
        if key in metadata and apply_condition(expected, metadata[key]):
            return True
    return False


@dataclass(frozen=True)
class FilterSet:
    """Snapshot of the inclusion and exclusion filters used for one evaluation.

    Attributes
    ----------
    inclusion
        Tag name to required value. When non-empty only matching examples run.
    exclusion
        Tag name to excluded value. Matching examples are removed unless they
        were explicitly included.
    """

    inclusion: Mapping[str, Any] = field(default_factory=dict)
    exclusion: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.inclusion and not self.exclusion

    def group_is_explicitly_included(self, group: ExampleGroup) -> bool:
        """A group is explicitly included when its own tags match the inclusion filter."""
        return bool(self.inclusion) and matches(self.inclusion, group.own_metadata)

    def is_forced(self, example: Example) -> bool:
        """Examples tagged locally, or owned by an explicitly included group, always run."""
        if not self.inclusion:
            return False
        if matches(self.inclusion, example.own_metadata):
            return True
        return any(
            self.group_is_explicitly_included(group)
            for group in example.example_group.ancestors()
        )

    def is_selected(self, example: Example) -> bool:
        if self.is_empty:
            return True
        if self.is_forced(example):
            return True
        if self.inclusion and not matches(self.inclusion, example.metadata):
            return False
        if self.exclusion and matches(self.exclusion, example.metadata):
            return False
        return True

    def select(self, examples: Iterable[Example]) -> list[Example]:
        """Return the selected examples, keeping their order."""
        return [example for example in examples if self.is_selected(example)]


__all__ = ["FilterSet", "apply_condition", "matches"]
