import asyncio

import pytest

from grove.errors import DeclarationError
from grove.hooks import HookRegistry, accepts_context, invoke
from grove.types import HookScope, Scope


def test_before_hooks_are_fifo_and_after_hooks_lifo():
    registry = HookRegistry()
    for name in ("h1", "h2", "h3"):
        registry.add(HookScope.BEFORE_EACH, lambda name=name: name)
        registry.add(HookScope.AFTER_EACH, lambda name=name: name)

    before = [hook.action() for hook in registry.for_scope(HookScope.BEFORE_EACH)]
    after = [hook.action() for hook in registry.for_scope(HookScope.AFTER_EACH)]

    assert before == ["h1", "h2", "h3"]
    assert after == ["h3", "h2", "h1"]
    assert len(registry) == 6


def test_hook_index_records_declaration_order():
    registry = HookRegistry()
    first = registry.add(HookScope.AFTER_ALL, lambda: None)
    second = registry.add(HookScope.AFTER_ALL, lambda: None)
    assert (first.index, second.index) == (0, 1)


def test_add_rejects_non_callable_actions():
    registry = HookRegistry()
    with pytest.raises(DeclarationError, match="must be callable"):
        registry.add(HookScope.BEFORE_ALL, "not callable")


def test_add_rejects_unknown_scopes():
    registry = HookRegistry()
    with pytest.raises(DeclarationError, match="Unknown hook scope"):
        registry.add("before_all", lambda: None)


def test_hook_scope_resolve():
    assert HookScope.resolve("before", "all") is HookScope.BEFORE_ALL
    assert HookScope.resolve("after", Scope.EACH) is HookScope.AFTER_EACH
    with pytest.raises(ValueError):
        HookScope.resolve("before", "sometimes")


def test_accepts_context():
    assert accepts_context(lambda ctx: None)
    assert accepts_context(lambda *args: None)
    assert not accepts_context(lambda: None)
    assert not accepts_context(lambda *, flag=False: None)


def test_invoke_passes_context_and_awaits_coroutines():
    seen = []

    async def async_hook(ctx):
        seen.append(("async", ctx))

    def sync_hook():
        seen.append(("sync",))

    asyncio.run(invoke(async_hook, "ctx"))
    asyncio.run(invoke(sync_hook, "ctx"))

    assert seen == [("async", "ctx"), ("sync",)]
