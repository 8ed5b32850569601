"""Demonstrates hook ordering and instance state isolation.

Run with:
    grove examples/spec_example_hooks_and_state.py -v
"""

import grove


class Stack:
    def __init__(self) -> None:
        self.items: list[object] = []

    def push(self, item: object) -> None:
        self.items.append(item)

    def pop(self) -> object:
        return self.items.pop()

    def __len__(self) -> int:
        return len(self.items)


with grove.describe(Stack) as stack_group:

    @stack_group.before("all")
    def open_log(ctx):
        # Shared by every example; examples get their own copy of the binding.
        ctx.log = []

    @stack_group.before
    def push_one(ctx):
        ctx.subject.push(1)

    @stack_group.it("starts from the pushed item")
    def _(ctx):
        assert len(ctx.subject) == 1

    @stack_group.it("pops the last pushed item")
    def _(ctx):
        ctx.subject.push(2)
        assert ctx.subject.pop() == 2

    with stack_group.context("when emptied") as emptied:

        @emptied.before
        def drain(ctx):
            ctx.subject.pop()

        @emptied.it("has no items")
        def _(ctx):
            assert len(ctx.subject) == 0

        @emptied.it("raises on pop")
        def _(ctx):
            try:
                ctx.subject.pop()
            except IndexError:
                return
            raise AssertionError("expected IndexError")

    stack_group.it("supports peeking")  # pending: no body yet
