"""Demonstrates tag filtering.

Run only the smoke examples:
    grove examples/spec_example_tags.py -t smoke

Skip the slow ones:
    grove examples/spec_example_tags.py -x slow
"""

import asyncio

import grove


def simple_chatbot(prompt: str) -> str:
    return f"Hello, {prompt}!"


with grove.describe("chatbot", component="greeter") as chatbot:
    chatbot.let("name", lambda: "World")

    @chatbot.it("greets by name", smoke=True)
    def _(ctx):
        assert simple_chatbot(ctx.name) == "Hello, World!"

    @chatbot.it("answers asynchronously", slow=True)
    async def _(ctx):
        await asyncio.sleep(0.01)
        assert simple_chatbot("async").startswith("Hello")

    with chatbot.describe("farewell", pending="Farewell flow not implemented yet") as farewell:

        @farewell.it("says goodbye")
        def _(ctx):
            assert simple_chatbot("friend").endswith("Goodbye!")
