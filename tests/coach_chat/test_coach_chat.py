"""Tests for the AI coach chat."""

import asyncio

from coach_chat.core import GREETING, CoachChat


class TestCoachChat:
    def test_starts_with_greeting(self, fake_ai, session):
        chat = CoachChat(fake_ai, session)
        assert chat.history == [{"role": "model", "text": GREETING}]
        assert not chat.is_streaming

    async def test_streams_reply_into_one_message(self, fake_ai, session):
        chat = CoachChat(fake_ai, session)

        reply = await chat.send_message("How do I fix dry skin?")

        assert reply == {"role": "model", "text": "Drink more water."}
        assert chat.history[-2] == {"role": "user", "text": "How do I fix dry skin?"}
        assert chat.history[-1] is reply
        assert not chat.is_streaming

    async def test_blank_message_is_ignored(self, fake_ai, session):
        chat = CoachChat(fake_ai, session)
        assert await chat.send_message("  ") is None
        assert len(chat.history) == 1

    async def test_cancel_keeps_partial_reply(self, fake_ai, session):
        chat = CoachChat(fake_ai, session)

        class CancellingAI:
            async def stream_chat(self, history):
                yield "Start "
                chat.cancel()
                yield "never shown"

        chat.ai = CancellingAI()
        reply = await chat.send_message("Tell me about peels")

        assert reply == {"role": "model", "text": "Start "}
        assert not chat.is_streaming

    async def test_stream_failure_is_normalized(self, fake_ai, session):
        fake_ai.error = RuntimeError("connection reset")
        chat = CoachChat(fake_ai, session)

        reply = await chat.send_message("hi")

        assert reply["text"] == "Drink more water."
        assert session.notifications.messages("error") == ["connection reset"]
        assert not chat.is_streaming

    async def test_cancel_when_idle_does_not_affect_next_reply(self, fake_ai, session):
        chat = CoachChat(fake_ai, session)
        chat.cancel()

        reply = await chat.send_message("hi")

        assert reply == {"role": "model", "text": "Drink more water."}


class GatedReplies:
    """Streams "<text>-a " then waits for the test before sending "<text>-b"."""

    def __init__(self):
        self.gates: dict[str, asyncio.Event] = {}

    async def stream_chat(self, history):
        text = history[-1]["text"]
        gate = self.gates.setdefault(text, asyncio.Event())
        yield f"{text}-a "
        await gate.wait()
        yield f"{text}-b"


class TestOverlappingReplies:
    async def test_cancel_reaches_reply_still_streaming_after_earlier_one_ends(self, session):
        ai = GatedReplies()
        chat = CoachChat(ai, session)

        first = asyncio.create_task(chat.send_message("one"))
        await asyncio.sleep(0)
        second = asyncio.create_task(chat.send_message("two"))
        await asyncio.sleep(0)

        ai.gates["one"].set()
        assert await first == {"role": "model", "text": "one-a one-b"}
        assert chat.is_streaming

        chat.cancel()
        ai.gates["two"].set()

        assert await second == {"role": "model", "text": "two-a "}
        assert not chat.is_streaming

    async def test_cancel_stops_all_overlapping_replies(self, session):
        ai = GatedReplies()
        chat = CoachChat(ai, session)

        first = asyncio.create_task(chat.send_message("one"))
        await asyncio.sleep(0)
        second = asyncio.create_task(chat.send_message("two"))
        await asyncio.sleep(0)

        chat.cancel()
        ai.gates["one"].set()
        ai.gates["two"].set()

        assert await first == {"role": "model", "text": "one-a "}
        assert await second == {"role": "model", "text": "two-a "}
        assert not chat.is_streaming
