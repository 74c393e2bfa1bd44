"""
AI Coach chat.

Replies are consumed token by token from an async stream and grow a single
model message in the history. cancel() stops consumption at the next token
and keeps whatever arrived so far.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Protocol

from common.logging_config import get_logger
from common.session import SessionContext
from common.types import ChatMessage

logger = get_logger("coach_chat")

GREETING = "Hello! I am AURA AI. How can I help you with your wellness, beauty, and fitness goals today?"


class ReplySource(Protocol):
    def stream_chat(self, history: list[ChatMessage]) -> AsyncIterator[str]: ...


class CoachChat:
    def __init__(self, ai: ReplySource, session: SessionContext):
        self.ai = ai
        self.session = session
        self.history: list[ChatMessage] = [{"role": "model", "text": GREETING}]
        # One cancel event per reply still streaming
        self._active: set[asyncio.Event] = set()

    @property
    def is_streaming(self) -> bool:
        return bool(self._active)

    def cancel(self) -> None:
        """Stop every reply currently streaming; no-op when idle."""
        if self.is_streaming:
            logger.info(f"{len(self._active)} reply stream(s) cancelled by user")
            for event in self._active:
                event.set()

    async def send_message(self, text: str) -> ChatMessage | None:
        """
        Send a user message and stream the coach's reply into the history.

        Returns:
            The (possibly partial) model message, or None if nothing arrived
        """
        if not text.strip():
            return None

        self.history.append({"role": "user", "text": text})
        cancelled = asyncio.Event()
        self._active.add(cancelled)

        reply: ChatMessage | None = None
        stream = self.ai.stream_chat(list(self.history))
        try:
            async for token in stream:
                if cancelled.is_set():
                    break
                if reply is None:
                    reply = {"role": "model", "text": ""}
                    self.history.append(reply)
                reply["text"] += token
        except Exception as e:
            self.session.errors.handle(e)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
            self._active.discard(cancelled)

        return reply
