"""Marketing content generation for the seller hub."""

from typing import Literal, Protocol

from common.logging_config import get_logger
from common.session import SessionContext

logger = get_logger("content_creator")

ContentType = Literal["blog", "instagram", "twitter"]
Tone = Literal["professional", "friendly", "inspirational", "scientific"]


class ContentGenerator(Protocol):
    async def generate_content(self, topic: str, content_type: str, tone: str, locale: str) -> str: ...


class ContentCreator:
    def __init__(self, ai: ContentGenerator, session: SessionContext):
        self.ai = ai
        self.session = session

        self.result: str | None = None
        self.error: str | None = None
        self.is_loading = False

    async def generate(
        self,
        topic: str,
        content_type: ContentType = "blog",
        tone: Tone = "professional",
    ) -> str | None:
        if not topic.strip():
            self.error = self.session.localizer.text("validation.required")
            return None

        self.is_loading = True
        self.error = None
        self.result = None
        try:
            content = await self.ai.generate_content(topic, content_type, tone, self.session.locale)
        except Exception as e:
            self.error = self.session.errors.handle(e)
            return None
        finally:
            self.is_loading = False

        logger.info(f"Generated {content_type} post ({len(content)} chars, tone={tone})")
        self.result = content
        return content
