"""
Semantic Search Orchestrator

Site-wide search: builds a corpus from the localized catalog, the expert
roster and a manifest of navigable pages, then asks the semantic search
capability to rank it against the user's query.

Failures are surfaced twice: as a toast (through the error normalizer) and
as inline error text for the search surface.
"""

import json
from typing import Protocol

from common.config import DISCARD_STALE_RESULTS
from common.localization import Localizer
from common.logging_config import get_logger
from common.metrics import searches
from common.session import SessionContext
from common.types import Page, SearchResultItem

logger = get_logger("semantic_search")


class SemanticSearch(Protocol):
    async def semantic_search(self, query: str, corpus: str, locale: str) -> list[SearchResultItem]: ...


# (name key, target page, description key) for every page the search can open
PAGE_MANIFEST: list[tuple[str, Page, str]] = [
    ("header.skinConsultation", Page.SKIN_CONSULTATION, "assessment.skinSubtitle"),
    ("header.fitnessAssessment", Page.FITNESS_ASSESSMENT, "assessment.fitnessSubtitle"),
    ("header.locationFinder", Page.LOCATION_FINDER, "locationFinder.subtitle"),
    ("header.aiCoach", Page.AI_CONSULTANT, "aiCoach.subtitle"),
    ("header.marketTrends", Page.MARKET_TRENDS, "marketTrends.subtitle"),
    ("header.ourExperts", Page.OUR_EXPERTS, "ourExperts.subtitle"),
    ("header.collaboration", Page.COLLABORATION, "collaborationPage.goalText"),
    ("header.joinUs", Page.JOIN_US, "joinUsPage.subtitle"),
    ("header.myPlans", Page.MY_CONSULTATIONS, "myPlansPage.subtitle"),
    ("header.downloadApp", Page.DOWNLOAD_APP, "downloadAppPage.subtitle"),
]


def build_page_manifest(localizer: Localizer) -> list[dict]:
    return [
        {"name": localizer.text(name_key), "target": page.value, "description": localizer.text(desc_key)}
        for name_key, page, desc_key in PAGE_MANIFEST
    ]


def build_search_corpus(localizer: Localizer) -> str:
    """
    Assemble the text the semantic search ranks against.

    Returns:
        Three labelled lines holding JSON arrays: services, experts, pages
    """
    services = localizer.items("hero.cosmeticServices") + localizer.items("hero.fitnessServices")
    experts = localizer.items("ourExperts.coaches") + localizer.items("ourExperts.doctors")
    pages = build_page_manifest(localizer)

    return "\n".join(
        [
            f"Services available at AURA AI: {json.dumps(services, ensure_ascii=False)}.",
            f"Experts at AURA AI: {json.dumps(experts, ensure_ascii=False)}.",
            f"Website Pages: {json.dumps(pages, ensure_ascii=False)}.",
        ]
    )


class SemanticSearchOrchestrator:
    def __init__(
        self,
        ai: SemanticSearch,
        session: SessionContext,
        discard_stale: bool = DISCARD_STALE_RESULTS,
    ):
        self.ai = ai
        self.session = session
        self.discard_stale = discard_stale

        self.results: list[SearchResultItem] | None = None
        self.error: str | None = None
        self.is_loading = False
        self._generation = 0

    def _is_current(self, generation: int) -> bool:
        return not self.discard_stale or generation == self._generation

    async def search(self, query: str) -> list[SearchResultItem] | None:
        self._generation += 1
        generation = self._generation

        # Reset before fetching so stale output never shows during a new search
        self.is_loading = True
        self.results = None
        self.error = None
        searches.add(1, attributes={"workflow": "semantic"})

        try:
            corpus = build_search_corpus(self.session.localizer)
            logger.debug(f"Semantic search #{generation}: corpus of {len(corpus)} chars")
            results = await self.ai.semantic_search(query, corpus, self.session.locale)
            if self._is_current(generation):
                self.results = results
                logger.info(f"Semantic search #{generation}: {len(results)} results")
            else:
                logger.info(f"Semantic search #{generation} superseded, result dropped")
            return results
        except Exception as e:
            message = self.session.errors.handle(e)
            if self._is_current(generation):
                self.error = message
            return None
        finally:
            if self._is_current(generation):
                self.is_loading = False
