"""
Application Orchestrator

Wires every workflow of the advisory app around one shared SessionContext:
1. Consultation synchronizer (saved plans)
2. Provider search (geolocation-assisted)
3. Semantic site search
4. Content creator and AI coach chat
5. Navigation, login flag and the quota notice

Pages read state from here and call its handlers; nothing in this module
renders anything.
"""

from common.geolocation import CityGeolocator, Geolocator
from common.llm_utils import AIServices
from common.logging_config import get_logger
from common.session import SessionContext
from common.types import Page, SavedConsultation
from coach_chat.core import CoachChat
from consultation_store.core import LanceConsultationStore
from consultation_sync.core import ConsultationStore, ConsultationSynchronizer, RestoreTarget
from content_creator.core import ContentCreator
from provider_search.core import ProviderSearchOrchestrator
from semantic_search.core import SemanticSearchOrchestrator

logger = get_logger("orchestrator")


class AuraOrchestrator:
    """
    Top-level controller for one user session.

    Every collaborator can be injected; defaults are the Ollama client, the
    LanceDB store and the configured-city geolocator.
    """

    def __init__(
        self,
        ai: AIServices | None = None,
        store: ConsultationStore | None = None,
        geolocator: Geolocator | None = None,
        session: SessionContext | None = None,
        discard_stale: bool | None = None,
    ):
        self.session = session or SessionContext()
        self.ai = ai or AIServices()
        stale_kwargs = {} if discard_stale is None else {"discard_stale": discard_stale}

        self.consultations = ConsultationSynchronizer(store or LanceConsultationStore(), self.session)
        self.provider_search = ProviderSearchOrchestrator(
            self.ai, geolocator or CityGeolocator(), self.session, **stale_kwargs
        )
        self.semantic_search = SemanticSearchOrchestrator(self.ai, self.session, **stale_kwargs)
        self.content_creator = ContentCreator(self.ai, self.session)
        self.coach_chat = CoachChat(self.ai, self.session)

    @property
    def page(self) -> Page:
        return self.session.navigation.page

    @property
    def is_quota_exhausted(self) -> bool:
        return self.session.is_quota_exhausted

    async def initialize(self) -> bool:
        """Load saved plans; the app stays usable if this fails."""
        logger.info("Initializing session")
        return await self.consultations.load()

    def set_page(self, page: Page | str) -> None:
        self.session.navigation.set_page(page)

    def navigate_from_search(self, page: Page | str) -> None:
        self.session.navigation.navigate_from_search(page)

    def dismiss_quota_notice(self) -> None:
        self.session.breaker.dismiss()

    async def save_consultation(self, record: SavedConsultation) -> bool:
        return await self.consultations.save(record)

    async def delete_consultation(self, consultation_id: str) -> bool:
        return await self.consultations.delete(consultation_id)

    def restore_consultation(self, consultation_id: str) -> RestoreTarget | None:
        return self.consultations.restore(consultation_id)

    def login(self) -> None:
        """Local-only login: no credentials are checked."""
        self.session.is_authenticated = True
        self.session.navigation.close_login()
        self.session.notifications.success("Login successful!")
        logger.info("User logged in")

    def logout(self) -> None:
        self.session.is_authenticated = False
        self.session.notifications.info("You have been logged out.")
        logger.info("User logged out")

    def submit_application(self, name: str, email: str, message: str = "") -> bool:
        """Accept a join-us application once name and email are filled in."""
        if not name.strip() or not email.strip():
            self.session.notifications.error("Please fill in your name and email.")
            return False
        self.session.notifications.success(self.session.localizer.text("joinUsPage.applySuccess"))
        logger.info(f"Application received ({len(message)} chars of message)")
        return True
