"""
Consultation Store Synchronizer

Keeps the in-memory list of saved plans consistent with the durable store:
- save: write, then re-read the whole collection (read-after-write refresh)
- delete: delete, then filter the id out locally
- restore: local lookup, then navigate to the page that owns the plan

Store failures go through the error normalizer and leave the list as it was.
"""

from dataclasses import dataclass
from typing import Protocol

from common.logging_config import get_logger
from common.session import SessionContext
from common.types import Page, SavedConsultation

logger = get_logger("consultation_sync")


class ConsultationStore(Protocol):
    async def init(self) -> None: ...

    async def write(self, record: SavedConsultation) -> None: ...

    async def list_all(self) -> list[SavedConsultation]: ...

    async def delete(self, consultation_id: str) -> None: ...


@dataclass(frozen=True)
class RestoreTarget:
    """Where a restored plan opens, and the plan the page rehydrates from."""

    page: Page
    consultation: SavedConsultation


def page_for_mode(mode: str | None) -> Page:
    """Fitness plans open the fitness assessment; every other mode opens the skin consultation."""
    return Page.FITNESS_ASSESSMENT if mode == "fitness" else Page.SKIN_CONSULTATION


def resolve_restore_target(record: SavedConsultation) -> RestoreTarget:
    return RestoreTarget(page=page_for_mode(record.get("mode")), consultation=record)


class ConsultationSynchronizer:
    def __init__(self, store: ConsultationStore, session: SessionContext):
        self.store = store
        self.session = session
        self.consultations: list[SavedConsultation] = []
        self.consultation_to_restore: SavedConsultation | None = None

    async def load(self) -> bool:
        """Initialize the store and read every saved plan."""
        try:
            await self.store.init()
            self.consultations = await self.store.list_all()
        except Exception as e:
            logger.error(f"Failed to initialize consultation store: {e}")
            self.session.errors.handle(e)
            return False
        logger.info(f"Loaded {len(self.consultations)} saved plans")
        return True

    async def save(self, record: SavedConsultation) -> bool:
        try:
            await self.store.write(record)
            # Refresh the list from the store to ensure consistency
            updated = await self.store.list_all()
        except Exception as e:
            self.session.errors.handle(e)
            return False
        self.consultations = updated
        self.session.notifications.success("Plan saved successfully!")
        logger.info(f"Saved plan {record['id']} ({len(updated)} total)")
        return True

    async def delete(self, consultation_id: str) -> bool:
        try:
            await self.store.delete(consultation_id)
        except Exception as e:
            self.session.errors.handle(e)
            return False
        self.consultations = [c for c in self.consultations if c["id"] != consultation_id]
        self.session.notifications.success("Plan deleted successfully.")
        logger.info(f"Deleted plan {consultation_id}")
        return True

    def find(self, consultation_id: str) -> SavedConsultation | None:
        return next((c for c in self.consultations if c["id"] == consultation_id), None)

    def restore(self, consultation_id: str) -> RestoreTarget | None:
        """
        Open a saved plan on the page that created it.

        An id missing from the current list (e.g. a stale view) is ignored.
        """
        record = self.find(consultation_id)
        if record is None:
            logger.debug(f"Restore ignored, no plan with id {consultation_id}")
            return None

        target = resolve_restore_target(record)
        self.consultation_to_restore = target.consultation
        self.session.navigation.set_page(target.page)
        self.session.notifications.info(f'Restored "{record["name"]}".')
        return target

    def take_restored(self, mode: str | None = None) -> SavedConsultation | None:
        """
        Hand the stashed plan to the page rehydrating from it, then clear it.

        With `mode`, only a plan of that mode is handed over; the stash is
        left in place otherwise.
        """
        record = self.consultation_to_restore
        if record is None:
            return None
        if mode is not None and page_for_mode(record.get("mode")) != page_for_mode(mode):
            return None
        self.consultation_to_restore = None
        return record
