"""
Consultation Store - durable storage of saved plans in LanceDB.

Each plan is one row keyed by id; the free-form payload is stored as JSON
text. LanceDB calls block, so every operation runs in a worker thread and
is awaited by the caller.
"""

import asyncio
import json
import os

import lancedb
from lancedb.pydantic import LanceModel

from common.config import DB_PATH, TABLE_NAME
from common.logging_config import get_logger
from common.types import SavedConsultation

logger = get_logger("consultation_store")


class StoreError(RuntimeError):
    """Raised when the durable store cannot complete an operation."""
    pass


class ConsultationRecord(LanceModel):
    """LanceDB schema for a saved consultation."""

    id: str
    name: str
    mode: str
    payload: str
    created_at: str


def _quote(value: str) -> str:
    return value.replace("'", "''")


def to_row(record: SavedConsultation) -> dict:
    return {
        "id": record["id"],
        "name": record["name"],
        "mode": record["mode"],
        "payload": json.dumps(record.get("payload") or {}),
        "created_at": record["created_at"],
    }


def from_row(row: dict) -> SavedConsultation:
    return {
        "id": row["id"],
        "name": row["name"],
        "mode": row["mode"],
        "payload": json.loads(row["payload"]) if row.get("payload") else {},
        "created_at": row["created_at"],
    }


class LanceConsultationStore:
    """Async store of SavedConsultation rows in a LanceDB table."""

    def __init__(self, db_path: str | None = None, table_name: str = TABLE_NAME):
        self.db_path = db_path or os.path.join(os.getcwd(), DB_PATH)
        self.table_name = table_name
        self._table = None

    def _open(self):
        os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
        db = lancedb.connect(self.db_path)
        return db.create_table(self.table_name, schema=ConsultationRecord, exist_ok=True)

    def _require_table(self):
        if self._table is None:
            raise StoreError("Consultation store is not initialized")
        return self._table

    def _write(self, row: dict) -> None:
        table = self._require_table()
        (
            table.merge_insert("id")
            .when_matched_update_all()
            .when_not_matched_insert_all()
            .execute([row])
        )

    def _list_all(self) -> list[SavedConsultation]:
        df = self._require_table().to_pandas()
        if df.empty:
            return []
        df = df.sort_values(["created_at", "id"])
        return [from_row(row) for row in df.to_dict(orient="records")]

    def _delete(self, consultation_id: str) -> None:
        self._require_table().delete(f"id = '{_quote(consultation_id)}'")

    async def init(self) -> None:
        try:
            self._table = await asyncio.to_thread(self._open)
        except Exception as e:
            raise StoreError(f"Could not open saved plans: {e}") from e
        logger.info(f"Consultation store ready at {self.db_path}")

    async def write(self, record: SavedConsultation) -> None:
        row = to_row(record)
        try:
            await asyncio.to_thread(self._write, row)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Could not save plan: {e}") from e
        logger.debug(f"Wrote consultation {record['id']}")

    async def list_all(self) -> list[SavedConsultation]:
        try:
            return await asyncio.to_thread(self._list_all)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Could not load saved plans: {e}") from e

    async def delete(self, consultation_id: str) -> None:
        try:
            await asyncio.to_thread(self._delete, consultation_id)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Could not delete plan: {e}") from e
        logger.debug(f"Deleted consultation {consultation_id}")
