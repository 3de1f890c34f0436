"""
Packing list record store.

CRUD and search over the `packing_lists` table, keyed by the generated
packing list code.

Listing:
    Newest first (created_at descending), optionally filtered by a
    case-insensitive substring of the code (search box / QR scan).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from core.database import Database
from core.exceptions import DuplicateRecordError, RecordNotFoundError
from models.packing_list import PackingList
from models.records import PackingListRecord
from modules.code_generator import generate_packing_list_code
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

ENTITY = "Packing list"

# Generated codes have one-second resolution; a taken code moves to the next second
MAX_CODE_ATTEMPTS = 60


class PackingListService:
    """Packing list CRUD backed by the shared Database."""

    def __init__(
        self,
        database: Database,
        code_factory: Callable[[Optional[datetime]], str] = generate_packing_list_code,
    ):
        """
        Args:
            database: Record store
            code_factory: Generates the code of new packing lists
        """
        self.database = database
        self.code_factory = code_factory

    def list_packing_lists(self, query: Optional[str] = None) -> List[PackingList]:
        """
        List packing lists, newest first.

        Args:
            query: Substring of the code to filter on (case-insensitive)
        """
        with self.database.session() as session:
            q = session.query(PackingListRecord)
            query = (query or "").strip()
            if query:
                q = q.filter(func.lower(PackingListRecord.code).contains(query.lower(), autoescape=True))
            records = q.order_by(
                PackingListRecord.created_at.desc(), PackingListRecord.code.desc()
            ).all()
            return [record.to_model() for record in records]

    def get_packing_list(self, code: str) -> PackingList:
        """
        Raises:
            RecordNotFoundError: If no packing list has this code
        """
        with self.database.session() as session:
            record = session.get(PackingListRecord, code)
            if record is None:
                raise RecordNotFoundError(ENTITY, code)
            return record.to_model()

    def exists(self, code: str) -> bool:
        with self.database.session() as session:
            return session.get(PackingListRecord, code) is not None

    def create_packing_list(self, packing_list: PackingList) -> PackingList:
        """
        Store a new packing list. A code is generated when it has none.

        Raises:
            DuplicateRecordError: If the given code is already taken
        """
        with self.database.session() as session:
            if packing_list.code:
                code = packing_list.code
                if session.get(PackingListRecord, code) is not None:
                    raise DuplicateRecordError(ENTITY, code)
            else:
                code = self._free_code(session)
            record = PackingListRecord(code=code)
            record.apply(packing_list)
            session.add(record)
            try:
                session.flush()
            except IntegrityError as e:
                # inserted by another request since the check above
                raise DuplicateRecordError(ENTITY, code) from e
            created = record.to_model()
        logger.info(f"Packing list created: {code} ({len(packing_list.boxes)} boxes)")
        return created

    def _free_code(self, session) -> str:
        now = datetime.now()
        for attempt in range(MAX_CODE_ATTEMPTS):
            code = self.code_factory(now + timedelta(seconds=attempt))
            if session.get(PackingListRecord, code) is None:
                return code
        raise DuplicateRecordError(ENTITY, code)

    def update_packing_list(self, code: str, packing_list: PackingList) -> PackingList:
        """
        Replace the contents of a stored packing list. The code never changes.

        Raises:
            RecordNotFoundError: If no packing list has this code
        """
        with self.database.session() as session:
            record = session.get(PackingListRecord, code)
            if record is None:
                raise RecordNotFoundError(ENTITY, code)
            record.apply(packing_list)
            session.flush()
            updated = record.to_model()
        logger.info(f"Packing list updated: {code}")
        return updated

    def delete_packing_list(self, code: str) -> None:
        """
        Raises:
            RecordNotFoundError: If no packing list has this code
        """
        with self.database.session() as session:
            record = session.get(PackingListRecord, code)
            if record is None:
                raise RecordNotFoundError(ENTITY, code)
            session.delete(record)
        logger.info(f"Packing list deleted: {code}")
