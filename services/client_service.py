"""
Client record store.

CRUD and search over the `clients` table. Works with Client dataclasses;
ORM rows never leave this module.

Search:
    Case-insensitive substring match on name OR email.
    Listings are ordered by name ascending.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import func, or_

from core.database import Database
from core.exceptions import RecordNotFoundError
from models.packing_list import Client
from models.records import ClientRecord
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

ENTITY = "Client"


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ClientService:
    """Client CRUD backed by the shared Database."""

    def __init__(self, database: Database, search_limit: int = 5):
        """
        Args:
            database: Record store
            search_limit: Maximum results returned by search() (client picker)
        """
        self.database = database
        self.search_limit = search_limit

    def _query(self, session, query: Optional[str]):
        q = session.query(ClientRecord)
        query = (query or "").strip()
        if query:
            pattern = f"%{_escape_like(query.lower())}%"
            q = q.filter(or_(
                func.lower(ClientRecord.name).like(pattern, escape="\\"),
                func.lower(ClientRecord.email).like(pattern, escape="\\"),
            ))
        return q.order_by(func.lower(ClientRecord.name).asc(), ClientRecord.name.asc())

    def list_clients(self, query: Optional[str] = None) -> List[Client]:
        """
        List clients ordered by name, optionally filtered.

        Args:
            query: Substring to look for in name or email (case-insensitive)
        """
        with self.database.session() as session:
            return [record.to_model() for record in self._query(session, query).all()]

    def search(self, query: str, limit: Optional[int] = None) -> List[Client]:
        """Search clients for the packing list client picker."""
        if not (query or "").strip():
            return []
        with self.database.session() as session:
            records = self._query(session, query).limit(limit or self.search_limit).all()
            return [record.to_model() for record in records]

    def get_client(self, client_id: str) -> Client:
        """
        Raises:
            RecordNotFoundError: If no client has this id
        """
        with self.database.session() as session:
            record = session.get(ClientRecord, client_id)
            if record is None:
                raise RecordNotFoundError(ENTITY, client_id)
            return record.to_model()

    def create_client(self, client: Client) -> Client:
        """Insert a new client with a fresh id."""
        record = ClientRecord(id=str(uuid.uuid4()))
        record.apply(client)
        with self.database.session() as session:
            session.add(record)
        logger.info(f"Client created: {record.id} ({client.name})")
        return record.to_model()

    def update_client(self, client_id: str, client: Client) -> Client:
        """
        Raises:
            RecordNotFoundError: If no client has this id
        """
        with self.database.session() as session:
            record = session.get(ClientRecord, client_id)
            if record is None:
                raise RecordNotFoundError(ENTITY, client_id)
            record.apply(client)
            session.flush()
            updated = record.to_model()
        logger.info(f"Client updated: {client_id}")
        return updated

    def save_client(self, client: Client) -> Client:
        """Update the client when it has a stored id, otherwise create it."""
        if client.id:
            with self.database.session() as session:
                exists = session.get(ClientRecord, client.id) is not None
            if exists:
                return self.update_client(client.id, client)
        return self.create_client(client)

    def delete_client(self, client_id: str) -> None:
        """
        Raises:
            RecordNotFoundError: If no client has this id
        """
        with self.database.session() as session:
            record = session.get(ClientRecord, client_id)
            if record is None:
                raise RecordNotFoundError(ENTITY, client_id)
            session.delete(record)
        logger.info(f"Client deleted: {client_id}")
