"""ORM models for the record store (clients + packing lists)."""
from __future__ import annotations

import datetime

from sqlalchemy import JSON, Column, DateTime, String, Index
from sqlalchemy.orm import declarative_base

from models.packing_list import Address, Client, PackingList

Base = declarative_base()


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class ClientRecord(Base):
    """Client table. The address is stored as a JSON object."""

    __tablename__ = "clients"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, default="", index=True)
    phone = Column(String(64), nullable=False, default="")
    address = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def apply(self, client: Client) -> None:
        self.name = client.name
        self.email = client.email
        self.phone = client.phone
        self.address = client.address.to_dict() if client.address else None

    def to_model(self) -> Client:
        return Client(
            id=self.id,
            name=self.name or "",
            email=self.email or "",
            phone=self.phone or "",
            address=Address.from_dict(self.address) if self.address is not None else None,
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ClientRecord id={self.id} name={self.name}>"


class PackingListRecord(Base):
    """
    Packing list table keyed by the generated code.

    The client is stored as a snapshot (client_data) so later edits to the
    client record do not change shipments already made.
    """

    __tablename__ = "packing_lists"

    code = Column(String(32), primary_key=True)
    client_data = Column(JSON, nullable=True)
    boxes_data = Column(JSON, nullable=False, default=list)
    tracking_numbers = Column(JSON, nullable=False, default=list)
    carrier = Column(String(32), nullable=False, default="DHL")
    custom_carrier = Column(String(255), nullable=True)
    po = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_packing_lists_created_at", "created_at"),
    )

    def apply(self, packing_list: PackingList) -> None:
        data = packing_list.to_dict()
        self.client_data = data["client"]
        self.boxes_data = data["boxes"]
        self.tracking_numbers = data["tracking_numbers"]
        self.carrier = data["carrier"]
        self.custom_carrier = data["custom_carrier"] or None
        self.po = data["po"] or None

    def to_model(self) -> PackingList:
        packing_list = PackingList.from_dict({
            "code": self.code,
            "client": self.client_data,
            "boxes": self.boxes_data,
            "tracking_numbers": self.tracking_numbers,
            "carrier": self.carrier,
            "custom_carrier": self.custom_carrier,
            "po": self.po,
        })
        packing_list.created_at = self.created_at
        packing_list.updated_at = self.updated_at
        return packing_list

    def __repr__(self) -> str:  # pragma: no cover
        return f"<PackingListRecord code={self.code}>"


__all__ = ["Base", "ClientRecord", "PackingListRecord"]
