"""
Data models for PackingListWeb.

This module contains:
- PackingList, Box, BoxModel, SizeQuantity: shipment snapshot (dataclasses)
- Client, Address: client records (dataclasses)
- ClientRecord, PackingListRecord: SQLAlchemy rows backing the record store

The dataclasses are what routes, forms and the document renderer work
with; ORM rows never leave the store services.
"""

from .packing_list import (
    DEFAULT_SIZES,
    Address,
    Box,
    BoxModel,
    Carrier,
    Client,
    Dimensions,
    PackingList,
    SizeQuantity,
)
from .records import Base, ClientRecord, PackingListRecord

__all__ = [
    # Shipment models
    "PackingList",
    "Box",
    "BoxModel",
    "SizeQuantity",
    "Dimensions",
    "Carrier",
    "DEFAULT_SIZES",
    # Client models
    "Client",
    "Address",
    # Store rows
    "Base",
    "ClientRecord",
    "PackingListRecord",
]
