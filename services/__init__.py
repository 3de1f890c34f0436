"""
Services layer for PackingListWeb.

This module contains the business logic services:
- ClientService: Client CRUD and search
- PackingListService: Packing list CRUD, code assignment and search
- PrintService: Render a packing list and hand it to a print surface

One instance of each is created by the app factory and shared by all
requests. Store services open a fresh session per call; the print service
creates a fresh surface per call.
"""

from .client_service import ClientService
from .packing_list_service import PackingListService
from .print_service import PrintService

__all__ = [
    "ClientService",
    "PackingListService",
    "PrintService",
]
