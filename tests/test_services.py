"""
Unit tests for the record store services (SQLite in a temp directory).
"""

from datetime import datetime
from unittest.mock import patch

import pytest

from core.exceptions import DuplicateRecordError, RecordNotFoundError, StoreError
from models.packing_list import Address, Carrier, Client, PackingList
from services.packing_list_service import PackingListService
from tests.helpers import make_box, make_model


class TestClientService:
    """Test client CRUD and search."""

    def test_create_assigns_id(self, client_service, sample_client):
        created = client_service.create_client(sample_client)
        assert created.id
        assert created.name == "Acme Retail"
        assert created.address.city == "Lisboa"

    def test_get(self, client_service, sample_client):
        created = client_service.create_client(sample_client)
        assert client_service.get_client(created.id) == created

    def test_get_missing(self, client_service):
        with pytest.raises(RecordNotFoundError):
            client_service.get_client("nope")

    def test_update(self, client_service, sample_client):
        created = client_service.create_client(sample_client)
        created.phone = "999"
        created.address = None
        updated = client_service.update_client(created.id, created)
        assert updated.phone == "999"
        assert updated.address is None
        assert client_service.get_client(created.id).phone == "999"

    def test_update_missing(self, client_service, sample_client):
        with pytest.raises(RecordNotFoundError):
            client_service.update_client("nope", sample_client)

    def test_save_creates_then_updates(self, client_service, sample_client):
        created = client_service.save_client(sample_client)
        created.name = "Acme Wholesale"
        saved = client_service.save_client(created)
        assert saved.id == created.id
        assert len(client_service.list_clients()) == 1
        assert client_service.list_clients()[0].name == "Acme Wholesale"

    def test_save_with_unknown_id_creates(self, client_service, sample_client):
        sample_client.id = "stale-id"
        saved = client_service.save_client(sample_client)
        assert saved.id != "stale-id"

    def test_delete(self, client_service, sample_client):
        created = client_service.create_client(sample_client)
        client_service.delete_client(created.id)
        with pytest.raises(RecordNotFoundError):
            client_service.get_client(created.id)

    def test_delete_missing(self, client_service):
        with pytest.raises(RecordNotFoundError):
            client_service.delete_client("nope")

    def test_list_ordered_by_name(self, client_service):
        for name in ("Zeta", "alpha", "Beta"):
            client_service.create_client(Client(name=name))
        names = [c.name for c in client_service.list_clients()]
        assert names == ["alpha", "Beta", "Zeta"]

    def test_search_name_and_email_case_insensitive(self, client_service):
        client_service.create_client(Client(name="Acme Retail", email="orders@acme.example"))
        client_service.create_client(Client(name="Other", email="buyer@ACME.example"))
        client_service.create_client(Client(name="Unrelated", email="x@y.example"))

        assert {c.name for c in client_service.search("acme")} == {"Acme Retail", "Other"}
        assert [c.name for c in client_service.search("RETAIL")] == ["Acme Retail"]

    def test_search_limit(self, client_service):
        for i in range(8):
            client_service.create_client(Client(name=f"Client {i}"))
        assert len(client_service.search("client")) == 5
        assert len(client_service.search("client", limit=2)) == 2

    def test_search_blank_query(self, client_service, sample_client):
        client_service.create_client(sample_client)
        assert client_service.search("  ") == []

    def test_search_wildcards_are_literal(self, client_service):
        client_service.create_client(Client(name="100% Cotton"))
        client_service.create_client(Client(name="1000 Threads"))
        assert [c.name for c in client_service.search("0%")] == ["100% Cotton"]


class TestPackingListService:
    """Test packing list CRUD, codes and listing."""

    def test_create_generates_code(self, packing_list_service, sample_packing_list):
        sample_packing_list.code = ""
        created = packing_list_service.create_packing_list(sample_packing_list)
        assert created.code.startswith("LOMPL")
        assert len(created.code) == 17
        assert created.created_at is not None

    def test_generated_codes_are_unique(self, database, sample_packing_list):
        """Two lists created in the same second get consecutive codes."""
        fixed = datetime(2026, 10, 19, 14, 30, 5)
        start = datetime.now()

        def factory(now):
            return "LOMPL" + (fixed + (now - start)).strftime("%d%m%y%H%M%S")

        service = PackingListService(database, code_factory=factory)
        sample_packing_list.code = ""
        first = service.create_packing_list(sample_packing_list)
        second = service.create_packing_list(sample_packing_list)
        assert first.code == "LOMPL191026143005"
        assert second.code == "LOMPL191026143006"

    def test_create_keeps_given_code(self, packing_list_service, sample_packing_list):
        created = packing_list_service.create_packing_list(sample_packing_list)
        assert created.code == "LOMPL191026143005"

    def test_duplicate_code(self, packing_list_service, sample_packing_list):
        packing_list_service.create_packing_list(sample_packing_list)
        with pytest.raises(DuplicateRecordError):
            packing_list_service.create_packing_list(sample_packing_list)

    def test_concurrent_insert_is_duplicate(self, packing_list_service, sample_packing_list):
        packing_list_service.create_packing_list(sample_packing_list)
        # the existence check misses a row inserted by another request
        with patch("sqlalchemy.orm.Session.get", return_value=None):
            with pytest.raises(DuplicateRecordError):
                packing_list_service.create_packing_list(sample_packing_list)
        assert len(packing_list_service.list_packing_lists()) == 1

    def test_duplicate_is_store_error(self):
        assert issubclass(DuplicateRecordError, StoreError)

    def test_round_trip_contents(self, packing_list_service, sample_packing_list):
        packing_list_service.create_packing_list(sample_packing_list)
        loaded = packing_list_service.get_packing_list(sample_packing_list.code)

        assert loaded.client == sample_packing_list.client
        assert loaded.boxes == sample_packing_list.boxes
        assert loaded.tracking_numbers == ["1Z999", "1Z999"]
        assert loaded.carrier is Carrier.UPS
        assert loaded.po == "PO-4711"

    def test_custom_carrier_stored(self, packing_list_service, sample_packing_list):
        sample_packing_list.carrier = Carrier.OTHER
        sample_packing_list.custom_carrier = "Local Courier"
        packing_list_service.create_packing_list(sample_packing_list)
        loaded = packing_list_service.get_packing_list(sample_packing_list.code)
        assert loaded.carrier_display == "Other - Local Courier"

    def test_update(self, packing_list_service, sample_packing_list):
        packing_list_service.create_packing_list(sample_packing_list)
        sample_packing_list.boxes.append(make_box(3, [make_model("C", "Green", L=1)]))
        sample_packing_list.po = ""
        updated = packing_list_service.update_packing_list(sample_packing_list.code, sample_packing_list)
        assert len(updated.boxes) == 3
        assert updated.po == ""

    def test_update_keeps_code(self, packing_list_service, sample_packing_list):
        packing_list_service.create_packing_list(sample_packing_list)
        changed = PackingList(code="LOMPL000000000000", client=sample_packing_list.client,
                              boxes=sample_packing_list.boxes)
        updated = packing_list_service.update_packing_list(sample_packing_list.code, changed)
        assert updated.code == sample_packing_list.code
        assert not packing_list_service.exists("LOMPL000000000000")

    def test_update_missing(self, packing_list_service, sample_packing_list):
        with pytest.raises(RecordNotFoundError):
            packing_list_service.update_packing_list("LOMPL999999999999", sample_packing_list)

    def test_delete(self, packing_list_service, sample_packing_list):
        packing_list_service.create_packing_list(sample_packing_list)
        packing_list_service.delete_packing_list(sample_packing_list.code)
        assert not packing_list_service.exists(sample_packing_list.code)

    def test_delete_missing(self, packing_list_service):
        with pytest.raises(RecordNotFoundError):
            packing_list_service.delete_packing_list("LOMPL999999999999")

    def test_list_newest_first(self, packing_list_service, sample_packing_list):
        for code in ("LOMPL010126000001", "LOMPL010126000002", "LOMPL010126000003"):
            sample_packing_list.code = code
            packing_list_service.create_packing_list(sample_packing_list)
        codes = [p.code for p in packing_list_service.list_packing_lists()]
        assert codes == ["LOMPL010126000003", "LOMPL010126000002", "LOMPL010126000001"]

    def test_list_filter_by_code(self, packing_list_service, sample_packing_list):
        for code in ("LOMPL010126000001", "LOMPL020226000002"):
            sample_packing_list.code = code
            packing_list_service.create_packing_list(sample_packing_list)
        assert [p.code for p in packing_list_service.list_packing_lists("lompl0202")] == ["LOMPL020226000002"]
        assert packing_list_service.list_packing_lists("nothing") == []

    def test_client_snapshot_independent_of_client_record(
        self, client_service, packing_list_service, sample_packing_list
    ):
        client = client_service.create_client(sample_packing_list.client)
        sample_packing_list.client = client
        packing_list_service.create_packing_list(sample_packing_list)

        client.address = Address(street="Elsewhere")
        client_service.update_client(client.id, client)
        loaded = packing_list_service.get_packing_list(sample_packing_list.code)
        assert loaded.client.address.street == "Rua Augusta 100"
