"""
Integration tests for the Flask routes (test client, temp SQLite file).

The testing config uses English so flashed messages can be asserted.
"""

from unittest.mock import patch

import pytest

from core.exceptions import EncodingError
from models.packing_list import Client, PackingList


def packing_list_form(action="save", **extra):
    form = {
        "action": action,
        "client-name": "Acme Retail",
        "client-email": "orders@acme.example",
        "client-street": "Rua Augusta 100",
        "client-postal_code": "1100-053",
        "client-city": "Lisboa",
        "client-state": "Lisboa",
        "client-country": "Portugal",
        "carrier": "DHL",
        "same_tracking": "1",
        "common_tracking": "JD0001",
        "box-0-gross_weight": "10",
        "box-0-model-0-reference": "A",
        "box-0-model-0-color": "Red",
        "box-0-model-0-qty-M": "5",
        "box-1-gross_weight": "8",
        "box-1-model-0-reference": "A",
        "box-1-model-0-color": "Red",
        "box-1-model-0-qty-M": "3",
    }
    form.update(extra)
    return form


@pytest.fixture
def services(app):
    return app.config["PACKING_LIST_SERVICE"], app.config["CLIENT_SERVICE"]


@pytest.fixture
def stored(services, sample_packing_list):
    packing_list_service, _ = services
    return packing_list_service.create_packing_list(sample_packing_list)


class TestMainRoutes:

    def test_index_redirects_to_overview(self, http):
        response = http.get("/")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/packing-lists")

    def test_unknown_page_redirects(self, http):
        response = http.get("/nowhere", follow_redirects=True)
        assert response.status_code == 200
        assert b"Page not found." in response.data

    def test_set_language(self, http):
        http.get("/set_language/pt")
        with http.session_transaction() as session:
            assert session["language"] == "pt"
        response = http.get("/packing-lists")
        assert "Clientes".encode() in response.data

    def test_set_unsupported_language(self, http):
        response = http.get("/set_language/xx", follow_redirects=True)
        assert b"Unsupported language: xx" in response.data


class TestPackingListOverview:

    def test_empty(self, http):
        response = http.get("/packing-lists")
        assert response.status_code == 200
        assert b"No packing lists found." in response.data

    def test_lists_stored(self, http, stored):
        response = http.get("/packing-lists")
        assert stored.code.encode() in response.data
        assert b"Acme Retail" in response.data
        assert b"<td>10</td>" in response.data

    def test_search(self, http, stored):
        assert stored.code.encode() in http.get("/packing-lists?q=143005").data
        assert stored.code.encode() not in http.get("/packing-lists?q=999999").data


class TestPackingListForm:

    def test_new_form(self, http):
        response = http.get("/packing-lists/new")
        assert response.status_code == 200
        assert b'name="box-0-model-0-reference"' in response.data
        assert b'name="box-0-model-0-qty-XXXL"' in response.data

    def test_new_form_with_client(self, http, services, sample_client):
        _, client_service = services
        client = client_service.create_client(sample_client)
        response = http.get(f"/packing-lists/new?client_id={client.id}")
        assert b'value="Acme Retail"' in response.data

    def test_save_creates(self, http, services):
        packing_list_service, _ = services
        response = http.post("/packing-lists/new", data=packing_list_form())
        assert response.status_code == 302

        saved = packing_list_service.list_packing_lists()
        assert len(saved) == 1
        assert saved[0].code.startswith("LOMPL")
        assert saved[0].tracking_numbers == ["JD0001", "JD0001"]
        assert [box.box_number for box in saved[0].boxes] == [1, 2]

    def test_save_flash(self, http):
        response = http.post("/packing-lists/new", data=packing_list_form(), follow_redirects=True)
        assert b"saved." in response.data

    def test_save_requires_client_and_boxes(self, http, services):
        packing_list_service, _ = services
        response = http.post("/packing-lists/new", data={"action": "save"})
        assert response.status_code == 200
        assert b"Client name and address are required." in response.data
        assert b"Add at least one box." in response.data
        assert packing_list_service.list_packing_lists() == []

    def test_add_box_keeps_input(self, http):
        response = http.post("/packing-lists/new", data=packing_list_form(action="add_box"))
        assert response.status_code == 200
        assert b'name="box-2-gross_weight"' in response.data
        assert b'value="Acme Retail"' in response.data

    def test_add_model_row(self, http):
        response = http.post("/packing-lists/new", data=packing_list_form(action="add_model:0"))
        assert b'name="box-0-model-1-reference"' in response.data
        assert b'name="box-1-model-1-reference"' not in response.data

    def test_add_model_after_removed_box(self, http):
        form = packing_list_form(action="add_model:1", **{"box-0-remove": "1"})
        response = http.post("/packing-lists/new", data=form)
        assert response.status_code == 200
        assert b'name="box-0-model-1-reference"' in response.data
        assert b'name="box-1-gross_weight"' not in response.data

    def test_add_model_malformed_action(self, http):
        response = http.post("/packing-lists/new", data=packing_list_form(action="add_model:x"))
        assert response.status_code == 200
        assert b'value="Acme Retail"' in response.data
        assert b'name="box-0-model-1-reference"' not in response.data

    def test_search_and_select_client(self, http, services, sample_client):
        _, client_service = services
        client = client_service.create_client(sample_client)

        response = http.post("/packing-lists/new", data={"action": "search_client", "client_query": "acme"})
        assert f"select_client:{client.id}".encode() in response.data

        response = http.post("/packing-lists/new", data={"action": f"select_client:{client.id}"})
        assert b'value="Rua Augusta 100"' in response.data

    def test_search_client_no_results(self, http):
        response = http.post("/packing-lists/new", data={"action": "search_client", "client_query": "zzz"})
        assert b"No clients found." in response.data

    def test_save_client_from_form(self, http, services):
        _, client_service = services
        response = http.post("/packing-lists/new", data=packing_list_form(action="save_client"))
        assert response.status_code == 200
        clients = client_service.list_clients()
        assert [c.name for c in clients] == ["Acme Retail"]
        assert f'value="{clients[0].id}"'.encode() in response.data

    def test_print_unsaved(self, http, services):
        packing_list_service, _ = services
        response = http.post("/packing-lists/new", data=packing_list_form(action="print:label"))
        assert response.status_code == 200
        assert response.mimetype == "text/html"
        assert b"window.print()" in response.data
        assert packing_list_service.list_packing_lists() == []

    def test_print_unsaved_invalid(self, http):
        response = http.post("/packing-lists/new", data={"action": "print:manifest"})
        assert response.status_code == 200
        assert b"Cannot print: Invalid packing list: No boxes found" in response.data
        assert b"window.print()" not in response.data

    def test_edit_form(self, http, stored):
        response = http.get(f"/packing-lists/{stored.code}/edit")
        assert response.status_code == 200
        assert stored.code.encode() in response.data
        assert b'value="PO-4711"' in response.data

    def test_edit_save(self, http, services, stored):
        packing_list_service, _ = services
        response = http.post(f"/packing-lists/{stored.code}/edit", data=packing_list_form(po="PO-9"))
        assert response.status_code == 302
        updated = packing_list_service.get_packing_list(stored.code)
        assert updated.po == "PO-9"
        assert len(packing_list_service.list_packing_lists()) == 1

    def test_edit_missing(self, http):
        response = http.get("/packing-lists/LOMPL000000000000/edit", follow_redirects=True)
        assert b"Record not found." in response.data

    def test_delete(self, http, services, stored):
        packing_list_service, _ = services
        response = http.post(f"/packing-lists/{stored.code}/delete")
        assert response.status_code == 302
        assert not packing_list_service.exists(stored.code)

    def test_delete_missing(self, http):
        response = http.post("/packing-lists/LOMPL000000000000/delete", follow_redirects=True)
        assert b"Record not found." in response.data


class TestPrinting:

    def test_print_label(self, http, stored):
        response = http.get(f"/print/label/{stored.code}")
        assert response.status_code == 200
        assert response.mimetype == "text/html"
        assert response.data.count(b'class="page box-label"') == 2
        assert b"window.print()" in response.data

    def test_print_manifest(self, http, stored):
        response = http.get(f"/print/manifest/{stored.code}")
        assert response.status_code == 200
        assert b"Page 2 of 2" in response.data

    def test_unknown_kind(self, http, stored):
        response = http.get(f"/print/poster/{stored.code}", follow_redirects=True)
        assert b"Unknown document type: poster" in response.data

    def test_unknown_code(self, http):
        response = http.get("/print/label/LOMPL000000000000", follow_redirects=True)
        assert b"Record not found." in response.data

    def test_validation_error(self, http, services):
        packing_list_service, _ = services
        packing_list_service.create_packing_list(PackingList(code="LOMPL010101000000"))
        response = http.get("/print/label/LOMPL010101000000", follow_redirects=True)
        assert b"Cannot print: Invalid packing list: No boxes found" in response.data

    def test_encoding_error(self, http, stored):
        with patch(
            "modules.document_renderer.encode_qr_data_url",
            side_effect=EncodingError(stored.code, "boom"),
        ):
            response = http.get(f"/print/label/{stored.code}", follow_redirects=True)
        assert b"the QR code could not be generated" in response.data
        assert b"window.print()" not in response.data


class TestClientRoutes:

    def test_list_empty(self, http):
        response = http.get("/clients")
        assert response.status_code == 200
        assert b"No clients yet." in response.data

    def test_create(self, http, services):
        _, client_service = services
        response = http.post("/clients/new", data={"name": "Acme", "email": "a@acme.example", "city": "Porto"})
        assert response.status_code == 302
        clients = client_service.list_clients()
        assert clients[0].name == "Acme"
        assert clients[0].address.city == "Porto"

    def test_create_requires_name(self, http, services):
        _, client_service = services
        response = http.post("/clients/new", data={"email": "a@acme.example"})
        assert response.status_code == 200
        assert b"Client name is required." in response.data
        assert client_service.list_clients() == []

    def test_list_search(self, http, services):
        _, client_service = services
        client_service.create_client(Client(name="Acme"))
        client_service.create_client(Client(name="Other"))
        response = http.get("/clients?q=acm")
        assert b"Acme" in response.data
        assert b"Other" not in response.data

    def test_edit(self, http, services, sample_client):
        _, client_service = services
        client = client_service.create_client(sample_client)
        assert http.get(f"/clients/{client.id}/edit").status_code == 200

        response = http.post(f"/clients/{client.id}/edit", data={"name": "Acme Wholesale"})
        assert response.status_code == 302
        assert client_service.get_client(client.id).name == "Acme Wholesale"

    def test_edit_missing(self, http):
        response = http.get("/clients/nope/edit", follow_redirects=True)
        assert b"Record not found." in response.data

    def test_delete(self, http, services, sample_client):
        _, client_service = services
        client = client_service.create_client(sample_client)
        response = http.post(f"/clients/{client.id}/delete", follow_redirects=True)
        assert b"Client deleted." in response.data
        assert client_service.list_clients() == []


class TestApi:

    def test_health(self, http):
        response = http.get("/api/health")
        assert response.status_code == 200
        assert response.get_json()["checks"]["database"] == "ok"

    def test_client_search(self, http, services, sample_client):
        _, client_service = services
        client_service.create_client(sample_client)
        data = http.get("/api/clients/search?q=acme").get_json()
        assert [c["name"] for c in data["results"]] == ["Acme Retail"]

    def test_client_search_blank(self, http):
        assert http.get("/api/clients/search?q=").get_json()["results"] == []

    def test_lookup_found(self, http, stored):
        response = http.get(f"/api/packing-lists/lookup?code={stored.code.lower()}")
        assert response.status_code == 200
        data = response.get_json()
        assert data["found"] is True
        assert data["url"].endswith(f"/packing-lists/{stored.code}/edit")

    def test_lookup_not_found(self, http):
        response = http.get("/api/packing-lists/lookup?code=LOMPL000000000000")
        assert response.status_code == 404
        assert response.get_json() == {"code": "LOMPL000000000000", "valid": True, "found": False}

    def test_lookup_invalid(self, http):
        response = http.get("/api/packing-lists/lookup?code=hello")
        assert response.status_code == 400
        assert response.get_json()["valid"] is False
