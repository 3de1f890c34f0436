"""
Shared fixtures for PackingListWeb tests.

Every test that touches the record store gets its own SQLite file under
pytest's tmp_path, so tests never share state.
"""

import pytest

from app import create_app
from core.database import Database
from models.packing_list import Address, Carrier, Client, PackingList
from services.client_service import ClientService
from services.packing_list_service import PackingListService
from tests.helpers import make_box, make_model


# Fixtures

@pytest.fixture
def database(tmp_path):
    """Fresh record store with the schema created."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def client_service(database):
    return ClientService(database, search_limit=5)


@pytest.fixture
def packing_list_service(database):
    return PackingListService(database)


@pytest.fixture
def app(tmp_path):
    """Flask app in testing mode backed by a temporary SQLite file."""
    app = create_app(
        "config.TestingConfig",
        overrides={"DATABASE_URL": f"sqlite:///{tmp_path / 'app.db'}"},
    )
    yield app
    app.config["DATABASE"].dispose()


@pytest.fixture
def http(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def sample_client():
    return Client(
        name="Acme Retail",
        email="orders@acme.example",
        phone="+351 210 000 000",
        address=Address(
            street="Rua Augusta 100",
            postal_code="1100-053",
            city="Lisboa",
            state="Lisboa",
            country="Portugal",
        ),
    )


@pytest.fixture
def sample_packing_list(sample_client):
    """Two boxes, style A/Red split across both, one tracking number."""
    return PackingList(
        code="LOMPL191026143005",
        client=sample_client,
        boxes=[
            make_box(1, [make_model("A", "Red", "Tee", M=5), make_model("B", "Blue", "Polo", S=2)]),
            make_box(2, [make_model("A", "Red", "Tee", M=3)]),
        ],
        tracking_numbers=["1Z999", "1Z999"],
        carrier=Carrier.UPS,
        po="PO-4711",
    )
