import pytest
from fastapi.testclient import TestClient

from catalog import ProductCatalog
from config import Settings
from main import create_app
from tests.fakes import FakeProductRepository


def make_payload(**overrides):
    payload = {
        "name": "Running Shoes",
        "price": 120,
        "category": "Footwear",
        "variants": [
            {"color": "Red", "size": "M", "stock": 10},
            {"color": "Blue", "size": "L", "stock": 5},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def repository():
    return FakeProductRepository()


@pytest.fixture
def catalog(repository):
    return ProductCatalog(repository)


@pytest.fixture
def client(repository):
    app = create_app(repository=repository, settings=Settings())
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
