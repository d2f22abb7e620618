# tests/conftest.py
import pytest

from app import create_app


@pytest.fixture
def memory_app():
    return create_app({"STORAGE_BACKEND": "memory", "SEED_SAMPLE_DATA": False})


@pytest.fixture
def sql_app():
    return create_app(
        {
            "STORAGE_BACKEND": "database",
            "DATABASE_URL": "sqlite://",
            "SEED_SAMPLE_DATA": False,
        }
    )


@pytest.fixture(params=["memory", "database"])
def app(request):
    return create_app(
        {
            "STORAGE_BACKEND": request.param,
            "DATABASE_URL": "sqlite://",
            "SEED_SAMPLE_DATA": False,
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()


def add_customer(client, name="A", address="B", **usage) -> dict:
    response = client.post("/customers", json={"name": name, "address": address, **usage})
    assert response.status_code == 200
    return response.get_json()["customer"]
