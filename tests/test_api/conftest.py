# tests/test_api/conftest.py
import pytest
from fastapi.testclient import TestClient

from api.main import create_app


@pytest.fixture
def client(database):
    """Test client for an app bound to the test database"""
    with TestClient(create_app(database)) as client:
        yield client


@pytest.fixture
def book_payload():
    return {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "isbn": "978-0547928227",
        "published_year": 1937,
        "genre": "Fantasy",
        "total_copies": 2,
        "description": "There and back again."
    }


@pytest.fixture
def user_payload():
    return {
        "name": "John Silva",
        "email": "john.silva@example.com",
        "phone": "(11) 99999-9999",
        "membership_type": "STUDENT"
    }


@pytest.fixture
def create_book(client, book_payload):
    def _create(**overrides):
        response = client.post("/books", json={**book_payload, **overrides})
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_user(client, user_payload):
    def _create(**overrides):
        response = client.post("/users", json={**user_payload, **overrides})
        assert response.status_code == 201, response.text
        return response.json()
    return _create
