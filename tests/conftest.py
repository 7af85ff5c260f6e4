"""Shared fixtures: a freshly seeded store and app per test."""

import base64

import pytest
from fastapi.testclient import TestClient

from course_service.config import Settings
from course_service.data_service import CourseDataService
from course_service.main import create_app

USERNAME = "caller@zirpl.com"
PASSWORD = "Pass123!"


def basic_auth_header(username: str, password: str) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def data_service():
    return CourseDataService()


@pytest.fixture
def app(data_service, settings):
    return create_app(data_service=data_service, settings=settings)


@pytest.fixture
def client(app):
    """Test client sending the configured credentials."""
    return TestClient(app, headers=basic_auth_header(USERNAME, PASSWORD))


@pytest.fixture
def anonymous_client(app):
    return TestClient(app)
