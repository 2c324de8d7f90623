"""Shared pytest fixtures for storefront tests."""

import pytest
from django.contrib.auth import get_user_model
from django.test import Client

from storefront.catalog.loader import get_catalog
from storefront.core.auth import AuthContext


User = get_user_model()

PASSWORD = "testpass123"


@pytest.fixture
def user(db):
    """Create a test shopper."""
    return User.objects.create_user(
        email="shopper@example.com",
        username="shopper",
        password=PASSWORD,
        phone="555-0100",
    )


@pytest.fixture
def other_user(db):
    """Create a second shopper."""
    return User.objects.create_user(
        email="other@example.com",
        username="other",
        password=PASSWORD,
    )


@pytest.fixture
def auth(user):
    """AuthContext for the test shopper."""
    return AuthContext.for_user(user)


@pytest.fixture
def other_auth(other_user):
    return AuthContext.for_user(other_user)


@pytest.fixture
def catalog():
    """The catalog loaded at startup from the test data directory."""
    return get_catalog()


@pytest.fixture
def client():
    """Return a Django test client."""
    return Client()


@pytest.fixture
def shopper_client(client, user):
    """Test client logged in as the test shopper."""
    client.force_login(user)
    return client
